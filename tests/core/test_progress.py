"""Tests for stderr status helpers."""

import pytest

from diffcov.core.progress import pluralize, spinner, status


class TestPluralize:
    """Tests for pluralize."""

    @pytest.mark.parametrize(
        ("count", "expected"),
        [(0, "0 files"), (1, "1 file"), (2, "2 files")],
    )
    def test_counts(self, count: int, expected: str) -> None:
        assert pluralize(count, "file") == expected

    def test_custom_plural(self) -> None:
        assert pluralize(3, "entry", "entries") == "3 entries"


class TestStatus:
    """Tests for status output."""

    def test_writes_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        status("foo.c.gcov needs update", style="warning")

        captured = capsys.readouterr()
        assert "foo.c.gcov needs update" in captured.err
        assert captured.out == ""

    def test_spinner_runs_body(self) -> None:
        ran = []

        with spinner("Running gcov"):
            ran.append(True)

        assert ran == [True]
