"""Tests for the CVS, ed-script and SVN hunk parsers."""

import io
from pathlib import Path

import pytest

from diffcov.core.errors import DiffError, ErrorCode
from diffcov.diff import (
    DiffEntry,
    DiffFormat,
    LineRange,
    parse_diff,
    parse_diff_file,
    parse_ed_command,
    parse_hunk_base,
    parse_source_path,
)


def _parse(text: str, fmt: DiffFormat) -> list[DiffEntry]:
    return parse_diff(io.StringIO(text), fmt)


# =============================================================================
# Line-level helpers
# =============================================================================


class TestParseEdCommand:
    """Tests for ed-script command lines."""

    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            ("12a13,14", LineRange(13, 14)),
            ("5,7c5,6", LineRange(5, 6)),
            ("30a31,32", LineRange(31, 32)),
            ("3c3", LineRange(3, 3)),
            ("0a1", LineRange(1, 1)),
        ],
    )
    def test_added_and_changed_lines_yield_new_range(self, line: str, expected: LineRange) -> None:
        assert parse_ed_command(line) == expected

    @pytest.mark.parametrize("line", ["3,4d3", "22,30d22", "7d6"])
    def test_deletion_yields_no_range(self, line: str) -> None:
        assert parse_ed_command(line) is None

    @pytest.mark.parametrize("line", ["12x13", "12a", "a13", "12a13,", "12a14,13"])
    def test_malformed_line_yields_no_range(self, line: str) -> None:
        assert parse_ed_command(line) is None


class TestParseHunkBase:
    """Tests for unified @@ summary lines."""

    def test_returns_new_start(self) -> None:
        assert parse_hunk_base("@@ -130,7 +131,9 @@") == 131

    def test_trailing_function_context_is_ignored(self) -> None:
        assert parse_hunk_base("@@ -1,3 +10,5 @@ int main(void)") == 10

    def test_omitted_lengths(self) -> None:
        assert parse_hunk_base("@@ -1 +1 @@") == 1

    def test_garbled_summary(self) -> None:
        assert parse_hunk_base("@@ garbage @@") is None


class TestParseSourcePath:
    """Tests for section header paths."""

    def test_index_marker(self) -> None:
        assert parse_source_path("Index: src/aaa.c", DiffFormat.CVS) == "src/aaa.c"
        assert parse_source_path("Index: aaa.c", DiffFormat.SVN) == "aaa.c"

    def test_ed_script_uses_whole_line(self) -> None:
        assert parse_source_path("Target=aaa.c", DiffFormat.DIFF) == "Target=aaa.c"


# =============================================================================
# SVN unified diffs
# =============================================================================


class TestSvnDiff:
    """Tests for SVN unified diff parsing."""

    def test_single_added_run(self) -> None:
        text = (
            "Index: foo.c\n"
            "===================================================================\n"
            "--- foo.c\t(revision 1)\n"
            "+++ foo.c\t(working copy)\n"
            "@@ -1,3 +10,5 @@\n"
            " a\n"
            "+b\n"
            "+c\n"
            " d\n"
        )

        entries = _parse(text, DiffFormat.SVN)

        assert entries == [DiffEntry("foo.c", (LineRange(11, 12),))]

    def test_removed_lines_do_not_advance_counter(self) -> None:
        text = (
            "Index: foo.c\n"
            "@@ -5,4 +5,4 @@\n"
            " keep\n"
            "-old one\n"
            "-old two\n"
            "+new\n"
            " keep\n"
        )

        assert _parse(text, DiffFormat.SVN)[0].ranges == (LineRange(6, 6),)

    def test_disjoint_runs_in_one_hunk(self) -> None:
        text = (
            "Index: foo.c\n"
            "@@ -1,4 +1,6 @@\n"
            "+first\n"
            " a\n"
            " b\n"
            "+second\n"
            "+third\n"
            " c\n"
        )

        assert _parse(text, DiffFormat.SVN)[0].ranges == (LineRange(1, 1), LineRange(4, 5))

    def test_counter_restarts_at_each_hunk(self) -> None:
        text = (
            "Index: foo.c\n"
            "@@ -1,2 +1,3 @@\n"
            " a\n"
            "+b\n"
            " c\n"
            "@@ -40,2 +41,3 @@\n"
            " x\n"
            " y\n"
            "+z\n"
        )

        assert _parse(text, DiffFormat.SVN)[0].ranges == (LineRange(2, 2), LineRange(43, 43))

    def test_multiple_files(self) -> None:
        text = (
            "Index: a.c\n"
            "@@ -1,1 +1,2 @@\n"
            " a\n"
            "+b\n"
            "Index: b.c\n"
            "@@ -3,1 +3,2 @@\n"
            "+x\n"
            " y\n"
        )

        entries = _parse(text, DiffFormat.SVN)

        assert [e.source_path for e in entries] == ["a.c", "b.c"]
        assert entries[0].ranges == (LineRange(2, 2),)
        assert entries[1].ranges == (LineRange(3, 3),)

    def test_deletion_only_file_is_dropped(self) -> None:
        text = (
            "Index: gone.c\n"
            "@@ -1,3 +1,1 @@\n"
            " a\n"
            "-b\n"
            "-c\n"
            "Index: kept.c\n"
            "@@ -1,1 +1,2 @@\n"
            " a\n"
            "+b\n"
        )

        assert [e.source_path for e in _parse(text, DiffFormat.SVN)] == ["kept.c"]

    def test_index_line_without_body_is_dropped(self) -> None:
        assert _parse("Index: empty.c\nIndex: other.c\n", DiffFormat.SVN) == []

    def test_garbled_summary_skips_that_hunk_only(self) -> None:
        text = (
            "Index: foo.c\n"
            "@@ broken @@\n"
            "+lost\n"
            "@@ -9,1 +9,2 @@\n"
            " a\n"
            "+b\n"
        )

        assert _parse(text, DiffFormat.SVN)[0].ranges == (LineRange(10, 10),)

    def test_header_plus_lines_before_first_hunk_are_ignored(self) -> None:
        text = "Index: foo.c\n+++ foo.c\t(working copy)\n@@ -1,1 +1,2 @@\n a\n+b\n"

        assert _parse(text, DiffFormat.SVN)[0].ranges == (LineRange(2, 2),)


# =============================================================================
# CVS and ed-script diffs
# =============================================================================


class TestCvsDiff:
    """Tests for CVS diff parsing (Index: sections with ed-script hunks)."""

    def test_ranges_per_file(self) -> None:
        text = (
            "Index: foo.c\n"
            "===================================================================\n"
            "RCS file: /cvs/foo.c,v\n"
            "retrieving revision 1.1\n"
            "diff -r1.1 foo.c\n"
            "12a13,14\n"
            "> added one\n"
            "> added two\n"
            "20c22\n"
            "< old\n"
            "---\n"
            "> new\n"
            "Index: bar.c\n"
            "===================================================================\n"
            "3,4d3\n"
            "< removed\n"
            "< removed\n"
            "8a8\n"
            "> added\n"
        )

        entries = _parse(text, DiffFormat.CVS)

        assert entries == [
            DiffEntry("foo.c", (LineRange(13, 14), LineRange(22, 22))),
            DiffEntry("bar.c", (LineRange(8, 8),)),
        ]

    def test_deletion_only_file_is_dropped(self) -> None:
        text = "Index: foo.c\n3,4d3\n< removed\n< removed\n"

        assert _parse(text, DiffFormat.CVS) == []


class TestEdScriptDiff:
    """Tests for plain ed-script ("diffall") parsing."""

    def test_sections_start_at_letter_followed_by_digit(self) -> None:
        text = (
            "Target=foo.c\n"
            "12a13,14\n"
            "> added\n"
            "> added\n"
            "5,7c5,6\n"
            "< a\n"
            "---\n"
            "> b\n"
            "Target=bar.c\n"
            "1a2\n"
            "> x\n"
        )

        entries = _parse(text, DiffFormat.DIFF)

        assert entries == [
            DiffEntry("Target=foo.c", (LineRange(13, 14), LineRange(5, 6))),
            DiffEntry("Target=bar.c", (LineRange(2, 2),)),
        ]

    def test_letter_line_without_digit_lookahead_is_not_a_section(self) -> None:
        text = "Only in dir: new.c\nTarget=foo.c\n2a3\n> x\n"

        assert [e.source_path for e in _parse(text, DiffFormat.DIFF)] == ["Target=foo.c"]

    def test_every_range_is_ordered(self) -> None:
        text = "Target=foo.c\n1a2,5\n9c9\n3,4d2\n12a14,13\n"

        for entry in _parse(text, DiffFormat.DIFF):
            assert all(r.start <= r.end for r in entry.ranges)


class TestParseDiffFile:
    """Tests for parse_diff_file."""

    def test_reads_file(self, tmp_path: Path) -> None:
        diff = tmp_path / "diff.txt"
        diff.write_text("Index: foo.c\n@@ -1,1 +1,2 @@\n a\n+b\n")

        assert parse_diff_file(diff, DiffFormat.SVN) == [DiffEntry("foo.c", (LineRange(2, 2),))]

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(DiffError) as exc_info:
            parse_diff_file(tmp_path / "missing.txt", DiffFormat.SVN)

        assert exc_info.value.code is ErrorCode.DIFF_FILE_NOT_FOUND
