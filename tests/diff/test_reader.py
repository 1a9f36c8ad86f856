"""Tests for the three-line lookahead reader."""

import io

from diffcov.diff.reader import LookaheadReader


def _reader(text: str) -> LookaheadReader:
    return LookaheadReader(io.StringIO(text))


class TestAdvance:
    """Window shifting tests."""

    def test_first_advance_fills_current_and_next(self) -> None:
        reader = _reader("one\ntwo\nthree\n")

        assert reader.advance() == "one"
        assert reader.previous is None
        assert reader.current == "one"
        assert reader.next == "two"

    def test_window_shifts_one_line_per_advance(self) -> None:
        reader = _reader("one\ntwo\nthree\n")
        reader.advance()

        assert reader.advance() == "two"
        assert (reader.previous, reader.current, reader.next) == ("one", "two", "three")

    def test_last_line_has_no_lookahead(self) -> None:
        reader = _reader("one\ntwo\n")
        reader.advance()
        reader.advance()

        assert reader.current == "two"
        assert reader.next is None

    def test_exhausted_stream_returns_none(self) -> None:
        reader = _reader("only\n")
        reader.advance()

        assert reader.advance() is None
        assert reader.advance() is None

    def test_empty_stream_returns_none(self) -> None:
        assert _reader("").advance() is None

    def test_line_terminators_are_stripped(self) -> None:
        reader = _reader("dos\r\nunix\nlast")

        assert list(reader) == ["dos", "unix", "last"]

    def test_blank_lines_are_kept(self) -> None:
        reader = _reader("a\n\nb\n")

        assert list(reader) == ["a", "", "b"]

    def test_iteration_yields_every_line_once(self) -> None:
        text = "".join(f"line {i}\n" for i in range(50))

        assert list(_reader(text)) == [f"line {i}" for i in range(50)]
