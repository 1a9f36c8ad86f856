"""Three-line lookahead reader shared by the diff parsers and the correlator."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TextIO


class LookaheadReader:
    """Line cursor exposing the previous, current and next line at once.

    ``advance()`` is the only method that touches the underlying stream.
    Line terminators are stripped. A window slot is ``None`` when there is
    no line there (before the first line, or past the end of the stream).
    """

    __slots__ = ("_stream", "previous", "current", "next")

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self.previous: str | None = None
        self.current: str | None = None
        self.next: str | None = None

    def _read(self) -> str | None:
        line = self._stream.readline()
        if not line:
            return None
        return line.rstrip("\r\n")

    def advance(self) -> str | None:
        """Shift the window one line forward and return the new current line.

        Returns None once the stream is exhausted and no line is left to
        become current.
        """
        self.previous = self.current
        self.current = self.next
        self.next = None
        if self.current is None:
            self.current = self._read()
            if self.current is None:
                return None
        self.next = self._read()
        return self.current

    def __iter__(self) -> Iterator[str]:
        while (line := self.advance()) is not None:
            yield line
