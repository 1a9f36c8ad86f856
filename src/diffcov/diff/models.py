"""Data models for parsed diffs.

All models are frozen dataclasses; a parsed diff is never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from diffcov.diff.reader import LookaheadReader

INDEX_MARKER = "Index:"


class DiffFormat(str, Enum):
    """Diff dialects understood by the hunk parsers."""

    CVS = "cvs"  # "Index:" sections with ed-script hunk lines
    DIFF = "diff"  # bare ed-script ("diffall") output
    SVN = "svn"  # "Index:" sections with unified @@ hunks

    @property
    def boundary(self) -> SectionBoundary:
        if self is DiffFormat.DIFF:
            return SectionBoundary.ED_SCRIPT
        return SectionBoundary.INDEX_MARKER


class SectionBoundary(Enum):
    """Predicate deciding where a per-file diff section starts and ends.

    Decisions only look at the reader window, never at the stream.
    """

    INDEX_MARKER = "index"
    ED_SCRIPT = "ed"
    NONE = "none"

    def starts_section(self, reader: LookaheadReader) -> bool:
        current = reader.current or ""
        if self is SectionBoundary.INDEX_MARKER:
            return current.startswith(INDEX_MARKER)
        if self is SectionBoundary.ED_SCRIPT:
            nxt = reader.next or ""
            return current[:1].isalpha() and nxt[:1].isdigit()
        return False

    def ends_section(self, reader: LookaheadReader) -> bool:
        nxt = reader.next or ""
        if self is SectionBoundary.INDEX_MARKER:
            return nxt.startswith(INDEX_MARKER)
        if self is SectionBoundary.ED_SCRIPT:
            return nxt[:1].isalpha()
        return False


@dataclass(frozen=True, slots=True)
class LineRange:
    """Inclusive, 1-based range of post-patch line numbers."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"LineRange start {self.start} is after end {self.end}")


@dataclass(frozen=True, slots=True)
class DiffEntry:
    """Changed line ranges for one source file, in diff order."""

    source_path: str
    ranges: tuple[LineRange, ...]
