"""Coverage data model for changed lines.

Archived rows live in the owning file's ``ByteArena``; the records here
only hold ``ByteRange`` offsets into it plus the counters the calculator
fills in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from diffcov.coverage.arena import ByteArena


class CoverageLevel(str, Enum):
    """How much of the annotation is evaluated."""

    LINE = "line"  # C0: executed lines
    BRANCH = "branch"  # C1: executed lines and branch outcomes

    @property
    def label(self) -> str:
        return "C1" if self is CoverageLevel.BRANCH else "C0"


def percent(passed: int, failed: int, *, empty: float) -> float:
    """Percentage of ``passed`` out of ``passed + failed``; ``empty`` when both are 0."""
    total = passed + failed
    if total == 0:
        return empty
    return passed / total * 100.0


@dataclass(frozen=True, slots=True)
class ByteRange:
    """Half-open ``[start, end)`` byte span inside an arena."""

    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True, slots=True)
class BranchRange:
    """One archived branch-outcome row."""

    span: ByteRange


@dataclass(slots=True)
class CoverageLine:
    """One archived source row that fell inside a changed range."""

    span: ByteRange
    branches: list[BranchRange] = field(default_factory=list)
    branch_pass: int = 0
    branch_fail: int = 0

    @property
    def branch_percent(self) -> float:
        """Taken-branch percentage; 100 when the row has no branches."""
        return percent(self.branch_pass, self.branch_fail, empty=100.0)


@dataclass(slots=True)
class CoverageFile:
    """Correlated coverage for one diff entry.

    Built by the correlator, counted by the calculator.
    """

    path: str  # annotated coverage file, e.g. foo.c.gcov
    source_path: str
    arena: ByteArena
    lines: list[CoverageLine] = field(default_factory=list)
    line_pass: int = 0
    line_fail: int = 0
    branch_pass: int = 0
    branch_fail: int = 0
    line_percent: float = 0.0
    branch_percent: float = 100.0

    @property
    def lines_found(self) -> int:
        return self.line_pass + self.line_fail

    @property
    def branches_found(self) -> int:
        return self.branch_pass + self.branch_fail

    @property
    def is_evaluable(self) -> bool:
        """False when no executable changed line was matched.

        Such files (missing or garbled annotation) are left out of every report.
        """
        return self.lines_found > 0


@dataclass(frozen=True, slots=True)
class CoverageTotals:
    """Aggregate counters across all evaluable files."""

    files: int
    line_pass: int
    line_fail: int
    branch_pass: int
    branch_fail: int

    @property
    def lines_found(self) -> int:
        return self.line_pass + self.line_fail

    @property
    def branches_found(self) -> int:
        return self.branch_pass + self.branch_fail

    @property
    def line_percent(self) -> float:
        return percent(self.line_pass, self.line_fail, empty=100.0)

    @property
    def branch_percent(self) -> float:
        return percent(self.branch_pass, self.branch_fail, empty=100.0)
