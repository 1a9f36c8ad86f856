"""Classify archived rows and derive coverage percentages."""

from __future__ import annotations

from collections.abc import Iterable

from diffcov.coverage.correlate import decode_row
from diffcov.coverage.models import (
    CoverageFile,
    CoverageLevel,
    CoverageLine,
    CoverageTotals,
    percent,
)

NOT_EXECUTED_MARKER = "#"
_UNTAKEN_BRANCH_TOKENS = (" 0%", "never")


def line_marker(row: str) -> str | None:
    """The execution marker: the character right before the first ``:``."""
    colon = row.find(":")
    if colon <= 0:
        return None
    return row[colon - 1]


def is_executed_marker(marker: str) -> bool:
    return "0" <= marker <= "9"


def is_untaken_branch(row: str) -> bool:
    return any(token in row for token in _UNTAKEN_BRANCH_TOKENS)


def _read(coverage: CoverageFile, line: CoverageLine) -> str:
    return decode_row(coverage.arena.read_range(line.span))


def calculate_file(
    coverage: CoverageFile,
    level: CoverageLevel = CoverageLevel.LINE,
) -> CoverageFile:
    """Fill in pass/fail counters and percentages of one file.

    Branch rows are only evaluated at branch level. Counters are reset first,
    so calculating twice gives the same result.
    """
    coverage.line_pass = coverage.line_fail = 0
    coverage.branch_pass = coverage.branch_fail = 0

    for line in coverage.lines:
        line.branch_pass = line.branch_fail = 0

        marker = line_marker(_read(coverage, line))
        if marker is None:
            continue
        if is_executed_marker(marker):
            coverage.line_pass += 1
        elif marker == NOT_EXECUTED_MARKER:
            coverage.line_fail += 1

        if level is not CoverageLevel.BRANCH:
            continue
        for branch in line.branches:
            text = decode_row(coverage.arena.read_range(branch.span))
            if is_untaken_branch(text):
                line.branch_fail += 1
            else:
                line.branch_pass += 1
        coverage.branch_pass += line.branch_pass
        coverage.branch_fail += line.branch_fail

    coverage.line_percent = percent(coverage.line_pass, coverage.line_fail, empty=0.0)
    coverage.branch_percent = percent(coverage.branch_pass, coverage.branch_fail, empty=100.0)
    return coverage


def calculate(
    files: Iterable[CoverageFile],
    level: CoverageLevel = CoverageLevel.LINE,
) -> list[CoverageFile]:
    """Calculate every file in order."""
    return [calculate_file(f, level) for f in files]


def summarize(files: Iterable[CoverageFile]) -> CoverageTotals:
    """Aggregate counters over the evaluable files only."""
    evaluable = [f for f in files if f.is_evaluable]
    return CoverageTotals(
        files=len(evaluable),
        line_pass=sum(f.line_pass for f in evaluable),
        line_fail=sum(f.line_fail for f in evaluable),
        branch_pass=sum(f.branch_pass for f in evaluable),
        branch_fail=sum(f.branch_fail for f in evaluable),
    )


def not_passed_lines(
    coverage: CoverageFile,
    level: CoverageLevel = CoverageLevel.LINE,
) -> list[str]:
    """Rows of changed lines that were not fully exercised.

    Line level lists rows marked ``#``. Branch level also lists rows with an
    untaken branch, each followed by all of its branch rows.
    """
    rows: list[str] = []
    for line in coverage.lines:
        text = _read(coverage, line)
        marker = line_marker(text)
        if marker is None:
            continue
        if level is CoverageLevel.LINE:
            if marker == NOT_EXECUTED_MARKER:
                rows.append(text)
            continue
        if marker == NOT_EXECUTED_MARKER or line.branch_fail > 0:
            rows.append(text)
        if line.branch_fail > 0:
            rows.extend(decode_row(coverage.arena.read_range(b.span)) for b in line.branches)
    return rows
