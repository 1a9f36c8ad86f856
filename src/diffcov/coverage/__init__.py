"""Changed-line coverage: correlation, calculation and reporting.

This package provides:
- An append-only byte arena holding archived annotation rows
- Correlation of diff line ranges with gcov-annotated source
- Line and branch pass/fail calculation
- Structured and text reports

Usage:
    from diffcov.coverage import CoverageLevel, build_summary, calculate, correlate_entries

    files = calculate(correlate_entries(entries), CoverageLevel.BRANCH)
    summary = build_summary(files, CoverageLevel.BRANCH)
"""

from diffcov.coverage.arena import ARENA_CHUNK_SIZE, ByteArena
from diffcov.coverage.calculate import (
    calculate,
    calculate_file,
    not_passed_lines,
    summarize,
)
from diffcov.coverage.correlate import (
    correlate_entries,
    correlate_entry,
    coverage_path_for,
    parse_row_lineno,
)
from diffcov.coverage.gcov import StaleCoverage, find_stale_coverage, run_gcov
from diffcov.coverage.models import (
    BranchRange,
    ByteRange,
    CoverageFile,
    CoverageLevel,
    CoverageLine,
    CoverageTotals,
)
from diffcov.coverage.report import build_summary, build_text_report

__all__ = [
    # Models
    "BranchRange",
    "ByteRange",
    "CoverageFile",
    "CoverageLevel",
    "CoverageLine",
    "CoverageTotals",
    # Arena
    "ARENA_CHUNK_SIZE",
    "ByteArena",
    # Correlation
    "correlate_entries",
    "correlate_entry",
    "coverage_path_for",
    "parse_row_lineno",
    # Calculation
    "calculate",
    "calculate_file",
    "not_passed_lines",
    "summarize",
    # gcov
    "StaleCoverage",
    "find_stale_coverage",
    "run_gcov",
    # Report
    "build_summary",
    "build_text_report",
]
