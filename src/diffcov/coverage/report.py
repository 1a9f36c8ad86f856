"""Coverage report generation.

Two renderings of the same numbers:

- ``build_summary``: structured dict for JSON output
- ``build_text_report``: the classic text report, one string per line

Output schema for build_summary:
{
    "level": "line" | "branch",
    "files": [
        {
            "path": str,             # annotated file, e.g. foo.c.gcov
            "source": str,
            "line_pass": int,
            "line_fail": int,
            "line_percent": float,
            "branch_pass": int,      # branch level only
            "branch_fail": int,      # branch level only
            "branch_percent": float, # branch level only
            "not_passed": [str, ...]
        },
        ...
    ],
    "total": {
        "files": int,
        "line_pass": int, "line_fail": int, "line_percent": float,
        "branch_pass": int, "branch_fail": int, "branch_percent": float
    }
}
Files without any evaluable changed line are omitted from both sections.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from diffcov.coverage.calculate import not_passed_lines, summarize
from diffcov.coverage.models import CoverageFile, CoverageLevel, CoverageTotals

_RESULT_BANNER = (
    "***************************",
    "***** coverage result *****",
    "***************************",
)
_SUMMARY_BANNER = ("*******************", "***** summary *****", "*******************")


def _rate(label: str, percent: float, passed: int, total: int) -> str:
    return f"{label}:{percent:.2f}% ({passed}/{total})"


def _file_lines(coverage: CoverageFile, level: CoverageLevel) -> list[str]:
    lines = [
        f"{coverage.path} "
        + _rate("Lines executed", coverage.line_percent, coverage.line_pass, coverage.lines_found)
    ]
    if level is CoverageLevel.BRANCH:
        lines.append(
            f"{coverage.path} "
            + _rate(
                "Branches executed",
                coverage.branch_percent,
                coverage.branch_pass,
                coverage.branches_found,
            )
        )
    return lines


def build_text_report(files: Sequence[CoverageFile], level: CoverageLevel) -> list[str]:
    """Render per-file results, not-passed rows and the summary as text lines."""
    evaluable = [f for f in files if f.is_evaluable]
    out: list[str] = list(_RESULT_BANNER)
    for coverage in evaluable:
        out.extend(_file_lines(coverage, level))
        out.extend(not_passed_lines(coverage, level))

    out.extend(_SUMMARY_BANNER)
    for coverage in evaluable:
        out.extend(_file_lines(coverage, level))

    totals = summarize(evaluable)
    out.append(
        _rate("Total Lines executed", totals.line_percent, totals.line_pass, totals.lines_found)
    )
    if level is CoverageLevel.BRANCH:
        out.append(
            _rate(
                "Total Branches executed",
                totals.branch_percent,
                totals.branch_pass,
                totals.branches_found,
            )
        )
    return out


def _totals_dict(totals: CoverageTotals, level: CoverageLevel) -> dict[str, Any]:
    result: dict[str, Any] = {
        "files": totals.files,
        "line_pass": totals.line_pass,
        "line_fail": totals.line_fail,
        "line_percent": round(totals.line_percent, 2),
    }
    if level is CoverageLevel.BRANCH:
        result["branch_pass"] = totals.branch_pass
        result["branch_fail"] = totals.branch_fail
        result["branch_percent"] = round(totals.branch_percent, 2)
    return result


def build_summary(files: Sequence[CoverageFile], level: CoverageLevel) -> dict[str, Any]:
    """Build a structured summary of calculated coverage files.

    Args:
        files: Calculated coverage files, in diff order.
        level: Reporting level; branch fields are only present at branch level.

    Returns:
        Structured dict suitable for JSON serialization.
    """
    evaluable = [f for f in files if f.is_evaluable]

    file_stats: list[dict[str, Any]] = []
    for coverage in evaluable:
        stats: dict[str, Any] = {
            "path": coverage.path,
            "source": coverage.source_path,
            "line_pass": coverage.line_pass,
            "line_fail": coverage.line_fail,
            "line_percent": round(coverage.line_percent, 2),
        }
        if level is CoverageLevel.BRANCH:
            stats["branch_pass"] = coverage.branch_pass
            stats["branch_fail"] = coverage.branch_fail
            stats["branch_percent"] = round(coverage.branch_percent, 2)
        stats["not_passed"] = not_passed_lines(coverage, level)
        file_stats.append(stats)

    return {
        "level": level.value,
        "files": file_stats,
        "total": _totals_dict(summarize(evaluable), level),
    }
