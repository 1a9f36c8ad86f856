"""End-to-end changed-line coverage run.

One diff is parsed start to finish, then each changed file's annotation
is correlated and calculated in diff order. Aggregates are only taken
from fully built files.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import structlog

from diffcov.core.errors import DiffError
from diffcov.coverage.calculate import calculate, summarize
from diffcov.coverage.correlate import correlate_entries
from diffcov.coverage.models import CoverageFile, CoverageLevel, CoverageTotals
from diffcov.diff.detect import detect_format_file
from diffcov.diff.models import DiffEntry, DiffFormat
from diffcov.diff.parsers import parse_diff_file

log = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CoverageResult:
    """Everything one run produced."""

    diff_format: DiffFormat
    level: CoverageLevel
    entries: list[DiffEntry]
    files: list[CoverageFile]
    totals: CoverageTotals

    @property
    def evaluable_files(self) -> list[CoverageFile]:
        return [f for f in self.files if f.is_evaluable]


def resolve_format(diff_path: Path, diff_format: DiffFormat | None) -> DiffFormat:
    """Use the given format, or detect it from the diff.

    Raises:
        DiffError: If the diff is unreadable or its format unrecognized.
    """
    if diff_format is not None:
        return diff_format
    if not diff_path.is_file():
        raise DiffError.file_not_found(str(diff_path))
    detected = detect_format_file(diff_path)
    if detected is None:
        raise DiffError.unknown_format(str(diff_path))
    return detected


def load_entries(
    diff_path: Path,
    diff_format: DiffFormat | None = None,
) -> tuple[DiffFormat, list[DiffEntry]]:
    """Resolve the format and parse the diff."""
    fmt = resolve_format(diff_path, diff_format)
    entries = parse_diff_file(diff_path, fmt)
    log.info("diff_loaded", path=str(diff_path), format=fmt.value, entries=len(entries))
    return fmt, entries


def measure(
    entries: list[DiffEntry],
    *,
    level: CoverageLevel = CoverageLevel.LINE,
    coverage_dir: Path | None = None,
    suffix: str = ".gcov",
) -> tuple[list[CoverageFile], CoverageTotals]:
    """Correlate and calculate already parsed entries."""
    files = calculate(correlate_entries(entries, directory=coverage_dir, suffix=suffix), level)
    totals = summarize(files)
    skipped = [f.path for f in files if not f.is_evaluable]
    if skipped:
        log.warning("coverage_not_evaluable", files=skipped)
    return files, totals


def analyze(
    diff_path: Path,
    *,
    diff_format: DiffFormat | None = None,
    level: CoverageLevel = CoverageLevel.LINE,
    coverage_dir: Path | None = None,
    suffix: str = ".gcov",
) -> CoverageResult:
    """Parse a diff and measure coverage of the lines it changed.

    Raises:
        DiffError: If the diff cannot be read or classified.
    """
    fmt, entries = load_entries(diff_path, diff_format)
    files, totals = measure(entries, level=level, coverage_dir=coverage_dir, suffix=suffix)
    return CoverageResult(diff_format=fmt, level=level, entries=entries, files=files, totals=totals)
