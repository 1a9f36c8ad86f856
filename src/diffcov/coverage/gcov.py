"""Annotated-file freshness checks and gcov invocation.

gcov writes ``<source>.gcov`` next to the ``.gcda`` counters produced by a
test run. An annotation older than its counters (or absent) no longer
describes the code under test and should be regenerated before correlating.
"""

from __future__ import annotations

import subprocess
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Literal

import structlog

from diffcov.core.errors import CoverageError
from diffcov.coverage.correlate import coverage_path_for
from diffcov.coverage.models import CoverageLevel
from diffcov.diff.models import DiffEntry

log = structlog.get_logger(__name__)

StaleReason = Literal["missing", "outdated"]


@dataclass(frozen=True, slots=True)
class StaleCoverage:
    """An annotated file that needs regenerating."""

    source: str
    coverage_path: Path
    reason: StaleReason


def _is_header(source: str) -> bool:
    return PurePath(source).suffix[1:2] == "h"


def _gcda_path(source: str, directory: Path | None) -> Path:
    path = Path(source)
    gcda = path.with_name(path.stem + ".gcda")
    return directory / gcda if directory is not None else gcda


def find_stale_coverage(
    entries: Iterable[DiffEntry],
    *,
    directory: Path | None = None,
    suffix: str = ".gcov",
) -> list[StaleCoverage]:
    """List annotated files that are missing or older than their ``.gcda``.

    Headers and sources without ``.gcda`` counters are not checked.
    """
    stale: list[StaleCoverage] = []
    for entry in entries:
        if not entry.source_path or _is_header(entry.source_path):
            continue

        gcda = _gcda_path(entry.source_path, directory)
        try:
            gcda_mtime = gcda.stat().st_mtime
        except OSError:
            continue

        coverage = coverage_path_for(entry.source_path, directory=directory, suffix=suffix)
        try:
            coverage_mtime = coverage.stat().st_mtime
        except OSError:
            stale.append(StaleCoverage(entry.source_path, coverage, "missing"))
            continue

        if coverage_mtime < gcda_mtime:
            stale.append(StaleCoverage(entry.source_path, coverage, "outdated"))

    for item in stale:
        log.info(
            "coverage_stale",
            source=item.source,
            path=str(item.coverage_path),
            reason=item.reason,
        )
    return stale


def gcov_command(level: CoverageLevel, command: str, cwd: Path) -> list[str]:
    """Build the gcov command line for every ``.gcno`` notes file in ``cwd``."""
    args = [command]
    if level is CoverageLevel.BRANCH:
        args.append("-b")
    args.append("-f")
    args.extend(sorted(p.name for p in cwd.glob("*.gcno")))
    return args


def run_gcov(
    level: CoverageLevel,
    *,
    command: str = "/usr/bin/gcov",
    cwd: Path | None = None,
) -> int:
    """Regenerate annotated files; returns gcov's exit code.

    Raises:
        CoverageError: If gcov cannot be started.
    """
    cwd = cwd or Path.cwd()
    args = gcov_command(level, command, cwd)
    log.info("gcov_run", args=args, cwd=str(cwd))
    try:
        result = subprocess.run(args, cwd=cwd, capture_output=True, text=True)
    except OSError as e:
        raise CoverageError.gcov_failed(command, str(e)) from e
    if result.returncode != 0:
        log.warning("gcov_failed", returncode=result.returncode, stderr=result.stderr.strip())
    return result.returncode
