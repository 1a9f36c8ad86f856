"""Diff format auto-detection.

Scores the whole diff by telltale lines: ``@@`` hunk summaries (svn),
``RCS file`` headers (cvs) and ``Target=`` headers (diffall ed-script).
"""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

import structlog

from diffcov.diff.models import DiffFormat
from diffcov.diff.reader import LookaheadReader

log = structlog.get_logger(__name__)


def detect_format(stream: TextIO) -> DiffFormat | None:
    """Guess the diff format of a stream, or None when nothing matches."""
    svn = cvs = diffall = 0

    for line in LookaheadReader(stream):
        if line.startswith("@@"):
            svn += 1
        if "RCS file" in line:
            cvs += 1
        if "Target=" in line:
            diffall += 1

    fmt: DiffFormat | None = None
    if diffall > 0:
        fmt = DiffFormat.DIFF
    if cvs > diffall:
        fmt = DiffFormat.CVS
    if svn > cvs:
        fmt = DiffFormat.SVN

    log.debug(
        "diff_format_detected",
        svn=svn,
        cvs=cvs,
        diffall=diffall,
        format=fmt.value if fmt else None,
    )
    return fmt


def detect_format_file(path: Path) -> DiffFormat | None:
    """Guess the diff format of a file; None if unreadable or unrecognized."""
    try:
        with path.open(encoding="utf-8", errors="surrogateescape") as f:
            return detect_format(f)
    except OSError as e:
        log.warning("diff_unreadable", path=str(path), error=str(e))
        return None
