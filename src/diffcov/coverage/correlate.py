"""Correlate changed line ranges with gcov-annotated source.

An annotated row looks like ``<marker>:<lineno>:<source text>``; branch
outcome rows (``branch  0 taken 80%``) follow the source row they belong
to. For each changed range the correlator archives every source row from
``range.start`` up to ``range.end`` together with its branch rows.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO

import structlog

from diffcov.coverage.arena import ByteArena
from diffcov.coverage.models import BranchRange, CoverageFile, CoverageLine
from diffcov.diff.models import DiffEntry
from diffcov.diff.reader import LookaheadReader

log = structlog.get_logger(__name__)

# Annotated files are read and archived with the same lossless codec.
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"

# Space-padded ASCII decimal, as gcov writes it.
_LINENO_RE = re.compile(r" *([0-9]+) *")


def parse_row_lineno(row: str) -> int | None:
    """Return the source line number of an annotated row, or None if malformed."""
    first = row.find(":")
    if first < 0:
        return None
    second = row.find(":", first + 1)
    if second < 0:
        return None
    match = _LINENO_RE.fullmatch(row, first + 1, second)
    if match is None:
        return None
    return int(match.group(1))


def is_source_row(row: str | None) -> bool:
    """True for a row that starts a new annotated source line."""
    if row is None:
        return False
    return row.startswith(" ") or parse_row_lineno(row) is not None


def is_branch_row(row: str) -> bool:
    return row.startswith("b") and "branch" in row


def _archive(arena: ByteArena, row: str) -> CoverageLine:
    return CoverageLine(span=arena.append(row.encode(_ENCODING, _ERRORS)))


def correlate_entry(
    entry: DiffEntry,
    stream: TextIO,
    *,
    coverage_path: str | None = None,
) -> CoverageFile:
    """Archive the annotated rows of ``stream`` that fall in ``entry``'s ranges.

    The stream is read once, front to back; when it runs out, whatever was
    archived so far is kept.
    """
    arena = ByteArena()
    coverage = CoverageFile(
        path=coverage_path or entry.source_path,
        source_path=entry.source_path,
        arena=arena,
    )
    reader = LookaheadReader(stream)

    for rng in entry.ranges:
        while (row := reader.advance()) is not None:
            lineno = parse_row_lineno(row)
            if lineno is None:
                continue
            if lineno < rng.start:
                continue

            line = _archive(arena, row)
            while reader.next is not None and not is_source_row(reader.next):
                extra = reader.advance()
                if extra is None:
                    break
                if is_branch_row(extra):
                    span = arena.append(extra.encode(_ENCODING, _ERRORS))
                    line.branches.append(BranchRange(span=span))
            coverage.lines.append(line)

            if lineno + 1 > rng.end:
                break

    log.debug(
        "coverage_correlated",
        source=entry.source_path,
        coverage=coverage.path,
        lines=len(coverage.lines),
        arena_bytes=arena.length,
    )
    return coverage


def coverage_path_for(
    source_path: str,
    *,
    directory: Path | None = None,
    suffix: str = ".gcov",
) -> Path:
    """Annotated file for a source path: ``foo.c`` -> ``foo.c.gcov``."""
    path = Path(f"{source_path}{suffix}")
    if directory is not None:
        path = directory / path
    return path


def correlate_entries(
    entries: Iterable[DiffEntry],
    *,
    directory: Path | None = None,
    suffix: str = ".gcov",
) -> list[CoverageFile]:
    """Correlate each entry against its annotated file, in diff order.

    Entries whose annotated file cannot be opened are skipped.
    """
    files: list[CoverageFile] = []
    for entry in entries:
        path = coverage_path_for(entry.source_path, directory=directory, suffix=suffix)
        try:
            stream = path.open(encoding=_ENCODING, errors=_ERRORS)
        except OSError as e:
            log.warning(
                "coverage_unreadable",
                source=entry.source_path,
                path=str(path),
                error=str(e),
            )
            continue
        with stream:
            files.append(
                correlate_entry(entry, stream, coverage_path=f"{entry.source_path}{suffix}")
            )
    return files


def decode_row(data: bytes) -> str:
    """Decode an archived row back to text."""
    return data.decode(_ENCODING, _ERRORS)
