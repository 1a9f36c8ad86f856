"""Diff hunk parsers.

Turns CVS, plain ed-script ("diffall") and SVN unified diffs into
per-file lists of post-patch line ranges that were added or changed.
Deleted lines produce no range, and a file section left without any
range is dropped.

Format examples::

    CVS                        ed-script                SVN
    Index: foo.c               Target=foo.c             Index: foo.c
    ===========                12a13,14                 ===========
    RCS file: ...              > added                  --- foo.c (revision 1)
    diff -r1.1 foo.c           > added                  +++ foo.c (working copy)
    12a13,14                   3,4d3                    @@ -1,3 +10,5 @@
    > added                    < removed                 a
                                                        +b
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import TextIO

import structlog

from diffcov.core.errors import DiffError
from diffcov.diff.models import INDEX_MARKER, DiffEntry, DiffFormat, LineRange
from diffcov.diff.reader import LookaheadReader

log = structlog.get_logger(__name__)

# <old_start>[,<old_end>]<op><new_start>[,<new_end>]
_ED_COMMAND_RE = re.compile(r"^(\d+)(?:,(\d+))?([acd])(\d+)(?:,(\d+))?\s*$")

# @@ -<old_start>[,<old_len>] +<new_start>[,<new_len>] @@
_HUNK_SUMMARY_RE = re.compile(r"^@@ -\d+(?:,\d+)? \+(\d+)(?:,\d+)? @@")


# ============================================================================
# Line-level helpers
# ============================================================================


def parse_source_path(line: str, fmt: DiffFormat) -> str:
    """Extract the file path from a section header line.

    ``Index: aaa.c`` -> ``aaa.c`` for CVS/SVN; ed-script sections use the
    whole header line.
    """
    if fmt is DiffFormat.DIFF:
        return line
    pos = line.find(INDEX_MARKER)
    if pos < 0:
        return line
    return line[pos + len(INDEX_MARKER) + 1 :]


def parse_ed_command(line: str) -> LineRange | None:
    """Parse an ed-script command line into its post-patch range.

    ``30a31,32`` -> 31..32, ``5,7c5,6`` -> 5..6, ``22,30d22`` -> None.
    """
    match = _ED_COMMAND_RE.match(line)
    if match is None:
        log.debug("malformed_hunk_line", line=line)
        return None
    op = match.group(3)
    if op == "d":
        return None
    start = int(match.group(4))
    end = int(match.group(5)) if match.group(5) is not None else start
    if start > end:
        log.debug("inverted_hunk_range", line=line, start=start, end=end)
        return None
    return LineRange(start, end)


def parse_hunk_base(line: str) -> int | None:
    """Return the new-file start line of an ``@@`` summary, or None."""
    match = _HUNK_SUMMARY_RE.match(line)
    if match is None:
        return None
    return int(match.group(1))


def is_hunk_summary(line: str) -> bool:
    return line.startswith("@@")


# ============================================================================
# Section body parsers
# ============================================================================


def _ed_script_ranges(reader: LookaheadReader, fmt: DiffFormat) -> list[LineRange]:
    """Collect ranges from digit-leading command lines until the section ends."""
    boundary = fmt.boundary
    ranges: list[LineRange] = []
    while not boundary.ends_section(reader):
        line = reader.advance()
        if line is None:
            break
        if line[:1].isdigit():
            rng = parse_ed_command(line)
            if rng is not None:
                ranges.append(rng)
    return ranges


def _unified_ranges(reader: LookaheadReader) -> list[LineRange]:
    """Collect one range per contiguous run of ``+`` lines in each hunk.

    ``counter`` is the offset of the current line from the hunk's new-file
    start; it restarts at -1 on every summary line so the first body line
    is 0, and ``-`` lines do not advance it.
    """
    boundary = DiffFormat.SVN.boundary
    ranges: list[LineRange] = []
    base: int | None = None
    counter = 0
    start: int | None = None

    while not boundary.ends_section(reader):
        line = reader.advance()
        if line is None:
            break

        if line[:1] in (" ", "+"):
            counter += 1

        if is_hunk_summary(line):
            counter = -1
            start = None
            base = parse_hunk_base(line)
            if base is None:
                log.debug("malformed_hunk_summary", line=line)
            continue

        if not base:
            continue

        prev_added = (reader.previous or "").startswith("+")
        next_added = (reader.next or "").startswith("+")
        if line.startswith("+"):
            if not prev_added:
                start = base + counter
            if not next_added and start is not None:
                ranges.append(LineRange(start, base + counter))
                start = None

    return ranges


# ============================================================================
# Entry points
# ============================================================================


def parse_diff(stream: TextIO, fmt: DiffFormat) -> list[DiffEntry]:
    """Parse a diff stream into entries that have at least one changed range."""
    reader = LookaheadReader(stream)
    boundary = fmt.boundary
    entries: list[DiffEntry] = []

    for line in reader:
        if not boundary.starts_section(reader):
            continue

        source_path = parse_source_path(line, fmt)
        if fmt is DiffFormat.SVN:
            ranges = _unified_ranges(reader)
        else:
            ranges = _ed_script_ranges(reader, fmt)

        if not ranges:
            log.debug("diff_entry_skipped", source=source_path, reason="no added lines")
            continue
        entries.append(DiffEntry(source_path=source_path, ranges=tuple(ranges)))

    log.debug("diff_parsed", format=fmt.value, entries=len(entries))
    return entries


def parse_diff_file(path: Path, fmt: DiffFormat) -> list[DiffEntry]:
    """Parse a diff file.

    Raises:
        DiffError: If the file cannot be opened.
    """
    try:
        with path.open(encoding="utf-8", errors="surrogateescape") as f:
            return parse_diff(f, fmt)
    except OSError as e:
        raise DiffError.file_not_found(str(path), str(e)) from e
