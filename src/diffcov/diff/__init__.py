"""Diff parsing: changed post-patch line ranges per source file.

Usage:
    from diffcov.diff import DiffFormat, parse_diff_file

    entries = parse_diff_file(Path("diff.txt"), DiffFormat.SVN)
    for entry in entries:
        print(entry.source_path, entry.ranges)
"""

from diffcov.diff.detect import detect_format, detect_format_file
from diffcov.diff.models import DiffEntry, DiffFormat, LineRange, SectionBoundary
from diffcov.diff.parsers import (
    parse_diff,
    parse_diff_file,
    parse_ed_command,
    parse_hunk_base,
    parse_source_path,
)
from diffcov.diff.reader import LookaheadReader

__all__ = [
    # Models
    "DiffEntry",
    "DiffFormat",
    "LineRange",
    "SectionBoundary",
    # Reader
    "LookaheadReader",
    # Parsers
    "parse_diff",
    "parse_diff_file",
    "parse_ed_command",
    "parse_hunk_base",
    "parse_source_path",
    # Detection
    "detect_format",
    "detect_format_file",
]
