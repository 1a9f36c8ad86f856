"""diffcov error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Diff
- 4xxx: Coverage
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Diff (3xxx)
    DIFF_FILE_NOT_FOUND = 3001
    DIFF_FORMAT_UNKNOWN = 3002

    # Coverage (4xxx)
    ARENA_OUT_OF_BOUNDS = 4001
    GCOV_FAILED = 4002


@dataclass(frozen=True, slots=True)
class DiffCovError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'DIFF_FILE_NOT_FOUND')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(DiffCovError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class DiffError(DiffCovError):
    """Errors reading or classifying the diff input."""

    @classmethod
    def file_not_found(cls, path: str, reason: str = "cannot be opened") -> "DiffError":
        return cls(
            code=ErrorCode.DIFF_FILE_NOT_FOUND,
            message=f"Diff file {path} {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def unknown_format(cls, path: str) -> "DiffError":
        return cls(
            code=ErrorCode.DIFF_FORMAT_UNKNOWN,
            message=f"Could not detect diff format of {path}",
            details={"path": path},
        )


class CoverageError(DiffCovError):
    """Errors raised while correlating or producing coverage annotations."""

    @classmethod
    def gcov_failed(cls, command: str, reason: str) -> "CoverageError":
        return cls(
            code=ErrorCode.GCOV_FAILED,
            message=f"Failed to run {command}: {reason}",
            details={"command": command, "reason": reason},
        )


class ArenaBoundsError(CoverageError):
    """A byte range reached outside the data held by an arena."""

    @classmethod
    def out_of_bounds(cls, start: int, end: int, length: int) -> "ArenaBoundsError":
        return cls(
            code=ErrorCode.ARENA_OUT_OF_BOUNDS,
            message=f"Range [{start}, {end}) outside arena of length {length}",
            details={"start": start, "end": end, "length": length},
        )
