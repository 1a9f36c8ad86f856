"""Core module exports."""

from diffcov.core.errors import (
    ArenaBoundsError,
    ConfigError,
    CoverageError,
    DiffCovError,
    DiffError,
    ErrorCode,
)
from diffcov.core.logging import configure_logging

__all__ = [
    # Errors
    "ArenaBoundsError",
    "ConfigError",
    "CoverageError",
    "DiffCovError",
    "DiffError",
    "ErrorCode",
    # Logging
    "configure_logging",
]
