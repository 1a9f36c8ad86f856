"""Config module exports."""

from diffcov.config.loader import load_config
from diffcov.config.models import (
    CoverageConfig,
    DiffConfig,
    DiffCovConfig,
    GcovConfig,
    LoggingConfig,
    LogOutputConfig,
)

__all__ = [
    "load_config",
    "CoverageConfig",
    "DiffConfig",
    "DiffCovConfig",
    "GcovConfig",
    "LoggingConfig",
    "LogOutputConfig",
]
