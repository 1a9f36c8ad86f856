"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (DIFFCOV__SECTION__KEY)
3. Repo YAML (.diffcov.yaml)
4. Global YAML (~/.config/diffcov/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    DIFFCOV__<SECTION>__<KEY>=<VALUE>

Examples:
    DIFFCOV__LOGGING__LEVEL=DEBUG
    DIFFCOV__COVERAGE__LEVEL=branch
    DIFFCOV__GCOV__UPDATE=never
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        DIFFCOV__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG lists every skipped hunk and coverage row.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class DiffConfig(BaseModel):
    """Diff input configuration.

    Env vars:
        DIFFCOV__DIFF__FILE: Diff file to read (default: diff.txt)
        DIFFCOV__DIFF__FORMAT: Force cvs, diff or svn (default: auto-detect)
    """

    file: str = Field(
        default="diff.txt",
        description="Diff file read when none is given on the command line.",
    )
    format: Literal["cvs", "diff", "svn"] | None = Field(
        default=None,
        description="Diff format. None detects it from the diff content.",
    )


class CoverageConfig(BaseModel):
    """Annotated coverage configuration.

    Env vars:
        DIFFCOV__COVERAGE__LEVEL: line (C0) or branch (C1)
        DIFFCOV__COVERAGE__SUFFIX: Suffix appended to source paths (default: .gcov)
        DIFFCOV__COVERAGE__DIRECTORY: Directory holding the annotated files
    """

    level: Literal["line", "branch"] = Field(
        default="line",
        description="line reports executed lines only; branch also reports branch outcomes.",
    )
    suffix: str = Field(
        default=".gcov",
        description="Annotated coverage file name is <source path><suffix>.",
    )
    directory: str | None = Field(
        default=None,
        description="Directory the annotated files are resolved against. Default: cwd.",
    )

    @field_validator("suffix")
    @classmethod
    def validate_suffix(cls, v: str) -> str:
        if not v:
            raise ValueError("Coverage suffix must not be empty")
        return v


class GcovConfig(BaseModel):
    """gcov invocation configuration.

    Env vars:
        DIFFCOV__GCOV__COMMAND: gcov executable
        DIFFCOV__GCOV__UPDATE: ask, always or never regenerate stale annotations
    """

    command: str = Field(
        default="/usr/bin/gcov",
        description="gcov executable used to regenerate annotated files.",
    )
    update: Literal["ask", "always", "never"] = Field(
        default="ask",
        description="What to do when annotated files are missing or older than .gcda data.",
    )


class DiffCovConfig(BaseModel):
    """Root configuration for diffcov.

    All settings can be configured via:
    1. Environment variables: DIFFCOV__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    diff: DiffConfig = Field(default_factory=DiffConfig)
    coverage: CoverageConfig = Field(default_factory=CoverageConfig)
    gcov: GcovConfig = Field(default_factory=GcovConfig)
