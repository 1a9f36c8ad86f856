"""structlog setup for diffcov runs.

Every module logs through ``structlog.get_logger(__name__)``; this module
routes those events to one stdlib handler per configured output, each with
its own level and renderer (human console lines or JSON).
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from diffcov.config.models import LoggingConfig, LogOutputConfig

_STREAMS = ("stderr", "stdout")

# Processors applied to structlog events and to foreign stdlib records alike.
_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
]


def _level(name: str | None, fallback: int) -> int:
    if not name:
        return fallback
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else fallback


def _renderer(output: LogOutputConfig) -> structlog.types.Processor:
    if output.format == "json":
        return structlog.processors.JSONRenderer()
    to_terminal = output.destination in _STREAMS and sys.stderr.isatty()
    return structlog.dev.ConsoleRenderer(colors=to_terminal, pad_event_to=0, pad_level=False)


def _handler(destination: str) -> logging.Handler:
    """Stream handler for stderr/stdout, append-mode file handler otherwise."""
    if destination in _STREAMS:
        # Resolved per call; sys.stderr may have been swapped since import.
        return logging.StreamHandler(getattr(sys, destination))
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a")


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "WARNING",
) -> None:
    """Install structlog and the stdlib handlers for every output.

    Args:
        config: Full logging configuration. When given, ``json_format``
            and ``level`` are ignored.
        json_format: Render the single stderr output as JSON.
        level: Root level for the single stderr output.
    """
    from diffcov.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    root_level = _level(config.level, logging.WARNING)

    structlog.configure(
        processors=[*_SHARED_PROCESSORS, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfiguring within one process (tests, --verbose) must take effect.
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(root_level)

    for output in config.outputs:
        handler = _handler(output.destination)
        handler.setLevel(_level(output.level, root_level))
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=_renderer(output),
                foreign_pre_chain=_SHARED_PROCESSORS,
            )
        )
        root.addHandler(handler)
