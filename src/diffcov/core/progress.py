"""User-facing status output for CLI runs.

Design principles:
- Report output goes to stdout; notices go to a Rich console on stderr
- Single line per notice, no spam
- Graceful degradation in non-TTY (CI, pipes)

Usage::

    from diffcov.core.progress import spinner, status

    status("foo.c.gcov needs update", style="warning")

    with spinner("Running gcov"):
        run_gcov(level)
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console

_console = Console(stderr=True)

_STYLES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}


def _is_tty() -> bool:
    """Check if stderr is a TTY."""
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print a styled status message to stderr."""
    prefix = _STYLES.get(style, "")
    padding = " " * indent
    _console.print(f"{padding}{prefix}{message}", highlight=False)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return "1 file" or "3 files"."""
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"


@contextmanager
def spinner(message: str, *, indent: int = 0) -> Iterator[None]:
    """Show a spinner while the block runs (plain message when not a TTY)."""
    padding = " " * indent
    if _is_tty():
        with _console.status(f"{padding}[cyan]{message}[/cyan]", spinner="dots"):
            yield
    else:
        _console.print(f"{padding}{message}...", highlight=False)
        yield
