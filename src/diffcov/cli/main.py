"""diffcov CLI - coverage of the lines a patch changed."""

from __future__ import annotations

import json
from pathlib import Path
from typing import NoReturn

import click

from diffcov import __version__
from diffcov.config.loader import load_config
from diffcov.config.models import DiffCovConfig
from diffcov.core.errors import ConfigError, DiffCovError, DiffError, ErrorCode
from diffcov.core.logging import configure_logging
from diffcov.core.progress import pluralize, spinner, status
from diffcov.coverage.gcov import StaleCoverage, find_stale_coverage, run_gcov
from diffcov.coverage.models import CoverageLevel
from diffcov.coverage.report import build_summary, build_text_report
from diffcov.diff.models import DiffFormat
from diffcov.ops import load_entries, measure


def _overrides(**sections: dict[str, object]) -> dict[str, dict[str, object]]:
    """Drop unset CLI options so config files and env vars still apply."""
    result: dict[str, dict[str, object]] = {}
    for section, values in sections.items():
        kept = {k: v for k, v in values.items() if v is not None}
        if kept:
            result[section] = kept
    return result


# flag name -> (ctx.meta key, selected value)
_EXCLUSIVE_FLAGS = {
    "line": ("diffcov.level", "line"),
    "branch": ("diffcov.level", "branch"),
    "cvs": ("diffcov.format", "cvs"),
    "diffall": ("diffcov.format", "diff"),
    "svn": ("diffcov.format", "svn"),
}


def _select(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """Record a level or format flag; the last one given on the command line wins.

    Click runs callbacks in command-line order, so a later flag overwrites
    an earlier one of the same group.
    """
    if value and param.name is not None:
        key, choice = _EXCLUSIVE_FLAGS[param.name]
        ctx.meta[key] = choice


def _fail(ctx: click.Context, error: DiffCovError, message: str, *, as_json: bool) -> NoReturn:
    """Exit 1 with the error as JSON on stdout, or as a click error message."""
    if as_json:
        click.echo(json.dumps({"error": error.to_dict()}, indent=2))
        ctx.exit(1)
    raise click.ClickException(message) from error


def _report_stale(stale: list[StaleCoverage]) -> None:
    for item in stale:
        if item.reason == "missing":
            status(f"{item.coverage_path} is none", style="warning")
        else:
            status(f"{item.coverage_path} needs update", style="warning")


def _refresh_coverage(
    config: DiffCovConfig,
    level: CoverageLevel,
    stale: list[StaleCoverage],
) -> bool:
    """Regenerate stale annotations per the update policy.

    Returns False when the user chose to quit.
    """
    policy = config.gcov.update
    if policy == "never":
        return True
    if policy == "ask":
        try:
            answer = click.prompt(
                f"create {level.label} gcov? [y/n/q]",
                default="q",
                show_default=False,
                err=True,
            )
        except click.Abort:
            # End of input quits like "q".
            answer = "q"
        answer = answer.strip().lower()
        if answer == "n":
            return True
        if answer != "y":
            return False

    cwd = Path(config.coverage.directory) if config.coverage.directory else Path.cwd()
    with spinner(f"Running gcov for {pluralize(len(stale), 'stale file')}"):
        returncode = run_gcov(level, command=config.gcov.command, cwd=cwd)
    if returncode != 0:
        status(f"gcov exited with status {returncode}", style="error")
    return True


@click.command()
@click.version_option(version=__version__, prog_name="diffcov")
@click.argument("diff_file", required=False, type=click.Path(path_type=Path))
@click.option(
    "-c0",
    "-C0",
    "--line",
    "line",
    is_flag=True,
    expose_value=False,
    callback=_select,
    help="Report line (C0) coverage",
)
@click.option(
    "-c1",
    "-C1",
    "--branch",
    "branch",
    is_flag=True,
    expose_value=False,
    callback=_select,
    help="Report line and branch (C1) coverage",
)
@click.option(
    "-c",
    "--cvsdiff",
    "cvs",
    is_flag=True,
    expose_value=False,
    callback=_select,
    help="Diff is CVS diff output",
)
@click.option(
    "-d",
    "--diffall",
    "diffall",
    is_flag=True,
    expose_value=False,
    callback=_select,
    help="Diff is ed-script output",
)
@click.option(
    "-s",
    "--svndiff",
    "svn",
    is_flag=True,
    expose_value=False,
    callback=_select,
    help="Diff is SVN unified diff",
)
@click.option(
    "--coverage-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the annotated .gcov files",
)
@click.option("--suffix", default=None, help="Annotated file suffix (default: .gcov)")
@click.option(
    "--gcov-update",
    type=click.Choice(["ask", "always", "never"]),
    default=None,
    help="Regenerate stale annotations with gcov",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    diff_file: Path | None,
    coverage_dir: Path | None,
    suffix: str | None,
    gcov_update: str | None,
    as_json: bool,
    verbose: bool,
) -> None:
    """Show how much of the code a patch changed was executed.

    DIFF_FILE is a CVS, ed-script or SVN diff (default: diff.txt). Each
    changed file is matched with its gcov annotation <file>.gcov.
    """
    level = ctx.meta.get("diffcov.level")
    diff_format = ctx.meta.get("diffcov.format")
    try:
        config = load_config(
            **_overrides(
                diff={"file": str(diff_file) if diff_file else None, "format": diff_format},
                coverage={
                    "level": level,
                    "suffix": suffix,
                    "directory": str(coverage_dir) if coverage_dir else None,
                },
                gcov={"update": gcov_update},
            )
        )
    except ConfigError as e:
        _fail(ctx, e, str(e), as_json=as_json)

    if verbose:
        config.logging.level = "DEBUG"
    configure_logging(config=config.logging)

    coverage_level = CoverageLevel(config.coverage.level)
    coverage_root = Path(config.coverage.directory) if config.coverage.directory else None
    diff_path = Path(config.diff.file)
    forced = DiffFormat(config.diff.format) if config.diff.format else None

    try:
        _, entries = load_entries(diff_path, forced)
    except DiffError as e:
        if e.code is ErrorCode.DIFF_FORMAT_UNKNOWN:
            raise click.UsageError(
                f"{e.message}; pass -c (cvs), -d (diffall) or -s (svn)"
            ) from e
        _fail(ctx, e, e.message, as_json=as_json)

    if not entries:
        raise click.ClickException(f"No added or changed lines found in {diff_path}")

    stale = find_stale_coverage(entries, directory=coverage_root, suffix=config.coverage.suffix)
    if stale:
        _report_stale(stale)
        if not _refresh_coverage(config, coverage_level, stale):
            return

    files, _ = measure(
        entries,
        level=coverage_level,
        coverage_dir=coverage_root,
        suffix=config.coverage.suffix,
    )

    if as_json:
        click.echo(json.dumps(build_summary(files, coverage_level), indent=2))
    else:
        for line in build_text_report(files, coverage_level):
            click.echo(line)


if __name__ == "__main__":
    cli()
