"""Command-line entry point for gitu."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

import typer

from . import __version__, config, engine
from . import log as gitu_log
from .discovery import DiscoveryError
from .io import die, say
from .report import render_report


class LogLevelName(str, Enum):
    trace = "trace"
    debug = "debug"
    info = "info"
    success = "success"
    warning = "warning"
    error = "error"


class ReportFormatName(str, Enum):
    text = "text"
    table = "table"
    json = "json"


app = typer.Typer(
    add_completion=False,
    help="Pull every clean, on-branch git repository beneath a directory.",
)


def _version_callback(value: bool) -> None:
    if value:
        say(__version__)
        raise typer.Exit()


@app.command()
def main(
    root: Optional[Path] = typer.Argument(
        None,
        help="directory to scan (defaults to the current directory)",
        show_default=False,
    ),
    branch: Optional[str] = typer.Option(
        None, "--branch", "-b", help="branch name to check and update"
    ),
    parallelism: Optional[int] = typer.Option(
        None, "--parallelism", "-p", help="number of repositories evaluated at once"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="seconds to wait for each inspection command"
    ),
    pull_timeout: Optional[float] = typer.Option(
        None, "--pull-timeout", help="seconds to wait for each git pull"
    ),
    git_path: Optional[str] = typer.Option(
        None, "--git-path", help="git executable to run"
    ),
    output_format: ReportFormatName = typer.Option(
        ReportFormatName.text, "--format", help="report format"
    ),
    log_level: Optional[LogLevelName] = typer.Option(
        None, "--log-level", help="minimum log level to show"
    ),
    no_color: bool = typer.Option(False, "--no-color", help="disable colored output"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="show the version and exit",
    ),
) -> None:
    """Check every repository under ROOT and pull the ones that pass."""
    if log_level is not None:
        gitu_log.set_level(log_level.value)
    if no_color:
        gitu_log.set_no_color(True)

    run_config = config.resolve_config(
        {
            "root": root,
            "branch": branch,
            "parallelism": parallelism,
            "timeout_seconds": timeout,
            "pull_timeout_seconds": pull_timeout,
            "git_path": git_path,
        }
    )
    try:
        report = engine.run_update(run_config)
    except DiscoveryError as exc:
        die(str(exc))
        return

    if not len(report) and output_format is not ReportFormatName.json:
        say(f"No repositories found under {run_config.root}.")
        return
    rendered = render_report(report, run_config.branch, format=output_format.value)
    if rendered:
        say("")
        say(rendered)


if __name__ == "__main__":
    app()
