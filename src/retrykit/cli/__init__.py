"""retrykit command line.

Developer tooling around the retry core: inspect the error taxonomy, check
how a given failure would be classified, and preview backoff timing for a
retry configuration.

Layout:
    __init__.py       app assembly and global options
    helpers.py        CLI logging state, config loading
    output.py         rich tables and formatting
    commands/
        classify.py   ``kinds`` and ``classify``
        schedule.py   ``schedule``
"""

from __future__ import annotations

from typing import Annotated

import typer

from retrykit import __version__

from .commands import classify, kinds, schedule
from .helpers import configure_global_logging, set_log_format, set_log_level
from .output import console

app = typer.Typer(
    name="retrykit",
    help="Inspect error classification and retry timing.",
    no_args_is_help=True,
    add_completion=False,
)


def _show_version(requested: bool) -> None:
    if not requested:
        return
    console.print(f"retrykit v{__version__}")
    raise typer.Exit()


def _apply_log_level(value: str | None) -> str | None:
    if value is not None:
        set_log_level(value)
    return value


def _apply_log_format(value: str | None) -> str | None:
    if value is not None:
        set_log_format(value)
    return value


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            is_eager=True,
            callback=_show_version,
            help="Print the retrykit version and exit.",
        ),
    ] = False,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            "-L",
            envvar="RETRYKIT_LOG_LEVEL",
            callback=_apply_log_level,
            help="Minimum log level: DEBUG, INFO, WARNING or ERROR.",
        ),
    ] = None,
    log_format: Annotated[
        str | None,
        typer.Option(
            "--log-format",
            envvar="RETRYKIT_LOG_FORMAT",
            callback=_apply_log_format,
            help="Log rendering: console or json.",
        ),
    ] = None,
) -> None:
    """retrykit: client-side error classification and retry."""
    configure_global_logging(console)


app.command(name="kinds")(kinds)
app.command(name="classify")(classify)
app.command(name="schedule")(schedule)

__all__ = ["app", "main"]
