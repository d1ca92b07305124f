"""Backoff schedule command for the retrykit CLI."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from retrykit.execution.backoff import backoff_schedule

from ..helpers import load_retry_config
from ..output import console, create_schedule_table


def schedule(
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        dir_okay=False,
        readable=True,
        help="YAML file with 'retry' and optional 'logging' sections",
    ),
    max_retries: int | None = typer.Option(None, "--max-retries", "-n", help="Retry limit"),
    initial_delay_ms: int | None = typer.Option(None, "--initial-delay-ms", help="First delay"),
    max_delay_ms: int | None = typer.Option(None, "--max-delay-ms", help="Delay cap"),
    multiplier: float | None = typer.Option(None, "--multiplier", help="Backoff multiplier"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Show the wait before each retry for a retry configuration."""
    config = load_retry_config(
        console,
        config_file,
        max_retries=max_retries,
        initial_delay_ms=initial_delay_ms,
        max_delay_ms=max_delay_ms,
        backoff_multiplier=multiplier,
    )
    delays = backoff_schedule(config)
    if json_output:
        console.print_json(json.dumps({"config": config.model_dump(), "delays_ms": delays}))
        return
    if not delays:
        console.print("[dim]max_retries is 0: a single attempt, no retries[/dim]")
        return
    console.print(create_schedule_table(delays))
