"""Rich output formatting for the retrykit CLI."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from retrykit.core.errors import ClassifiedError, ErrorKind

# Shared console instance
console = Console()


class KindColors:
    """Color mappings for error kinds."""

    KIND: dict[ErrorKind, str] = {
        ErrorKind.NETWORK: "yellow",
        ErrorKind.TIMEOUT: "yellow",
        ErrorKind.SERVER: "magenta",
        ErrorKind.AUTH: "red",
        ErrorKind.NOT_FOUND: "red",
        ErrorKind.VALIDATION: "red",
        ErrorKind.RATE_LIMIT: "blue",
        ErrorKind.UNKNOWN: "dim",
    }

    @classmethod
    def get(cls, kind: ErrorKind) -> str:
        return cls.KIND.get(kind, "white")


def format_kind(kind: ErrorKind) -> str:
    color = KindColors.get(kind)
    return f"[{color}]{kind.value}[/{color}]"


def format_retryable(retryable: bool) -> str:
    return "[green]yes[/green]" if retryable else "[red]no[/red]"


def format_duration_ms(ms: float) -> str:
    """Format milliseconds for display (e.g. ``250ms``, ``1.5s``, ``2.0min``)."""
    if ms < 1000:
        return f"{ms:.0f}ms"
    seconds = ms / 1000
    if seconds < 60:
        return f"{seconds:.1f}s"
    return f"{seconds / 60:.1f}min"


def create_kinds_table() -> Table:
    table = Table(title="Error kinds")
    table.add_column("Kind")
    table.add_column("Retryable", justify="center")
    table.add_column("Description")
    for kind in ErrorKind:
        table.add_row(format_kind(kind), format_retryable(kind.is_retryable), kind.description)
    return table


def create_classification_table(result: ClassifiedError) -> Table:
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Kind", format_kind(result.kind))
    table.add_row("Retryable", format_retryable(result.retriable))
    table.add_row("Status", "-" if result.status is None else str(result.status))
    table.add_row("Response context", "yes" if result.has_response else "no")
    table.add_row("Error type", result.exception_type)
    if result.message:
        table.add_row("Message", result.message)
    return table


def create_schedule_table(delays: Sequence[float]) -> Table:
    table = Table(title="Backoff schedule")
    table.add_column("Retry", justify="right")
    table.add_column("Delay (ms)", justify="right")
    table.add_column("Delay", justify="right")
    table.add_column("Cumulative", justify="right")
    total = 0.0
    for retry_number, delay in enumerate(delays, start=1):
        total += delay
        table.add_row(
            str(retry_number),
            f"{delay:.0f}",
            format_duration_ms(delay),
            format_duration_ms(total),
        )
    return table
