"""Error classification commands for the retrykit CLI.

- ``retrykit kinds``     list the error taxonomy
- ``retrykit classify``  classify a representative error value
"""

from __future__ import annotations

import json

import typer

from retrykit.core.errors import AbortError, ErrorClassifier

from ..output import console, create_classification_table, create_kinds_table

# Exception types that can be constructed from the command line
_EXCEPTION_TYPES: dict[str, type[BaseException]] = {
    "TypeError": TypeError,
    "AbortError": AbortError,
    "TimeoutError": TimeoutError,
    "ConnectionError": ConnectionError,
    "Exception": Exception,
}

_DEFAULT_MESSAGES: dict[str, str] = {
    "TypeError": "Failed to fetch",
    "AbortError": "Aborted",
    "TimeoutError": "Timed out",
    "ConnectionError": "Connection refused",
}


def kinds() -> None:
    """List error kinds and whether each is retried by default."""
    console.print(create_kinds_table())


def build_error(
    status: int | None,
    error_type: str | None,
    message: str | None,
    bare: bool,
) -> object:
    """Build the error value a client would see for the given options."""
    if error_type is not None:
        exc_class = _EXCEPTION_TYPES.get(error_type)
        if exc_class is None:
            choices = ", ".join(sorted(_EXCEPTION_TYPES))
            raise typer.BadParameter(
                f"Unknown error type '{error_type}'. Choose from: {choices}",
                param_hint="--type",
            )
        return exc_class(message or _DEFAULT_MESSAGES.get(error_type, "error"))
    if status is not None:
        if bare:
            return {"status": status}
        return {"response": {"status": status}}
    if message is not None:
        return Exception(message)
    return None


def classify(
    status: int | None = typer.Argument(
        None, help="HTTP status carried by the error (0 = response without status)"
    ),
    error_type: str | None = typer.Option(
        None, "--type", "-t", help="Exception type to construct (e.g. TypeError, AbortError)"
    ),
    message: str | None = typer.Option(None, "--message", "-m", help="Exception message"),
    bare: bool = typer.Option(
        False, "--bare", help="Put the status on the error itself instead of a response"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Classify a representative error and show whether it is retryable."""
    error = build_error(status, error_type, message, bare)
    result = ErrorClassifier().describe(error)
    if json_output:
        console.print_json(json.dumps(result.to_dict()))
        return
    console.print(create_classification_table(result))
