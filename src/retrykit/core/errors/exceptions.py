"""Exception types raised by retrykit and by operations it wraps."""

from __future__ import annotations


class RetrykitError(Exception):
    """Base class for retrykit errors."""


class AbortError(RetrykitError):
    """An operation was aborted before completing.

    Raised by ``AbortSignal.throw_if_aborted()``; classified as a timeout.
    """

    name = "AbortError"


class StatusError(RetrykitError):
    """A structured failure carrying an HTTP-like status code.

    Useful for adapting transport errors that expose a status but no
    response object.
    """

    def __init__(self, status: int, message: str | None = None) -> None:
        self.status = status
        super().__init__(message or f"Request failed with status {status}")


class ConfigError(RetrykitError):
    """A configuration file could not be loaded or validated."""
