"""Data produced while classifying an error."""

from __future__ import annotations

from dataclasses import dataclass

from .codes import ErrorKind


@dataclass(frozen=True)
class ErrorStatusInfo:
    """HTTP-like status extracted from an error value.

    Attributes:
        status: Extracted status. ``None`` when a status member exists but
            is not a usable number; it then matches no status rule.
        has_response: Whether the value carried response context (a
            ``response`` member or a bare ``status`` member).
    """

    status: int | None
    has_response: bool


NO_STATUS = ErrorStatusInfo(status=0, has_response=False)


@dataclass(frozen=True)
class ClassifiedError:
    """Full classification of an error value, for logging and diagnostics."""

    kind: ErrorKind
    status: int | None
    has_response: bool
    retriable: bool
    message: str
    exception_type: str

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": self.kind.value,
            "status": self.status,
            "has_response": self.has_response,
            "retriable": self.retriable,
            "message": self.message,
            "exception_type": self.exception_type,
        }
