"""ErrorClassifier: maps any caught value to an ErrorKind.

Classification is a total function. It never raises, whatever the input:
``None``, primitives, mappings, exceptions or arbitrary objects. Rules are
evaluated in precedence order and the first match wins:

1. Failed low-level fetch (``TypeError`` mentioning fetch, httpx network
   errors, ``ConnectionError``) -> network
2. Aborted or timed-out request -> timeout
3. Extract an HTTP-like status (see ``extract_status``)
4. Status 0 inside a response envelope -> network
5. 401/403 -> auth, 404 -> notFound, 400/422 -> validation,
   429 -> rateLimit, >= 500 -> server
6. Otherwise -> unknown

Network and abort detection come first because such errors usually carry
no meaningful status.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import httpx

from retrykit.core.logging import get_logger

from .codes import (
    AUTH_STATUSES,
    NOT_FOUND_STATUS,
    RATE_LIMIT_STATUS,
    RETRYABLE_KINDS,
    SERVER_STATUS_MIN,
    VALIDATION_STATUSES,
    ErrorKind,
)
from .exceptions import AbortError
from .models import NO_STATUS, ClassifiedError, ErrorStatusInfo

_logger = get_logger("errors")

_ABORT_ERROR_NAMES = frozenset({"AbortError", "CanceledError"})
_MISSING = object()

StatusExtractor = Callable[[object], ErrorStatusInfo]


def _member(value: object, name: str) -> Any:
    """Read a key or attribute, returning ``_MISSING`` when absent.

    Properties that raise are treated as absent.
    """
    try:
        if isinstance(value, Mapping):
            return value.get(name, _MISSING)
        return getattr(value, name, _MISSING)
    except Exception:
        return _MISSING


def _as_status(value: Any) -> int | None:
    """Coerce a raw status member to an int, or None when unusable."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _safe_str(value: object) -> str:
    try:
        return str(value)
    except Exception:
        return f"<unprintable {type(value).__name__}>"


def extract_status(error: object) -> ErrorStatusInfo:
    """Extract an HTTP-like status from an error value.

    A ``response`` member wins: its ``status`` (or httpx-style
    ``status_code``) is used, defaulting to 0 when absent, and the value is
    marked as having response context. Otherwise a top-level ``status``
    member is used. Anything else has status 0 and no response context.
    """
    if error is None or isinstance(error, (str, bytes, int, float, bool)):
        return NO_STATUS

    response = _member(error, "response")
    if response is not _MISSING:
        status: int | None = 0
        if response is not None:
            for name in ("status", "status_code"):
                raw = _member(response, name)
                if raw is not _MISSING and raw is not None:
                    status = _as_status(raw)
                    break
        return ErrorStatusInfo(status=status, has_response=True)

    raw = _member(error, "status")
    if raw is not _MISSING:
        return ErrorStatusInfo(status=_as_status(raw), has_response=True)

    return NO_STATUS


def is_network_failure(error: object) -> bool:
    """Whether the value is a failed low-level fetch or connection."""
    if isinstance(error, TypeError) and "fetch" in _safe_str(error):
        return True
    return isinstance(error, (httpx.NetworkError, ConnectionError))


def is_abort_error(error: object) -> bool:
    """Whether the value is an abort-style exception.

    Matches by class name so that abort errors from other libraries
    (``AbortError``, ``CanceledError``) are recognised without importing them.
    """
    if not isinstance(error, BaseException):
        return False
    if isinstance(error, AbortError):
        return True
    if type(error).__name__ in _ABORT_ERROR_NAMES:
        return True
    return _member(error, "name") == "AbortError"


def _is_timeout(error: object) -> bool:
    return is_abort_error(error) or isinstance(error, (TimeoutError, httpx.TimeoutException))


class ErrorClassifier:
    """Classifies caught values into ErrorKind.

    Args:
        status_extractor: Function pulling an ``ErrorStatusInfo`` out of an
            error value. Replace it to adapt to a different HTTP client's
            error shape.
        network_on_empty_status: Treat status 0 inside a response envelope
            as a network failure. Some client wrappers surface transport
            failures this way; disable it for clients that do not.
    """

    def __init__(
        self,
        status_extractor: StatusExtractor = extract_status,
        *,
        network_on_empty_status: bool = True,
    ) -> None:
        self._extract_status = status_extractor
        self._network_on_empty_status = network_on_empty_status

    def classify(self, error: object) -> ErrorKind:
        """Classify an error value. Never raises."""
        return self._classify(error)[0]

    def describe(self, error: object) -> ClassifiedError:
        """Classify an error value and capture the evidence used."""
        kind, info = self._classify(error)
        return ClassifiedError(
            kind=kind,
            status=info.status,
            has_response=info.has_response,
            retriable=kind in RETRYABLE_KINDS,
            message="" if error is None else _safe_str(error),
            exception_type=type(error).__name__,
        )

    def _classify(self, error: object) -> tuple[ErrorKind, ErrorStatusInfo]:
        if error is None:
            return ErrorKind.UNKNOWN, NO_STATUS
        if is_network_failure(error):
            return ErrorKind.NETWORK, NO_STATUS
        if _is_timeout(error):
            return ErrorKind.TIMEOUT, NO_STATUS

        try:
            info = self._extract_status(error)
        except Exception:
            # A custom extractor must not break totality
            _logger.debug("errors.status_extraction_failed", exc_info=True)
            info = NO_STATUS

        return self._kind_for_status(info), info

    def _kind_for_status(self, info: ErrorStatusInfo) -> ErrorKind:
        status = info.status
        if status is None:
            return ErrorKind.UNKNOWN
        if status == 0 and info.has_response and self._network_on_empty_status:
            return ErrorKind.NETWORK
        if status in AUTH_STATUSES:
            return ErrorKind.AUTH
        if status == NOT_FOUND_STATUS:
            return ErrorKind.NOT_FOUND
        if status in VALIDATION_STATUSES:
            return ErrorKind.VALIDATION
        if status == RATE_LIMIT_STATUS:
            return ErrorKind.RATE_LIMIT
        if status >= SERVER_STATUS_MIN:
            return ErrorKind.SERVER
        return ErrorKind.UNKNOWN


_default_classifier = ErrorClassifier()


def classify_error(error: object) -> ErrorKind:
    """Classify an error value with the default classifier."""
    return _default_classifier.classify(error)
