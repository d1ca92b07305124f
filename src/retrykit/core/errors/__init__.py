"""Error classification.

Re-exports all public symbols.
"""

from retrykit.core.errors.codes import (
    AUTH_STATUSES,
    NOT_FOUND_STATUS,
    RATE_LIMIT_STATUS,
    RETRYABLE_KINDS,
    SERVER_STATUS_MIN,
    VALIDATION_STATUSES,
    ErrorKind,
)
from retrykit.core.errors.exceptions import (
    AbortError,
    ConfigError,
    RetrykitError,
    StatusError,
)
from retrykit.core.errors.models import ClassifiedError, ErrorStatusInfo
from retrykit.core.errors.classifier import (
    ErrorClassifier,
    classify_error,
    extract_status,
    is_abort_error,
    is_network_failure,
)

__all__ = [
    "AUTH_STATUSES",
    "NOT_FOUND_STATUS",
    "RATE_LIMIT_STATUS",
    "RETRYABLE_KINDS",
    "SERVER_STATUS_MIN",
    "VALIDATION_STATUSES",
    "ErrorKind",
    "AbortError",
    "ConfigError",
    "RetrykitError",
    "StatusError",
    "ClassifiedError",
    "ErrorStatusInfo",
    "ErrorClassifier",
    "classify_error",
    "extract_status",
    "is_abort_error",
    "is_network_failure",
]
