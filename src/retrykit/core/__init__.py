"""Core error taxonomy, configuration and logging."""

from retrykit.core.config import LogConfig, RecoveryConfig, RetryConfig
from retrykit.core.errors import (
    AbortError,
    ClassifiedError,
    ErrorClassifier,
    ErrorKind,
    RetrykitError,
    StatusError,
    classify_error,
)

__all__ = [
    "AbortError",
    "ClassifiedError",
    "ErrorClassifier",
    "ErrorKind",
    "LogConfig",
    "RecoveryConfig",
    "RetryConfig",
    "RetrykitError",
    "StatusError",
    "classify_error",
]
