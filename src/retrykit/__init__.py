"""retrykit: client-side error classification and automatic retry.

Classifies heterogeneous error values into a closed taxonomy, decides
whether a failure is worth retrying, drives bounded exponential-backoff
retries with cancellation, and tracks online/offline connectivity.
"""

__version__ = "0.1.0"

from retrykit.connectivity import (
    ConnectivityMonitor,
    ConnectivityState,
    ConnectivityTransition,
    ManualConnectivitySource,
    get_connectivity_monitor,
)
from retrykit.core.config import RecoveryConfig, RetryConfig
from retrykit.core.errors import (
    AbortError,
    ErrorClassifier,
    ErrorKind,
    StatusError,
    classify_error,
)
from retrykit.execution import (
    AbortController,
    RetryabilityPolicy,
    RetryEngine,
    RetryPhase,
    RetryState,
    is_retryable,
)

__all__ = [
    "__version__",
    "AbortController",
    "AbortError",
    "ConnectivityMonitor",
    "ConnectivityState",
    "ConnectivityTransition",
    "ErrorClassifier",
    "ErrorKind",
    "ManualConnectivitySource",
    "RecoveryConfig",
    "RetryConfig",
    "RetryEngine",
    "RetryPhase",
    "RetryState",
    "RetryabilityPolicy",
    "StatusError",
    "classify_error",
    "get_connectivity_monitor",
    "is_retryable",
]
