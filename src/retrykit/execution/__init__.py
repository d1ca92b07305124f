"""Execution layer: retry policy, backoff and the retry engine."""

from retrykit.execution.abort import AbortController, AbortSignal
from retrykit.execution.backoff import backoff_schedule, compute_delay_ms, next_delay_ms
from retrykit.execution.retry_engine import RetryEngine, RetryPhase, RetryState
from retrykit.execution.retry_policy import DEFAULT_POLICY, RetryabilityPolicy, is_retryable

__all__ = [
    "AbortController",
    "AbortSignal",
    "DEFAULT_POLICY",
    "RetryEngine",
    "RetryPhase",
    "RetryState",
    "RetryabilityPolicy",
    "backoff_schedule",
    "compute_delay_ms",
    "is_retryable",
    "next_delay_ms",
]
