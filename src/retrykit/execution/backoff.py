"""Exponential backoff delays.

The wait before retry *k* (1-indexed) is::

    min(initial_delay_ms * backoff_multiplier ** (k - 1), max_delay_ms)

Delays grow geometrically and never decrease once capped.
"""

from __future__ import annotations

from retrykit.core.config import RetryConfig


def compute_delay_ms(config: RetryConfig, retry_number: int) -> float:
    """Delay waited before retry ``retry_number``.

    Raises:
        ValueError: If retry_number is less than 1.
    """
    if retry_number < 1:
        raise ValueError(f"retry_number must be >= 1, got {retry_number}")
    delay = config.initial_delay_ms * config.backoff_multiplier ** (retry_number - 1)
    return float(min(delay, config.max_delay_ms))


def next_delay_ms(config: RetryConfig, current_delay_ms: float) -> float:
    """Delay following ``current_delay_ms``, capped at ``max_delay_ms``."""
    return float(min(current_delay_ms * config.backoff_multiplier, config.max_delay_ms))


def backoff_schedule(config: RetryConfig) -> list[float]:
    """All waits for retries 1..max_retries, in order."""
    delays: list[float] = []
    delay = float(config.initial_delay_ms)
    for _ in range(config.max_retries):
        delays.append(delay)
        delay = next_delay_ms(config, delay)
    return delays
