"""Tests for retrykit.execution.backoff module."""

import pytest

from retrykit.core.config import RetryConfig
from retrykit.execution.backoff import backoff_schedule, compute_delay_ms, next_delay_ms


class TestComputeDelay:
    """Tests for compute_delay_ms."""

    def test_doubles_from_initial_delay(self):
        config = RetryConfig(initial_delay_ms=100, backoff_multiplier=2, max_delay_ms=30000)
        assert [compute_delay_ms(config, k) for k in (1, 2, 3)] == [100.0, 200.0, 400.0]

    def test_capped_at_max_delay(self):
        config = RetryConfig(initial_delay_ms=1000, max_delay_ms=3000)
        assert compute_delay_ms(config, 2) == 2000.0
        assert compute_delay_ms(config, 3) == 3000.0
        assert compute_delay_ms(config, 10) == 3000.0

    def test_fractional_multiplier(self):
        config = RetryConfig(initial_delay_ms=100, backoff_multiplier=1.5)
        assert compute_delay_ms(config, 3) == pytest.approx(225.0)

    @pytest.mark.parametrize("retry_number", [0, -1])
    def test_rejects_retry_number_below_one(self, retry_number):
        with pytest.raises(ValueError, match="retry_number must be >= 1"):
            compute_delay_ms(RetryConfig(), retry_number)


class TestNextDelay:
    """Tests for next_delay_ms."""

    def test_grows_geometrically(self):
        config = RetryConfig(initial_delay_ms=100, backoff_multiplier=3)
        assert next_delay_ms(config, 100) == 300.0

    def test_never_exceeds_cap(self):
        config = RetryConfig(initial_delay_ms=100, max_delay_ms=500)
        assert next_delay_ms(config, 400) == 500.0
        assert next_delay_ms(config, 500) == 500.0


class TestBackoffSchedule:
    """Tests for backoff_schedule."""

    def test_schedule_length_matches_max_retries(self):
        assert len(backoff_schedule(RetryConfig(max_retries=5))) == 5

    def test_no_retries_no_delays(self):
        assert backoff_schedule(RetryConfig(max_retries=0)) == []

    def test_schedule_matches_compute_delay(self):
        config = RetryConfig(max_retries=6, initial_delay_ms=250, max_delay_ms=5000, backoff_multiplier=2.5)
        schedule = backoff_schedule(config)
        for k, delay in enumerate(schedule, start=1):
            assert delay == pytest.approx(compute_delay_ms(config, k))

    @pytest.mark.parametrize(
        "config",
        [
            RetryConfig(max_retries=8, initial_delay_ms=100, max_delay_ms=1000),
            RetryConfig(max_retries=8, initial_delay_ms=1, max_delay_ms=1, backoff_multiplier=4),
            RetryConfig(max_retries=8, initial_delay_ms=300, max_delay_ms=30000, backoff_multiplier=1.1),
        ],
    )
    def test_monotonic_and_bounded(self, config):
        schedule = backoff_schedule(config)
        assert schedule == sorted(schedule)
        assert all(delay <= config.max_delay_ms for delay in schedule)
        assert schedule[0] == config.initial_delay_ms
