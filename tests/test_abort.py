"""Tests for retrykit.execution.abort module."""

import asyncio

import pytest

from retrykit.core.config import RetryConfig
from retrykit.core.errors import AbortError, ErrorKind, classify_error
from retrykit.execution.abort import AbortController
from retrykit.execution.retry_engine import RetryEngine, RetryPhase


class TestAbortSignal:
    """Tests for AbortSignal behaviour."""

    def test_new_signal_not_aborted(self):
        controller = AbortController()
        assert not controller.signal.aborted
        assert not controller.is_aborted()
        controller.signal.throw_if_aborted()

    def test_abort_sets_reason(self):
        controller = AbortController()
        controller.abort("navigated away")

        assert controller.signal.aborted
        assert controller.signal.reason == "navigated away"
        with pytest.raises(AbortError, match="navigated away"):
            controller.signal.throw_if_aborted()

    def test_abort_error_classifies_as_timeout(self):
        controller = AbortController()
        controller.abort()
        with pytest.raises(AbortError) as exc_info:
            controller.signal.throw_if_aborted()
        assert classify_error(exc_info.value) == ErrorKind.TIMEOUT

    def test_abort_is_idempotent(self):
        controller = AbortController()
        reasons: list[object] = []
        controller.signal.add_callback(reasons.append)

        controller.abort("first")
        controller.abort("second")

        assert reasons == ["first"]
        assert controller.signal.reason == "first"

    def test_callback_after_abort_runs_immediately(self):
        controller = AbortController()
        controller.abort("done")
        reasons: list[object] = []

        controller.signal.add_callback(reasons.append)

        assert reasons == ["done"]

    def test_failing_callback_does_not_stop_others(self):
        controller = AbortController()
        reasons: list[object] = []

        def broken(reason):
            raise RuntimeError("callback bug")

        controller.signal.add_callback(broken)
        controller.signal.add_callback(reasons.append)
        controller.abort("stop")

        assert reasons == ["stop"]


class TestAbortController:
    """Tests for AbortController lifecycle."""

    def test_reset_gives_fresh_signal(self):
        controller = AbortController()
        old = controller.signal
        controller.abort()

        new = controller.reset()

        assert new is controller.signal
        assert new is not old
        assert old.aborted
        assert not new.aborted

    def test_context_manager_aborts_on_exit(self):
        with AbortController() as controller:
            signal = controller.signal
            assert not signal.aborted
        assert signal.aborted


class TestAbortWithRetryEngine:
    """Tests for preemptive abort of an in-flight operation."""

    @pytest.mark.asyncio
    async def test_aborted_operation_stops_with_cancel(self):
        controller = AbortController()
        started = asyncio.Event()
        calls = [0]

        async def operation():
            calls[0] += 1
            signal = controller.reset()
            started.set()
            while not signal.aborted:
                await asyncio.sleep(0)
            signal.throw_if_aborted()

        engine = RetryEngine(operation, RetryConfig(max_retries=3, initial_delay_ms=1))
        task = asyncio.create_task(engine.execute())
        await started.wait()

        controller.abort()
        engine.cancel()

        assert await task is None
        assert calls[0] == 1
        assert engine.phase == RetryPhase.CANCELLED
