"""Retry engine: bounded exponential-backoff retries with cancellation.

The engine repeatedly invokes a caller-supplied async operation until it
succeeds, fails with an error the policy will not retry, runs out of
retries, or is cancelled.

State machine::

    idle -> running -> succeeded
                    -> failed
                    -> retrying -> running
                    -> cancelled          (from running or retrying)

``attempt_count`` counts retries performed, not the first attempt, and is
reset by every ``execute()`` call.

Cancellation is cooperative. It is checked at both suspension points
(after the operation completes and after the backoff wait). A pending
backoff timer is cancelled immediately and ``execute()`` returns ``None``
without invoking any further callback. An operation already in flight is
not interrupted; pass it an ``AbortSignal`` for preemptive abort.

Example usage:
    from retrykit.execution import RetryEngine

    engine = RetryEngine(
        fetch_universities,
        RetryConfig(max_retries=3, initial_delay_ms=500),
        on_retry=lambda attempt, error: print(f"retry {attempt}: {error}"),
    )
    universities = await engine.execute()
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from retrykit.core.config import RetryConfig
from retrykit.core.errors import ErrorClassifier
from retrykit.core.logging import OperationContext, get_logger, with_context

from .backoff import next_delay_ms
from .retry_policy import is_retryable

T = TypeVar("T")

_logger = get_logger("retry_engine")
_classifier = ErrorClassifier()

Operation = Callable[[], Awaitable[T]]
ShouldRetry = Callable[[BaseException], bool]
StateListener = Callable[["RetryState"], Any]


class RetryPhase(str, Enum):
    """Lifecycle phase of one ``execute()`` invocation."""

    IDLE = "idle"
    RUNNING = "running"
    """The operation is in flight."""

    RETRYING = "retrying"
    """Waiting out the backoff delay before the next attempt."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (RetryPhase.SUCCEEDED, RetryPhase.FAILED, RetryPhase.CANCELLED)


@dataclass(frozen=True)
class RetryState:
    """Snapshot of a RetryEngine's observable state."""

    phase: RetryPhase = RetryPhase.IDLE
    attempt_count: int = 0
    last_error: BaseException | None = None
    current_delay_ms: float | None = None

    @property
    def is_loading(self) -> bool:
        return self.phase in (RetryPhase.RUNNING, RetryPhase.RETRYING)

    @property
    def is_retrying(self) -> bool:
        return self.phase is RetryPhase.RETRYING


class RetryEngine(Generic[T]):
    """Runs one logical async operation with automatic retries.

    An engine holds one in-flight logical operation at a time. Calling
    ``execute()`` again supersedes an earlier invocation that is still
    running; the superseded call returns ``None`` and fires no callbacks.

    Args:
        fn: Zero-argument callable returning an awaitable.
        config: Retry limits and backoff; defaults to ``RetryConfig()``.
        should_retry: Predicate deciding whether an error is worth
            retrying. Defaults to ``is_retryable``.
        on_success: Called with the result on success.
        on_error: Called with the final error before it is re-raised.
        on_retry: Called with (attempt, error) before each backoff wait.
        name: Operation name used in log entries.

    Callbacks may be plain functions or coroutine functions. Exceptions they
    raise are logged and do not change the engine's flow.
    """

    def __init__(
        self,
        fn: Operation[T],
        config: RetryConfig | None = None,
        *,
        should_retry: ShouldRetry | None = None,
        on_success: Callable[[T], Any] | None = None,
        on_error: Callable[[BaseException], Any] | None = None,
        on_retry: Callable[[int, BaseException], Any] | None = None,
        name: str = "operation",
    ) -> None:
        self._fn = fn
        self.config = config or RetryConfig()
        self._should_retry: ShouldRetry = should_retry or is_retryable
        self._on_success = on_success
        self._on_error = on_error
        self._on_retry = on_retry
        self.name = name

        self._state = RetryState()
        # Bumped by execute() and cancel(); an invocation whose generation
        # no longer matches has been cancelled or superseded.
        self._generation = 0
        self._timer: asyncio.TimerHandle | None = None
        self._waiter: asyncio.Future[None] | None = None
        self._listeners: list[StateListener] = []

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def state(self) -> RetryState:
        return self._state

    @property
    def phase(self) -> RetryPhase:
        return self._state.phase

    @property
    def attempt_count(self) -> int:
        return self._state.attempt_count

    @property
    def last_error(self) -> BaseException | None:
        return self._state.last_error

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def is_retrying(self) -> bool:
        return self._state.is_retrying

    @property
    def has_pending_timer(self) -> bool:
        """Whether a backoff timer is currently scheduled."""
        return self._timer is not None

    def add_listener(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener called with a RetryState on every transition.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def _set_state(self, **changes: Any) -> None:
        self._state = RetryState(
            phase=changes.get("phase", self._state.phase),
            attempt_count=changes.get("attempt_count", self._state.attempt_count),
            last_error=changes.get("last_error", self._state.last_error),
            current_delay_ms=changes.get("current_delay_ms", self._state.current_delay_ms),
        )
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                _logger.warning(
                    "retry.listener_error",
                    operation=self.name,
                    phase=self._state.phase.value,
                    exc_info=True,
                )

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def execute(self) -> T | None:
        """Run the operation, retrying per the config and policy.

        Returns:
            The operation's result, or ``None`` if cancelled.

        Raises:
            Exception: The operation's own error, unchanged, once retries
                are exhausted or the error is not retryable.
        """
        self._clear_timer()
        self._generation += 1
        generation = self._generation
        self._set_state(
            phase=RetryPhase.RUNNING,
            attempt_count=0,
            last_error=None,
            current_delay_ms=None,
        )
        ctx = OperationContext(operation=self.name, component="retry_engine")
        with with_context(ctx):
            try:
                return await self._run(generation)
            except asyncio.CancelledError:
                # The surrounding task was cancelled; drop any pending timer
                if generation == self._generation:
                    self.cancel()
                raise

    async def _run(self, generation: int) -> T | None:
        config = self.config
        delay = float(config.initial_delay_ms)
        _logger.debug("retry.started", max_retries=config.max_retries)

        while True:
            try:
                result = await self._fn()
            except Exception as error:
                if self._is_stale(generation):
                    _logger.debug("retry.discarded", reason="cancelled")
                    return None

                self._set_state(last_error=error)
                attempt = self._state.attempt_count
                if attempt < config.max_retries and self._check_retry(error):
                    attempt += 1
                    self._set_state(
                        phase=RetryPhase.RETRYING,
                        attempt_count=attempt,
                        current_delay_ms=delay,
                    )
                    _logger.warning(
                        "retry.scheduled",
                        attempt=attempt,
                        max_retries=config.max_retries,
                        delay_ms=delay,
                        error_kind=_classifier.classify(error).value,
                        error_type=type(error).__name__,
                    )
                    await self._invoke("on_retry", self._on_retry, attempt, error)
                    if self._is_stale(generation):
                        return None

                    await self._sleep(delay)
                    if self._is_stale(generation):
                        _logger.debug("retry.discarded", reason="cancelled")
                        return None

                    delay = next_delay_ms(config, delay)
                    self._set_state(phase=RetryPhase.RUNNING, current_delay_ms=None)
                    continue

                self._set_state(phase=RetryPhase.FAILED, current_delay_ms=None)
                _logger.error(
                    "retry.exhausted" if attempt >= config.max_retries else "retry.not_retryable",
                    attempts=attempt + 1,
                    error_kind=_classifier.classify(error).value,
                    error_type=type(error).__name__,
                )
                await self._invoke("on_error", self._on_error, error)
                raise

            if self._is_stale(generation):
                _logger.debug("retry.discarded", reason="cancelled")
                return None

            self._set_state(phase=RetryPhase.SUCCEEDED, current_delay_ms=None)
            _logger.info("retry.succeeded", retries=self._state.attempt_count)
            await self._invoke("on_success", self._on_success, result)
            return result

    def _check_retry(self, error: Exception) -> bool:
        try:
            return bool(self._should_retry(error))
        except Exception:
            _logger.warning("retry.should_retry_error", operation=self.name, exc_info=True)
            return False

    def _is_stale(self, generation: int) -> bool:
        return generation != self._generation

    async def _invoke(self, hook: str, callback: Callable[..., Any] | None, *args: Any) -> None:
        if callback is None:
            return
        try:
            result = callback(*args)
            if inspect.isawaitable(result):
                await result
        except Exception:
            _logger.warning("retry.callback_error", hook=hook, exc_info=True)

    async def _sleep(self, delay_ms: float) -> None:
        """Wait ``delay_ms`` on a timer that ``cancel()`` can release early."""
        loop = asyncio.get_running_loop()
        waiter: asyncio.Future[None] = loop.create_future()
        self._waiter = waiter
        self._timer = loop.call_later(delay_ms / 1000, _release, waiter)
        try:
            await waiter
        finally:
            if self._waiter is waiter:
                self._clear_timer()

    def _clear_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._waiter is not None:
            _release(self._waiter)
            self._waiter = None

    # ------------------------------------------------------------------
    # Cancellation and teardown
    # ------------------------------------------------------------------

    def cancel(self) -> None:
        """Cancel the current invocation.

        Safe in any phase and idempotent. Only a running or retrying
        invocation moves to ``cancelled``; idle and terminal phases are left
        unchanged.
        """
        self._generation += 1
        self._clear_timer()
        if self._state.phase in (RetryPhase.RUNNING, RetryPhase.RETRYING):
            self._set_state(phase=RetryPhase.CANCELLED, current_delay_ms=None)
            _logger.info(
                "retry.cancelled",
                operation=self.name,
                attempt_count=self._state.attempt_count,
            )

    def close(self) -> None:
        """Tear down the engine, cancelling any pending retry."""
        self.cancel()

    async def __aenter__(self) -> RetryEngine[T]:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"RetryEngine(name={self.name!r}, phase={self.phase.value}, "
            f"attempts={self.attempt_count}/{self.config.max_retries})"
        )


def _release(waiter: asyncio.Future[None]) -> None:
    if not waiter.done():
        waiter.set_result(None)
