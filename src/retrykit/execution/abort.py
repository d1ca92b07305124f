"""Abort signals for operations that need preemptive cancellation.

The retry engine only cancels cooperatively. An operation that should stop
mid-flight owns an ``AbortController`` and checks its signal::

    controller = AbortController()

    async def load() -> list[dict]:
        signal = controller.reset()
        response = await client.get("/universities")
        signal.throw_if_aborted()
        return response.json()

    engine = RetryEngine(load)
    task = asyncio.create_task(engine.execute())
    ...
    controller.abort()
    engine.cancel()

An ``AbortError`` escaping the operation classifies as a timeout.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from retrykit.core.errors import AbortError
from retrykit.core.logging import get_logger

_logger = get_logger("abort")


class AbortSignal:
    """Read side of an AbortController."""

    def __init__(self) -> None:
        self._aborted = False
        self._reason: Any = None
        self._callbacks: list[Callable[[Any], Any]] = []

    @property
    def aborted(self) -> bool:
        return self._aborted

    @property
    def reason(self) -> Any:
        return self._reason

    def throw_if_aborted(self) -> None:
        """Raise AbortError if the signal has been aborted."""
        if self._aborted:
            raise AbortError(str(self._reason) if self._reason is not None else "Aborted")

    def add_callback(self, callback: Callable[[Any], Any]) -> None:
        """Call ``callback(reason)`` on abort, or immediately if already aborted."""
        if self._aborted:
            callback(self._reason)
            return
        self._callbacks.append(callback)

    def _abort(self, reason: Any) -> None:
        if self._aborted:
            return
        self._aborted = True
        self._reason = reason
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback(reason)
            except Exception:
                _logger.warning("abort.callback_error", exc_info=True)


class AbortController:
    """Owns an AbortSignal and aborts it on demand."""

    def __init__(self) -> None:
        self._signal = AbortSignal()

    @property
    def signal(self) -> AbortSignal:
        return self._signal

    def abort(self, reason: Any = None) -> None:
        """Abort the current signal. Idempotent."""
        self._signal._abort(reason)

    def is_aborted(self) -> bool:
        return self._signal.aborted

    def reset(self) -> AbortSignal:
        """Replace the signal with a fresh one, e.g. before a retry."""
        self._signal = AbortSignal()
        return self._signal

    def __enter__(self) -> AbortController:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.abort()
