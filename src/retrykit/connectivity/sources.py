"""Host connectivity signal sources.

A source reports the host's current connectivity and emits two transition
signals, "online" and "offline". The ConnectivityMonitor consumes exactly
these; it never polls.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Literal, Protocol, runtime_checkable

from retrykit.core.logging import get_logger

_logger = get_logger("connectivity.source")

ConnectivityEvent = Literal["online", "offline"]
Handler = Callable[[], None]


@runtime_checkable
class ConnectivitySource(Protocol):
    """Protocol for host-provided connectivity signals."""

    def is_online(self) -> bool | None:
        """Current connectivity, or None if it cannot be determined."""
        ...

    def add_listener(self, event: ConnectivityEvent, handler: Handler) -> None:
        ...

    def remove_listener(self, event: ConnectivityEvent, handler: Handler) -> None:
        ...


class ManualConnectivitySource:
    """In-process source driven by the host via ``go_offline``/``go_online``.

    Suits hosts that learn about connectivity changes elsewhere (an OS hook,
    a health check, a UI bridge) and tests.
    """

    def __init__(self, online: bool | None = True) -> None:
        self._online = online
        self._handlers: dict[ConnectivityEvent, list[Handler]] = {
            "online": [],
            "offline": [],
        }

    def is_online(self) -> bool | None:
        return self._online

    def add_listener(self, event: ConnectivityEvent, handler: Handler) -> None:
        self._handlers[event].append(handler)

    def remove_listener(self, event: ConnectivityEvent, handler: Handler) -> None:
        handlers = self._handlers[event]
        if handler in handlers:
            handlers.remove(handler)

    def listener_count(self, event: ConnectivityEvent) -> int:
        return len(self._handlers[event])

    def go_offline(self) -> None:
        """Report that the host lost connectivity."""
        self._online = False
        self._emit("offline")

    def go_online(self) -> None:
        """Report that the host regained connectivity."""
        self._online = True
        self._emit("online")

    def _emit(self, event: ConnectivityEvent) -> None:
        for handler in list(self._handlers[event]):
            try:
                handler()
            except Exception:
                _logger.warning("connectivity.handler_error", signal=event, exc_info=True)
