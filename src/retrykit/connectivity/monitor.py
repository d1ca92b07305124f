"""Connectivity monitor: tracks online/offline state from host signals.

State rules:
- "offline" signal: ``is_online=False, was_offline=True``
- "online" signal: ``is_online=True``; a set ``was_offline`` is reset to
  False in the same update

``was_offline`` therefore means "currently inside an offline period".
Observers learn that the client recovered from the ``recovered`` flag of
the ConnectivityTransition they receive, which carries the state from
before the reset.

There is one logical monitor per running client; use
``get_connectivity_monitor()`` unless a host wires its own.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from retrykit.core.logging import get_logger

from .sources import ConnectivitySource, ManualConnectivitySource

_logger = get_logger("connectivity")

TransitionListener = Callable[["ConnectivityTransition"], Any]


@dataclass(frozen=True)
class ConnectivityState:
    is_online: bool
    was_offline: bool = False


@dataclass(frozen=True)
class ConnectivityTransition:
    """A state change observed by the monitor."""

    previous: ConnectivityState
    current: ConnectivityState

    @property
    def went_offline(self) -> bool:
        return self.previous.is_online and not self.current.is_online

    @property
    def recovered(self) -> bool:
        """The client came back online after an observed offline period."""
        return self.previous.was_offline and self.current.is_online


class ConnectivityMonitor:
    """Event-driven observer of the host's connectivity.

    Subscribes to the source's "offline" and "online" signals on
    construction and unsubscribes on ``close()``.

    Usage::

        monitor = ConnectivityMonitor(source)
        unsubscribe = monitor.subscribe(on_transition)
        ...
        monitor.close()
    """

    def __init__(self, source: ConnectivitySource | None = None) -> None:
        self._source: ConnectivitySource = source or ManualConnectivitySource()
        self._state = ConnectivityState(is_online=self._initial_status(), was_offline=False)
        self._listeners: list[TransitionListener] = []
        self._closed = False
        self._source.add_listener("offline", self._handle_offline)
        self._source.add_listener("online", self._handle_online)
        _logger.debug("connectivity.started", is_online=self._state.is_online)

    def _initial_status(self) -> bool:
        try:
            online = self._source.is_online()
        except Exception:
            _logger.warning("connectivity.status_unavailable", exc_info=True)
            return True
        return True if online is None else bool(online)

    @property
    def source(self) -> ConnectivitySource:
        return self._source

    @property
    def state(self) -> ConnectivityState:
        return self._state

    @property
    def is_online(self) -> bool:
        return self._state.is_online

    @property
    def was_offline(self) -> bool:
        return self._state.was_offline

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: TransitionListener) -> Callable[[], None]:
        """Register a listener for state transitions.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _handle_offline(self) -> None:
        self._apply(ConnectivityState(is_online=False, was_offline=True))

    def _handle_online(self) -> None:
        # Coming back online consumes the was_offline flag
        self._apply(ConnectivityState(is_online=True, was_offline=False))

    def _apply(self, new_state: ConnectivityState) -> None:
        previous = self._state
        if new_state == previous:
            return
        self._state = new_state
        transition = ConnectivityTransition(previous=previous, current=new_state)

        if transition.went_offline:
            _logger.warning("connectivity.offline")
        elif transition.recovered:
            _logger.info("connectivity.restored")
        else:
            _logger.info("connectivity.changed", is_online=new_state.is_online)

        for listener in list(self._listeners):
            try:
                listener(transition)
            except Exception:
                _logger.warning("connectivity.listener_error", exc_info=True)

    def close(self) -> None:
        """Unsubscribe from the source. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._source.remove_listener("offline", self._handle_offline)
        self._source.remove_listener("online", self._handle_online)
        self._listeners.clear()
        _logger.debug("connectivity.stopped")

    def __enter__(self) -> ConnectivityMonitor:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


_default_monitor: ConnectivityMonitor | None = None


def get_connectivity_monitor(source: ConnectivitySource | None = None) -> ConnectivityMonitor:
    """Return the process-wide monitor, creating it on first use.

    ``source`` is only used when the monitor is created.
    """
    global _default_monitor
    if _default_monitor is None or _default_monitor.closed:
        _default_monitor = ConnectivityMonitor(source)
    return _default_monitor


def reset_connectivity_monitor() -> None:
    """Close and forget the process-wide monitor."""
    global _default_monitor
    if _default_monitor is not None:
        _default_monitor.close()
    _default_monitor = None
