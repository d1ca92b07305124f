"""Bridges ConnectivityMonitor transitions to user-facing notifications.

The notifier is an observer of the monitor, never part of it: while offline
a persistent "connection lost" notice is shown; coming back online dismisses
that notice and sends "connection restored".
"""

from __future__ import annotations

import asyncio

from retrykit.connectivity import ConnectivityMonitor, ConnectivityTransition
from retrykit.core.logging import get_logger

from .base import (
    OFFLINE_NOTIFICATION_ID,
    NotificationContext,
    NotificationEvent,
    NotificationManager,
)

_logger = get_logger("notifications.connectivity")


class ConnectivityNotifier:
    """Subscribes to a monitor and delivers connectivity notifications.

    A monitor that is already offline when the notifier attaches gets the
    "connection lost" notice right away. "Connection restored" is only sent
    after a lost notice, and each lost notice is sent once per offline
    period.

    Deliveries run as asyncio tasks chained in transition order. Events
    seen outside a running event loop are kept in a backlog that runs
    ahead of the next delivery scheduled inside a loop, or on ``drain()``.

    Usage::

        notifier = ConnectivityNotifier(monitor, NotificationManager([LogNotifier()]))
        ...
        await notifier.drain()
        await notifier.close()
    """

    def __init__(self, monitor: ConnectivityMonitor, manager: NotificationManager) -> None:
        self._monitor = monitor
        self._manager = manager
        self._tail: asyncio.Task[None] | None = None
        self._backlog: list[NotificationEvent] = []
        # Whether the last queued event left the offline notice up
        self._notice_shown = False
        self._unsubscribe = monitor.subscribe(self._on_transition)
        if not monitor.is_online:
            self._notice_shown = True
            self._enqueue(NotificationEvent.CONNECTION_LOST)

    def _on_transition(self, transition: ConnectivityTransition) -> None:
        if not transition.current.is_online:
            if not self._notice_shown:
                self._notice_shown = True
                self._enqueue(NotificationEvent.CONNECTION_LOST)
        elif self._notice_shown:
            self._notice_shown = False
            self._enqueue(NotificationEvent.CONNECTION_RESTORED)

    def _enqueue(self, event: NotificationEvent) -> None:
        self._backlog.append(event)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._schedule_backlog(loop)

    def _schedule_backlog(self, loop: asyncio.AbstractEventLoop) -> None:
        events, self._backlog = self._backlog, []
        previous = self._tail
        self._tail = loop.create_task(
            self._deliver_after(previous, events),
            name="connectivity-notification",
        )

    async def _deliver_after(
        self,
        previous: asyncio.Task[None] | None,
        events: list[NotificationEvent],
    ) -> None:
        if previous is not None:
            await asyncio.gather(previous, return_exceptions=True)
        for event in events:
            await self._deliver(event)

    async def _deliver(self, event: NotificationEvent) -> None:
        if event is NotificationEvent.CONNECTION_RESTORED:
            await self._manager.dismiss(OFFLINE_NOTIFICATION_ID)
        await self._manager.notify(NotificationContext(event))

    async def drain(self) -> None:
        """Deliver backlogged events and wait for pending deliveries."""
        if self._backlog:
            self._schedule_backlog(asyncio.get_running_loop())
        while self._tail is not None:
            tail = self._tail
            await asyncio.gather(tail, return_exceptions=True)
            if self._tail is tail:
                self._tail = None

    async def close(self) -> None:
        """Stop observing the monitor and flush pending deliveries."""
        self._unsubscribe()
        await self.drain()
        _logger.debug("notifications.connectivity_closed")
