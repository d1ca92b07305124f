"""Notification framework base types and protocols.

Provides:
- NotificationEvent enum for connectivity events
- NotificationContext carrying user-facing title and message text
- Notifier protocol for notification backends
- NotificationManager for coordinating multiple notifiers
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from retrykit.core.logging import get_logger

_logger = get_logger("notifications")

OFFLINE_NOTIFICATION_ID = "offline-notification"


class NotificationEvent(Enum):
    """Events that can trigger notifications."""

    CONNECTION_LOST = "connection_lost"
    CONNECTION_RESTORED = "connection_restored"


_TITLES: dict[NotificationEvent, str] = {
    NotificationEvent.CONNECTION_LOST: "No internet connection",
    NotificationEvent.CONNECTION_RESTORED: "Connection restored",
}

_MESSAGES: dict[NotificationEvent, str] = {
    NotificationEvent.CONNECTION_LOST: "Please check your network connection",
    NotificationEvent.CONNECTION_RESTORED: "Your internet connection is back",
}


@dataclass
class NotificationContext:
    """Context provided to notifiers when sending notifications."""

    event: NotificationEvent
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def notification_id(self) -> str | None:
        """Stable id for notifications that are later dismissed.

        The lost-connection notice stays up until connectivity returns.
        """
        if self.event is NotificationEvent.CONNECTION_LOST:
            return OFFLINE_NOTIFICATION_ID
        return None

    @property
    def persistent(self) -> bool:
        """Whether the notification should stay until dismissed."""
        return self.event is NotificationEvent.CONNECTION_LOST

    def format_title(self) -> str:
        return _TITLES.get(self.event, self.event.value)

    def format_message(self) -> str:
        return _MESSAGES.get(self.event, self.event.value)


@runtime_checkable
class Notifier(Protocol):
    """Protocol for notification backends.

    Each notifier registers for specific event types, delivers
    notifications for them and can dismiss persistent ones by id.
    """

    @property
    def subscribed_events(self) -> set[NotificationEvent]:
        ...

    async def send(self, context: NotificationContext) -> bool:
        """Send a notification.

        Returns:
            True if the notification was delivered. Failures should be
            logged rather than raised.
        """
        ...

    async def dismiss(self, notification_id: str) -> None:
        """Withdraw a persistent notification, if still shown."""
        ...

    async def close(self) -> None:
        ...


class NotificationManager:
    """Routes notifications to subscribed notifiers.

    Notifier failures are logged and never interrupt other notifiers or
    the caller.

    Example usage:
        manager = NotificationManager([LogNotifier()])
        await manager.notify(NotificationContext(NotificationEvent.CONNECTION_LOST))
    """

    def __init__(self, notifiers: list[Notifier] | None = None) -> None:
        self._notifiers: list[Notifier] = notifiers or []

    def add_notifier(self, notifier: Notifier) -> None:
        self._notifiers.append(notifier)

    def remove_notifier(self, notifier: Notifier) -> None:
        """Remove a notifier.

        Raises:
            ValueError: If notifier is not registered.
        """
        self._notifiers.remove(notifier)

    @property
    def notifier_count(self) -> int:
        return len(self._notifiers)

    async def notify(self, context: NotificationContext) -> dict[str, bool]:
        """Send to all notifiers subscribed to the event.

        Returns:
            Dict mapping notifier class name to success status.
        """
        results: dict[str, bool] = {}
        for notifier in self._notifiers:
            if context.event not in notifier.subscribed_events:
                continue
            notifier_name = type(notifier).__name__
            try:
                results[notifier_name] = await notifier.send(context)
            except Exception:
                _logger.warning(
                    "notifications.send_failed",
                    notifier=notifier_name,
                    notification_event=context.event.value,
                    exc_info=True,
                )
                results[notifier_name] = False
        return results

    async def dismiss(self, notification_id: str) -> None:
        for notifier in self._notifiers:
            try:
                await notifier.dismiss(notification_id)
            except Exception:
                _logger.warning(
                    "notifications.dismiss_failed",
                    notifier=type(notifier).__name__,
                    notification_id=notification_id,
                    exc_info=True,
                )

    async def close(self) -> None:
        for notifier in self._notifiers:
            try:
                await notifier.close()
            except Exception:
                _logger.warning(
                    "notifications.close_failed",
                    notifier=type(notifier).__name__,
                    exc_info=True,
                )
