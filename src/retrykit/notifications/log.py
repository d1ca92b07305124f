"""Notifier that reports connectivity events through structured logging."""

from __future__ import annotations

from retrykit.core.logging import get_logger

from .base import NotificationContext, NotificationEvent

_logger = get_logger("notifications.log")


class LogNotifier:
    """Writes notifications to the retrykit log.

    Tracks which persistent notifications are currently shown so that
    ``dismiss`` only logs ids that were actually active.
    """

    def __init__(self, events: set[NotificationEvent] | None = None) -> None:
        self._events = events if events is not None else set(NotificationEvent)
        self.active: set[str] = set()

    @property
    def subscribed_events(self) -> set[NotificationEvent]:
        return self._events

    async def send(self, context: NotificationContext) -> bool:
        log = _logger.warning if context.persistent else _logger.info
        log(
            "notification.sent",
            notification_event=context.event.value,
            title=context.format_title(),
            message=context.format_message(),
        )
        if context.notification_id is not None:
            self.active.add(context.notification_id)
        return True

    async def dismiss(self, notification_id: str) -> None:
        if notification_id in self.active:
            self.active.discard(notification_id)
            _logger.info("notification.dismissed", notification_id=notification_id)

    async def close(self) -> None:
        self.active.clear()
