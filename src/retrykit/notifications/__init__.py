"""Connectivity notifications.

Usage:
    from retrykit.notifications import (
        ConnectivityNotifier,
        LogNotifier,
        NotificationManager,
    )

    notifier = ConnectivityNotifier(
        get_connectivity_monitor(),
        NotificationManager([LogNotifier()]),
    )
"""

from retrykit.notifications.base import (
    OFFLINE_NOTIFICATION_ID,
    NotificationContext,
    NotificationEvent,
    NotificationManager,
    Notifier,
)
from retrykit.notifications.connectivity import ConnectivityNotifier
from retrykit.notifications.log import LogNotifier

__all__ = [
    "OFFLINE_NOTIFICATION_ID",
    "ConnectivityNotifier",
    "LogNotifier",
    "NotificationContext",
    "NotificationEvent",
    "NotificationManager",
    "Notifier",
]
