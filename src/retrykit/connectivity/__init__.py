"""Connectivity tracking driven by host online/offline signals."""

from retrykit.connectivity.monitor import (
    ConnectivityMonitor,
    ConnectivityState,
    ConnectivityTransition,
    get_connectivity_monitor,
    reset_connectivity_monitor,
)
from retrykit.connectivity.sources import (
    ConnectivityEvent,
    ConnectivitySource,
    ManualConnectivitySource,
)

__all__ = [
    "ConnectivityEvent",
    "ConnectivityMonitor",
    "ConnectivitySource",
    "ConnectivityState",
    "ConnectivityTransition",
    "ManualConnectivitySource",
    "get_connectivity_monitor",
    "reset_connectivity_monitor",
]
