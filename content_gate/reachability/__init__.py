"""Network reachability probing."""

from content_gate.reachability.monitor import (
    ConnectivityHandler,
    ConnectivityMonitor,
    SocketConnectivityMonitor,
    StaticConnectivityMonitor,
)
from content_gate.reachability.probe import (
    DEFAULT_REACHABILITY_TIMEOUT_SECONDS,
    NetworkReachabilityProbe,
)


__all__ = [
    "DEFAULT_REACHABILITY_TIMEOUT_SECONDS",
    "ConnectivityHandler",
    "ConnectivityMonitor",
    "NetworkReachabilityProbe",
    "SocketConnectivityMonitor",
    "StaticConnectivityMonitor",
]
