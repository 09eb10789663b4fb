"""Blocking reachability probe over a callback-driven monitor."""

import threading
from collections.abc import Callable

import structlog

from content_gate.reachability.monitor import ConnectivityMonitor


logger = structlog.get_logger()

DEFAULT_REACHABILITY_TIMEOUT_SECONDS = 2.0


class NetworkReachabilityProbe:
    """Answer, within a bounded wait, whether the network is reachable.

    Every call creates its own monitor and its own wait event, so
    concurrent or consecutive probes never see each other's reports.
    A probe that times out fails closed.
    """

    def __init__(self, monitor_factory: Callable[[], ConnectivityMonitor]) -> None:
        """Initialize the probe.

        Args:
            monitor_factory: Creates a fresh monitor for each probe.
        """
        self._monitor_factory = monitor_factory
        self._log = logger.bind(component="reachability")

    def is_reachable(
        self, timeout: float = DEFAULT_REACHABILITY_TIMEOUT_SECONDS
    ) -> bool:
        """Wait for the first connectivity report.

        Args:
            timeout: Maximum wait in seconds.

        Returns:
            The first reported value, or False if nothing was reported in time.
        """
        reported = threading.Event()
        state: dict[str, bool] = {}

        def on_report(connected: bool) -> None:
            if not reported.is_set():
                state["connected"] = connected
                reported.set()

        monitor = self._monitor_factory()
        monitor.start(on_report)
        try:
            delivered = reported.wait(timeout)
        finally:
            monitor.cancel()

        connected = delivered and state.get("connected", False)
        self._log.info(
            "reachability_probed",
            connected=connected,
            timed_out=not delivered,
            timeout=timeout,
        )
        return connected
