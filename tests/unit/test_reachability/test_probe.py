"""Unit tests for the reachability probe."""

import socket
import threading
import time

import pytest

from content_gate.reachability.monitor import (
    ConnectivityHandler,
    SocketConnectivityMonitor,
    StaticConnectivityMonitor,
)
from content_gate.reachability.probe import NetworkReachabilityProbe


class DelayedMonitor:
    """Monitor that reports from a thread after a delay."""

    def __init__(self, connected: bool, delay: float) -> None:
        self._connected = connected
        self._delay = delay

    def start(self, handler: ConnectivityHandler) -> None:
        def report() -> None:
            time.sleep(self._delay)
            handler(self._connected)

        threading.Thread(target=report, daemon=True).start()

    def cancel(self) -> None:
        pass


class RepeatingMonitor:
    """Monitor that reports several values in a row."""

    def __init__(self, values: list[bool]) -> None:
        self._values = values

    def start(self, handler: ConnectivityHandler) -> None:
        for value in self._values:
            handler(value)

    def cancel(self) -> None:
        pass


class TestNetworkReachabilityProbe:
    """Tests for NetworkReachabilityProbe."""

    @pytest.mark.parametrize("connected", [True, False])
    def test_reports_first_value(self, connected: bool) -> None:
        """Test the monitor's report is returned."""
        probe = NetworkReachabilityProbe(lambda: StaticConnectivityMonitor(connected))
        assert probe.is_reachable(timeout=1.0) is connected

    def test_silent_monitor_fails_closed(self) -> None:
        """Test no report within the timeout means unreachable."""
        probe = NetworkReachabilityProbe(lambda: StaticConnectivityMonitor(None))

        start = time.monotonic()
        assert probe.is_reachable(timeout=0.05) is False
        assert time.monotonic() - start < 1.0

    def test_late_report_is_ignored(self) -> None:
        """Test a report after the timeout does not count."""
        probe = NetworkReachabilityProbe(lambda: DelayedMonitor(True, delay=0.5))
        assert probe.is_reachable(timeout=0.05) is False

    def test_report_from_background_thread(self) -> None:
        """Test a report delivered from another thread is awaited."""
        probe = NetworkReachabilityProbe(lambda: DelayedMonitor(True, delay=0.01))
        assert probe.is_reachable(timeout=2.0) is True

    def test_only_first_report_counts(self) -> None:
        """Test later reports do not overwrite the first."""
        probe = NetworkReachabilityProbe(lambda: RepeatingMonitor([False, True]))
        assert probe.is_reachable(timeout=1.0) is False

    def test_monitor_is_cancelled(self) -> None:
        """Test each probe uses and cancels a fresh monitor."""
        monitors: list[StaticConnectivityMonitor] = []

        def factory() -> StaticConnectivityMonitor:
            monitor = StaticConnectivityMonitor(True)
            monitors.append(monitor)
            return monitor

        probe = NetworkReachabilityProbe(factory)
        probe.is_reachable(timeout=1.0)
        probe.is_reachable(timeout=1.0)

        assert len(monitors) == 2
        assert all(m.starts == 1 and m.cancels == 1 for m in monitors)


class TestSocketConnectivityMonitor:
    """Tests for SocketConnectivityMonitor."""

    def test_reports_reachable_listener(self) -> None:
        """Test a local listening socket is reported reachable."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as listener:
            listener.bind(("127.0.0.1", 0))
            listener.listen(1)
            port = listener.getsockname()[1]

            probe = NetworkReachabilityProbe(
                lambda: SocketConnectivityMonitor("127.0.0.1", port, 1.0)
            )
            assert probe.is_reachable(timeout=2.0) is True

    def test_reports_unreachable_port(self) -> None:
        """Test a closed port is reported unreachable."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind(("127.0.0.1", 0))
            port = sock.getsockname()[1]

        probe = NetworkReachabilityProbe(
            lambda: SocketConnectivityMonitor("127.0.0.1", port, 0.5)
        )
        assert probe.is_reachable(timeout=2.0) is False
