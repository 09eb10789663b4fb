"""Connectivity monitors that report reachability through a callback."""

import socket
import threading
from collections.abc import Callable
from typing import Protocol, runtime_checkable

import structlog


logger = structlog.get_logger()

ConnectivityHandler = Callable[[bool], None]


@runtime_checkable
class ConnectivityMonitor(Protocol):
    """Source of connectivity-change notifications.

    ``start`` subscribes a handler that is called with ``True`` or
    ``False`` each time connectivity is reported, possibly from another
    thread. ``cancel`` stops further reports.
    """

    def start(self, handler: ConnectivityHandler) -> None:
        """Begin reporting connectivity to ``handler``."""
        ...

    def cancel(self) -> None:
        """Stop reporting."""
        ...


class SocketConnectivityMonitor:
    """Report reachability of a TCP endpoint from a background thread.

    A single report is produced per ``start`` call: True when a TCP
    connection to ``host:port`` succeeds within ``connect_timeout``.
    """

    def __init__(
        self,
        host: str = "1.1.1.1",
        port: int = 53,
        connect_timeout: float = 2.0,
    ) -> None:
        """Initialize the monitor.

        Args:
            host: Host to connect to.
            port: TCP port to connect to.
            connect_timeout: Socket connect timeout in seconds.
        """
        self._host = host
        self._port = port
        self._connect_timeout = connect_timeout
        self._cancelled = threading.Event()
        self._log = logger.bind(component="reachability", host=host, port=port)

    def start(self, handler: ConnectivityHandler) -> None:
        self._cancelled.clear()
        thread = threading.Thread(
            target=self._run,
            args=(handler,),
            name="content-gate-connectivity",
            daemon=True,
        )
        thread.start()

    def cancel(self) -> None:
        self._cancelled.set()

    def _run(self, handler: ConnectivityHandler) -> None:
        try:
            with socket.create_connection(
                (self._host, self._port), timeout=self._connect_timeout
            ):
                connected = True
        except OSError as e:
            self._log.debug("connectivity_check_failed", error=str(e))
            connected = False

        if not self._cancelled.is_set():
            handler(connected)


class StaticConnectivityMonitor:
    """Monitor that reports a fixed value, or never reports.

    Used by tests and by offline tooling. With ``connected=None`` no
    report is ever delivered, which exercises the probe timeout.
    """

    def __init__(self, connected: bool | None) -> None:
        """Initialize the monitor.

        Args:
            connected: Value to report, or None to stay silent.
        """
        self._connected = connected
        self.starts = 0
        self.cancels = 0

    def start(self, handler: ConnectivityHandler) -> None:
        self.starts += 1
        if self._connected is not None:
            handler(self._connected)

    def cancel(self) -> None:
        self.cancels += 1
