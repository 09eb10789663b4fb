"""Redirect resolver that follows a chain of hops to its terminal response."""

import time
from urllib.parse import urlsplit

import httpx
import structlog

from content_gate.fetch.config import ResolverConfig
from content_gate.fetch.constants import PATH_ID_PARAM, VALID_URL_SCHEMES
from content_gate.fetch.metrics import ResolverMetrics
from content_gate.fetch.models import (
    ProbeError,
    ProbeErrorClass,
    ProbeResult,
    is_accepted_status,
)
from content_gate.fetch.query import find_last_query_param
from content_gate.fetch.redact import redact_url


logger = structlog.get_logger()


class _ProbeTimeoutError(Exception):
    """Raised internally when the overall probe deadline has elapsed."""


class RedirectResolver:
    """Resolve a URL through every redirect hop to its final destination.

    Each call issues one logical GET and follows redirects by hand so
    every hop is recorded and the whole chain shares a single deadline.
    Each hop passes the remaining time to httpx, which bounds every
    phase (connect, write, read, pool) separately, and a hop that
    completes after the deadline is reported as a timeout.
    Bodies are never downloaded. There are no retries: a probe is one
    best-effort attempt and a timeout is reported like any other
    failure.
    """

    def __init__(
        self,
        config: ResolverConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            config: Resolver configuration (defaults apply when omitted).
            transport: Optional httpx transport, used by tests to mock the network.
        """
        self._config = config or ResolverConfig()
        self._transport = transport
        self._metrics = ResolverMetrics.get_instance()
        self._log = logger.bind(component="resolver")

    def resolve(self, url: str, timeout: float) -> ProbeResult:
        """Resolve a URL to its final authorized destination.

        Args:
            url: URL of the first request.
            timeout: Deadline in seconds for the whole redirect chain.

        Returns:
            ProbeResult describing the outcome. Never raises for network
            or HTTP failures.
        """
        start_ns = time.perf_counter_ns()
        log = self._log.bind(url=redact_url(url), timeout=timeout)

        chain: list[str] = []
        status_code: int | None = None
        error: ProbeError | None = None

        invalid = self._validate_url(url)
        if invalid is not None:
            error = invalid
        else:
            try:
                status_code = self._follow(url, timeout, chain, log)
            except _ProbeTimeoutError:
                error = ProbeError(
                    error_class=ProbeErrorClass.TIMEOUT,
                    message="Request timed out",
                )
            except httpx.TimeoutException:
                error = ProbeError(
                    error_class=ProbeErrorClass.TIMEOUT,
                    message="Request timed out",
                )
            except httpx.TooManyRedirects:
                error = ProbeError(
                    error_class=ProbeErrorClass.TOO_MANY_REDIRECTS,
                    message="Too many redirects",
                )
            except httpx.UnsupportedProtocol:
                error = ProbeError(
                    error_class=ProbeErrorClass.INVALID_URL,
                    message="Invalid URL",
                )
            except httpx.HTTPError as e:
                error = ProbeError(
                    error_class=ProbeErrorClass.NETWORK_ERROR,
                    message=f"Network error: {e}",
                )
            except httpx.InvalidURL:
                error = ProbeError(
                    error_class=ProbeErrorClass.INVALID_URL,
                    message="Invalid URL",
                )

        if error is None and status_code is not None:
            if not is_accepted_status(status_code):
                error = ProbeError(
                    error_class=ProbeErrorClass.SERVER_REJECTED,
                    message=f"Server error: {status_code}",
                    status_code=status_code,
                )

        duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
        result = ProbeResult(
            request_url=url,
            final_url="" if error else (chain[-1] if chain else url),
            status_code=status_code,
            redirect_chain=chain,
            path_id=find_last_query_param([url, *chain], PATH_ID_PARAM),
            error=error,
            duration_ms=duration_ms,
        )

        self._metrics.record_probe(status_code, len(chain), duration_ms)
        if error is None:
            self._metrics.record_success()
        else:
            self._metrics.record_failure(error.error_class)

        log.info(
            "probe_complete",
            success=result.success,
            status_code=status_code,
            redirect_count=result.redirect_count,
            final_url=redact_url(result.final_url),
            has_path_id=result.path_id is not None,
            duration_ms=round(duration_ms, 2),
            error_class=error.error_class.value if error else None,
        )
        return result

    def _validate_url(self, url: str) -> ProbeError | None:
        """Reject URLs that cannot be requested.

        Args:
            url: Candidate URL.

        Returns:
            ProbeError for an invalid URL, None otherwise.
        """
        try:
            urlsplit(url)
            parsed = httpx.URL(url)
        except (ValueError, httpx.InvalidURL):
            parsed = None

        if parsed is None or parsed.scheme not in VALID_URL_SCHEMES or not parsed.host:
            return ProbeError(
                error_class=ProbeErrorClass.INVALID_URL,
                message="Invalid URL",
            )
        return None

    def _follow(
        self,
        url: str,
        timeout: float,
        chain: list[str],
        log: structlog.stdlib.BoundLogger,
    ) -> int:
        """Follow redirects until a terminal response.

        Appends every redirect target to ``chain`` as it is visited so the
        caller keeps the partial chain when a later hop fails.

        Args:
            url: URL of the first request.
            timeout: Deadline in seconds for the whole chain.
            chain: Receives redirect-target URLs in visit order.
            log: Bound logger.

        Returns:
            Status code of the terminal response.

        Raises:
            _ProbeTimeoutError: If the deadline elapses before a hop starts
                or while it is in flight.
            httpx.TooManyRedirects: If the hop limit is exceeded.
            httpx.HTTPError: On transport failures.
        """
        deadline = time.monotonic() + timeout
        headers = {"User-Agent": self._config.user_agent, **self._config.headers}

        with httpx.Client(
            transport=self._transport,
            headers=headers,
            follow_redirects=False,
        ) as client:
            next_url: httpx.URL | str = url
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise _ProbeTimeoutError

                request = client.build_request("GET", next_url, timeout=remaining)
                response = client.send(request, stream=True)
                response.close()
                if time.monotonic() > deadline:
                    raise _ProbeTimeoutError

                if response.next_request is None:
                    return response.status_code

                next_url = response.next_request.url
                chain.append(str(next_url))
                log.debug(
                    "redirect_hop",
                    hop=len(chain),
                    status_code=response.status_code,
                    location=redact_url(str(next_url)),
                )

                if len(chain) > self._config.max_redirects:
                    msg = f"Exceeded {self._config.max_redirects} redirects"
                    raise httpx.TooManyRedirects(msg, request=request)
