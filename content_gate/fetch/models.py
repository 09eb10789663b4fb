"""Data models for redirect-resolved probes."""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from content_gate.fetch.constants import ACCEPTED_STATUS_MAX, ACCEPTED_STATUS_MIN


class ProbeErrorClass(str, Enum):
    """Classification of probe failures.

    - INVALID_URL: URL could not be parsed or has an unsupported scheme
    - TIMEOUT: The overall probe deadline elapsed
    - NETWORK_ERROR: Transport failure (DNS, connect, protocol)
    - TOO_MANY_REDIRECTS: Redirect hop limit exceeded
    - SERVER_REJECTED: Terminal status outside the accepted range
    """

    INVALID_URL = "INVALID_URL"
    TIMEOUT = "TIMEOUT"
    NETWORK_ERROR = "NETWORK_ERROR"
    TOO_MANY_REDIRECTS = "TOO_MANY_REDIRECTS"
    SERVER_REJECTED = "SERVER_REJECTED"


class ProbeError(BaseModel):
    """Typed error from a probe."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    error_class: ProbeErrorClass = Field(description="Classification of the error")
    message: Annotated[str, Field(min_length=1, description="Human-readable reason")]
    status_code: int | None = Field(
        default=None, description="Terminal HTTP status code if available"
    )


class ProbeResult(BaseModel):
    """Outcome of one redirect-resolved probe.

    ``final_url`` is empty on failure. ``path_id`` is the ``pathid``
    value of the most recent URL that carried one, across the request
    URL and every redirect target, whether or not the probe succeeded.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    request_url: str = Field(description="URL of the first request")
    final_url: str = Field(default="", description="Resolved URL on success")
    status_code: int | None = Field(
        default=None, description="Terminal HTTP status code"
    )
    redirect_chain: list[str] = Field(
        default_factory=list, description="Redirect-target URLs in visit order"
    )
    path_id: str | None = Field(default=None, description="Last observed pathid")
    error: ProbeError | None = Field(default=None, description="Failure details")
    duration_ms: float = Field(default=0.0, ge=0.0)

    @property
    def success(self) -> bool:
        """Check if the probe reached an accepted terminal response."""
        return self.error is None

    @property
    def reason(self) -> str:
        """Short diagnostic reason for the outcome."""
        return self.error.message if self.error else "Success"

    @property
    def redirect_count(self) -> int:
        """Number of redirect hops followed."""
        return len(self.redirect_chain)


def is_accepted_status(status_code: int) -> bool:
    """Check if a terminal status code counts as authorized.

    Args:
        status_code: HTTP status code.

    Returns:
        True for 200 through 403 inclusive.
    """
    return ACCEPTED_STATUS_MIN <= status_code <= ACCEPTED_STATUS_MAX
