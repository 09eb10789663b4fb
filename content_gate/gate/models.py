"""Inputs and outputs of gate evaluation."""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from content_gate.fetch.constants import DEFAULT_PROBE_TIMEOUT_SECONDS
from content_gate.reachability.probe import DEFAULT_REACHABILITY_TIMEOUT_SECONDS


class GateFailure(str, Enum):
    """Why a fresh evaluation routed to the app.

    Every member collapses to the same sticky outward decision; the
    class is kept for logs and metrics only.
    """

    NO_CONNECTIVITY = "NO_CONNECTIVITY"
    DATE_NOT_REACHED = "DATE_NOT_REACHED"
    UNSUPPORTED_DEVICE = "UNSUPPORTED_DEVICE"
    SERVER_REJECTED = "SERVER_REJECTED"
    NETWORK_ERROR = "NETWORK_ERROR"
    INVALID_URL = "INVALID_URL"
    TIMEOUT = "TIMEOUT"


class GateOptions(BaseModel):
    """Per-call evaluation options."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    device_check: bool = Field(
        default=True, description="Exclude unsupported device classes"
    )
    timeout_seconds: Annotated[float, Field(gt=0.0, le=300.0)] = (
        DEFAULT_PROBE_TIMEOUT_SECONDS
    )
    reachability_timeout_seconds: Annotated[float, Field(gt=0.0, le=60.0)] = (
        DEFAULT_REACHABILITY_TIMEOUT_SECONDS
    )
    cache_key: str | None = Field(
        default=None, description="Decision key; the target URL when omitted"
    )


class GateResult(BaseModel):
    """Outcome of one gate evaluation.

    ``final_url`` is only meaningful when ``should_show_external_content``
    is True, and may be empty even then when re-acquisition failed.
    ``reason`` is diagnostic and not meant for display.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    should_show_external_content: bool
    final_url: str = ""
    reason: Annotated[str, Field(min_length=1)]

    @classmethod
    def show_app(cls, reason: str) -> "GateResult":
        """Build a result routing to the in-app experience."""
        return cls(should_show_external_content=False, final_url="", reason=reason)

    @classmethod
    def show_external(cls, final_url: str, reason: str) -> "GateResult":
        """Build a result routing to external content."""
        return cls(
            should_show_external_content=True, final_url=final_url, reason=reason
        )
