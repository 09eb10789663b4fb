"""Data models for persisted gate records."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class DecisionRecord(BaseModel):
    """Persisted gate decision for one cache key.

    The two flags are mutually exclusive by control flow, not by
    storage. ``resolved_url`` is only meaningful once
    ``external_content_shown`` is set.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    cache_key: str = Field(description="Decision cache key")
    external_content_shown: bool = Field(
        default=False, description="External routing was decided"
    )
    app_content_shown: bool = Field(
        default=False, description="In-app fallback was decided"
    )
    resolved_url: str | None = Field(
        default=None, description="Final authorized URL to route to"
    )

    @property
    def is_decided(self) -> bool:
        """Check if either outcome has been persisted."""
        return self.external_content_shown or self.app_content_shown


class PathIdRecord(BaseModel):
    """Last-seen ``pathid`` for an original target URL."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str = Field(description="Original target URL")
    path_id: Annotated[str, Field(min_length=1, description="Opaque server token")]
