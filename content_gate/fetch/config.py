"""Configuration model for the redirect resolver."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from content_gate.fetch.constants import DEFAULT_MAX_REDIRECTS


class ResolverConfig(BaseModel):
    """Configuration for redirect-resolved probes."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = (
        "content-gate/0.1"
    )
    max_redirects: Annotated[int, Field(ge=0, le=100)] = DEFAULT_MAX_REDIRECTS
    headers: dict[str, str] = Field(
        default_factory=dict, description="Extra headers sent with every probe"
    )

    @field_validator("headers")
    @classmethod
    def validate_no_auth_headers(cls, v: dict[str, str]) -> dict[str, str]:
        """Ensure no credential headers are stored in config."""
        forbidden = {"authorization", "cookie", "x-api-key"}
        for key in v:
            if key.lower() in forbidden:
                msg = (
                    f"Header '{key}' must not be stored in config; "
                    "use environment variables"
                )
                raise ValueError(msg)
        return v
