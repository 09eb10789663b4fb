"""Gate settings powered by Pydantic BaseSettings."""

from pathlib import Path
from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GateSettings(BaseSettings):
    """Centralized environment configuration.

    Every field can be overridden with a ``CONTENT_GATE_`` prefixed
    environment variable or an entry in ``.env``.
    """

    model_config = SettingsConfigDict(
        env_prefix="CONTENT_GATE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    db_path: Path = Path("state/content_gate.sqlite")
    user_id: str = ""
    device_model: str = ""
    excluded_device_models: list[str] = Field(default_factory=lambda: ["iPad"])
    probe_timeout_seconds: Annotated[float, Field(gt=0.0, le=300.0)] = 12.0
    reachability_timeout_seconds: Annotated[float, Field(gt=0.0, le=60.0)] = 2.0
    reachability_host: str = "1.1.1.1"
    reachability_port: Annotated[int, Field(ge=1, le=65535)] = 53
    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = (
        "content-gate/0.1"
    )
    max_redirects: Annotated[int, Field(ge=0, le=100)] = 20


def get_settings() -> GateSettings:
    """Get a settings instance."""
    return GateSettings()
