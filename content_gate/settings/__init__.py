"""Gate settings loading."""

from .app import GateSettings, get_settings


__all__ = ["GateSettings", "get_settings"]
