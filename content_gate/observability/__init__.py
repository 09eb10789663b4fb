"""Observability module for structured logging."""

from content_gate.observability.logging import (
    bind_evaluation_context,
    clear_evaluation_context,
    configure_logging,
)


__all__ = [
    "bind_evaluation_context",
    "clear_evaluation_context",
    "configure_logging",
]
