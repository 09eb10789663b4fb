"""Unit tests for structured logging configuration."""

import io
import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from content_gate.observability.logging import (
    bind_evaluation_context,
    clear_evaluation_context,
    configure_logging,
)


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Restore structlog defaults after each test."""
    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_output(self) -> None:
        """Test events are rendered as JSON lines."""
        output = io.StringIO()
        configure_logging(level=logging.INFO, output=output)

        structlog.get_logger().info("probe_complete", success=True)

        event = json.loads(output.getvalue().strip())
        assert event["event"] == "probe_complete"
        assert event["success"] is True
        assert event["level"] == "info"
        assert "timestamp" in event

    def test_level_filters(self) -> None:
        """Test events below the configured level are dropped."""
        output = io.StringIO()
        configure_logging(level=logging.WARNING, output=output)

        structlog.get_logger().info("gate_evaluated")

        assert output.getvalue() == ""

    def test_console_output(self) -> None:
        """Test the console renderer is used when JSON is off."""
        output = io.StringIO()
        configure_logging(level=logging.INFO, output=output, json_format=False)

        structlog.get_logger().info("gate_evaluated")

        assert "gate_evaluated" in output.getvalue()
        with pytest.raises(json.JSONDecodeError):
            json.loads(output.getvalue())


class TestEvaluationContext:
    """Tests for evaluation context binding."""

    def test_cache_key_bound_and_cleared(self) -> None:
        """Test the cache key appears only while bound."""
        output = io.StringIO()
        configure_logging(level=logging.INFO, output=output)
        log = structlog.get_logger()

        bind_evaluation_context("promo")
        log.info("inside")
        clear_evaluation_context()
        log.info("outside")

        inside, outside = (json.loads(line) for line in output.getvalue().splitlines())
        assert inside["cache_key"] == "promo"
        assert "cache_key" not in outside
