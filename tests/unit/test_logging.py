"""Unit tests for logging utilities."""

import pytest

from utils.logging import (
    REDACTED,
    _add_system_context,
    clear_correlation_id,
    get_correlation_id,
    redact_secrets,
    set_correlation_id,
)


class TestRedactSecrets:
    """Test cases for the redaction processor."""

    def test_top_level_keys(self) -> None:
        event = redact_secrets(None, "info", {"event": "login", "password": "s3cret", "Token": "abc", "host": "h1"})

        assert event == {"event": "login", "password": REDACTED, "Token": REDACTED, "host": "h1"}

    def test_nested_keys(self) -> None:
        event = redact_secrets(None, "info", {"headers": {"Authorization": "Bearer abc", "Cookie": "test"}})

        assert event["headers"] == {"Authorization": REDACTED, "Cookie": "test"}


class TestCorrelationId:
    """Test cases for correlation id handling."""

    @pytest.fixture(autouse=True)
    def reset(self):
        yield
        clear_correlation_id()

    def test_set_and_get(self) -> None:
        assert set_correlation_id("tick-1") == "tick-1"
        assert get_correlation_id() == "tick-1"

    def test_generated_when_missing(self) -> None:
        correlation_id = set_correlation_id()

        assert correlation_id
        assert get_correlation_id() == correlation_id

    def test_added_to_log_lines(self) -> None:
        set_correlation_id("tick-2")

        event = _add_system_context(None, "info", {"event": "push"})

        assert event["correlation_id"] == "tick-2"
        assert "pid" in event

    def test_absent_after_clear(self) -> None:
        set_correlation_id("tick-3")
        clear_correlation_id()

        assert "correlation_id" not in _add_system_context(None, "info", {"event": "push"})
