"""Tests for infrastructure.observability.logging_config."""

from __future__ import annotations

from infrastructure.observability.logging_config import (
    SERVICE_NAME,
    add_service_name,
    redact_secrets,
)


class TestProcessors:
    def test_add_service_name(self) -> None:
        event = add_service_name(None, "info", {"event": "x"})
        assert event["service"] == SERVICE_NAME

    def test_add_service_name_keeps_existing(self) -> None:
        event = add_service_name(None, "info", {"event": "x", "service": "other"})
        assert event["service"] == "other"

    def test_redact_secrets(self) -> None:
        event = redact_secrets(
            None,
            "info",
            {"event": "call", "authorization": "Bearer abc", "api_key": "abc", "path": "/price"},
        )
        assert event["authorization"] == "***"
        assert event["api_key"] == "***"
        assert event["path"] == "/price"
