"""Tests for sensitive data filtering in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from app.core.config import LogSettings
from app.core.logging import (
    JsonFormatter,
    RequestIdFilter,
    SensitiveDataFilter,
    clear_request_id,
    configure_logging,
    set_request_id,
)


@pytest.fixture
def log_capture():
    """Logger wired to a JSON handler with redaction, plus its output stream."""
    logger = logging.getLogger("test_redaction")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    yield logger, stream

    logger.handlers.clear()
    clear_request_id()


def test_redacts_credentials(log_capture):
    logger, stream = log_capture

    logger.info(
        "auth.sign_in.failed",
        extra={
            "email": "ada@example.com",
            "password": "Secret!123",
            "reason": "wrong_password",
        },
    )

    output = stream.getvalue()
    assert "ada@example.com" not in output
    assert "Secret!123" not in output
    assert "[REDACTED]" in output
    assert "wrong_password" in output


def test_redacts_client_ip(log_capture):
    logger, stream = log_capture

    logger.warning("rate_limit.blocked", extra={"client_ip": "203.0.113.7", "scopes": ["ip"]})

    payload = json.loads(stream.getvalue())
    assert payload["client_ip"] == "[REDACTED]"
    assert payload["scopes"] == ["ip"]
    assert payload["level"] == "warning"


def test_redacts_nested_dicts(log_capture):
    logger, stream = log_capture

    logger.info(
        "nested_event",
        extra={
            "headers": {"authorization": "Bearer abc", "user-agent": "pytest"},
            "form": {"confirm_password": "Secret!123", "name": "Ada"},
        },
    )

    output = stream.getvalue()
    assert "Bearer abc" not in output
    assert "Secret!123" not in output
    assert "pytest" in output
    assert "Ada" in output


def test_allows_safe_fields(log_capture):
    logger, stream = log_capture

    logger.info(
        "http.request",
        extra={"path": "/v1/auth/login", "status": 429, "duration_ms": 1.5},
    )

    payload = json.loads(stream.getvalue())
    assert payload["path"] == "/v1/auth/login"
    assert payload["status"] == 429
    assert "[REDACTED]" not in stream.getvalue()


def test_request_id_from_context(log_capture):
    logger, stream = log_capture
    set_request_id("req-abc")

    logger.info("with_context")

    assert json.loads(stream.getvalue())["request_id"] == "req-abc"


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_configure_logging_uses_given_level(restore_root_logger):
    configure_logging(LogSettings(level="WARNING", format="plain"))

    assert restore_root_logger.level == logging.WARNING
    assert len(restore_root_logger.handlers) == 1


def test_configure_logging_debug_overrides_level(restore_root_logger):
    configure_logging(LogSettings(level="WARNING", format="plain"), debug=True)

    assert restore_root_logger.level == logging.DEBUG


def test_configure_logging_json_handler_redacts(restore_root_logger):
    configure_logging(LogSettings(format="json"))

    handler = restore_root_logger.handlers[0]
    assert isinstance(handler.formatter, JsonFormatter)
    assert any(isinstance(f, SensitiveDataFilter) for f in handler.filters)
