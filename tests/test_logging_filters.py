"""Tests for log formatting, redaction and request id correlation."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from app.core.logging import (
    JsonFormatter,
    RequestIdFilter,
    SensitiveDataFilter,
    clear_request_id,
    redact,
    set_request_id,
)


@pytest.fixture
def capture():
    """Logger wired like configure_logging, writing into a buffer."""
    logger = logging.getLogger("test_permits_logging")
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


def _last_record(stream: StringIO) -> dict:
    return json.loads(stream.getvalue().strip().splitlines()[-1])


def test_json_line_contains_structured_extras(capture):
    logger, stream = capture

    logger.info("permits.listed", extra={"page": 2, "per_page": 5, "total": 12})

    record = _last_record(stream)
    assert record["message"] == "permits.listed"
    assert record["level"] == "info"
    assert record["logger"] == "test_permits_logging"
    assert record["page"] == 2
    assert record["total"] == 12
    assert "timestamp" in record


def test_sensitive_filter_redacts_credentials(capture):
    logger, stream = capture

    logger.info(
        "request.headers",
        extra={"authorization": "Bearer abc123", "cookie": "session=xyz", "safe_field": "visible"},
    )

    output = stream.getvalue()
    assert "abc123" not in output
    assert "session=xyz" not in output
    assert "[REDACTED]" in output
    assert "visible" in output


def test_sensitive_filter_redacts_nested_dicts(capture):
    logger, stream = capture

    logger.info(
        "nested_event",
        extra={"headers": {"X-API-Key": "secret-key", "user-agent": "pytest"}},
    )

    record = _last_record(stream)
    assert record["headers"] == {"X-API-Key": "[REDACTED]", "user-agent": "pytest"}


def test_safe_fields_pass_through(capture):
    logger, stream = capture

    logger.warning("rate_limit.exceeded", extra={"limit": 5, "request_path": "/v1/permits"})

    output = stream.getvalue()
    assert "/v1/permits" in output
    assert "[REDACTED]" not in output


def test_request_id_from_context(capture):
    logger, stream = capture
    set_request_id("req-123")

    logger.info("permit.not_found", extra={"permit_id": "abc"})

    assert _last_record(stream)["request_id"] == "req-123"


def test_redact_handles_lists_and_tuples():
    value = {"items": [{"token": "t1"}, ("a", {"password": "p"})]}

    assert redact(value) == {"items": [{"token": "[REDACTED]"}, ("a", {"password": "[REDACTED]"})]}
