"""Tests for log redaction and JSON formatting."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from plangen.core.logging import (
    JsonFormatter,
    RequestIdFilter,
    SensitiveDataFilter,
    clear_request_id,
    redact,
    set_request_id,
)


@pytest.fixture
def capture() -> tuple[logging.Logger, StringIO]:
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
    return logger, stream


def test_plan_text_and_ideas_are_redacted(capture) -> None:
    logger, stream = capture

    logger.info(
        "plan_event",
        extra={
            "idea": "A secret startup idea",
            "content": "# Confidential plan",
            "plan_length": 42,
        },
    )

    record = json.loads(stream.getvalue())
    assert record["idea"] == "[REDACTED]"
    assert record["content"] == "[REDACTED]"
    assert record["plan_length"] == 42
    assert "secret startup" not in stream.getvalue()


def test_nested_values_are_redacted(capture) -> None:
    logger, stream = capture

    logger.info("nested", extra={"payload": {"api_key": "sk-123", "model": "gpt-4"}})

    record = json.loads(stream.getvalue())
    assert record["payload"] == {"api_key": "[REDACTED]", "model": "gpt-4"}


def test_request_id_is_attached(capture) -> None:
    logger, stream = capture
    set_request_id("req-abc")
    try:
        logger.info("with_request")
    finally:
        clear_request_id()

    record = json.loads(stream.getvalue())
    assert record["request_id"] == "req-abc"
    assert record["message"] == "with_request"
    assert record["level"] == "info"


def test_redact_handles_sequences() -> None:
    assert redact([{"token": "t"}, ("x",)]) == [{"token": "[REDACTED]"}, ("x",)]
