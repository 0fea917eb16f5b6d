"""Tests for log redaction and lifecycle correlation."""

from __future__ import annotations

import json
import logging
from io import StringIO

from cis_provider.core.logging import (
    JsonFormatter,
    OperationFilter,
    SensitiveDataFilter,
    operation_context,
)


def _logger(name: str) -> tuple[logging.Logger, StringIO]:
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(OperationFilter())
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return logger, stream


def test_sensitive_filter_redacts_tokens() -> None:
    logger, stream = _logger("test_redaction")

    logger.info(
        "cis.request",
        extra={
            "iam_token": "Bearer secret-iam",
            "headers": {"X-Auth-User-Token": "Bearer nested-secret", "Accept": "application/json"},
            "zone_id": "zone1",
        },
    )

    output = stream.getvalue()
    assert "secret-iam" not in output
    assert "nested-secret" not in output
    assert "[REDACTED]" in output
    assert "zone1" in output


def test_operation_context_tags_records() -> None:
    logger, stream = _logger("test_operation")

    with operation_context("read", "rule1:zone1:inst1"):
        logger.info("rate_limit.read.gone")
    logger.info("outside")

    first, second = [json.loads(line) for line in stream.getvalue().splitlines()]
    assert first["operation"] == "read"
    assert first["resource_id"] == "rule1:zone1:inst1"
    assert "operation" not in second


def test_explicit_resource_id_wins() -> None:
    logger, stream = _logger("test_operation_override")

    with operation_context("create"):
        logger.info("rate_limit.create.success", extra={"resource_id": "rule9:zone9:inst9"})

    record = json.loads(stream.getvalue())
    assert record["operation"] == "create"
    assert record["resource_id"] == "rule9:zone9:inst9"
