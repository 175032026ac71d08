"""Unit tests for the logging utility."""

from __future__ import annotations

import json
import logging

from cms_api.core.logger import JSONFormatter, configure_logging


def test_configure_logging_sets_level() -> None:
    """``configure_logging`` should set the root logger level."""

    # Act
    configure_logging("DEBUG")

    # Assert
    assert logging.getLogger().level == logging.DEBUG
    configure_logging("INFO")


def test_json_formatter_copies_structured_extras() -> None:
    record = logging.LogRecord("cms_api.test", logging.INFO, __file__, 1, "hello %s", ("x",), None)
    record.event = "auth.login.succeeded"
    record.user_id = 3
    record.request_id = "req-1"

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "hello x"
    assert payload["event"] == "auth.login.succeeded"
    assert payload["user_id"] == 3
    assert payload["request_id"] == "req-1"
    assert "elapsed_ms" not in payload
