from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator

import pytest
from rich.logging import RichHandler

from tracelens.observability.logging import TelemetryJsonFormatter, setup_logging


@pytest.fixture
def root_logger() -> Iterator[logging.Logger]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_json_logging(root_logger: logging.Logger) -> None:
    setup_logging("debug", "json")

    (handler,) = root_logger.handlers
    assert isinstance(handler.formatter, TelemetryJsonFormatter)
    assert root_logger.level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING

    record = logging.LogRecord("tracelens.traces", logging.INFO, __file__, 1, "found %d", (3,), None)
    payload = json.loads(handler.formatter.format(record))
    assert payload["level"] == "INFO"
    assert payload["name"] == "tracelens.traces"
    assert payload["message"] == "found 3"
    assert "error_type" not in payload


def test_json_records_carry_utc_timestamp_and_error_type() -> None:
    formatter = TelemetryJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    try:
        raise TimeoutError("jaeger did not answer")
    except TimeoutError:
        exc_info = sys.exc_info()
    record = logging.LogRecord(
        "tracelens.traces.fanout", logging.WARNING, __file__, 1, "skipping", (), exc_info
    )
    record.created = 1736935200.5

    payload = json.loads(formatter.format(record))

    assert payload["timestamp"] == "2025-01-15T10:00:00.500Z"
    assert payload["level"] == "WARNING"
    assert payload["error_type"] == "TimeoutError"


def test_text_logging_uses_rich(root_logger: logging.Logger) -> None:
    setup_logging("bogus", "text")

    (handler,) = root_logger.handlers
    assert isinstance(handler, RichHandler)
    assert root_logger.level == logging.INFO
