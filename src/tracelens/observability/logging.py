"""Logging configuration."""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import Any

from pythonjsonlogger import jsonlogger

from ..core.timewindow import isoformat_z


class TelemetryJsonFormatter(jsonlogger.JsonFormatter):
    """JSON lines with a UTC millisecond timestamp, matching summary start times."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = isoformat_z(datetime.fromtimestamp(record.created, UTC))
        log_record["level"] = record.levelname
        # backend failures are logged with exc_info; keep the exception class searchable
        if record.exc_info and record.exc_info[0] is not None:
            log_record.setdefault("error_type", record.exc_info[0].__name__)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Configure the root logger with JSON or Rich text output."""

    log_level = getattr(logging, level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear existing handlers
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    if fmt.lower() == "json":
        log_handler = logging.StreamHandler(sys.stderr)
        formatter = TelemetryJsonFormatter(  # type: ignore[no-untyped-call]
            "%(timestamp)s %(level)s %(name)s %(message)s", json_ensure_ascii=False
        )
        log_handler.setFormatter(formatter)
        root_logger.addHandler(log_handler)
    else:
        from rich.logging import RichHandler

        root_logger.addHandler(
            RichHandler(rich_tracebacks=True, markup=False, show_time=True, show_path=False)
        )

    # Silence noisy libs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


__all__ = ["TelemetryJsonFormatter", "setup_logging"]
