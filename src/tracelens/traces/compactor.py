"""Build bounded :class:`TraceSummary` records from raw spans."""

from __future__ import annotations

from ..core.timewindow import nanos_to_iso
from .attributes import find_attribute, relevant_tags
from .classify import classify_span
from .models import IntValue, LogEntry, Span, SpanOutcome, StringValue, TraceSummary

MAX_LOG_ENTRIES = 3
MAX_LOG_ATTRIBUTES = 5
DEFAULT_ERROR_MESSAGE = "No error message"
UNKNOWN_DURATION = "unknown"


def format_duration(span: Span) -> str:
    """Return the span duration as ``"<n>ms"``, or ``"unknown"`` for unfinished spans."""

    if span.end_time_unix_nano is None:
        return UNKNOWN_DURATION
    duration_ms = (span.end_time_unix_nano - span.start_time_unix_nano) / 1_000_000
    if duration_ms.is_integer():
        return f"{int(duration_ms)}ms"
    # nanosecond resolution needs at most six decimals; never use exponent form
    return f"{duration_ms:.6f}".rstrip("0") + "ms"


def extract_logs(span: Span) -> list[LogEntry] | None:
    if not span.events:
        return None
    return [
        LogEntry(
            timestamp=str(event.time_unix_nano),
            name=event.name,
            attributes=list(event.attributes[:MAX_LOG_ATTRIBUTES]) if event.attributes else None,
        )
        for event in span.events[:MAX_LOG_ENTRIES]
    ]


def build_trace_summary(span: Span, service: str) -> TraceSummary:
    """Compact one span owned by ``service`` into a summary."""

    status = classify_span(span)

    error_message = None
    if status is SpanOutcome.ERROR:
        error_message = (span.status.message if span.status else None) or DEFAULT_ERROR_MESSAGE

    # error.type and http.status_code are promoted for direct access
    error_type_attr = find_attribute(span.attributes, "error.type")
    error_type = None
    if error_type_attr is not None and isinstance(error_type_attr.value, StringValue):
        error_type = error_type_attr.value.value

    http_status_attr = find_attribute(span.attributes, "http.status_code")
    http_status = None
    if http_status_attr is not None and isinstance(http_status_attr.value, IntValue):
        http_status = http_status_attr.value.value

    return TraceSummary(
        trace_id=span.trace_id,
        span_id=span.span_id,
        service=service,
        operation=span.name,
        start_time=nanos_to_iso(span.start_time_unix_nano),
        duration=format_duration(span),
        status=status,
        error_message=error_message,
        error_type=error_type,
        http_status_code=http_status,
        tags=relevant_tags(span),
        logs=extract_logs(span),
    )


__all__ = [
    "DEFAULT_ERROR_MESSAGE",
    "MAX_LOG_ATTRIBUTES",
    "MAX_LOG_ENTRIES",
    "build_trace_summary",
    "extract_logs",
    "format_duration",
]
