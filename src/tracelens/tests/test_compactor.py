from __future__ import annotations

from tracelens.tests.conftest import make_span
from tracelens.traces.compactor import build_trace_summary, format_duration
from tracelens.traces.models import Span, SpanOutcome, dump


def test_summary_of_failed_span() -> None:
    span = Span.model_validate(
        make_span(
            status={"code": 2, "message": "Database timeout"},
            attributes=[
                {"key": "error.type", "value": {"stringValue": "SQLException"}},
                {"key": "http.status_code", "value": {"intValue": "500"}},
                {"key": "http.method", "value": {"stringValue": "POST"}},
                {"key": "thread.id", "value": {"intValue": 4}},
            ],
        )
    )

    summary = build_trace_summary(span, "payment-service")

    assert summary.trace_id == "trace-s1"
    assert summary.service == "payment-service"
    assert summary.operation == "GET /api/users"
    assert summary.start_time == "2025-01-15T10:00:00.000Z"
    assert summary.duration == "250ms"
    assert summary.status is SpanOutcome.ERROR
    assert summary.error_message == "Database timeout"
    assert summary.error_type == "SQLException"
    assert summary.http_status_code == 500
    assert summary.tags == {
        "error.type": "SQLException",
        "http.status_code": 500,
        "http.method": "POST",
    }
    assert summary.logs is None


def test_error_without_message_gets_default() -> None:
    summary = build_trace_summary(Span.model_validate(make_span(status={"code": 2})), "svc")

    assert summary.error_message == "No error message"


def test_successful_span_has_no_error_fields() -> None:
    summary = build_trace_summary(Span.model_validate(make_span(status={"code": 1})), "svc")

    payload = dump(summary)
    assert payload["status"] == "ok"
    assert "errorMessage" not in payload
    assert "errorType" not in payload
    assert "httpStatusCode" not in payload


def test_duration_rendering() -> None:
    assert format_duration(Span.model_validate(make_span(duration_ns=None))) == "unknown"
    assert format_duration(Span.model_validate(make_span(duration_ns=1_500_000))) == "1.5ms"
    assert format_duration(Span.model_validate(make_span(duration_ns=0))) == "0ms"


def test_sub_microsecond_durations_are_not_in_exponent_form() -> None:
    assert format_duration(Span.model_validate(make_span(duration_ns=1))) == "0.000001ms"
    assert format_duration(Span.model_validate(make_span(duration_ns=250_000_123))) == (
        "250.000123ms"
    )


def test_logs_are_truncated() -> None:
    events = [
        {
            "timeUnixNano": str(1736935200000000000 + i),
            "name": f"event-{i}",
            "attributes": [
                {"key": f"k{j}", "value": {"intValue": j}} for j in range(8)
            ],
        }
        for i in range(6)
    ]
    summary = build_trace_summary(Span.model_validate(make_span(events=events)), "svc")

    assert summary.logs is not None
    assert [log.name for log in summary.logs] == ["event-0", "event-1", "event-2"]
    assert all(len(log.attributes or []) == 5 for log in summary.logs)
    assert dump(summary)["logs"][0]["attributes"][0] == {"key": "k0", "value": {"intValue": 0}}


def test_summary_serializes_with_camel_case_keys() -> None:
    payload = dump(build_trace_summary(Span.model_validate(make_span()), "svc"))

    assert set(payload) == {
        "traceId",
        "spanId",
        "service",
        "operation",
        "startTime",
        "duration",
        "status",
        "tags",
    }
    assert payload["status"] == "unset"
