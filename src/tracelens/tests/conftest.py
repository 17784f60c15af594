from __future__ import annotations

from typing import Any

import pytest

from tracelens.core.config import Settings

JAEGER = "http://jaeger:16686"
PROMETHEUS = "http://prometheus:9090"

# 2025-01-15T10:00:00.000Z in nanoseconds
START_NS = 1736935200000000000


def make_span(
    span_id: str = "s1",
    *,
    name: str = "GET /api/users",
    duration_ns: int | None = 250_000_000,
    status: dict[str, Any] | None = None,
    attributes: list[dict[str, Any]] | None = None,
    events: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    span: dict[str, Any] = {
        "traceId": f"trace-{span_id}",
        "spanId": span_id,
        "name": name,
        "startTimeUnixNano": str(START_NS),
    }
    if duration_ns is not None:
        span["endTimeUnixNano"] = str(START_NS + duration_ns)
    if status is not None:
        span["status"] = status
    if attributes is not None:
        span["attributes"] = attributes
    if events is not None:
        span["events"] = events
    return span


def make_resource_span(service: str, *scopes: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "resource": {
            "attributes": [{"key": "service.name", "value": {"stringValue": service}}]
        },
        "scopeSpans": [{"spans": spans} for spans in scopes],
    }


def make_response(*resource_spans: dict[str, Any]) -> dict[str, Any]:
    return {"result": {"resourceSpans": list(resource_spans)}}


def prometheus_vector(*samples: tuple[dict[str, str], float]) -> dict[str, Any]:
    return {
        "status": "success",
        "data": {
            "resultType": "vector",
            "result": [
                {"metric": labels, "value": [1736935200.0, str(value)]} for labels, value in samples
            ],
        },
    }


@pytest.fixture
def settings() -> Settings:
    return Settings(tracing_api_base=JAEGER, metrics_api_base=PROMETHEUS, request_timeout=2.0)


@pytest.fixture
def unconfigured_settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    monkeypatch.delenv("TRACELENS_TRACING_API_BASE", raising=False)
    monkeypatch.delenv("TRACELENS_METRICS_API_BASE", raising=False)
    return Settings()
