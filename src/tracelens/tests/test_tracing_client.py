from __future__ import annotations

from datetime import UTC, datetime

import httpx
import pytest
import respx
from httpx import Response

from tracelens.core.config import Settings
from tracelens.core.errors import ConfigurationError, TracingBackendError
from tracelens.tests.conftest import JAEGER, make_resource_span, make_response, make_span
from tracelens.traces.classify import TraceFilter
from tracelens.traces.client import TraceQuery, TracingClient

START = datetime(2025, 1, 15, 9, 0, tzinfo=UTC)
END = datetime(2025, 1, 15, 10, 0, tzinfo=UTC)


def _query(**overrides) -> TraceQuery:
    return TraceQuery(service="checkout", start=START, end=END, **overrides)


def test_query_params_for_plain_search() -> None:
    assert _query(limit=3).to_params() == {
        "query.service_name": "checkout",
        "query.start_time_min": "2025-01-15T09:00:00.000Z",
        "query.start_time_max": "2025-01-15T10:00:00.000Z",
        "query.search_depth": "3",
    }


def test_query_params_with_optional_filters() -> None:
    params = _query(
        trace_filter=TraceFilter.ERRORS, operation="POST /pay", min_duration="100ms"
    ).to_params()

    assert params["query.attributes.error"] == "true"
    assert params["query.operation_name"] == "POST /pay"
    assert params["query.duration_min"] == "100ms"


def test_successful_filter_is_not_sent_to_backend() -> None:
    assert "query.attributes.error" not in _query(trace_filter=TraceFilter.SUCCESSFUL).to_params()


@pytest.mark.asyncio
@respx.mock
async def test_fetch_traces_sends_query(settings: Settings) -> None:
    route = respx.get(f"{JAEGER}/api/v3/traces").mock(
        return_value=Response(
            200, json=make_response(make_resource_span("checkout", [make_span("s1")]))
        )
    )

    response = await TracingClient(settings).fetch_traces(_query(trace_filter="errors"))

    assert route.called
    sent = route.calls.last.request.url.params
    assert sent["query.service_name"] == "checkout"
    assert sent["query.attributes.error"] == "true"
    assert response.result.resource_spans[0].scope_spans[0].spans[0].span_id == "s1"


@pytest.mark.asyncio
@respx.mock
async def test_list_services(settings: Settings) -> None:
    respx.get(f"{JAEGER}/api/v3/services").mock(
        return_value=Response(200, json={"services": ["checkout", "payments"]})
    )

    assert await TracingClient(settings).list_services() == ["checkout", "payments"]


@pytest.mark.asyncio
@respx.mock
async def test_error_status_raises_backend_error(settings: Settings) -> None:
    respx.get(f"{JAEGER}/api/v3/traces").mock(return_value=Response(500, text="boom"))

    with pytest.raises(TracingBackendError) as exc_info:
        await TracingClient(settings).fetch_traces(_query())

    assert exc_info.value.status_code == 500
    assert exc_info.value.to_dict()["error_code"] == "BACKEND_TRACING_FAILED"


@pytest.mark.asyncio
@respx.mock
async def test_transport_failure_and_bad_json_raise_backend_error(settings: Settings) -> None:
    respx.get(f"{JAEGER}/api/v3/services").mock(side_effect=httpx.ConnectError("refused"))
    respx.get(f"{JAEGER}/api/v3/traces").mock(return_value=Response(200, text="not json"))
    client = TracingClient(settings)

    with pytest.raises(TracingBackendError):
        await client.list_services()
    with pytest.raises(TracingBackendError):
        await client.fetch_raw_traces(_query())


@pytest.mark.asyncio
async def test_missing_base_url_fails_before_any_request(unconfigured_settings: Settings) -> None:
    with pytest.raises(ConfigurationError):
        await TracingClient(unconfigured_settings).list_services()
