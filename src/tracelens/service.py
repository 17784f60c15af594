"""Engine facade consumed by request layers such as tool servers or the CLI."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError

from .core.config import Settings, get_settings
from .core.errors import InvalidRequest, TracingBackendError
from .core.timewindow import resolve_time_range
from .metrics.client import MetricsClient
from .metrics.formatting import ReportFormat, format_health_report
from .metrics.health import collect_service_health
from .metrics.models import ServiceHealthMetrics
from .traces.classify import TraceFilter, predicate_for
from .traces.client import TraceQuery, TracingClient
from .traces.extraction import extract_trace_summary
from .traces.fanout import FanOutPolicy, search_all_services
from .traces.models import AllServicesResult, ExtractedTraces

LOGGER = logging.getLogger(__name__)

ALL_SERVICES = "all"


class TraceRequest(BaseModel):
    """Inbound parameters for a trace search."""

    service: str = Field(description='Service name, or "all" to search every service.')
    limit: int = Field(default=5, ge=0, description="Maximum number of summaries to return.")
    lookback: str = Field(default="1h", description='Time range such as "1h", "30m", "2d".')
    operation: str | None = Field(default=None, description="Optional operation name filter.")
    min_duration: str | None = Field(
        default=None, description='Minimum span duration such as "100ms".'
    )
    filter: TraceFilter = Field(default=TraceFilter.ALL, description="all, errors or successful.")


class HealthRequest(BaseModel):
    """Inbound parameters for a service health report."""

    service: str
    lookback: str = Field(default="15m", description='Time range such as "15m", "1h", "4h".')
    format: ReportFormat = ReportFormat.SUMMARY
    include_trends: bool = Field(default=False, description="Compare with the previous period.")


class HealthResult(BaseModel):
    report: ServiceHealthMetrics
    text: str


def _validate(model: type[BaseModel], params: BaseModel | dict[str, Any]) -> Any:
    if isinstance(params, model):
        return params
    try:
        return model.model_validate(params)
    except ValidationError as exc:
        raise InvalidRequest(str(exc)) from exc


class TelemetryService:
    """Query Jaeger and Prometheus and return compact, structured results."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        tracing: TracingClient | None = None,
        metrics: MetricsClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._tracing = tracing or TracingClient(self._settings, transport=transport)
        self._metrics = metrics or MetricsClient(self._settings, transport=transport)
        self._fanout_policy = FanOutPolicy(max_concurrency=self._settings.fanout_concurrency)

    async def list_services(self) -> list[str]:
        return await self._tracing.list_services()

    async def get_traces(
        self, request: TraceRequest | dict[str, Any]
    ) -> ExtractedTraces | AllServicesResult:
        """Summarise traces for one service, or for every service when ``service="all"``.

        Raises:
            InvalidFormat: If the lookback cannot be parsed.
            TracingBackendError: If a single-service query fails.
        """

        params: TraceRequest = _validate(TraceRequest, request)
        start, end = resolve_time_range(params.lookback)
        query = TraceQuery(
            service=params.service,
            start=start,
            end=end,
            limit=params.limit,
            trace_filter=params.filter,
            operation=params.operation,
            min_duration=params.min_duration,
        )

        if params.service == ALL_SERVICES:
            return await search_all_services(self._tracing, query, self._fanout_policy)

        response = await self._tracing.fetch_traces(query)
        extracted = extract_trace_summary(response, params.limit, predicate_for(params.filter))
        LOGGER.info(
            "Kept %d summaries from %d resource spans for %s",
            extracted.traces_found,
            extracted.total_traces_searched,
            params.service,
        )
        return extracted

    async def get_service_health(self, request: HealthRequest | dict[str, Any]) -> HealthResult:
        params: HealthRequest = _validate(HealthRequest, request)
        # Fail on missing configuration before any query is scheduled
        self._settings.require_metrics_url()

        report = await collect_service_health(
            self._metrics,
            params.service,
            params.lookback,
            include_trends=params.include_trends,
        )
        return HealthResult(report=report, text=format_health_report(report, params.format))

    async def get_trace_sample(self, service: str | None = None, lookback: str = "1h") -> Any:
        """Return one raw, unsummarised trace payload for debugging the wire format.

        Defaults to the first service known to the tracing backend.
        """

        if service is None:
            services = await self._tracing.list_services()
            if not services:
                raise TracingBackendError("Tracing backend reports no services")
            service = services[0]

        start, end = resolve_time_range(lookback)
        LOGGER.info("Fetching sample trace for %s", service)
        return await self._tracing.fetch_raw_traces(
            TraceQuery(service=service, start=start, end=end, limit=1)
        )


__all__ = ["HealthRequest", "HealthResult", "TelemetryService", "TraceRequest"]
