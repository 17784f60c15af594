"""Async client for the Jaeger ``/api/v3`` query API."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError

from ..core.config import Settings
from ..core.errors import TracingBackendError
from ..core.timewindow import isoformat_z
from .classify import TraceFilter
from .models import ServicesResponse, TraceQueryResponse

LOGGER = logging.getLogger(__name__)


class TraceQuery(BaseModel):
    """Parameters of one ``/traces`` search scoped to a single service."""

    service: str
    start: datetime
    end: datetime
    limit: int = Field(default=5, description="Also sent as the backend search depth.")
    trace_filter: TraceFilter = TraceFilter.ALL
    operation: str | None = None
    min_duration: str | None = None

    def for_service(self, service: str) -> TraceQuery:
        return self.model_copy(update={"service": service})

    def to_params(self) -> dict[str, str]:
        params = {
            "query.service_name": self.service,
            "query.start_time_min": isoformat_z(self.start),
            "query.start_time_max": isoformat_z(self.end),
            "query.search_depth": str(self.limit),
        }
        # Let Jaeger drop non-error traces at the source
        if self.trace_filter is TraceFilter.ERRORS:
            params["query.attributes.error"] = "true"
        if self.operation:
            params["query.operation_name"] = self.operation
        if self.min_duration:
            params["query.duration_min"] = self.min_duration
        return params


class TracingClient:
    """Wrapper around the Jaeger HTTP query API."""

    def __init__(
        self,
        settings: Settings,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._timeout = timeout if timeout is not None else settings.request_timeout
        self._transport = transport

    async def _get(self, path: str, params: dict[str, str] | None = None) -> Any:
        """Issue a GET against the tracing API and return the decoded JSON body."""

        base_url = self._settings.require_tracing_url()
        LOGGER.debug("Tracing request %s%s params=%s", base_url, path, params)

        async with httpx.AsyncClient(
            base_url=base_url, timeout=httpx.Timeout(self._timeout), transport=self._transport
        ) as client:
            try:
                response = await client.get(path, params=params)
            except httpx.HTTPError as exc:
                raise TracingBackendError(f"Failed to reach tracing backend: {exc}") from exc

        if response.status_code >= 400:
            LOGGER.error("Tracing backend error %s: %s", response.status_code, response.text[:256])
            raise TracingBackendError(
                f"Tracing backend returned {response.status_code} for {path}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise TracingBackendError(f"Tracing backend returned invalid JSON for {path}") from exc

    async def list_services(self) -> list[str]:
        """Return every service name known to the tracing backend."""

        data = await self._get("/services")
        try:
            return ServicesResponse.model_validate(data).services
        except ValidationError as exc:
            raise TracingBackendError("Unexpected services payload from tracing backend") from exc

    async def fetch_raw_traces(self, query: TraceQuery) -> Any:
        """Return the unparsed ``/traces`` body for ``query``."""

        return await self._get("/traces", params=query.to_params())

    async def fetch_traces(self, query: TraceQuery) -> TraceQueryResponse:
        data = await self.fetch_raw_traces(query)
        try:
            return TraceQueryResponse.model_validate(data)
        except ValidationError as exc:
            raise TracingBackendError(
                f"Unexpected trace payload for service {query.service}"
            ) from exc


__all__ = ["TraceQuery", "TracingClient"]
