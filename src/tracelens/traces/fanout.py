"""Run the same trace search against every known service and aggregate the results."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from .classify import predicate_for
from .client import TraceQuery, TracingClient
from .extraction import extract_trace_summary
from .models import AllServicesResult, ServiceSearchSummary, ServiceTraceResult

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class FanOutPolicy:
    """How many per-service queries may be in flight at once.

    The default of one keeps the search sequential so the tracing backend
    only ever sees a single query from us.
    """

    max_concurrency: int = 1

    def __post_init__(self) -> None:
        if self.max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")


SEQUENTIAL = FanOutPolicy()


async def _search_service(
    client: TracingClient, query: TraceQuery
) -> ServiceTraceResult | None:
    """Query one service; any failure is logged and reported as ``None``."""

    try:
        response = await client.fetch_traces(query)
        extracted = extract_trace_summary(response, query.limit, predicate_for(query.trace_filter))
    except Exception as exc:
        LOGGER.warning("Skipping service %s after failed trace query: %s", query.service, exc)
        return None

    if extracted.traces_found == 0:
        return None
    return ServiceTraceResult(
        service=query.service,
        trace_count=extracted.traces_found,
        traces=extracted.traces,
    )


async def search_all_services(
    client: TracingClient,
    query: TraceQuery,
    policy: FanOutPolicy = SEQUENTIAL,
) -> AllServicesResult:
    """Search every service known to the backend with ``query``.

    Failing to list services propagates; a failure for an individual service
    only removes that service from ``traces_by_service``. Services without a
    matching trace are omitted but still counted in ``summary.total``.
    """

    services = await client.list_services()
    LOGGER.info(
        "Searching %d services (filter=%s, max_concurrency=%d)",
        len(services),
        query.trace_filter.value,
        policy.max_concurrency,
    )

    semaphore = asyncio.Semaphore(policy.max_concurrency)

    async def bounded(service: str) -> ServiceTraceResult | None:
        async with semaphore:
            return await _search_service(client, query.for_service(service))

    # gather keeps results in service-list order regardless of completion order
    results = await asyncio.gather(*(bounded(service) for service in services))
    found = [result for result in results if result is not None]

    return AllServicesResult(
        summary=ServiceSearchSummary(total=len(services), with_traces=len(found)),
        traces_by_service=found,
    )


__all__ = ["FanOutPolicy", "SEQUENTIAL", "search_all_services"]
