"""Derive a service health report from spanmetrics queries."""

from __future__ import annotations

import asyncio
import logging
import math

from ..core.timewindow import resolve_window_seconds
from . import queries
from .client import MetricsClient, scalar, top_k
from .models import (
    ErrorOperation,
    HealthMetrics,
    HealthStatus,
    HealthTrend,
    LatencyPercentiles,
    PrometheusQueryResult,
    ServiceHealthMetrics,
    SlowOperation,
    TrendDirection,
)

LOGGER = logging.getLogger(__name__)

# Fixed thresholds; wrap determine_health_status to apply different ones.
CRITICAL_ERROR_RATE = 5.0
CRITICAL_P95_MS = 1000.0
DEGRADED_ERROR_RATE = 1.0
DEGRADED_P95_MS = 500.0
STABLE_TREND_DELTA = 0.5

UNKNOWN_OPERATION = "unknown"


def determine_health_status(error_rate: float, p95_latency_ms: float) -> HealthStatus:
    if error_rate > CRITICAL_ERROR_RATE or p95_latency_ms > CRITICAL_P95_MS:
        return HealthStatus.CRITICAL
    if error_rate > DEGRADED_ERROR_RATE or p95_latency_ms > DEGRADED_P95_MS:
        return HealthStatus.DEGRADED
    return HealthStatus.HEALTHY


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _operation_name(labels: dict[str, str]) -> str:
    return labels.get("span_name") or labels.get("operation") or UNKNOWN_OPERATION


def compute_trend(error_rate: float, previous_error_rate: float) -> HealthTrend:
    """Compare the current error rate with the previous period's."""

    delta = error_rate - previous_error_rate
    if abs(delta) < STABLE_TREND_DELTA:
        direction = TrendDirection.STABLE
    elif delta > 0:
        direction = TrendDirection.DEGRADING
    else:
        direction = TrendDirection.IMPROVING

    percent_change = f"{delta / previous_error_rate * 100:.1f}" if previous_error_rate > 0 else "N/A"
    sign = "+" if delta >= 0 else ""
    return HealthTrend(
        direction=direction,
        previous_error_rate=f"{previous_error_rate:.2f}%",
        change=f"{sign}{delta:.2f}% ({percent_change}%)",
    )


def build_health_report(
    service: str,
    lookback: str,
    *,
    throughput: PrometheusQueryResult | None = None,
    error_rate: PrometheusQueryResult | None = None,
    p50: PrometheusQueryResult | None = None,
    p95: PrometheusQueryResult | None = None,
    p99: PrometheusQueryResult | None = None,
    errors_by_operation: PrometheusQueryResult | None = None,
    slowest_operations: PrometheusQueryResult | None = None,
    previous_error_rate: PrometheusQueryResult | None = None,
) -> ServiceHealthMetrics:
    """Build the report from whichever query results are available.

    Missing results count as zero, so the report is always produced. The trend
    block is only present when ``previous_error_rate`` was supplied.
    """

    throughput_rps = scalar(throughput)
    current_error_rate = scalar(error_rate)
    p50_ms = scalar(p50)
    p95_ms = scalar(p95)
    p99_ms = scalar(p99)

    success_rate = max(0.0, 100.0 - current_error_rate)
    estimated_total = _round_half_up(throughput_rps * resolve_window_seconds(lookback))
    estimated_errors = _round_half_up(current_error_rate / 100 * estimated_total)

    # TODO: report per-operation throughput once spanmetrics exposes it per span_name
    requests_per_sec = f"{throughput_rps:.2f}"
    top_errors = [
        ErrorOperation(
            operation=_operation_name(labels),
            error_rate=f"{value:.2f}%",
            requests_per_sec=requests_per_sec,
        )
        for labels, value in top_k(errors_by_operation)
    ]
    slowest = [
        SlowOperation(
            operation=_operation_name(labels),
            p95_latency=f"{value:.1f}ms",
            requests_per_sec=requests_per_sec,
        )
        for labels, value in top_k(slowest_operations)
    ]

    trend = None
    if previous_error_rate is not None:
        trend = compute_trend(current_error_rate, scalar(previous_error_rate))

    return ServiceHealthMetrics(
        service=service,
        period=lookback,
        health_status=determine_health_status(current_error_rate, p95_ms),
        metrics=HealthMetrics(
            throughput=f"{throughput_rps:.2f} req/s",
            error_count=estimated_errors,
            error_rate=f"{current_error_rate:.2f}%",
            success_rate=f"{success_rate:.2f}%",
            latency=LatencyPercentiles(
                p50=f"{p50_ms:.1f}ms",
                p95=f"{p95_ms:.1f}ms",
                p99=f"{p99_ms:.1f}ms",
            ),
        ),
        top_errors=top_errors or None,
        slowest_operations=slowest,
        trend=trend,
    )


async def _skipped() -> None:
    return None


async def collect_service_health(
    client: MetricsClient,
    service: str,
    lookback: str,
    *,
    include_trends: bool = False,
) -> ServiceHealthMetrics:
    """Issue the health query battery concurrently and build the report."""

    LOGGER.info("Collecting health for service %s over %s", service, lookback)
    (
        throughput,
        error_rate,
        p50,
        p95,
        p99,
        errors_by_operation,
        slowest_operations,
        previous_error_rate,
    ) = await asyncio.gather(
        client.query(queries.throughput_query(service, lookback)),
        client.query(queries.error_rate_query(service, lookback)),
        client.query(queries.latency_quantile_query(service, lookback, 0.50)),
        client.query(queries.latency_quantile_query(service, lookback, 0.95)),
        client.query(queries.latency_quantile_query(service, lookback, 0.99)),
        client.query(queries.top_error_operations_query(service, lookback)),
        client.query(queries.slowest_operations_query(service, lookback)),
        (
            client.query(queries.error_rate_query(service, lookback, offset=lookback))
            if include_trends
            else _skipped()
        ),
    )

    return build_health_report(
        service,
        lookback,
        throughput=throughput,
        error_rate=error_rate,
        p50=p50,
        p95=p95,
        p99=p99,
        errors_by_operation=errors_by_operation,
        slowest_operations=slowest_operations,
        previous_error_rate=previous_error_rate,
    )


__all__ = [
    "build_health_report",
    "collect_service_health",
    "compute_trend",
    "determine_health_status",
]
