"""Prometheus query payloads and the service health report."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PrometheusSample(BaseModel):
    """One series of an instant (``value``) or range (``values``) query."""

    metric: dict[str, str] = Field(default_factory=dict)
    value: tuple[float, str] | None = None
    values: list[tuple[float, str]] | None = None


class PrometheusData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    result_type: str = Field(default="vector", alias="resultType")
    result: list[PrometheusSample] = Field(default_factory=list)


class PrometheusQueryResult(BaseModel):
    """Body of ``GET /api/v1/query``."""

    status: str
    data: PrometheusData = Field(default_factory=PrometheusData)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    CRITICAL = "critical"


class TrendDirection(str, Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DEGRADING = "degrading"


class LatencyPercentiles(BaseModel):
    p50: str
    p95: str
    p99: str


class HealthMetrics(BaseModel):
    throughput: str = Field(description="Requests per second, e.g. '12.50 req/s'.")
    error_count: int = Field(description="Estimated errors over the lookback period.")
    error_rate: str
    success_rate: str
    latency: LatencyPercentiles


class ErrorOperation(BaseModel):
    operation: str
    error_rate: str
    requests_per_sec: str


class SlowOperation(BaseModel):
    operation: str
    p95_latency: str
    requests_per_sec: str


class HealthTrend(BaseModel):
    direction: TrendDirection
    previous_error_rate: str | None = None
    change: str | None = None


class ServiceHealthMetrics(BaseModel):
    """Health report for one service over one lookback period."""

    service: str
    period: str
    health_status: HealthStatus
    metrics: HealthMetrics
    top_errors: list[ErrorOperation] | None = None
    slowest_operations: list[SlowOperation] = Field(default_factory=list)
    trend: HealthTrend | None = None


__all__ = [
    "ErrorOperation",
    "HealthMetrics",
    "HealthStatus",
    "HealthTrend",
    "LatencyPercentiles",
    "PrometheusData",
    "PrometheusQueryResult",
    "PrometheusSample",
    "ServiceHealthMetrics",
    "SlowOperation",
    "TrendDirection",
]
