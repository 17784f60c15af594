"""Render a :class:`ServiceHealthMetrics` report for humans or machines."""

from __future__ import annotations

from enum import Enum

from .models import HealthStatus, ServiceHealthMetrics, TrendDirection


class ReportFormat(str, Enum):
    SUMMARY = "summary"
    DETAILED = "detailed"
    JSON = "json"


_STATUS_ICONS = {
    HealthStatus.HEALTHY: "✅",
    HealthStatus.DEGRADED: "⚠️",
    HealthStatus.CRITICAL: "🚨",
}
_TREND_ICONS = {
    TrendDirection.IMPROVING: "📈",
    TrendDirection.DEGRADING: "📉",
    TrendDirection.STABLE: "➡️",
}


def format_health_report(report: ServiceHealthMetrics, fmt: ReportFormat | str) -> str:
    """Render ``report`` without recomputing or reordering anything.

    ``summary`` never lists slow operations; ``detailed`` adds them.
    """

    fmt = ReportFormat(fmt)
    if fmt is ReportFormat.JSON:
        return report.model_dump_json(indent=2, exclude_none=True)

    metrics = report.metrics
    lines = [
        f"{_STATUS_ICONS[report.health_status]} Service Health: "
        f"{report.service.upper()} - {report.health_status.value.upper()}",
        f"Period: Last {report.period}",
        "",
        "📊 Key Metrics:",
        f"  • Throughput: {metrics.throughput}",
        f"  • Error Rate: {metrics.error_rate} (~{metrics.error_count} errors)",
        f"  • Success Rate: {metrics.success_rate}",
        f"  • P50 Latency: {metrics.latency.p50}",
        f"  • P95 Latency: {metrics.latency.p95}",
        f"  • P99 Latency: {metrics.latency.p99}",
    ]

    if report.trend is not None:
        trend = report.trend
        lines += [
            "",
            f"{_TREND_ICONS[trend.direction]} Trend: {trend.direction.value.upper()}",
            f"  • Previous error rate: {trend.previous_error_rate}",
            f"  • Change: {trend.change}",
        ]

    if report.top_errors:
        lines += ["", "🔴 Top Error Operations:"]
        lines += [f"  • {op.operation}: {op.error_rate} error rate" for op in report.top_errors]

    if fmt is ReportFormat.DETAILED:
        lines += ["", "🐌 Slowest Operations (by P95):"]
        lines += [f"  • {op.operation}: {op.p95_latency}" for op in report.slowest_operations]

    return "\n".join(lines) + "\n"


__all__ = ["ReportFormat", "format_health_report"]
