"""Prometheus-backed service health reporting."""

from .client import MetricsClient, query_prometheus, scalar, top_k
from .formatting import ReportFormat, format_health_report
from .health import build_health_report, collect_service_health, determine_health_status

__all__ = [
    "MetricsClient",
    "ReportFormat",
    "build_health_report",
    "collect_service_health",
    "determine_health_status",
    "format_health_report",
    "query_prometheus",
    "scalar",
    "top_k",
]
