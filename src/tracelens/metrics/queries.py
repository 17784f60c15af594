"""PromQL expressions over the spanmetrics connector's series."""

from __future__ import annotations

CALLS_TOTAL = "traces_span_metrics_calls_total"
DURATION_BUCKET = "traces_span_metrics_duration_milliseconds_bucket"
ERROR_STATUS = "STATUS_CODE_ERROR"
TOP_K = 5


def escape_label(value: str) -> str:
    """Escape a value for use inside a double-quoted PromQL label matcher."""

    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def _calls(service: str, lookback: str, *, errors_only: bool = False, offset: str | None = None) -> str:
    matchers = f'service_name="{escape_label(service)}"'
    if errors_only:
        matchers += f',status_code="{ERROR_STATUS}"'
    selector = f"{CALLS_TOTAL}{{{matchers}}}[{lookback}]"
    if offset:
        selector += f" offset {offset}"
    return f"rate({selector})"


def throughput_query(service: str, lookback: str) -> str:
    return _calls(service, lookback)


def error_rate_query(service: str, lookback: str, *, offset: str | None = None) -> str:
    """Percentage of calls with an error status; ``offset`` shifts the window back."""

    errors = _calls(service, lookback, errors_only=True, offset=offset)
    total = _calls(service, lookback, offset=offset)
    return f"({errors} / {total}) * 100"


def latency_quantile_query(service: str, lookback: str, quantile: float) -> str:
    buckets = f'{DURATION_BUCKET}{{service_name="{escape_label(service)}"}}[{lookback}]'
    return f"histogram_quantile({quantile:.2f}, rate({buckets}))"


def top_error_operations_query(service: str, lookback: str, k: int = TOP_K) -> str:
    return f"topk({k}, {error_rate_query(service, lookback)})"


def slowest_operations_query(service: str, lookback: str, k: int = TOP_K) -> str:
    return f"topk({k}, {latency_quantile_query(service, lookback, 0.95)})"


__all__ = [
    "error_rate_query",
    "escape_label",
    "latency_quantile_query",
    "slowest_operations_query",
    "throughput_query",
    "top_error_operations_query",
]
