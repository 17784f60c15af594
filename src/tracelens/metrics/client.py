"""Instant queries against Prometheus.

Failures never raise: a transport error, a non-2xx status or an unreadable
body all come back as ``None``. Callers therefore cannot tell an unreachable
Prometheus from an empty result at this layer.
"""

from __future__ import annotations

import logging
import math

import httpx
from pydantic import ValidationError

from ..core.config import Settings
from .models import PrometheusQueryResult

LOGGER = logging.getLogger(__name__)

QUERY_PATH = "/api/v1/query"


async def query_prometheus(
    base_url: str,
    expression: str,
    *,
    timeout: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> PrometheusQueryResult | None:
    """Run one instant query and return the parsed response or ``None``."""

    LOGGER.info("Prometheus query: %s", expression)
    async with httpx.AsyncClient(
        base_url=base_url, timeout=httpx.Timeout(timeout), transport=transport
    ) as client:
        try:
            response = await client.get(QUERY_PATH, params={"query": expression})
        except httpx.HTTPError as exc:
            LOGGER.warning("Error querying Prometheus: %s", exc)
            return None

    if response.status_code >= 400:
        LOGGER.warning("Prometheus query failed: %s %s", response.status_code, response.reason_phrase)
        return None

    try:
        return PrometheusQueryResult.model_validate(response.json())
    except (ValueError, ValidationError) as exc:
        LOGGER.warning("Unreadable Prometheus response: %s", exc)
        return None


def _parse_sample_value(raw: str) -> float | None:
    try:
        value = float(raw)
    except ValueError:
        return None
    # histogram_quantile yields NaN when there were no observations
    return None if math.isnan(value) else value


def scalar(result: PrometheusQueryResult | None, default: float = 0.0) -> float:
    """Return the first series' value, or ``default`` when there is none."""

    if result is None or not result.data.result:
        return default
    first = result.data.result[0]
    if first.value is None:
        return default
    value = _parse_sample_value(first.value[1])
    return default if value is None else value


def top_k(result: PrometheusQueryResult | None) -> list[tuple[dict[str, str], float]]:
    """Return every series as ``(labels, value)``; a missing value counts as 0."""

    if result is None:
        return []
    pairs: list[tuple[dict[str, str], float]] = []
    for sample in result.data.result:
        value = _parse_sample_value(sample.value[1]) if sample.value is not None else None
        pairs.append((dict(sample.metric), value if value is not None else 0.0))
    return pairs


class MetricsClient:
    """Prometheus client bound to the configured base URL and timeout."""

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

    async def query(self, expression: str) -> PrometheusQueryResult | None:
        return await query_prometheus(
            self._settings.require_metrics_url(),
            expression,
            timeout=self._timeout,
            transport=self._transport,
        )


__all__ = ["MetricsClient", "query_prometheus", "scalar", "top_k"]
