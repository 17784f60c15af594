"""Lookback parsing and timestamp conversion helpers."""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta

from .errors import InvalidFormat

_LOOKBACK_RE = re.compile(r"([0-9]+)(s|m|h|d)")
_UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

DEFAULT_WINDOW_SECONDS = 900


def _parse(lookback: str) -> tuple[int, str] | None:
    match = _LOOKBACK_RE.fullmatch(lookback or "")
    if match is None:
        return None
    return int(match.group(1)), match.group(2)


def resolve_window_ms(lookback: str) -> int:
    """Convert a lookback such as ``"15m"`` to milliseconds.

    Raises:
        InvalidFormat: If ``lookback`` is not ``<integer><s|m|h|d>``.
    """

    parsed = _parse(lookback)
    if parsed is None:
        raise InvalidFormat(lookback)
    value, unit = parsed
    return value * _UNIT_SECONDS[unit] * 1000


def resolve_window_seconds(lookback: str) -> int:
    """Convert a lookback to seconds, falling back to 15 minutes on bad input."""

    parsed = _parse(lookback)
    if parsed is None:
        return DEFAULT_WINDOW_SECONDS
    value, unit = parsed
    return value * _UNIT_SECONDS[unit]


def resolve_time_range(lookback: str, now: datetime | None = None) -> tuple[datetime, datetime]:
    """Return the absolute ``(start, end)`` UTC window ending at ``now``."""

    end = now or datetime.now(UTC)
    return end - timedelta(milliseconds=resolve_window_ms(lookback)), end


def isoformat_z(moment: datetime) -> str:
    """Render a datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""

    if moment.tzinfo is not None:
        moment = moment.astimezone(UTC)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def nanos_to_iso(nanos: str | int) -> str:
    """Convert a nanosecond epoch timestamp to an ISO-8601 instant.

    Integer division keeps full precision for timestamps beyond the float range.
    """

    millis = int(nanos) // 1_000_000
    return isoformat_z(_EPOCH + timedelta(milliseconds=millis))


__all__ = [
    "DEFAULT_WINDOW_SECONDS",
    "isoformat_z",
    "nanos_to_iso",
    "resolve_time_range",
    "resolve_window_ms",
    "resolve_window_seconds",
]
