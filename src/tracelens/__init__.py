"""tracelens: compact Jaeger trace summaries and Prometheus health reports."""

from .core.config import Settings, get_settings
from .core.errors import TelemetryError, format_error
from .service import HealthRequest, HealthResult, TelemetryService, TraceRequest

__all__ = [
    "HealthRequest",
    "HealthResult",
    "Settings",
    "TelemetryError",
    "TelemetryService",
    "TraceRequest",
    "format_error",
    "get_settings",
]
