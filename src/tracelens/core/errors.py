"""Standardized error codes and exceptions for the telemetry engine.

Every failure that crosses the engine boundary is rendered as a structured
dictionary (error code, category, message, recovery hint) so that callers
such as tool servers never surface raw stack traces.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, NamedTuple

import httpx
from pydantic import ValidationError


class ErrorSeverity(str, Enum):
    """Severity levels for errors."""

    CRITICAL = "critical"  # Engine unusable until fixed
    ERROR = "error"  # Operation failed
    WARNING = "warning"  # Degraded result


class ErrorInfo(NamedTuple):
    """Structured information about an error code."""

    code: str
    severity: ErrorSeverity
    category: str
    description: str
    recovery_hint: str


class ErrorCode(str, Enum):
    """Error codes surfaced by the engine.

    Format: CATEGORY_SPECIFIC_ERROR
    """

    CONFIG_MISSING = "CONFIG_MISSING"
    INPUT_INVALID_FORMAT = "INPUT_INVALID_FORMAT"
    INPUT_INVALID = "INPUT_INVALID"
    BACKEND_TRACING_FAILED = "BACKEND_TRACING_FAILED"
    NET_TIMEOUT = "NET_TIMEOUT"
    UNKNOWN = "UNKNOWN"


ERROR_METADATA: dict[ErrorCode, ErrorInfo] = {
    ErrorCode.CONFIG_MISSING: ErrorInfo(
        code="CONFIG_MISSING",
        severity=ErrorSeverity.CRITICAL,
        category="config",
        description="Required backend URL is not configured",
        recovery_hint="Set TRACELENS_TRACING_API_BASE / TRACELENS_METRICS_API_BASE",
    ),
    ErrorCode.INPUT_INVALID_FORMAT: ErrorInfo(
        code="INPUT_INVALID_FORMAT",
        severity=ErrorSeverity.ERROR,
        category="input",
        description="Time window does not match <integer><s|m|h|d>",
        recovery_hint='Use a lookback such as "30s", "15m", "1h" or "2d"',
    ),
    ErrorCode.INPUT_INVALID: ErrorInfo(
        code="INPUT_INVALID",
        severity=ErrorSeverity.ERROR,
        category="input",
        description="Request parameters failed validation",
        recovery_hint="Check parameter names, types and allowed values",
    ),
    ErrorCode.BACKEND_TRACING_FAILED: ErrorInfo(
        code="BACKEND_TRACING_FAILED",
        severity=ErrorSeverity.ERROR,
        category="backend",
        description="The tracing backend could not be queried",
        recovery_hint="Check that Jaeger is reachable and the service name exists",
    ),
    ErrorCode.NET_TIMEOUT: ErrorInfo(
        code="NET_TIMEOUT",
        severity=ErrorSeverity.WARNING,
        category="network",
        description="Backend request timed out",
        recovery_hint="Retry, narrow the lookback, or raise TRACELENS_REQUEST_TIMEOUT",
    ),
    ErrorCode.UNKNOWN: ErrorInfo(
        code="UNKNOWN",
        severity=ErrorSeverity.ERROR,
        category="unknown",
        description="An unexpected error occurred",
        recovery_hint="Check logs for detailed error message",
    ),
}


def get_error_info(code: ErrorCode) -> ErrorInfo:
    """Get metadata for an error code."""
    return ERROR_METADATA.get(code, ERROR_METADATA[ErrorCode.UNKNOWN])


class TelemetryError(Exception):
    """Base class for errors raised by the engine."""

    code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        info = get_error_info(self.code)
        return {
            "error_code": info.code,
            "severity": info.severity.value,
            "category": info.category,
            "message": self.message,
            "recovery_hint": info.recovery_hint,
        }


class ConfigurationError(TelemetryError):
    """Raised when a required setting is missing."""

    code = ErrorCode.CONFIG_MISSING

    def __init__(self, setting: str) -> None:
        self.setting = setting
        super().__init__(f"Missing required configuration: {setting}")


class InvalidFormat(TelemetryError):
    """Raised when a lookback string is not ``<integer><s|m|h|d>``."""

    code = ErrorCode.INPUT_INVALID_FORMAT

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid lookback format: {value}")


class InvalidRequest(TelemetryError):
    """Raised when engine request parameters fail validation."""

    code = ErrorCode.INPUT_INVALID


class TracingBackendError(TelemetryError):
    """Raised when the tracing backend returns an error or cannot be reached."""

    code = ErrorCode.BACKEND_TRACING_FAILED

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


def format_error(exc: BaseException) -> dict[str, Any]:
    """Render any exception as the structured error payload.

    Args:
        exc: The exception crossing the engine boundary.

    Returns:
        Machine-readable error dictionary.
    """
    if isinstance(exc, TelemetryError):
        return exc.to_dict()
    if isinstance(exc, ValidationError):
        return InvalidRequest(str(exc)).to_dict()

    code = ErrorCode.NET_TIMEOUT if isinstance(exc, httpx.TimeoutException) else ErrorCode.UNKNOWN
    info = get_error_info(code)
    return {
        "error_code": info.code,
        "severity": info.severity.value,
        "category": info.category,
        "message": f"{type(exc).__name__}: {exc}",
        "recovery_hint": info.recovery_hint,
    }


__all__ = [
    "ConfigurationError",
    "ErrorCode",
    "ErrorInfo",
    "ErrorSeverity",
    "InvalidFormat",
    "InvalidRequest",
    "TelemetryError",
    "TracingBackendError",
    "format_error",
    "get_error_info",
]
