"""Configuration management for the telemetry engine."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, ClassVar, Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from .errors import ConfigurationError

# Ensure .env values are loaded before settings initialisation.
load_dotenv()


class Settings(BaseModel):
    """Engine settings loaded from environment variables."""

    ENV_PREFIX: ClassVar[str] = "TRACELENS_"

    model_config = ConfigDict(extra="ignore")

    tracing_api_base: HttpUrl | None = Field(
        default=None,
        description="Base URL of the Jaeger query service (e.g. http://jaeger:16686).",
    )
    tracing_api_path: str = Field(
        default="/api/v3",
        description="Path prefix of the OTLP JSON query API on the tracing backend.",
    )
    metrics_api_base: HttpUrl | None = Field(
        default=None,
        description="Base URL of the Prometheus server (e.g. http://prometheus:9090).",
    )
    request_timeout: float = Field(
        default=10.0,
        description="Timeout in seconds applied to every outbound backend request.",
    )
    fanout_concurrency: int = Field(
        default=1,
        ge=1,
        description="Maximum per-service trace queries in flight when searching all services.",
    )

    log_level: str = Field(default="INFO", description="Python logging level for the engine.")
    log_format: Literal["json", "text"] = Field(
        default="json", description="Log output format: structured JSON or Rich text."
    )

    def __init__(self, **data: Any) -> None:  # noqa: D401 - inherited docstring
        env_values = type(self)._load_environment_values()
        env_values.update(data)
        super().__init__(**env_values)

    @classmethod
    def _load_environment_values(cls) -> dict[str, Any]:
        """Return field values sourced from the current environment."""

        values: dict[str, Any] = {}
        for field_name in cls.model_fields:
            env_key = f"{cls.ENV_PREFIX}{field_name.upper()}"
            if env_key in os.environ:
                values[field_name] = os.environ[env_key]
        return values

    def require_tracing_url(self) -> str:
        """Return the tracing API root (base URL plus API path) or fail loudly."""

        if self.tracing_api_base is None:
            raise ConfigurationError(f"{self.ENV_PREFIX}TRACING_API_BASE")
        path = "/" + self.tracing_api_path.strip("/") if self.tracing_api_path.strip("/") else ""
        return f"{str(self.tracing_api_base).rstrip('/')}{path}"

    def require_metrics_url(self) -> str:
        """Return the Prometheus base URL or fail loudly."""

        if self.metrics_api_base is None:
            raise ConfigurationError(f"{self.ENV_PREFIX}METRICS_API_BASE")
        return str(self.metrics_api_base).rstrip("/")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a singleton instance of :class:`Settings`."""

    return Settings()


__all__ = ["Settings", "get_settings"]
