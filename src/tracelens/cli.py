"""Command-line access to the telemetry engine."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Coroutine
from typing import Any, NoReturn, Optional, TypeVar

import typer
from pydantic import BaseModel, ValidationError
from rich.console import Console

from .core.config import get_settings
from .core.errors import TelemetryError, format_error
from .metrics.formatting import ReportFormat
from .observability.logging import setup_logging
from .service import HealthRequest, TelemetryService, TraceRequest
from .traces.classify import TraceFilter
from .traces.models import dump

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

app = typer.Typer(help="Summarise Jaeger traces and Prometheus service health.")
console = Console()


def _service() -> TelemetryService:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    return TelemetryService(settings)


def _fail(exc: Exception) -> NoReturn:
    console.print_json(json.dumps(format_error(exc)))
    raise typer.Exit(code=1) from exc


def _request(model: type[M], **params: Any) -> M:
    """Validate command options into an engine request."""

    try:
        return model(**params)
    except ValidationError as exc:
        _fail(exc)


def _run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine, printing engine errors as structured JSON."""

    try:
        return asyncio.run(coro)
    except (TelemetryError, ValidationError) as exc:
        _fail(exc)


def _print(result: Any) -> None:
    payload = dump(result) if isinstance(result, BaseModel) else result
    console.print_json(json.dumps(payload))


@app.command()
def services() -> None:
    """List every service with spans in the tracing backend."""

    _print(_run(_service().list_services()))


@app.command()
def traces(
    service: str = typer.Argument(..., help='Service name, or "all" for every service.'),
    limit: int = typer.Option(5, help="Maximum number of traces to return."),
    lookback: str = typer.Option("1h", help='Time range such as "1h", "30m", "2d".'),
    operation: Optional[str] = typer.Option(None, help="Operation name to filter on."),
    min_duration: Optional[str] = typer.Option(None, help='Minimum duration such as "100ms".'),
    filter: TraceFilter = typer.Option(TraceFilter.ALL, help="all, errors or successful."),
) -> None:
    """Show compact trace summaries."""

    request = _request(
        TraceRequest,
        service=service,
        limit=limit,
        lookback=lookback,
        operation=operation,
        min_duration=min_duration,
        filter=filter,
    )
    _print(_run(_service().get_traces(request)))


@app.command()
def health(
    service: str = typer.Argument(..., help="Service to report on."),
    lookback: str = typer.Option("15m", help='Time range such as "15m", "1h", "4h".'),
    format: ReportFormat = typer.Option(ReportFormat.SUMMARY, help="summary, detailed or json."),
    trends: bool = typer.Option(False, "--trends", help="Compare with the previous period."),
) -> None:
    """Show the health report for a service."""

    request = _request(
        HealthRequest, service=service, lookback=lookback, format=format, include_trends=trends
    )
    result = _run(_service().get_service_health(request))
    if format is ReportFormat.JSON:
        console.print_json(result.text)
    else:
        console.print(result.text, markup=False, highlight=False)


@app.command()
def sample(
    service: Optional[str] = typer.Argument(None, help="Service to sample; defaults to the first one."),
    lookback: str = typer.Option("1h", help='Time range such as "1h", "30m", "2d".'),
) -> None:
    """Dump one raw trace payload."""

    _print(_run(_service().get_trace_sample(service, lookback)))


if __name__ == "__main__":  # pragma: no cover
    app()
