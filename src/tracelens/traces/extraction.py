"""Walk a Jaeger OTLP response and keep at most ``limit`` span summaries.

The walk is a lazy generator over resource spans, scope spans and spans.
``extract_trace_summary`` truncates it with :func:`itertools.islice`, so once
``limit`` summaries are kept no further spans are filtered or compacted.
"""

from __future__ import annotations

from collections.abc import Iterator
from itertools import islice

from .attributes import find_attribute
from .classify import SpanPredicate
from .compactor import build_trace_summary
from .models import ExtractedTraces, ResourceSpan, StringValue, TraceQueryResponse, TraceSummary

UNKNOWN_SERVICE = "unknown"


def service_name_of(resource_span: ResourceSpan) -> str:
    """Return the ``service.name`` resource attribute or ``"unknown"``."""

    attribute = find_attribute(resource_span.resource.attributes, "service.name")
    if attribute is not None and isinstance(attribute.value, StringValue) and attribute.value.value:
        return attribute.value.value
    return UNKNOWN_SERVICE


def iter_trace_summaries(
    response: TraceQueryResponse, predicate: SpanPredicate | None = None
) -> Iterator[TraceSummary]:
    """Yield summaries in input order, skipping spans rejected by ``predicate``."""

    for resource_span in response.result.resource_spans:
        service = service_name_of(resource_span)
        for scope_span in resource_span.scope_spans:
            for span in scope_span.spans:
                if predicate is not None and not predicate(span):
                    continue
                yield build_trace_summary(span, service)


def extract_trace_summary(
    response: TraceQueryResponse,
    limit: int,
    predicate: SpanPredicate | None = None,
) -> ExtractedTraces:
    """Compress ``response`` into at most ``limit`` summaries.

    Args:
        response: Full OTLP response from the tracing backend.
        limit: Maximum number of summaries to keep; values below zero keep nothing.
        predicate: Optional span filter evaluated before compaction.

    Returns:
        ExtractedTraces: ``total_traces_searched`` is the number of resource-span
        groups in the response (scan breadth), not a span count.
    """

    traces = list(islice(iter_trace_summaries(response, predicate), max(limit, 0)))
    return ExtractedTraces(
        total_traces_searched=len(response.result.resource_spans),
        traces_found=len(traces),
        traces=traces,
    )


__all__ = ["extract_trace_summary", "iter_trace_summaries", "service_name_of"]
