"""Trace retrieval and summarisation."""

from .classify import TraceFilter, is_error_span, is_successful_span, predicate_for
from .client import TraceQuery, TracingClient
from .extraction import extract_trace_summary
from .fanout import FanOutPolicy, search_all_services

__all__ = [
    "FanOutPolicy",
    "TraceFilter",
    "TraceQuery",
    "TracingClient",
    "extract_trace_summary",
    "is_error_span",
    "is_successful_span",
    "predicate_for",
    "search_all_services",
]
