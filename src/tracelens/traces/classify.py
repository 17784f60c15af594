"""Span status classification and the predicates built on it."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from .models import Span, SpanOutcome

SpanPredicate = Callable[[Span], bool]

STATUS_CODE_OK = 1
STATUS_CODE_ERROR = 2


class TraceFilter(str, Enum):
    """Client-side filter applied to spans before they are summarised."""

    ALL = "all"
    ERRORS = "errors"
    SUCCESSFUL = "successful"


def classify_span(span: Span) -> SpanOutcome:
    code = span.status.code if span.status else None
    if code == STATUS_CODE_OK:
        return SpanOutcome.OK
    if code == STATUS_CODE_ERROR:
        return SpanOutcome.ERROR
    return SpanOutcome.UNSET


def is_error_span(span: Span) -> bool:
    return span.status is not None and span.status.code == STATUS_CODE_ERROR


def is_successful_span(span: Span) -> bool:
    """Anything that is not an error, so spans with an unset status count as successful."""

    return not is_error_span(span)


def predicate_for(trace_filter: TraceFilter | str) -> SpanPredicate | None:
    """Map a filter name to its span predicate; ``all`` means no predicate."""

    match TraceFilter(trace_filter):
        case TraceFilter.ERRORS:
            return is_error_span
        case TraceFilter.SUCCESSFUL:
            return is_successful_span
        case _:
            return None


__all__ = [
    "SpanPredicate",
    "TraceFilter",
    "classify_span",
    "is_error_span",
    "is_successful_span",
    "predicate_for",
]
