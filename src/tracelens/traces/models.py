"""OTLP trace payloads returned by Jaeger and the compacted summaries built from them."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel


class _OtlpModel(BaseModel):
    """Base for read-only OTLP JSON structures (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# ---------------------------------------------------------------------------
# Attribute values
# ---------------------------------------------------------------------------


class StringValue(_OtlpModel):
    kind: Literal["string"] = "string"
    value: str


class IntValue(_OtlpModel):
    kind: Literal["int"] = "int"
    value: int  # OTLP JSON sends int64 as a string; pydantic coerces it


class BoolValue(_OtlpModel):
    kind: Literal["bool"] = "bool"
    value: bool


class DoubleValue(_OtlpModel):
    kind: Literal["double"] = "double"
    value: float


AttributeValue = Annotated[
    StringValue | IntValue | BoolValue | DoubleValue, Field(discriminator="kind")
]

# Decoding precedence for the wire representation.
_WIRE_KEYS: tuple[tuple[str, str], ...] = (
    ("stringValue", "string"),
    ("intValue", "int"),
    ("boolValue", "bool"),
    ("doubleValue", "double"),
)
_KIND_TO_WIRE = {kind: wire_key for wire_key, kind in _WIRE_KEYS}


class Attribute(_OtlpModel):
    """Key plus a tagged attribute value; ``value`` is ``None`` when nothing is set."""

    key: str
    value: AttributeValue | None = None

    @field_validator("value", mode="before")
    @classmethod
    def _decode_wire(cls, raw: Any) -> Any:
        if not isinstance(raw, dict) or "kind" in raw:
            return raw
        for wire_key, kind in _WIRE_KEYS:
            if raw.get(wire_key) is not None:
                return {"kind": kind, "value": raw[wire_key]}
        return None

    @field_serializer("value")
    def _encode_wire(self, value: StringValue | IntValue | BoolValue | DoubleValue | None) -> dict[str, Any]:
        if value is None:
            return {}
        return {_KIND_TO_WIRE[value.kind]: value.value}


def _none_to_empty(value: Any) -> Any:
    return [] if value is None else value


# ---------------------------------------------------------------------------
# Spans
# ---------------------------------------------------------------------------

_STATUS_NAMES = {"STATUS_CODE_UNSET": 0, "STATUS_CODE_OK": 1, "STATUS_CODE_ERROR": 2}


class SpanStatus(_OtlpModel):
    code: int = 0  # 0 = UNSET, 1 = OK, 2 = ERROR
    message: str | None = None

    @field_validator("code", mode="before")
    @classmethod
    def _decode_enum_name(cls, raw: Any) -> Any:
        if isinstance(raw, str) and raw in _STATUS_NAMES:
            return _STATUS_NAMES[raw]
        return 0 if raw is None else raw


class SpanEvent(_OtlpModel):
    """A log line or exception recorded during a span."""

    time_unix_nano: int
    name: str
    attributes: list[Attribute] = Field(default_factory=list)

    _empty_attributes = field_validator("attributes", mode="before")(_none_to_empty)


class Span(_OtlpModel):
    """A single timed operation. ``end_time_unix_nano`` is unset for crashed or running spans."""

    trace_id: str
    span_id: str
    parent_span_id: str | None = None
    name: str
    start_time_unix_nano: int
    end_time_unix_nano: int | None = None
    attributes: list[Attribute] = Field(default_factory=list)
    events: list[SpanEvent] = Field(default_factory=list)
    status: SpanStatus | None = None

    _empty_collections = field_validator("attributes", "events", mode="before")(_none_to_empty)


class ScopeSpan(_OtlpModel):
    spans: list[Span] = Field(default_factory=list)

    _empty_spans = field_validator("spans", mode="before")(_none_to_empty)


class Resource(_OtlpModel):
    attributes: list[Attribute] = Field(default_factory=list)

    _empty_attributes = field_validator("attributes", mode="before")(_none_to_empty)


class ResourceSpan(_OtlpModel):
    resource: Resource = Field(default_factory=Resource)
    scope_spans: list[ScopeSpan] = Field(default_factory=list)

    _empty_scopes = field_validator("scope_spans", mode="before")(_none_to_empty)

    @field_validator("resource", mode="before")
    @classmethod
    def _missing_resource(cls, raw: Any) -> Any:
        return {} if raw is None else raw


class TraceResult(_OtlpModel):
    resource_spans: list[ResourceSpan] = Field(default_factory=list)

    _empty_resource_spans = field_validator("resource_spans", mode="before")(_none_to_empty)


class TraceQueryResponse(_OtlpModel):
    """Top-level body of ``GET /api/v3/traces``."""

    result: TraceResult = Field(default_factory=TraceResult)

    @field_validator("result", mode="before")
    @classmethod
    def _missing_result(cls, raw: Any) -> Any:
        return {} if raw is None else raw


# ---------------------------------------------------------------------------
# Compacted output
# ---------------------------------------------------------------------------


class SpanOutcome(str, Enum):
    OK = "ok"
    ERROR = "error"
    UNSET = "unset"


class LogEntry(_OtlpModel):
    timestamp: str
    name: str
    attributes: list[Attribute] | None = None


class TraceSummary(_OtlpModel):
    """Bounded, consumer-friendly view of one span."""

    trace_id: str
    span_id: str
    service: str
    operation: str
    start_time: str
    duration: str
    status: SpanOutcome
    error_message: str | None = None
    error_type: str | None = None
    http_status_code: int | None = None
    tags: dict[str, str | int | bool | float] = Field(default_factory=dict)
    logs: list[LogEntry] | None = None


class ExtractedTraces(_OtlpModel):
    total_traces_searched: int
    traces_found: int
    traces: list[TraceSummary] = Field(default_factory=list)


class ServiceTraceResult(BaseModel):
    service: str
    trace_count: int
    traces: list[TraceSummary]


class ServiceSearchSummary(BaseModel):
    total: int
    with_traces: int


class AllServicesResult(BaseModel):
    summary: ServiceSearchSummary
    traces_by_service: list[ServiceTraceResult] = Field(default_factory=list)


class ServicesResponse(BaseModel):
    """Body of ``GET /api/v3/services``."""

    services: list[str] = Field(default_factory=list)

    _empty_services = field_validator("services", mode="before")(_none_to_empty)


def dump(model: BaseModel) -> dict[str, Any]:
    """Serialize a result model the way consumers expect (camelCase, no nulls)."""

    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = [
    "AllServicesResult",
    "Attribute",
    "AttributeValue",
    "BoolValue",
    "DoubleValue",
    "ExtractedTraces",
    "IntValue",
    "LogEntry",
    "Resource",
    "ResourceSpan",
    "ScopeSpan",
    "ServiceSearchSummary",
    "ServiceTraceResult",
    "ServicesResponse",
    "Span",
    "SpanEvent",
    "SpanOutcome",
    "SpanStatus",
    "StringValue",
    "TraceQueryResponse",
    "TraceResult",
    "TraceSummary",
    "dump",
]
