from __future__ import annotations

from tracelens.tests.conftest import make_span
from tracelens.traces.attributes import find_attribute, relevant_tags, value_of
from tracelens.traces.models import Attribute, IntValue, Span, StringValue


def test_value_of_decodes_each_variant() -> None:
    assert value_of(Attribute.model_validate({"key": "a", "value": {"intValue": 200}})) == 200
    assert value_of(Attribute.model_validate({"key": "a", "value": {"stringValue": "GET"}})) == "GET"
    assert value_of(Attribute.model_validate({"key": "a", "value": {"boolValue": False}})) is False
    assert value_of(Attribute.model_validate({"key": "a", "value": {"doubleValue": 3.5}})) == 3.5


def test_value_of_without_variant_is_none() -> None:
    assert value_of(Attribute.model_validate({"key": "a", "value": {}})) is None
    assert value_of(Attribute.model_validate({"key": "a"})) is None
    assert value_of(None) is None


def test_wire_int64_strings_become_integers() -> None:
    attribute = Attribute.model_validate({"key": "http.status_code", "value": {"intValue": "503"}})

    assert isinstance(attribute.value, IntValue)
    assert attribute.value.value == 503


def test_first_populated_variant_wins() -> None:
    attribute = Attribute.model_validate(
        {"key": "odd", "value": {"intValue": 7, "stringValue": "seven"}}
    )

    assert isinstance(attribute.value, StringValue)


def test_attribute_serializes_back_to_wire_shape() -> None:
    attribute = Attribute.model_validate({"key": "db.system", "value": {"stringValue": "postgresql"}})

    assert attribute.model_dump() == {"key": "db.system", "value": {"stringValue": "postgresql"}}


def test_find_attribute_tolerates_missing_collections() -> None:
    attributes = [
        Attribute.model_validate({"key": "a", "value": {"stringValue": "first"}}),
        Attribute.model_validate({"key": "a", "value": {"stringValue": "second"}}),
    ]

    assert value_of(find_attribute(attributes, "a")) == "first"
    assert find_attribute(attributes, "b") is None
    assert find_attribute(None, "a") is None
    assert find_attribute([], "a") is None


def test_relevant_tags_keeps_only_known_namespaces() -> None:
    span = Span.model_validate(
        make_span(
            attributes=[
                {"key": "http.method", "value": {"stringValue": "GET"}},
                {"key": "db.statement", "value": {"stringValue": "SELECT 1"}},
                {"key": "error.type", "value": {"stringValue": "TimeoutError"}},
                {"key": "rpc.system", "value": {"stringValue": "grpc"}},
                {"key": "messaging.system", "value": {"stringValue": "kafka"}},
                {"key": "service.name", "value": {"stringValue": "frontend"}},
                {"key": "custom.tag", "value": {"stringValue": "x"}},
                {"key": "http.empty", "value": {}},
            ]
        )
    )

    assert relevant_tags(span) == {
        "http.method": "GET",
        "db.statement": "SELECT 1",
        "error.type": "TimeoutError",
        "rpc.system": "grpc",
        "messaging.system": "kafka",
    }


def test_relevant_tags_without_attributes() -> None:
    span = Span.model_validate({**make_span(), "attributes": None})

    assert relevant_tags(span) == {}
