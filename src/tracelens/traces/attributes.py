"""Helpers for reading OTLP span attributes."""

from __future__ import annotations

from collections.abc import Iterable

from .models import Attribute, Span

# Namespaces worth surfacing in a summary; everything else is dropped.
RELEVANT_TAG_PREFIXES = ("error.", "http.", "db.", "rpc.", "messaging.")

ScalarValue = str | int | bool | float


def value_of(attribute: Attribute | None) -> ScalarValue | None:
    """Return the decoded value of ``attribute`` or ``None`` if no variant is set."""

    if attribute is None or attribute.value is None:
        return None
    return attribute.value.value


def find_attribute(attributes: Iterable[Attribute] | None, key: str) -> Attribute | None:
    """Return the first attribute named ``key``."""

    for attribute in attributes or ():
        if attribute.key == key:
            return attribute
    return None


def relevant_tags(span: Span) -> dict[str, ScalarValue]:
    tags: dict[str, ScalarValue] = {}
    for attribute in span.attributes:
        if not attribute.key.startswith(RELEVANT_TAG_PREFIXES):
            continue
        value = value_of(attribute)
        if value is not None:
            tags[attribute.key] = value
    return tags


__all__ = ["RELEVANT_TAG_PREFIXES", "find_attribute", "relevant_tags", "value_of"]
