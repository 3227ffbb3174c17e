"""
Conversion of authored schemas into document-ready JSON Schema.
"""

from __future__ import annotations

from typing import Any, Dict

REF_PREFIX = "#/components/schemas/"

_COMPOSITION_KEYS = ("type", "anyOf", "oneOf", "allOf")


def schema_ref(name: str) -> Dict[str, str]:
    """Build a ``$ref`` pointer to a component schema."""
    return {"$ref": f"{REF_PREFIX}{name}"}


def to_json_schema(schema: Any) -> Any:
    """
    Return a cleaned deep copy of ``schema``.

    Drops every ``$id`` (identifiers are carried by component names) and the
    validator-only ``errorMessage`` keyword on schema nodes. The input is
    never modified.
    """
    if isinstance(schema, list):
        return [to_json_schema(item) for item in schema]
    if not isinstance(schema, dict):
        return schema

    is_schema_node = any(key in schema for key in _COMPOSITION_KEYS)
    result: Dict[str, Any] = {}
    for key, value in schema.items():
        if key == "$id":
            continue
        if key == "errorMessage" and is_schema_node:
            continue
        result[key] = to_json_schema(value)
    return result
