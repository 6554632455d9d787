"""Literal value extraction from object schemas."""

from __future__ import annotations

from atmyapp.json_values import JsonObject, JsonValue


def extract_constants(schema: JsonValue) -> JsonObject | None:
    """Keep only the `const` values of an object schema, preserving nesting.

    Properties without a fixed value are dropped. Nested object schemas are
    kept only when they contain at least one constant. Returns None, never an
    empty dict, when nothing constant remains.
    """
    if not isinstance(schema, dict):
        return None
    properties = schema.get("properties")
    if not isinstance(properties, dict):
        return None

    result: JsonObject = {}
    for key, definition in properties.items():
        if not isinstance(definition, dict):
            continue
        if "const" in definition:
            result[key] = definition["const"]
        elif definition.get("type") == "object" and "properties" in definition:
            nested = extract_constants(definition)
            if nested:
                result[key] = nested

    return result or None
