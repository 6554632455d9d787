"""Constant extraction tests."""

from __future__ import annotations

from atmyapp.special_types import extract_constants


def test_keeps_only_constant_leaves_with_nesting() -> None:
    schema = {
        "type": "object",
        "properties": {
            "optimizeFormat": {"type": "string", "const": "webp"},
            "optimizeLoad": {"type": "string", "enum": ["progressive", "none"]},
            "ratioHint": {
                "type": "object",
                "properties": {
                    "x": {"type": "number", "const": 16},
                    "y": {"type": "number", "const": 9},
                },
            },
            "maxSize": {
                "type": "object",
                "properties": {"width": {"type": "integer"}},
            },
        },
    }

    assert extract_constants(schema) == {
        "optimizeFormat": "webp",
        "ratioHint": {"x": 16, "y": 9},
    }


def test_returns_none_when_nothing_is_constant() -> None:
    schema = {
        "type": "object",
        "properties": {
            "contentType": {"type": "string"},
            "nested": {"type": "object", "properties": {"flag": {"type": "boolean"}}},
        },
    }

    assert extract_constants(schema) is None


def test_non_object_input_returns_none() -> None:
    assert extract_constants({"type": "string", "const": "x"}) is None
    assert extract_constants(["webp"]) is None
    assert extract_constants(None) is None


def test_falsy_constants_are_kept() -> None:
    schema = {
        "properties": {
            "enabled": {"type": "boolean", "const": False},
            "count": {"type": "integer", "const": 0},
            "label": {"type": "string", "const": ""},
        }
    }

    assert extract_constants(schema) == {"enabled": False, "count": 0, "label": ""}
