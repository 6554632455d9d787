"""Special-type transformer registry tests."""

from __future__ import annotations

from dataclasses import dataclass

from atmyapp.json_values import JsonObject, JsonValue
from atmyapp.special_types import (
    MarkerRule,
    TransformerRegistry,
    default_registry,
    process_special_types,
    register_type_transformer,
    shared_registry,
)


def _marker_node(discriminator: str, config: JsonObject) -> JsonObject:
    return {
        "type": "object",
        "properties": {
            "__amatype": {"type": "string", "const": discriminator},
            "__config": config,
        },
        "required": ["__amatype", "__config"],
        "additionalProperties": False,
    }


def test_image_marker_collapses_to_discriminator_and_config() -> None:
    node = _marker_node(
        "AmaImageDef",
        {"type": "object", "properties": {"optimizeFormat": {"type": "string", "const": "webp"}}},
    )

    assert process_special_types(node, default_registry()) == {
        "__amatype": "AmaImageDef",
        "config": {"optimizeFormat": "webp"},
    }


def test_file_marker_without_constants_has_null_config() -> None:
    node = _marker_node(
        "AmaFileDef", {"type": "object", "properties": {"contentType": {"type": "string"}}}
    )

    assert process_special_types(node, default_registry()) == {
        "__amatype": "AmaFileDef",
        "config": None,
    }


def test_unmatched_nodes_are_rebuilt_and_nested_markers_folded() -> None:
    image = _marker_node(
        "AmaImageDef",
        {"type": "object", "properties": {"optimizeLoad": {"type": "string", "const": "none"}}},
    )
    tree = {
        "type": "object",
        "properties": {
            "title": {"type": "string"},
            "gallery": {"type": "array", "items": [image, "plain", 3]},
        },
        "required": ["title"],
    }

    result = process_special_types(tree, default_registry())

    assert result == {
        "type": "object",
        "properties": {
            "title": {"type": "string"},
            "gallery": {
                "type": "array",
                "items": [
                    {"__amatype": "AmaImageDef", "config": {"optimizeLoad": "none"}},
                    "plain",
                    3,
                ],
            },
        },
        "required": ["title"],
    }
    assert result is not tree


def test_unknown_discriminator_is_left_untouched() -> None:
    node = _marker_node("AmaVideoDef", {"type": "object", "properties": {}})

    assert process_special_types(node, default_registry()) == node


def test_matched_subtree_is_not_processed_further() -> None:
    inner = _marker_node(
        "AmaFileDef",
        {"type": "object", "properties": {"contentType": {"type": "string", "const": "a/b"}}},
    )
    outer = _marker_node("AmaImageDef", {"type": "object", "properties": {"inner": inner}})

    assert process_special_types(outer, default_registry()) == {
        "__amatype": "AmaImageDef",
        "config": {"inner": {"__amatype": "AmaFileDef", "__config": {"contentType": "a/b"}}},
    }


@dataclass(frozen=True)
class _UppercaseRule:
    def matches(self, node: JsonObject) -> bool:
        return node.get("format") == "upper"

    def apply(self, node: JsonObject) -> JsonValue:
        return "UPPER"


def test_first_registered_rule_wins() -> None:
    registry = TransformerRegistry([_UppercaseRule()])
    registry.register(MarkerRule("AmaImageDef"))
    node = {
        "format": "upper",
        "properties": {"__amatype": {"const": "AmaImageDef"}, "__config": {}},
    }

    assert registry.process(node) == "UPPER"
    assert len(registry.rules) == 2


def test_registering_on_shared_registry_extends_default_processing(monkeypatch) -> None:
    registry = default_registry()
    monkeypatch.setattr(
        "atmyapp.special_types.transformer_registry._SHARED_REGISTRY", registry
    )

    register_type_transformer(_UppercaseRule())

    assert shared_registry() is registry
    assert process_special_types({"a": {"format": "upper"}}) == {"a": "UPPER"}
