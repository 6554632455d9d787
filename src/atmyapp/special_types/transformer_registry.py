"""Ordered registry of special-type folding rules."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from atmyapp.json_values import JsonObject, JsonValue

from .constant_extraction import extract_constants

MARKER_FIELD = "__amatype"
CONFIG_FIELD = "__config"
IMAGE_DISCRIMINATOR = "AmaImageDef"
FILE_DISCRIMINATOR = "AmaFileDef"


class TransformerRule(Protocol):
    """Predicate plus fold applied to object schema nodes."""

    def matches(self, node: JsonObject) -> bool: ...

    def apply(self, node: JsonObject) -> JsonValue: ...


@dataclass(frozen=True)
class MarkerRule:
    """Fold a node carrying a fixed `__amatype` marker and a `__config` subtree."""

    discriminator: str

    def matches(self, node: JsonObject) -> bool:
        properties = node.get("properties")
        if not isinstance(properties, dict):
            return False
        marker = properties.get(MARKER_FIELD)
        if not isinstance(marker, dict) or marker.get("const") != self.discriminator:
            return False
        return CONFIG_FIELD in properties

    def apply(self, node: JsonObject) -> JsonValue:
        properties = node["properties"]
        assert isinstance(properties, dict)
        return {
            MARKER_FIELD: self.discriminator,
            "config": extract_constants(properties[CONFIG_FIELD]),
        }


class TransformerRegistry:
    """Rules tested in registration order; the first match folds the node."""

    def __init__(self, rules: Iterable[TransformerRule] = ()) -> None:
        self._rules: list[TransformerRule] = list(rules)

    @property
    def rules(self) -> tuple[TransformerRule, ...]:
        return tuple(self._rules)

    def register(self, rule: TransformerRule) -> None:
        self._rules.append(rule)

    def process(self, node: JsonValue) -> JsonValue:
        """Fold matching subtrees; rebuild everything else recursively."""
        if isinstance(node, list):
            return [self.process(item) for item in node]
        if not isinstance(node, dict):
            return node
        for rule in self._rules:
            if rule.matches(node):
                return rule.apply(node)
        return {key: self.process(value) for key, value in node.items()}


def default_rules() -> list[TransformerRule]:
    return [MarkerRule(IMAGE_DISCRIMINATOR), MarkerRule(FILE_DISCRIMINATOR)]


def default_registry() -> TransformerRegistry:
    """Return a fresh registry holding the image and file rules."""
    return TransformerRegistry(default_rules())


_SHARED_REGISTRY = default_registry()


def shared_registry() -> TransformerRegistry:
    """Process-wide registry used when no registry is passed explicitly."""
    return _SHARED_REGISTRY


def register_type_transformer(rule: TransformerRule) -> None:
    """Append a rule to the process-wide registry."""
    _SHARED_REGISTRY.register(rule)


def process_special_types(
    node: JsonValue, registry: TransformerRegistry | None = None
) -> JsonValue:
    return (registry if registry is not None else _SHARED_REGISTRY).process(node)
