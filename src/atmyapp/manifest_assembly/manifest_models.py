"""Manifest entities."""

from __future__ import annotations

from dataclasses import dataclass, field

from atmyapp.json_values import JsonObject, JsonValue


@dataclass(frozen=True)
class Manifest:
    """Aggregated definitions of one extraction run, keyed by resource path."""

    description: str
    definitions: dict[str, JsonObject] = field(default_factory=dict)
    args: JsonObject = field(default_factory=dict)

    def to_dict(self) -> JsonObject:
        definitions: JsonValue = dict(self.definitions)
        return {
            "description": self.description,
            "definitions": definitions,
            "args": dict(self.args),
        }
