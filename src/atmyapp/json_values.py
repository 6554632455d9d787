"""JSON value tree shared by schema generation, folding and manifest assembly."""

from __future__ import annotations

from typing import TypeAlias

JsonScalar: TypeAlias = str | int | float | bool | None
JsonValue: TypeAlias = dict[str, "JsonValue"] | list["JsonValue"] | JsonScalar
JsonObject: TypeAlias = dict[str, JsonValue]
