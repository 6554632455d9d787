"""Schema extraction entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from atmyapp.json_values import JsonValue


@dataclass(frozen=True)
class ExtractedContent:
    """Resource path and structural schema taken from one marked alias."""

    path: str
    structure: JsonValue
    source_file: Path
    alias_name: str

    @property
    def origin(self) -> str:
        return f"{self.source_file} - {self.alias_name}"
