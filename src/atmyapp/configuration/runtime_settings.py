"""Configuration domain entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_INCLUDE_PATTERNS = ("**/*.py",)
DEFAULT_DESCRIPTION = "AMA Definitions"


@dataclass(frozen=True)
class SessionSettings:
    """Credentials persisted by `ama use`."""

    url: str | None = None
    token: str | None = None
    project_id: str | None = None


@dataclass(frozen=True)
class ProjectSettings:
    """Definition discovery and manifest metadata."""

    include: tuple[str, ...] = DEFAULT_INCLUDE_PATTERNS
    description: str | None = None
    args: Mapping[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class AnalysisOptions:
    """Static type analysis options read from `[tool.ama.analysis]`."""

    search_paths: tuple[Path, ...] = ()
    ignore_errors: bool = True
    integer_type: str = "integer"


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    root: Path
    project: ProjectSettings
    session: SessionSettings
