"""Configuration loader service."""

from __future__ import annotations

import json
import logging
import tomllib
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import (
    DEFAULT_INCLUDE_PATTERNS,
    AnalysisOptions,
    Configuration,
    ProjectSettings,
    SessionSettings,
)

PROJECT_CONFIG_FILENAME = "ama.config.yaml"
DEFAULT_ANALYSIS_CONFIG = "pyproject.toml"
AMA_DIRECTORY = ".ama"
SESSION_FILENAME = "session.json"

_INTEGER_TYPES = ("integer", "number")
_PROJECT_KEYS = ("include", "description", "args")

_LOGGER = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when a configuration or session file is invalid."""


def load_configuration(project_root: Path | str = ".") -> Configuration:
    """Load the project configuration merged over the stored session."""
    root = Path(project_root).resolve()
    session_document = _read_session_document(session_path(root))
    project_document = _read_project_document(root / PROJECT_CONFIG_FILENAME)

    # Older sessions carry project keys too; the project file wins.
    merged: dict[str, Any] = {
        key: session_document[key] for key in _PROJECT_KEYS if key in session_document
    }
    merged.update(project_document)

    return Configuration(
        root=root,
        project=_parse_project_settings(merged),
        session=_parse_session_settings(session_document),
    )


def load_session(project_root: Path | str = ".") -> SessionSettings:
    """Load only the stored session credentials."""
    root = Path(project_root).resolve()
    return _parse_session_settings(_read_session_document(session_path(root)))


def session_path(project_root: Path) -> Path:
    return project_root / AMA_DIRECTORY / SESSION_FILENAME


def load_analysis_options(config_path: Path | str) -> AnalysisOptions:
    """Read `[tool.ama.analysis]` from a TOML file, falling back to defaults."""
    path = Path(config_path).resolve()
    if not path.exists():
        _LOGGER.warning("analysis config at %s not found, using default analysis options", path)
        return AnalysisOptions()

    _LOGGER.debug("Using analysis config from %s", path)
    try:
        parsed = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigurationError(f"Failed to parse analysis config {path}: {exc}") from exc

    section = parsed.get("tool", {}).get("ama", {}).get("analysis")
    if section is None:
        _LOGGER.debug("No [tool.ama.analysis] table in %s, using defaults", path)
        return AnalysisOptions()
    section = _require_mapping(section, "tool.ama.analysis")

    search_paths = tuple(
        _resolve_path(path.parent, raw)
        for raw in _normalize_string_sequence(section.get("search_paths"), "search_paths")
    )
    ignore_errors = section.get("ignore_errors", True)
    if not isinstance(ignore_errors, bool):
        raise ConfigurationError("tool.ama.analysis.ignore_errors must be a boolean.")
    integer_type = _require_non_empty_string(
        section.get("integer_type", "integer"), "tool.ama.analysis.integer_type"
    )
    if integer_type not in _INTEGER_TYPES:
        raise ConfigurationError(
            f"tool.ama.analysis.integer_type must be one of: {', '.join(_INTEGER_TYPES)}."
        )
    return AnalysisOptions(
        search_paths=search_paths,
        ignore_errors=ignore_errors,
        integer_type=integer_type,
    )


def _read_project_document(path: Path) -> Mapping[str, Any]:
    if not path.exists():
        return {}
    try:
        parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse project config {path}: {exc}") from exc
    if parsed is None:
        return {}
    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Project config root must be a mapping.")
    return parsed


def _read_session_document(path: Path) -> Mapping[str, Any]:
    if not path.exists():
        return {}
    try:
        parsed = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Failed to read session {path}: {exc}") from exc
    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Session root must be a JSON object.")
    return parsed


def _parse_project_settings(section: Mapping[str, Any]) -> ProjectSettings:
    include_value = section.get("include")
    include = (
        _normalize_string_sequence(include_value, "include")
        if include_value is not None
        else DEFAULT_INCLUDE_PATTERNS
    )
    if not include:
        raise ConfigurationError("include must contain at least one glob pattern.")
    description = _optional_string(section.get("description"), "description")
    args = section.get("args")
    if args is None:
        args = {}
    if not isinstance(args, Mapping):
        raise ConfigurationError("args must be a mapping.")
    return ProjectSettings(include=include, description=description, args=dict(args))


def _parse_session_settings(section: Mapping[str, Any]) -> SessionSettings:
    return SessionSettings(
        url=_optional_string(section.get("url"), "session.url"),
        token=_optional_string(section.get("token"), "session.token"),
        project_id=_optional_string(section.get("projectId"), "session.projectId"),
    )


def _normalize_string_sequence(value: Any, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        stripped = value.strip()
        return (stripped,) if stripped else ()
    if isinstance(value, Sequence):
        normalized = []
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError(f"{field_name} entries must be strings.")
            stripped = item.strip()
            if stripped:
                normalized.append(stripped)
        return tuple(normalized)
    raise ConfigurationError(f"{field_name} must be a string or list of strings.")


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a table.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None
