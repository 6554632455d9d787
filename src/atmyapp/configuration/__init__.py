"""Configuration domain exports."""

from .loader import (
    AMA_DIRECTORY,
    DEFAULT_ANALYSIS_CONFIG,
    PROJECT_CONFIG_FILENAME,
    SESSION_FILENAME,
    ConfigurationError,
    load_analysis_options,
    load_configuration,
    load_session,
    session_path,
)
from .runtime_settings import (
    DEFAULT_DESCRIPTION,
    DEFAULT_INCLUDE_PATTERNS,
    AnalysisOptions,
    Configuration,
    ProjectSettings,
    SessionSettings,
)
from .session_store import GITIGNORE_ENTRY, generate_project_id, save_session

__all__ = [
    "AMA_DIRECTORY",
    "AnalysisOptions",
    "Configuration",
    "ConfigurationError",
    "DEFAULT_ANALYSIS_CONFIG",
    "DEFAULT_DESCRIPTION",
    "DEFAULT_INCLUDE_PATTERNS",
    "GITIGNORE_ENTRY",
    "PROJECT_CONFIG_FILENAME",
    "ProjectSettings",
    "SESSION_FILENAME",
    "SessionSettings",
    "generate_project_id",
    "load_analysis_options",
    "load_configuration",
    "load_session",
    "save_session",
    "session_path",
]
