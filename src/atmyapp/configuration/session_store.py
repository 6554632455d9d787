"""Session persistence for `ama use`."""

from __future__ import annotations

import json
import secrets
import string
from pathlib import Path

from .loader import AMA_DIRECTORY, SESSION_FILENAME, ConfigurationError, session_path
from .runtime_settings import SessionSettings

GITIGNORE_ENTRY = f"\n# AMA configuration\n{AMA_DIRECTORY}/{SESSION_FILENAME}\n"

_PROJECT_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_project_id() -> str:
    """Return a short random project identifier such as ``proj_k3x9a1b``."""
    return "proj_" + "".join(secrets.choice(_PROJECT_ID_ALPHABET) for _ in range(7))


def save_session(project_root: Path | str, session: SessionSettings) -> Path:
    """Write `.ama/session.json` and keep it out of version control.

    Args:
      project_root: Directory holding the `.ama` folder and `.gitignore`.
      session: Credentials to persist.

    Returns:
      The resolved session file path.

    Raises:
      ConfigurationError: If the session directory or file cannot be written.
    """
    root = Path(project_root).resolve()
    destination = session_path(root)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        _ensure_gitignore_entry(root / ".gitignore")
        document = {"token": session.token, "projectId": session.project_id, "url": session.url}
        destination.write_text(json.dumps(document, indent=2), encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Failed to save session: {exc}") from exc
    return destination


def _ensure_gitignore_entry(gitignore_path: Path) -> None:
    if not gitignore_path.exists():
        gitignore_path.write_text(GITIGNORE_ENTRY, encoding="utf-8")
        return
    current = gitignore_path.read_text(encoding="utf-8")
    if f"{AMA_DIRECTORY}/{SESSION_FILENAME}" not in current:
        with gitignore_path.open("a", encoding="utf-8") as handle:
            handle.write(GITIGNORE_ENTRY)
