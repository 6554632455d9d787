"""Session store tests."""

from __future__ import annotations

import json
import re
from pathlib import Path

from atmyapp.configuration import (
    GITIGNORE_ENTRY,
    SessionSettings,
    generate_project_id,
    load_session,
    save_session,
)


def test_generated_project_ids_have_expected_shape() -> None:
    project_id = generate_project_id()

    assert re.fullmatch(r"proj_[a-z0-9]{7}", project_id)


def test_save_session_writes_json_and_creates_gitignore(tmp_path: Path) -> None:
    session = SessionSettings(url="https://cms.example.com", token="tok", project_id="proj_1")

    path = save_session(tmp_path, session)

    assert path == (tmp_path / ".ama" / "session.json").resolve()
    assert json.loads(path.read_text(encoding="utf-8")) == {
        "token": "tok",
        "projectId": "proj_1",
        "url": "https://cms.example.com",
    }
    assert (tmp_path / ".gitignore").read_text(encoding="utf-8") == GITIGNORE_ENTRY
    assert load_session(tmp_path) == session


def test_existing_gitignore_is_appended_once(tmp_path: Path) -> None:
    gitignore = tmp_path / ".gitignore"
    gitignore.write_text("node_modules/\n", encoding="utf-8")
    session = SessionSettings(url="https://cms.example.com", token="tok", project_id="proj_1")

    save_session(tmp_path, session)
    save_session(tmp_path, session)

    text = gitignore.read_text(encoding="utf-8")
    assert text.startswith("node_modules/\n")
    assert text.count(".ama/session.json") == 1
    assert "# AMA configuration" in text
