"""CLI orchestration integration tests."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from click.testing import CliRunner
from atmyapp.cli import cli, main

_DEFINITIONS = """
from typing import Literal, TypedDict

from atmyapp import AmaContentRef


class LandingContent(TypedDict):
    title: str
    description: str


type _AMA_Landing = AmaContentRef[Literal["landing/content.json"], LandingContent]
"""


@dataclass
class _FakeResponse:
    status_code: int
    text: str = ""


@dataclass
class _FakeSession:
    status_code: int
    posts: list[dict] = field(default_factory=list)

    def post(self, url, *, json=None, headers=None):
        self.posts.append({"url": url, "json": json, "headers": headers})
        return _FakeResponse(self.status_code, "upstream failure")

    def close(self) -> None:
        return None


def _install_session(monkeypatch, status_code: int) -> _FakeSession:
    session = _FakeSession(status_code)
    monkeypatch.setattr(
        "atmyapp.migration.migration_use_case.requests.Session", lambda: session
    )
    return session


def test_use_command_persists_session(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()

    result = runner.invoke(cli, ["use", "-u", "https://cms.example.com", "-t", "secret"])

    assert result.exit_code == 0
    assert "Successfully authenticated and joined project" in result.output
    session = json.loads((tmp_path / ".ama" / "session.json").read_text(encoding="utf-8"))
    assert session["url"] == "https://cms.example.com"
    assert session["token"] == "secret"
    assert session["projectId"].startswith("proj_")
    assert ".ama/session.json" in (tmp_path / ".gitignore").read_text(encoding="utf-8")


def test_use_command_prompts_for_missing_values(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()

    result = runner.invoke(cli, ["use"], input="https://cms.example.com\nsecret\n")

    assert result.exit_code == 0
    assert "Enter the project URL" in result.output
    assert "secret" not in result.output
    session = json.loads((tmp_path / ".ama" / "session.json").read_text(encoding="utf-8"))
    assert session["token"] == "secret"


def test_migrate_dry_run_writes_definitions(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "landing.py").write_text(_DEFINITIONS, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    session = _install_session(monkeypatch, 200)
    runner = CliRunner()

    result = runner.invoke(cli, ["migrate", "--dry-run", "--verbose"])

    assert result.exit_code == 0
    assert "Dry run mode enabled" in result.output
    assert "[VERBOSE]" in result.output
    assert "Migration completed successfully" in result.output
    assert session.posts == []
    definitions = json.loads((tmp_path / ".ama" / "definitions.json").read_text(encoding="utf-8"))
    assert "landing/content.json" in definitions["definitions"]


def test_migrate_uploads_with_stored_session(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "landing.py").write_text(_DEFINITIONS, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    session = _install_session(monkeypatch, 201)

    assert main(["use", "--url", "https://cms.example.com", "--token", "secret"]) == 0
    assert main(["migrate"]) == 0

    (post,) = session.posts
    assert post["url"] == "https://cms.example.com/storage/structure"
    assert post["headers"]["Authorization"] == "Bearer secret"


def test_upload_failure_keeps_definitions_and_exits_non_zero(
    tmp_path: Path, monkeypatch, capsys
) -> None:
    (tmp_path / "landing.py").write_text(_DEFINITIONS, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    _install_session(monkeypatch, 500)
    assert main(["use", "--url", "https://cms.example.com", "--token", "secret"]) == 0

    exit_code = main(["migrate"])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Upload failed, but definitions were generated successfully" in captured.err
    assert "status: 500" in captured.err
    assert (tmp_path / ".ama" / "definitions.json").exists()
