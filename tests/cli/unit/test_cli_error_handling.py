"""CLI error-handling tests."""

from __future__ import annotations

from pathlib import Path

from atmyapp.cli import main


def test_unknown_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["migrate", "--bogus"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "No such option: --bogus" in captured.err
    assert "Traceback" not in captured.err


def test_unknown_command_returns_clean_click_error(capsys) -> None:
    exit_code = main(["publish"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "No such command" in captured.err


def test_migration_failure_returns_exit_code_one(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)

    exit_code = main(["migrate", "--dry-run"])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Fatal error: No valid AMA contents found." in captured.err
    assert "Traceback" not in captured.err


def test_invalid_project_config_returns_exit_code_one(
    tmp_path: Path, monkeypatch, capsys
) -> None:
    (tmp_path / "ama.config.yaml").write_text("args: nope\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    exit_code = main(["migrate"])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "args must be a mapping" in captured.err
