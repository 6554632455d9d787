"""Declaration file scanner tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from atmyapp.declaration_scanning import scan_declaration_files


def _touch(path: Path, contents: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents, encoding="utf-8")
    return path


def test_returns_sorted_absolute_matches(tmp_path: Path) -> None:
    second = _touch(tmp_path / "content" / "pages.py")
    first = _touch(tmp_path / "content" / "images.py")
    _touch(tmp_path / "content" / "notes.txt")

    files = scan_declaration_files(["content/**/*.py"], tmp_path)

    assert files == [first.resolve(), second.resolve()]
    assert all(path.is_absolute() for path in files)


def test_overlapping_patterns_are_deduplicated(tmp_path: Path) -> None:
    definitions = _touch(tmp_path / "definitions.py")

    files = scan_declaration_files(["*.py", "**/*.py", "definitions.py"], tmp_path)

    assert files == [definitions.resolve()]


def test_skips_dependency_build_and_test_directories(tmp_path: Path) -> None:
    kept = _touch(tmp_path / "app" / "content.py")
    for ignored in ("node_modules", "tests", "build", ".venv", "__pycache__"):
        _touch(tmp_path / ignored / "content.py")

    files = scan_declaration_files(["**/*.py"], tmp_path)

    assert files == [kept.resolve()]


def test_no_match_returns_empty_list(tmp_path: Path) -> None:
    _touch(tmp_path / "readme.md")

    assert scan_declaration_files(["**/*.py"], tmp_path) == []


def test_accepts_absolute_patterns(tmp_path: Path) -> None:
    definitions = _touch(tmp_path / "defs" / "content.py")
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()

    files = scan_declaration_files([str(tmp_path / "defs" / "*.py")], elsewhere)

    assert files == [definitions.resolve()]


def test_project_inside_ignored_directory_name_still_matches(tmp_path: Path) -> None:
    project = tmp_path / "build" / "site"
    definitions = _touch(project / "content" / "pages.py")

    relative = scan_declaration_files(["content/*.py"], project)
    absolute = scan_declaration_files([str(project / "content" / "*.py")], tmp_path)

    assert relative == [definitions.resolve()]
    assert absolute == [definitions.resolve()]


def test_double_star_matches_top_level_and_nested_files(tmp_path: Path) -> None:
    top = _touch(tmp_path / "content" / "a.py")
    nested = _touch(tmp_path / "content" / "blog" / "posts" / "b.py")
    _touch(tmp_path / "other" / "c.py")
    _touch(tmp_path / "content" / "node_modules" / "d.py")

    files = scan_declaration_files(["content/**/*.py"], tmp_path)

    assert files == [top.resolve(), nested.resolve()]


def test_ignored_directories_are_not_descended(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _touch(tmp_path / "node_modules" / "pkg" / "deep" / "content.py")
    kept = _touch(tmp_path / "app" / "content.py")
    visited: list[Path] = []
    original_walk = Path.walk

    def _recording_walk(self: Path, *args, **kwargs):
        for entry in original_walk(self, *args, **kwargs):
            visited.append(entry[0])
            yield entry

    monkeypatch.setattr(Path, "walk", _recording_walk)

    files = scan_declaration_files(["**/*.py"], tmp_path)

    assert files == [kept.resolve()]
    assert not any("node_modules" in directory.parts for directory in visited)


@pytest.mark.parametrize(
    ("pattern", "expected"),
    [
        ("defs/page?.py", ["page1.py", "page2.py"]),
        ("defs/page[1].py", ["page1.py"]),
        ("defs/page[!1].py", ["page2.py"]),
        ("defs/page1.py", ["page1.py"]),
    ],
)
def test_single_character_and_class_patterns(
    tmp_path: Path, pattern: str, expected: list[str]
) -> None:
    for name in ("page1.py", "page2.py", "page10.py"):
        _touch(tmp_path / "defs" / name)

    files = scan_declaration_files([pattern], tmp_path)

    assert [path.name for path in files] == expected
