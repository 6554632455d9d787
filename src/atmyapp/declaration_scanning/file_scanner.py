"""Source file discovery service."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

IGNORED_DIRECTORIES = frozenset(
    {
        "node_modules",
        "test",
        "tests",
        "dist",
        "build",
        "__pycache__",
        ".venv",
        "venv",
        ".git",
        ".tox",
        "site-packages",
    }
)

_MAGIC_CHARACTERS = frozenset("*?[")

_LOGGER = logging.getLogger(__name__)


def scan_declaration_files(patterns: Iterable[str], cwd: Path | str) -> list[Path]:
    """Return sorted, de-duplicated absolute paths matching any glob pattern.

    Each pattern is walked from its literal prefix (``content`` for
    ``content/**/*.py``). Dependency, build and test directories below that
    prefix are pruned from the walk; the prefix itself may live anywhere. No
    match is not an error; callers decide whether an empty result is fatal.
    """
    base = Path(cwd).resolve()
    pattern_list = list(patterns)
    _LOGGER.info("Scanning files...")
    _LOGGER.debug("Using patterns: %s", ", ".join(pattern_list))

    found: set[Path] = set()
    for pattern in pattern_list:
        found.update(_match_pattern(base, pattern))

    files = sorted(found)
    _LOGGER.debug("Found %d files matching patterns", len(files))
    return files


def _match_pattern(base: Path, pattern: str) -> set[Path]:
    prefix, magic = _split_pattern(pattern)
    root = base / prefix if prefix is not None else base
    if not magic:
        return {root.resolve()} if root.is_file() else set()

    matcher = _compile_segments(magic)
    matches: set[Path] = set()
    for directory, dirnames, filenames in root.walk():
        dirnames[:] = [name for name in dirnames if name not in IGNORED_DIRECTORIES]
        for filename in filenames:
            candidate = directory / filename
            if matcher.match(candidate.relative_to(root).as_posix()):
                matches.add(candidate.resolve())
    return matches


def _split_pattern(pattern: str) -> tuple[Path | None, list[str]]:
    parts = list(Path(pattern).parts)
    for index, part in enumerate(parts):
        if _MAGIC_CHARACTERS.intersection(part):
            prefix = Path(*parts[:index]) if index else None
            return prefix, parts[index:]
    return Path(pattern), []


def _compile_segments(segments: list[str]) -> re.Pattern[str]:
    pieces: list[str] = []
    last = len(segments) - 1
    for index, segment in enumerate(segments):
        if segment == "**":
            # Zero or more whole directories, or anything at all when trailing.
            pieces.append(".*" if index == last else "(?:[^/]+/)*")
            continue
        pieces.append(_translate_segment(segment))
        if index != last:
            pieces.append("/")
    return re.compile("".join(pieces) + r"\Z")


def _translate_segment(segment: str) -> str:
    pieces: list[str] = []
    index = 0
    while index < len(segment):
        char = segment[index]
        index += 1
        if char == "*":
            pieces.append("[^/]*")
        elif char == "?":
            pieces.append("[^/]")
        elif char == "[":
            closing = segment.find("]", index + 1)
            if closing == -1:
                pieces.append(re.escape(char))
                continue
            members = segment[index:closing]
            if members.startswith("!"):
                members = "^" + members[1:]
            pieces.append("[" + members.replace("\\", "\\\\") + "]")
            index = closing + 1
        else:
            pieces.append(re.escape(char))
    return "".join(pieces)
