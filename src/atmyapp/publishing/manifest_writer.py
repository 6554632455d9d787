"""Local manifest persistence."""

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path

from atmyapp.configuration import AMA_DIRECTORY
from atmyapp.manifest_assembly import Manifest

from .publish_errors import DirectoryCreationError, LocalWriteError

DEFINITIONS_FILENAME = "definitions.json"

_LOGGER = logging.getLogger(__name__)


def definitions_path(project_root: Path | str) -> Path:
    return Path(project_root) / AMA_DIRECTORY / DEFINITIONS_FILENAME


def serialize_manifest(manifest: Manifest) -> str:
    return json.dumps(manifest.to_dict(), indent=2, ensure_ascii=False)


def write_manifest(manifest: Manifest, output_path: Path | str) -> Path:
    """Replace the output file with the pretty-printed manifest.

    The JSON is written to a sibling temporary file first and moved into
    place, so a failed write never leaves a truncated manifest behind.

    Raises:
      DirectoryCreationError: If the parent directory cannot be created.
      LocalWriteError: If the file cannot be written.
    """
    destination = Path(output_path)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryCreationError(
            f"Failed to create directory {destination.parent}: {exc}"
        ) from exc

    _LOGGER.debug("Saving definitions to %s", destination.resolve())
    temporary = destination.with_name(f".{destination.name}.tmp")
    try:
        temporary.write_text(serialize_manifest(manifest), encoding="utf-8")
        os.replace(temporary, destination)
    except OSError as exc:
        with contextlib.suppress(OSError):
            temporary.unlink(missing_ok=True)
        raise LocalWriteError(f"Failed to write {destination}: {exc}") from exc
    return destination.resolve()
