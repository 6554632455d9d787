"""Migration run entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from atmyapp.configuration import DEFAULT_ANALYSIS_CONFIG
from atmyapp.manifest_assembly import Manifest


@dataclass(frozen=True)
class MigrationRequest:
    """Input contract for one `ama migrate` run."""

    project_root: str = "."
    analysis_config: str = DEFAULT_ANALYSIS_CONFIG
    dry_run: bool = False
    continue_on_error: bool = False


class UploadStatus(str, Enum):
    """What happened to the manifest after it was written locally."""

    UPLOADED = "uploaded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class AliasExtractionFailure:
    """One marked alias that could not be extracted."""

    source_file: Path
    alias_name: str
    message: str

    def describe(self) -> str:
        return f"{self.source_file} - {self.alias_name} - {self.message}"


@dataclass(frozen=True)
class MigrationOutcome:
    """Output contract for one completed run."""

    output_path: Path
    manifest: Manifest
    extracted_count: int
    failures: tuple[AliasExtractionFailure, ...]
    upload_status: UploadStatus
    upload_error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.upload_status != UploadStatus.FAILED
