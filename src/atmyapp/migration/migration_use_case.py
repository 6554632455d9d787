"""Migration use-case service.

One run scans the configured include patterns, extracts every marked alias,
assembles the manifest, writes `.ama/definitions.json` and, unless this is a
dry run, uploads the manifest. Execution is sequential: file by file, alias
by alias.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

import requests

from atmyapp.configuration import (
    AnalysisOptions,
    Configuration,
    ConfigurationError,
    load_analysis_options,
    load_configuration,
)
from atmyapp.declaration_scanning import scan_declaration_files
from atmyapp.manifest_assembly import Manifest, assemble_manifest
from atmyapp.publishing import (
    DefinitionsUploader,
    HttpSession,
    UploadError,
    definitions_path,
    write_manifest,
)
from atmyapp.schema_generation import (
    AliasExtractionError,
    ExtractedContent,
    SchemaGenerator,
    extract_content,
)
from atmyapp.special_types import TransformerRegistry
from atmyapp.type_analysis import DeclarationParseError, TypeProject

from .migration_contracts import (
    AliasExtractionFailure,
    MigrationOutcome,
    MigrationRequest,
    UploadStatus,
)

_LOGGER = logging.getLogger(__name__)


class MigrationError(Exception):
    """Raised when a migration run cannot be completed."""


class NoContentsFoundError(MigrationError):
    """Raised when a run extracts no content at all."""


class ExtractionAbortedError(MigrationError):
    """Raised on the first alias failure when errors are not collected."""

    def __init__(self, message: str, failures: tuple[AliasExtractionFailure, ...]) -> None:
        super().__init__(message)
        self.failures = failures


@dataclass(frozen=True)
class _ExtractionResult:
    contents: tuple[ExtractedContent, ...]
    failures: tuple[AliasExtractionFailure, ...]


def execute_migration(
    request: MigrationRequest,
    *,
    session_factory: Callable[[], HttpSession] | None = None,
    registry: TransformerRegistry | None = None,
) -> MigrationOutcome:
    """Execute one full migration run and return its outcome.

    Raises:
      MigrationError: For configuration problems, aborted extraction or an empty result.
      DirectoryCreationError: If the output directory cannot be created.
      LocalWriteError: If the manifest cannot be written.
    """
    root = Path(request.project_root).resolve()
    _LOGGER.info("Starting migration process")
    _LOGGER.debug("Options: %s", request)

    configuration, options = _load_settings(root, request.analysis_config)
    files = scan_declaration_files(configuration.project.include, root)
    _LOGGER.info("Found %d files to process", len(files))

    extraction = _extract_contents(files, root, options, request.continue_on_error)
    _report_extraction(extraction)
    if not extraction.contents:
        raise NoContentsFoundError("No valid AMA contents found.")

    manifest = assemble_manifest(extraction.contents, configuration.project, registry)
    output_path = write_manifest(manifest, definitions_path(root))
    _LOGGER.info("Successfully generated %s", output_path)

    upload_status, upload_error = _publish(
        manifest,
        configuration,
        dry_run=request.dry_run,
        session_factory=session_factory or requests.Session,
    )
    return MigrationOutcome(
        output_path=output_path,
        manifest=manifest,
        extracted_count=len(extraction.contents),
        failures=extraction.failures,
        upload_status=upload_status,
        upload_error=upload_error,
    )


def _load_settings(root: Path, analysis_config: str) -> tuple[Configuration, AnalysisOptions]:
    config_path = Path(analysis_config)
    if not config_path.is_absolute():
        config_path = root / config_path
    try:
        return load_configuration(root), load_analysis_options(config_path)
    except ConfigurationError as exc:
        raise MigrationError(str(exc)) from exc


def _extract_contents(
    files: Sequence[Path],
    root: Path,
    options: AnalysisOptions,
    continue_on_error: bool,
) -> _ExtractionResult:
    project = TypeProject(options, root=root)
    for path in files:
        try:
            project.add_source_files([path])
        except DeclarationParseError as exc:
            _LOGGER.warning("Skipping unparsable file: %s", exc)

    generator = SchemaGenerator(project)
    contents: list[ExtractedContent] = []
    failures: list[AliasExtractionFailure] = []
    _LOGGER.info("Processing %d source files...", len(project.source_modules))
    for module in project.source_modules:
        _LOGGER.debug("Examining file: %s", module.path)
        aliases = project.marked_aliases(module)
        _LOGGER.debug("Found %d AMA type aliases in %s", len(aliases), module.path)
        for alias in aliases:
            try:
                content = extract_content(alias, generator)
            except AliasExtractionError as exc:
                failure = AliasExtractionFailure(
                    source_file=alias.declaring_file, alias_name=alias.name, message=str(exc)
                )
                failures.append(failure)
                _LOGGER.error("%s", failure.describe())
                if not continue_on_error:
                    raise ExtractionAbortedError(failure.describe(), tuple(failures)) from exc
                continue
            contents.append(content)
            _LOGGER.debug("Successfully processed %s", alias.name)

    return _ExtractionResult(contents=tuple(contents), failures=tuple(failures))


def _report_extraction(extraction: _ExtractionResult) -> None:
    _LOGGER.info("Successfully processed %d AMA contents", len(extraction.contents))
    if not extraction.failures:
        return
    _LOGGER.warning("Failed to process %d items", len(extraction.failures))
    for failure in extraction.failures:
        _LOGGER.warning("  %s", failure.describe())


def _publish(
    manifest: Manifest,
    configuration: Configuration,
    *,
    dry_run: bool,
    session_factory: Callable[[], HttpSession],
) -> tuple[UploadStatus, str | None]:
    if dry_run:
        _LOGGER.info("Dry run mode enabled. Skipping upload to server.")
        return UploadStatus.SKIPPED, None

    _LOGGER.info("Uploading definitions to AtMyApp platform")
    with contextlib.closing(session_factory()) as session:
        try:
            DefinitionsUploader(session).upload(
                manifest,
                base_url=configuration.session.url,
                token=configuration.session.token,
            )
        except UploadError as exc:
            _LOGGER.error("Failed to post definitions: %s", exc)
            return UploadStatus.FAILED, str(exc)
    _LOGGER.info("Successfully posted definitions to storage.")
    return UploadStatus.UPLOADED, None
