"""Manifest assembly service."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from atmyapp.configuration.runtime_settings import DEFAULT_DESCRIPTION, ProjectSettings
from atmyapp.json_values import JsonObject
from atmyapp.schema_generation import ExtractedContent
from atmyapp.special_types import TransformerRegistry, process_special_types

from .manifest_models import Manifest

_LOGGER = logging.getLogger(__name__)


def assemble_manifest(
    contents: Sequence[ExtractedContent],
    settings: ProjectSettings,
    registry: TransformerRegistry | None = None,
) -> Manifest:
    """Fold special types in every structure and key the results by path.

    A path declared twice keeps the later content; the overwrite is logged.
    """
    _LOGGER.debug("Processing contents and transforming special types")
    definitions: dict[str, JsonObject] = {}
    origins: dict[str, str] = {}
    for content in contents:
        _LOGGER.debug("Transforming special types for path: %s", content.path)
        if content.path in definitions:
            _LOGGER.warning(
                "Duplicate resource path %s: %s overrides %s",
                content.path,
                content.origin,
                origins[content.path],
            )
        definitions[content.path] = {
            "structure": process_special_types(content.structure, registry),
        }
        origins[content.path] = content.origin

    _LOGGER.debug("Generating final output definition")
    return Manifest(
        description=settings.description or DEFAULT_DESCRIPTION,
        definitions=definitions,
        args=dict(settings.args),
    )
