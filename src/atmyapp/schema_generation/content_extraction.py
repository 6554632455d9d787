"""Marked alias to extracted content service."""

from __future__ import annotations

import logging
import re

from atmyapp.json_values import JsonValue
from atmyapp.type_analysis import MarkedAlias

from .extraction_errors import (
    InvalidSchemaStructureError,
    MissingPathError,
    SchemaGenerationError,
)
from .extraction_models import ExtractedContent
from .schema_generator import SchemaGenerator

_QUOTED_LITERAL = re.compile(r"[\"'](.*?)[\"']")

_LOGGER = logging.getLogger(__name__)


def extract_content(alias: MarkedAlias, generator: SchemaGenerator) -> ExtractedContent:
    """Generate the alias's schema and split it into resource path and structure.

    Raises:
      SchemaGenerationError: If no schema could be generated.
      MissingPathError: If the alias declares no quoted resource path.
      InvalidSchemaStructureError: If the schema is not an object reference shape.
    """
    _LOGGER.debug("Processing AMA type: %s in %s", alias.name, alias.declaring_file)
    _LOGGER.debug("Generating schema for %s", alias.name)
    schema = generator.generate(alias)
    if schema is None:
        raise SchemaGenerationError(f"Failed to generate schema for {alias.name}")

    match = _QUOTED_LITERAL.search(generator.project.render_type_text(alias))
    if match is None or not match.group(1):
        raise MissingPathError(f"Missing file path in {alias.name}")

    properties = schema.get("properties") if isinstance(schema, dict) else None
    if not isinstance(properties, dict):
        raise InvalidSchemaStructureError(f"Invalid schema structure in {alias.name}")

    path = _const_string(properties.get("path"))
    if path is None:
        raise MissingPathError(f"Missing constant path property in {alias.name}")

    if "structure" in properties:
        structure = properties["structure"]
    elif "config" in properties:
        structure = properties["config"]
    else:
        raise InvalidSchemaStructureError(
            f"Invalid schema structure in {alias.name}: no structure or config property"
        )

    _LOGGER.debug("Successfully extracted content from %s", alias.name)
    return ExtractedContent(
        path=path,
        structure=structure,
        source_file=alias.declaring_file,
        alias_name=alias.name,
    )


def _const_string(node: JsonValue) -> str | None:
    if not isinstance(node, dict):
        return None
    value = node.get("const")
    if isinstance(value, str) and value:
        return value
    return None
