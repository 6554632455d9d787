"""Per-alias extraction failures."""

from __future__ import annotations


class AliasExtractionError(Exception):
    """Base class for failures scoped to a single marked alias."""


class MissingPathError(AliasExtractionError):
    """Raised when a marked alias does not declare a quoted resource path."""


class SchemaGenerationError(AliasExtractionError):
    """Raised when no schema can be generated for a marked alias."""


class InvalidSchemaStructureError(AliasExtractionError):
    """Raised when a generated schema lacks the expected reference shape."""
