"""Schema generation exports."""

from .content_extraction import extract_content
from .extraction_errors import (
    AliasExtractionError,
    InvalidSchemaStructureError,
    MissingPathError,
    SchemaGenerationError,
)
from .extraction_models import ExtractedContent
from .schema_generator import SchemaGenerator

__all__ = [
    "AliasExtractionError",
    "ExtractedContent",
    "InvalidSchemaStructureError",
    "MissingPathError",
    "SchemaGenerationError",
    "SchemaGenerator",
    "extract_content",
]
