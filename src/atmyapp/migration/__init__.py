"""Migration domain exports."""

from .migration_contracts import (
    AliasExtractionFailure,
    MigrationOutcome,
    MigrationRequest,
    UploadStatus,
)
from .migration_use_case import (
    ExtractionAbortedError,
    MigrationError,
    NoContentsFoundError,
    execute_migration,
)

__all__ = [
    "MigrationRequest",
    "MigrationOutcome",
    "UploadStatus",
    "AliasExtractionFailure",
    "MigrationError",
    "NoContentsFoundError",
    "ExtractionAbortedError",
    "execute_migration",
]
