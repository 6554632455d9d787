"""Publishing exports."""

from .definitions_uploader import STRUCTURE_ENDPOINT, DefinitionsUploader, HttpSession
from .manifest_writer import (
    DEFINITIONS_FILENAME,
    definitions_path,
    serialize_manifest,
    write_manifest,
)
from .publish_errors import DirectoryCreationError, LocalWriteError, PublishError, UploadError

__all__ = [
    "DEFINITIONS_FILENAME",
    "DefinitionsUploader",
    "DirectoryCreationError",
    "HttpSession",
    "LocalWriteError",
    "PublishError",
    "STRUCTURE_ENDPOINT",
    "UploadError",
    "definitions_path",
    "serialize_manifest",
    "write_manifest",
]
