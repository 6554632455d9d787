"""Publishing failures."""

from __future__ import annotations


class PublishError(Exception):
    """Base class for manifest persistence and upload failures."""


class DirectoryCreationError(PublishError):
    """Raised when the local output directory cannot be created."""


class LocalWriteError(PublishError):
    """Raised when the manifest file cannot be written."""


class UploadError(PublishError):
    """Raised when posting the manifest fails; the local file is left intact."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
