"""
BookmarkHub v1 - Error Taxonomy

Every error raised by the core carries a stable ``kind`` and an optional
detail string. UI boundaries turn these into localized messages.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ErrorInfo:
    """Serializable description of a failure"""
    kind: str
    message: str
    detail: Optional[str] = None


class BookmarkHubError(Exception):
    """Base exception for all core failures."""

    kind = "error"

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_info(self) -> ErrorInfo:
        return ErrorInfo(kind=self.kind, message=self.message, detail=self.detail)


class FormatError(BookmarkHubError):
    """Raised when a bookmark document is malformed or its dialect unsupported."""

    kind = "format_error"


class ImportIOError(BookmarkHubError, OSError):
    """Raised when the source document cannot be read."""

    kind = "io_error"


class StorageError(BookmarkHubError):
    """Raised when the storage backend rejects an operation."""

    kind = "storage_error"


class CycleError(BookmarkHubError):
    """Raised when a folder insert would make a folder its own ancestor."""

    kind = "cycle_error"


class ValidationError(BookmarkHubError):
    """Raised for invalid input such as an empty folder name or missing user."""

    kind = "validation_error"
