"""
BookmarkHub v1 - Shared Core

Domain models and the organization views used by the CLI and the web API.
"""

from .errors import (
    BookmarkHubError,
    CycleError,
    FormatError,
    ImportIOError,
    StorageError,
    ValidationError,
)
from .events import EventBus, EventKind
from .folders import FolderHierarchy, FolderSelection
from .models import BookmarkRecord, Collection, FolderNode, Tag
from .tags import derive_tags, lighten_color

__all__ = [
    "BookmarkHubError",
    "CycleError",
    "FormatError",
    "ImportIOError",
    "StorageError",
    "ValidationError",
    "EventBus",
    "EventKind",
    "FolderHierarchy",
    "FolderSelection",
    "BookmarkRecord",
    "Collection",
    "FolderNode",
    "Tag",
    "derive_tags",
    "lighten_color",
]
