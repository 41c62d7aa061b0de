"""
BookmarkHub v1 - Ingest Module

This module provides functionality to parse browser bookmark exports,
store them and organize them into collection folders.
"""

from .bookmark_parser import BookmarkParser, Dialect, parse_bookmarks_file
from .db import BookmarkDB, BookmarkStorage
from .orchestrator import FolderService, ImportOrchestrator, ImportResult, ImportState

__all__ = [
    "BookmarkParser",
    "Dialect",
    "parse_bookmarks_file",
    "BookmarkDB",
    "BookmarkStorage",
    "FolderService",
    "ImportOrchestrator",
    "ImportResult",
    "ImportState",
]
