"""
BookmarkHub v1 - Import Orchestrator

Drives an import through read -> parse -> persist and announces the result
on the event bus. Also hosts the folder creation flow, which follows the
same validate -> persist -> notify shape.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from shared.errors import (
    BookmarkHubError,
    ErrorInfo,
    ImportIOError,
    StorageError,
    ValidationError,
)
from shared.events import BookmarksImported, CollectionUpdated, EventBus, EventKind, FolderCreated
from shared.folders import FolderHierarchy, FolderTreeNode, validate_folder_name
from shared.models import FolderNode

from .bookmark_parser import BookmarkParser, Dialect, read_document
from .db import BookmarkStorage

logger = logging.getLogger(__name__)


class ImportState(str, Enum):
    IDLE = "idle"
    READING = "reading"
    PARSING = "parsing"
    PERSISTING = "persisting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class ImportResult:
    """Outcome of one import attempt"""
    state: ImportState
    parsed: int = 0
    imported: int = 0
    error: Optional[ErrorInfo] = None

    @property
    def succeeded(self) -> bool:
        return self.state is ImportState.SUCCEEDED


def require_user(user_id: Optional[str]) -> str:
    if not user_id or not str(user_id).strip():
        raise ValidationError("An authenticated user is required")
    return str(user_id).strip()


class ImportOrchestrator:
    """
    Runs bookmark imports for one storage backend and event bus.

    Each attempt ends in SUCCEEDED or FAILED with exactly one error; nothing
    is retried and nothing already stored is rolled back.
    """

    def __init__(
        self,
        storage: BookmarkStorage,
        bus: EventBus,
        parser: Optional[BookmarkParser] = None,
        encoding: str = "utf-8",
        max_bytes: Optional[int] = None,
    ):
        self.storage = storage
        self.bus = bus
        self.parser = parser or BookmarkParser()
        self.encoding = encoding
        self.max_bytes = max_bytes
        self.state = ImportState.IDLE
        self.last_result: Optional[ImportResult] = None

    def _transition(self, state: ImportState) -> None:
        logger.debug(f"Import state {self.state.value} -> {state.value}")
        self.state = state

    def _fail(self, error: BookmarkHubError, parsed: int = 0) -> None:
        logger.warning(f"Import failed during {self.state.value}: {error.message}")
        self._transition(ImportState.FAILED)
        self.last_result = ImportResult(
            state=ImportState.FAILED,
            parsed=parsed,
            error=error.to_info(),
        )

    async def run(
        self,
        source: Union[str, Path],
        user_id: str,
        dialect: Union[str, Dialect],
        collection_id: Optional[str] = None,
    ) -> ImportResult:
        """
        Import a bookmarks export file.

        Args:
            source: Path to the export file
            user_id: Owner of the imported bookmarks
            dialect: Browser dialect of the export
            collection_id: Optional collection to file the bookmarks under

        Returns:
            ImportResult for the successful import

        Raises:
            ValidationError: If no user is given
            ImportIOError: If the file cannot be read
            FormatError: If the document cannot be parsed
            StorageError: If storage rejects the bookmarks
        """
        self._transition(ImportState.IDLE)
        try:
            user_id = require_user(user_id)
        except ValidationError as e:
            self._fail(e)
            raise

        self._transition(ImportState.READING)
        path = Path(source)
        try:
            self._check_size(path)
            document = read_document(path, self.encoding)
        except BookmarkHubError as e:
            self._fail(e)
            raise

        logger.info(f"Read {len(document)} characters from {path}")
        return await self._parse_and_persist(document, user_id, dialect, collection_id, str(path))

    async def run_document(
        self,
        document: str,
        user_id: str,
        dialect: Union[str, Dialect],
        collection_id: Optional[str] = None,
        source: Optional[str] = None,
    ) -> ImportResult:
        """Import an export whose text is already in memory"""
        self._transition(ImportState.IDLE)
        try:
            user_id = require_user(user_id)
        except ValidationError as e:
            self._fail(e)
            raise
        return await self._parse_and_persist(document, user_id, dialect, collection_id, source)

    def _check_size(self, path: Path) -> None:
        if self.max_bytes is None:
            return
        try:
            size = path.stat().st_size
        except OSError as e:
            raise ImportIOError(f"Cannot read bookmarks file: {path}", detail=str(e)) from e
        if size > self.max_bytes:
            raise ValidationError(
                f"Bookmarks file is too large ({size} bytes, limit {self.max_bytes})"
            )

    async def _parse_and_persist(
        self,
        document: str,
        user_id: str,
        dialect: Union[str, Dialect],
        collection_id: Optional[str],
        source: Optional[str],
    ) -> ImportResult:
        self._transition(ImportState.PARSING)
        try:
            records = self.parser.parse(document, dialect)
        except BookmarkHubError as e:
            self._fail(e)
            raise

        self._transition(ImportState.PERSISTING)
        try:
            imported = await self.storage.save_bookmarks(user_id, records, collection_id)
        except StorageError as e:
            self._fail(e, parsed=len(records))
            raise
        except Exception as e:
            error = StorageError("Storage rejected the import", detail=str(e))
            self._fail(error, parsed=len(records))
            raise error from e

        self._transition(ImportState.SUCCEEDED)
        result = ImportResult(state=ImportState.SUCCEEDED, parsed=len(records), imported=imported)
        self.last_result = result
        logger.info(f"Imported {imported} of {len(records)} bookmarks for user {user_id}")

        self.bus.publish(
            EventKind.BOOKMARKS_IMPORTED,
            BookmarksImported(user_id=user_id, count=imported, source=source),
        )
        if collection_id:
            self.bus.publish(
                EventKind.COLLECTION_UPDATED,
                CollectionUpdated(user_id=user_id, collection_id=collection_id),
            )
        return result


class FolderService:
    """Creates folders after checking them against the current hierarchy"""

    # Stands in for the id storage has not assigned yet
    PENDING_ID = "fld_pending"

    def __init__(self, storage: BookmarkStorage, bus: EventBus):
        self.storage = storage
        self.bus = bus

    async def load_hierarchy(self, user_id: str, collection_id: str) -> FolderHierarchy:
        user_id = require_user(user_id)
        try:
            folders = await self.storage.get_collection_folders(user_id, collection_id)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError("Storage could not load the folders", detail=str(e)) from e
        return FolderHierarchy(folders)

    async def load_tree(self, user_id: str, collection_id: str) -> list[FolderTreeNode]:
        hierarchy = await self.load_hierarchy(user_id, collection_id)
        return hierarchy.build_tree()

    async def create_folder(
        self,
        user_id: str,
        collection_id: str,
        name: str,
        parent_id: Optional[str] = None,
    ) -> FolderNode:
        """
        Create a folder in a collection.

        The placement is checked against the stored hierarchy before
        anything is written.

        Raises:
            ValidationError: If the user or name is invalid
            CycleError: If the folder would become its own ancestor
            StorageError: If storage rejects the folder
        """
        user_id = require_user(user_id)
        name = validate_folder_name(name)
        if not collection_id:
            raise ValidationError("A collection is required to create a folder")

        hierarchy = await self.load_hierarchy(user_id, collection_id)
        if parent_id is not None and parent_id not in hierarchy:
            logger.warning(f"Parent folder {parent_id} not in collection {collection_id}; "
                           "the new folder will show as a root")
        hierarchy.check_insert(FolderNode(
            id=self.PENDING_ID,
            name=name,
            collection_id=collection_id,
            parent_id=parent_id,
        ))

        try:
            folder = await self.storage.create_folder(user_id, collection_id, name, parent_id)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError("Storage rejected the folder", detail=str(e)) from e

        hierarchy.insert(folder)
        logger.info(f"Created folder {folder.id} ({hierarchy.path_of(folder.id)})")

        self.bus.publish(
            EventKind.FOLDER_CREATED,
            FolderCreated(user_id=user_id, collection_id=collection_id, folder=folder),
        )
        self.bus.publish(
            EventKind.COLLECTION_UPDATED,
            CollectionUpdated(user_id=user_id, collection_id=collection_id),
        )
        return folder
