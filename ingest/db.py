"""
BookmarkHub v1 - Storage Collaborator

Interface the core needs from persistent storage, plus a PostgreSQL
implementation on an asyncpg pool. Every database failure surfaces as a
StorageError; nothing here retries.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Protocol, Sequence

import asyncpg

from shared.errors import StorageError
from shared.models import BookmarkRecord, Collection, FolderNode, Tag
from shared.tags import DEFAULT_TAG_COLOR

logger = logging.getLogger(__name__)


class BookmarkStorage(Protocol):
    """Operations the core calls on the storage backend"""

    async def create_folder(
        self,
        user_id: str,
        collection_id: str,
        name: str,
        parent_id: Optional[str] = None,
    ) -> FolderNode: ...

    async def get_collection_folders(self, user_id: str, collection_id: str) -> list[FolderNode]: ...

    async def get_user_collections(self, user_id: str) -> list[Collection]: ...

    async def get_user_tags(self, user_id: str) -> list[Tag]: ...

    async def get_user_bookmarks(self, user_id: str) -> list[BookmarkRecord]: ...

    async def save_bookmarks(
        self,
        user_id: str,
        records: Sequence[BookmarkRecord],
        collection_id: Optional[str] = None,
    ) -> int: ...


def generate_id(prefix: str = "") -> str:
    """Opaque identifier such as fld_3f2a..."""
    return f"{prefix}{uuid.uuid4().hex}"


class BookmarkDB:
    """
    PostgreSQL storage backed by an asyncpg connection pool.

    Tables: bookmark, collection, collection_folder, tag.
    """

    def __init__(
        self,
        database_url: str,
        min_size: int = 2,
        max_size: int = 10,
        default_tag_color: str = DEFAULT_TAG_COLOR,
    ):
        self.database_url = database_url
        self.min_size = min_size
        self.max_size = max_size
        self.default_tag_color = default_tag_color
        self._pool: Optional[asyncpg.Pool] = None

    async def connect(self):
        """Create connection pool"""
        try:
            self._pool = await asyncpg.create_pool(
                self.database_url,
                min_size=self.min_size,
                max_size=self.max_size,
            )
        except (asyncpg.PostgresError, OSError) as e:
            raise StorageError("Could not connect to the database", detail=str(e)) from e
        logger.info("Database pool created")

    async def disconnect(self):
        """Close connection pool"""
        if self._pool:
            await self._pool.close()
            self._pool = None
            logger.info("Database pool closed")

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[asyncpg.Connection]:
        """Get a connection from the pool, translating driver errors"""
        if self._pool is None:
            raise StorageError("Database is not connected")
        try:
            async with self._pool.acquire() as conn:
                yield conn
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.error(f"Storage operation failed: {e}")
            raise StorageError("Storage rejected the operation", detail=str(e)) from e

    async def create_folder(
        self,
        user_id: str,
        collection_id: str,
        name: str,
        parent_id: Optional[str] = None,
    ) -> FolderNode:
        """Insert a folder and bump the collection's updated_at"""
        folder_id = generate_id("fld_")

        async with self.connection() as conn:
            async with conn.transaction():
                path = name
                if parent_id:
                    parent_path = await conn.fetchval(
                        """
                        SELECT path FROM collection_folder
                        WHERE id = $1 AND collection_id = $2 AND user_id = $3
                        """,
                        parent_id, collection_id, user_id,
                    )
                    if parent_path:
                        path = f"{parent_path}/{name}"

                await conn.execute(
                    """
                    INSERT INTO collection_folder (id, user_id, collection_id, name, parent_id, path)
                    VALUES ($1, $2, $3, $4, $5, $6)
                    """,
                    folder_id, user_id, collection_id, name, parent_id, path,
                )
                await conn.execute(
                    "UPDATE collection SET updated_at = now() WHERE id = $1 AND user_id = $2",
                    collection_id, user_id,
                )

        return FolderNode(
            id=folder_id,
            name=name,
            collection_id=collection_id,
            parent_id=parent_id,
            path=path,
        )

    async def get_collection_folders(self, user_id: str, collection_id: str) -> list[FolderNode]:
        async with self.connection() as conn:
            rows = await conn.fetch(
                """
                SELECT id, name, collection_id, parent_id, path
                FROM collection_folder
                WHERE user_id = $1 AND collection_id = $2
                ORDER BY created_at, id
                """,
                user_id, collection_id,
            )
        return [FolderNode(**dict(row)) for row in rows]

    async def get_user_collections(self, user_id: str) -> list[Collection]:
        async with self.connection() as conn:
            rows = await conn.fetch(
                """
                SELECT c.id, c.name, c.description, c.updated_at,
                       COUNT(b.id) AS bookmark_count
                FROM collection c
                LEFT JOIN bookmark b ON b.collection_id = c.id
                WHERE c.user_id = $1
                GROUP BY c.id
                ORDER BY c.updated_at DESC
                """,
                user_id,
            )
        return [Collection(**dict(row)) for row in rows]

    async def get_user_tags(self, user_id: str) -> list[Tag]:
        """Stored tags; counts come from the current bookmark rows"""
        async with self.connection() as conn:
            rows = await conn.fetch(
                """
                SELECT t.id, t.name, COALESCE(t.bg_color, $2) AS bg_color, t.created_at,
                       COUNT(b.id) AS count
                FROM tag t
                LEFT JOIN bookmark b ON b.user_id = t.user_id AND t.name = ANY(b.tags)
                WHERE t.user_id = $1
                GROUP BY t.id
                ORDER BY count DESC, t.created_at
                """,
                user_id, self.default_tag_color,
            )
        return [Tag(**dict(row)) for row in rows]

    async def get_user_bookmarks(self, user_id: str) -> list[BookmarkRecord]:
        async with self.connection() as conn:
            rows = await conn.fetch(
                """
                SELECT url, title, added_at, tags
                FROM bookmark
                WHERE user_id = $1
                ORDER BY added_at DESC
                """,
                user_id,
            )
        return [
            BookmarkRecord(
                url=row["url"],
                title=row["title"] or "",
                added_at=row["added_at"],
                tags=tuple(row["tags"] or ()),
            )
            for row in rows
        ]

    async def save_bookmarks(
        self,
        user_id: str,
        records: Sequence[BookmarkRecord],
        collection_id: Optional[str] = None,
    ) -> int:
        """
        Insert all records in one transaction.

        Either every record is stored or none is.
        """
        if not records:
            return 0

        rows = [
            (generate_id("bm_"), user_id, r.url, r.title, r.added_at, list(r.tags), collection_id)
            for r in records
        ]
        async with self.connection() as conn:
            async with conn.transaction():
                await conn.executemany(
                    """
                    INSERT INTO bookmark (id, user_id, url, title, added_at, tags, collection_id)
                    VALUES ($1, $2, $3, $4, $5, $6, $7)
                    """,
                    rows,
                )
                if collection_id:
                    await conn.execute(
                        "UPDATE collection SET updated_at = now() WHERE id = $1 AND user_id = $2",
                        collection_id, user_id,
                    )

        logger.info(f"Stored {len(rows)} bookmarks for user {user_id}")
        return len(rows)
