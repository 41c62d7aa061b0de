"""
BookmarkHub v1 - Test Configuration and Fixtures

Shared fixtures for unit and API tests.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

import pytest

from shared.events import EventBus
from shared.models import BookmarkRecord, Collection, FolderNode, Tag

FIXED_NOW = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)

SAMPLE_EXPORT = """<!DOCTYPE NETSCAPE-Bookmark-file-1>
<META HTTP-EQUIV="Content-Type" CONTENT="text/html; charset=UTF-8">
<TITLE>Bookmarks</TITLE>
<H1>Bookmarks</H1>
<DL><p>
    <DT><H3 ADD_DATE="1699000000">Research</H3>
    <DL><p>
        <DT><A HREF="https://a.example" ADD_DATE="1700000000" TAGS="work,read-later">A</A>
        <DT><A ADD_DATE="1700000100">No link here</A>
        <DT><A HREF="https://b.example/path?q=1" ADD_DATE="1700000200">B</A>
    </DL><p>
    <DT><A HREF="https://c.example" TAGS="work">C</A>
</DL><p>
"""


class FakeStorage:
    """In-memory stand-in for the storage collaborator"""

    def __init__(self, fail_with: Optional[Exception] = None):
        self.fail_with = fail_with
        self.bookmarks: list[tuple[str, BookmarkRecord, Optional[str]]] = []
        self.folders: list[tuple[str, FolderNode]] = []
        self.collections: dict[str, list[Collection]] = {}
        self.tags: dict[str, list[Tag]] = {}
        self._next_id = 0

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    async def create_folder(self, user_id, collection_id, name, parent_id=None) -> FolderNode:
        self._check()
        self._next_id += 1
        parent = next(
            (f for u, f in self.folders if u == user_id and f.id == parent_id), None
        )
        folder = FolderNode(
            id=f"fld_{self._next_id}",
            name=name,
            collection_id=collection_id,
            parent_id=parent_id,
            path=f"{parent.path}/{name}" if parent else name,
        )
        self.folders.append((user_id, folder))
        return folder

    async def get_collection_folders(self, user_id, collection_id) -> list[FolderNode]:
        self._check()
        return [f for u, f in self.folders if u == user_id and f.collection_id == collection_id]

    async def get_user_collections(self, user_id) -> list[Collection]:
        self._check()
        return list(self.collections.get(user_id, []))

    async def get_user_tags(self, user_id) -> list[Tag]:
        self._check()
        return list(self.tags.get(user_id, []))

    async def get_user_bookmarks(self, user_id) -> list[BookmarkRecord]:
        self._check()
        return [record for u, record, _ in self.bookmarks if u == user_id]

    async def save_bookmarks(
        self,
        user_id: str,
        records: Sequence[BookmarkRecord],
        collection_id: Optional[str] = None,
    ) -> int:
        self._check()
        self.bookmarks.extend((user_id, record, collection_id) for record in records)
        return len(records)


@pytest.fixture
def fixed_clock():
    """Clock that always returns FIXED_NOW"""
    return lambda: FIXED_NOW


@pytest.fixture
def sample_document() -> str:
    return SAMPLE_EXPORT


@pytest.fixture
def bookmarks_file(tmp_path: Path) -> Path:
    path = tmp_path / "bookmarks.html"
    path.write_text(SAMPLE_EXPORT, encoding="utf-8")
    return path


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def recorder():
    """Handler that records every payload it receives"""

    class Recorder:
        def __init__(self):
            self.calls = []

        def __call__(self, payload):
            self.calls.append(payload)

    return Recorder()
