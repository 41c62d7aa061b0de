"""
BookmarkHub v1 - Domain Models

Plain dataclasses shared by the parser, the organization views and storage.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current time as an aware UTC datetime"""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class BookmarkRecord:
    """A single normalized bookmark extracted from a browser export"""
    url: str
    title: str = ""
    added_at: datetime = field(default_factory=utcnow)
    tags: tuple[str, ...] = ()

    def __post_init__(self):
        if not self.url or not self.url.strip():
            raise ValueError("BookmarkRecord.url must be non-empty")
        # Accept any sequence for tags but store it immutably
        if not isinstance(self.tags, tuple):
            object.__setattr__(self, "tags", tuple(self.tags))

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return {
            "url": self.url,
            "title": self.title,
            "added_at": self.added_at.isoformat(),
            "tags": list(self.tags),
        }


@dataclass(frozen=True)
class FolderNode:
    """A folder inside a collection; parent_id=None marks a root"""
    id: str
    name: str
    collection_id: str
    parent_id: Optional[str] = None
    path: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "collection_id": self.collection_id,
            "parent_id": self.parent_id,
            "path": self.path,
        }


@dataclass(frozen=True)
class Collection:
    """A named collection of folders and bookmarks"""
    id: str
    name: str
    description: Optional[str] = None
    bookmark_count: int = 0
    updated_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "bookmark_count": self.bookmark_count,
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass(frozen=True)
class Tag:
    """A tag with its display color and derived usage count"""
    id: str
    name: str
    bg_color: str
    count: int = 0
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "bg_color": self.bg_color,
            "count": self.count,
            "created_at": self.created_at.isoformat(),
        }
