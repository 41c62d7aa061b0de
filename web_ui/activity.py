"""
BookmarkHub v1 - Activity Feed

Keeps the most recent bus events for the dashboard. The feed only listens
to the bus; it never talks to the importer or the folder service directly.
"""

from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from shared.events import (
    BookmarkDeleted,
    BookmarksImported,
    CollectionUpdated,
    EventBus,
    EventKind,
    EventPayload,
    FolderCreated,
)
from shared.models import utcnow


@dataclass(frozen=True)
class ActivityEntry:
    kind: EventKind
    at: datetime
    summary: str


def summarize(kind: EventKind, payload: Optional[EventPayload]) -> str:
    """One-line description of an event"""
    if isinstance(payload, BookmarksImported):
        return f"Imported {payload.count} bookmarks"
    if isinstance(payload, BookmarkDeleted):
        return f"Deleted bookmark {payload.bookmark_id}"
    if isinstance(payload, CollectionUpdated):
        return f"Collection {payload.collection_id} changed"
    if isinstance(payload, FolderCreated):
        return f"Folder {payload.folder.path or payload.folder.name} created"
    return kind.value.replace("_", " ")


class ActivityFeed:
    """Bounded, newest-first list of recent events"""

    def __init__(self, maxlen: int = 50):
        self._entries: deque[ActivityEntry] = deque(maxlen=maxlen)
        self._handlers: dict[EventKind, Callable] = {
            kind: self._handler_for(kind) for kind in EventKind
        }

    def _handler_for(self, kind: EventKind) -> Callable[[Optional[EventPayload]], None]:
        def handle(payload: Optional[EventPayload]) -> None:
            self._entries.append(
                ActivityEntry(kind=kind, at=utcnow(), summary=summarize(kind, payload))
            )
        return handle

    def attach(self, bus: EventBus) -> None:
        for kind, handler in self._handlers.items():
            bus.subscribe(kind, handler)

    def detach(self, bus: EventBus) -> None:
        for kind, handler in self._handlers.items():
            bus.unsubscribe(kind, handler)

    def entries(self) -> list[ActivityEntry]:
        return list(reversed(self._entries))
