"""
BookmarkHub v1 - Change Notification Bus

In-process publish/subscribe channel that lets data-mutating operations
(import, folder creation, tag edits) notify independent observers without a
direct dependency between them.

The bus is constructed once by the composition root (CLI command or web app
lifespan) and handed to whichever component publishes or subscribes.
Delivery is synchronous: publish() returns only after every handler ran.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Union

from .models import FolderNode

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    """Closed set of events carried on the bus"""
    BOOKMARKS_IMPORTED = "bookmarks_imported"
    BOOKMARK_DELETED = "bookmark_deleted"
    COLLECTION_UPDATED = "collection_updated"
    FOLDER_CREATED = "folder_created"


@dataclass(frozen=True)
class BookmarksImported:
    """Payload for bookmarks_imported: how many records an import stored"""
    user_id: str
    count: int
    source: Optional[str] = None


@dataclass(frozen=True)
class BookmarkDeleted:
    """Payload for bookmark_deleted"""
    user_id: str
    bookmark_id: str


@dataclass(frozen=True)
class CollectionUpdated:
    """Payload for collection_updated"""
    user_id: str
    collection_id: str


@dataclass(frozen=True)
class FolderCreated:
    """Payload for folder_created: the folder as returned by storage"""
    user_id: str
    collection_id: str
    folder: FolderNode


EventPayload = Union[BookmarksImported, BookmarkDeleted, CollectionUpdated, FolderCreated]
Handler = Callable[[Optional[EventPayload]], Any]

PAYLOAD_TYPES: dict[EventKind, type] = {
    EventKind.BOOKMARKS_IMPORTED: BookmarksImported,
    EventKind.BOOKMARK_DELETED: BookmarkDeleted,
    EventKind.COLLECTION_UPDATED: CollectionUpdated,
    EventKind.FOLDER_CREATED: FolderCreated,
}


@dataclass(frozen=True)
class Event:
    """A published event; exists only for the duration of a publish call"""
    kind: EventKind
    payload: Optional[EventPayload] = None


class EventBus:
    """
    Synchronous publish/subscribe bus.

    Handlers for a kind run in subscription order on the caller's thread and
    all receive the same payload object. A failing handler is logged and the
    remaining handlers still run.
    """

    def __init__(self):
        self._handlers: dict[EventKind, list[Handler]] = {}

    def subscribe(self, kind: EventKind, handler: Handler) -> None:
        """
        Register a handler for an event kind.

        Args:
            kind: The event kind to listen for
            handler: Callable receiving the payload (or None)
        """
        kind = EventKind(kind)
        self._handlers.setdefault(kind, []).append(handler)

    def unsubscribe(self, kind: EventKind, handler: Handler) -> None:
        """Remove a handler; unknown handlers are ignored."""
        kind = EventKind(kind)
        handlers = self._handlers.get(kind)
        if not handlers:
            return
        try:
            handlers.remove(handler)
        except ValueError:
            return
        if not handlers:
            del self._handlers[kind]

    def publish(self, kind: EventKind, payload: Optional[EventPayload] = None) -> int:
        """
        Deliver an event to every handler currently subscribed to its kind.

        Args:
            kind: The event kind
            payload: Optional payload; must match the kind's payload type

        Returns:
            Number of handlers that completed without raising

        Raises:
            TypeError: If the payload type does not belong to the kind
        """
        event = Event(kind=EventKind(kind), payload=payload)
        expected = PAYLOAD_TYPES[event.kind]
        if payload is not None and not isinstance(payload, expected):
            raise TypeError(
                f"{event.kind.value} expects {expected.__name__}, "
                f"got {type(payload).__name__}"
            )

        # Snapshot so handlers may (un)subscribe while we deliver
        handlers = list(self._handlers.get(event.kind, ()))
        delivered = 0
        for handler in handlers:
            try:
                handler(event.payload)
                delivered += 1
            except Exception:
                logger.exception(f"Handler {handler!r} failed for {event.kind.value}")

        logger.debug(f"Published {event.kind.value} to {delivered}/{len(handlers)} handlers")
        return delivered

    def subscriber_count(self, kind: EventKind) -> int:
        """Number of handlers subscribed to a kind"""
        return len(self._handlers.get(EventKind(kind), ()))

    def clear(self) -> None:
        """Drop every subscription; the web app does this on shutdown for a bus it created"""
        self._handlers.clear()
