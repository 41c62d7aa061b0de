"""
BookmarkHub v1 - Library Routes

Views derived from the user's bookmarks: tags, timeline, recent activity
and background task progress.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from config import get_config
from ingest.db import BookmarkStorage
from shared.tags import derive_tags, lighten_color
from shared.tasks import ProgressView, TaskStatus, render_progress
from shared.timeline import TIME_GROUP_LABELS, filter_bookmarks, group_by_period

from ..deps import get_storage, get_user_id
from ..models import ActivityOut, BookmarkOut, TagOut, TimelineGroupOut

router = APIRouter(tags=["Library"])


@router.get("/tags", response_model=list[TagOut])
async def list_tags(
    user_id: str = Depends(get_user_id),
    storage: BookmarkStorage = Depends(get_storage),
):
    """
    Tags with counts recomputed from the current bookmarks.

    Stored tag colours are kept; tags only seen on bookmarks get a palette
    colour.
    """
    bookmarks = await storage.get_user_bookmarks(user_id)
    known = await storage.get_user_tags(user_id)
    offset = get_config().tags.gradient_offset

    return [
        TagOut(
            id=tag.id,
            name=tag.name,
            bg_color=tag.bg_color,
            gradient_to=lighten_color(tag.bg_color, offset),
            count=tag.count,
            created_at=tag.created_at,
        )
        for tag in derive_tags(bookmarks, known_tags=known)
    ]


@router.get("/timeline", response_model=list[TimelineGroupOut])
async def get_timeline(
    q: Optional[str] = Query(None, description="Filter by title or URL"),
    user_id: str = Depends(get_user_id),
    storage: BookmarkStorage = Depends(get_storage),
):
    """Bookmarks grouped by the period they were added in."""
    bookmarks = await storage.get_user_bookmarks(user_id)
    if q:
        bookmarks = filter_bookmarks(bookmarks, q)

    return [
        TimelineGroupOut(
            group=group.value,
            label=TIME_GROUP_LABELS[group],
            bookmarks=[BookmarkOut(**b.to_dict()) for b in items],
        )
        for group, items in group_by_period(bookmarks).items()
    ]


@router.get("/activity", response_model=list[ActivityOut])
async def recent_activity(request: Request):
    """Most recent change events seen on the bus."""
    return [
        ActivityOut(kind=entry.kind.value, at=entry.at, summary=entry.summary)
        for entry in request.app.state.activity.entries()
    ]


@router.post("/tasks/render", response_model=ProgressView)
async def render_task(status: TaskStatus):
    """Render a background task status for a progress panel."""
    return render_progress(status)
