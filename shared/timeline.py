"""
BookmarkHub v1 - Timeline Grouping

Buckets bookmarks by when they were added, newest first.
"""

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, Optional

from .models import BookmarkRecord, utcnow


class TimeGroup(str, Enum):
    TODAY = "today"
    YESTERDAY = "yesterday"
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"
    EARLIER = "earlier"


TIME_GROUP_LABELS = {
    TimeGroup.TODAY: "Today",
    TimeGroup.YESTERDAY: "Yesterday",
    TimeGroup.THIS_WEEK: "This week",
    TimeGroup.THIS_MONTH: "This month",
    TimeGroup.EARLIER: "Earlier",
}


def start_of_week(day: date) -> date:
    """Monday on or before the given day"""
    return day - timedelta(days=day.weekday())


def period_of(added_at: datetime, now: datetime) -> TimeGroup:
    """Time group for a single timestamp relative to now"""
    if added_at.tzinfo is not None and now.tzinfo is not None:
        added_at = added_at.astimezone(now.tzinfo)
    day = added_at.date()
    today = now.date()

    if day == today:
        return TimeGroup.TODAY
    if day == today - timedelta(days=1):
        return TimeGroup.YESTERDAY
    if start_of_week(today) <= day <= today:
        return TimeGroup.THIS_WEEK
    if today.replace(day=1) <= day <= today:
        return TimeGroup.THIS_MONTH
    return TimeGroup.EARLIER


def group_by_period(
    bookmarks: Iterable[BookmarkRecord],
    now: Optional[datetime] = None,
) -> dict[TimeGroup, list[BookmarkRecord]]:
    """
    Group bookmarks into time buckets.

    Groups appear in TimeGroup order and empty groups are left out. Inside a
    group bookmarks are sorted newest first.
    """
    now = now or utcnow()
    ordered = sorted(bookmarks, key=lambda b: b.added_at, reverse=True)

    groups: dict[TimeGroup, list[BookmarkRecord]] = {group: [] for group in TimeGroup}
    for bookmark in ordered:
        groups[period_of(bookmark.added_at, now)].append(bookmark)

    return {group: items for group, items in groups.items() if items}


def filter_bookmarks(bookmarks: Iterable[BookmarkRecord], query: str) -> list[BookmarkRecord]:
    """Case-insensitive substring match against title and url"""
    needle = query.strip().lower()
    if not needle:
        return list(bookmarks)
    return [
        b for b in bookmarks
        if needle in b.title.lower() or needle in b.url.lower()
    ]
