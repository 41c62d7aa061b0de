"""
BookmarkHub v1 - Tag Aggregation

Derives tag usage counts from a bookmark set and computes the lighter tone
used for tag gradients. Counts are always recomputed from the bookmarks
passed in; nothing here keeps a running total.
"""

from datetime import datetime
from typing import Iterable, Optional, Protocol, Sequence

from .models import Tag, utcnow

# Preset palette: background and text colour per name
TAG_COLORS: dict[str, dict[str, str]] = {
    "blue": {"bg": "#1E88E5", "text": "#ffffff"},
    "green": {"bg": "#43A047", "text": "#ffffff"},
    "orange": {"bg": "#FB8C00", "text": "#ffffff"},
    "pink": {"bg": "#EC407A", "text": "#ffffff"},
    "purple": {"bg": "#7E57C2", "text": "#ffffff"},
    "brown": {"bg": "#795548", "text": "#ffffff"},
    "cyan": {"bg": "#00ACC1", "text": "#ffffff"},
    "yellow": {"bg": "#FDD835", "text": "#212121"},
    "red": {"bg": "#E53935", "text": "#ffffff"},
    "indigo": {"bg": "#3949AB", "text": "#ffffff"},
}

DEFAULT_TAG_COLOR = TAG_COLORS["blue"]["bg"]
DEFAULT_GRADIENT_OFFSET = 20


class Tagged(Protocol):
    tags: Sequence[str]


def palette_color(index: int) -> str:
    """Background colour for the index-th new tag, cycling the palette"""
    colors = list(TAG_COLORS.values())
    return colors[index % len(colors)]["bg"]


def count_tags(bookmarks: Iterable[Tagged]) -> dict[str, int]:
    """
    Count bookmarks per tag name.

    A bookmark listing the same tag twice is counted once. The returned dict
    preserves the order in which tags first appear.
    """
    counts: dict[str, int] = {}
    for bookmark in bookmarks:
        for name in dict.fromkeys(bookmark.tags):
            counts[name] = counts.get(name, 0) + 1
    return counts


def derive_tags(
    bookmarks: Iterable[Tagged],
    known_tags: Optional[Iterable[Tag]] = None,
    now: Optional[datetime] = None,
) -> list[Tag]:
    """
    Build the tag list for a set of bookmarks.

    Args:
        bookmarks: Anything with a ``tags`` sequence
        known_tags: Stored tags whose id, colour and creation time are kept;
            those on no bookmark are listed with a count of 0
        now: Creation time for tags not found in known_tags

    Returns:
        Tags sorted by count descending, ties in order of first occurrence
        (unused stored tags last, in stored order)
    """
    known = {tag.name: tag for tag in known_tags or ()}
    created = now or utcnow()
    counts = count_tags(bookmarks)

    tags = []
    for index, (name, count) in enumerate(counts.items()):
        stored = known.get(name)
        if stored is not None:
            tags.append(Tag(
                id=stored.id,
                name=name,
                bg_color=stored.bg_color,
                count=count,
                created_at=stored.created_at,
            ))
        else:
            tags.append(Tag(
                id=name,
                name=name,
                bg_color=palette_color(index),
                count=count,
                created_at=created,
            ))

    # Stored tags not applied to any bookmark yet
    for name, stored in known.items():
        if name not in counts:
            tags.append(Tag(
                id=stored.id,
                name=name,
                bg_color=stored.bg_color,
                count=0,
                created_at=stored.created_at,
            ))

    # sorted() is stable, so equal counts keep first-occurrence order
    return sorted(tags, key=lambda tag: -tag.count)


def lighten_color(color: str, amount: int = DEFAULT_GRADIENT_OFFSET) -> str:
    """
    Shift every RGB channel of a hex colour by a flat amount.

    Each channel is clamped to 0-255. Non-hex values are returned as given.

    >>> lighten_color("#1E88E5")
    '#329cf9'
    """
    if not color.startswith("#"):
        return color

    hex_digits = color[1:]
    if len(hex_digits) == 3:
        hex_digits = "".join(c * 2 for c in hex_digits)
    if len(hex_digits) != 6:
        return color

    try:
        channels = [int(hex_digits[i:i + 2], 16) for i in (0, 2, 4)]
    except ValueError:
        return color

    adjusted = [min(255, max(0, channel + amount)) for channel in channels]
    return "#" + "".join(f"{channel:02x}" for channel in adjusted)


def gradient(tag: Tag, amount: int = DEFAULT_GRADIENT_OFFSET) -> tuple[str, str]:
    """Start and end colours of a tag's gradient"""
    return tag.bg_color, lighten_color(tag.bg_color, amount)
