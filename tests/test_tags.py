"""
BookmarkHub v1 - Tag Aggregation Tests
"""

from datetime import datetime, timezone

import pytest

from shared.models import BookmarkRecord, Tag
from shared.tags import (
    DEFAULT_TAG_COLOR,
    count_tags,
    derive_tags,
    gradient,
    lighten_color,
    palette_color,
)

from .conftest import FIXED_NOW


def bookmark(*tags: str) -> BookmarkRecord:
    return BookmarkRecord(url="https://x.example", tags=tags, added_at=FIXED_NOW)


class TestDeriveTags:
    """Tests for tag counting and ordering."""

    def test_tied_counts_keep_first_occurrence_order(self):
        """ai and ml both appear twice; ai was seen first."""
        tags = derive_tags(
            [bookmark("ai"), bookmark("ai", "ml"), bookmark("ml")],
            now=FIXED_NOW,
        )

        assert [(t.name, t.count) for t in tags] == [("ai", 2), ("ml", 2)]

    def test_sorted_by_count_descending(self):
        tags = derive_tags([bookmark("rare", "common"), bookmark("common")])

        assert [t.name for t in tags] == ["common", "rare"]

    def test_no_bookmarks(self):
        assert derive_tags([]) == []

    def test_untagged_bookmarks(self):
        assert derive_tags([bookmark(), bookmark()]) == []

    def test_duplicate_tag_on_one_bookmark_counts_once(self):
        assert count_tags([bookmark("ai", "ai")]) == {"ai": 1}

    def test_counts_match_bookmarks(self):
        """Each count equals the number of bookmarks carrying the tag."""
        bookmarks = [bookmark("a", "b"), bookmark("b", "c"), bookmark("c"), bookmark("b")]

        for tag in derive_tags(bookmarks):
            assert tag.count == sum(1 for b in bookmarks if tag.name in b.tags)

    def test_new_tags_get_palette_colors(self):
        tags = derive_tags([bookmark("first", "second")], now=FIXED_NOW)

        assert tags[0].id == "first"
        assert tags[0].bg_color == palette_color(0)
        assert tags[1].bg_color == palette_color(1)
        assert all(t.created_at == FIXED_NOW for t in tags)

    def test_known_tags_keep_stored_fields(self):
        created = datetime(2023, 1, 1, tzinfo=timezone.utc)
        stored = Tag(id="tag_9", name="ai", bg_color="#000000", count=99, created_at=created)

        tags = derive_tags([bookmark("ai")], known_tags=[stored])

        assert tags == [Tag(id="tag_9", name="ai", bg_color="#000000", count=1, created_at=created)]

    def test_stored_tag_without_bookmarks_is_listed_with_zero_count(self):
        """A tag the user created but has not applied yet is still returned."""
        stored = Tag(id="tag_1", name="unused", bg_color=DEFAULT_TAG_COLOR)

        tags = derive_tags([bookmark("ai")], known_tags=[stored])

        assert [(t.name, t.count) for t in tags] == [("ai", 1), ("unused", 0)]
        assert tags[1].id == "tag_1"
        assert tags[1].bg_color == DEFAULT_TAG_COLOR

    def test_only_stored_tags(self):
        stored = [
            Tag(id="tag_2", name="b", bg_color="#000000"),
            Tag(id="tag_1", name="a", bg_color="#ffffff"),
        ]

        assert [t.name for t in derive_tags([], known_tags=stored)] == ["b", "a"]

    def test_palette_cycles(self):
        assert palette_color(0) == palette_color(10)


class TestLightenColor:
    """Tests for gradient colour computation."""

    def test_default_offset(self):
        assert lighten_color("#1E88E5") == "#329cf9"

    def test_channels_clamp_at_white(self):
        assert lighten_color("#FFFFFF") == "#ffffff"
        assert lighten_color("#F0F0F0", 40) == "#ffffff"

    def test_channels_clamp_at_black(self):
        assert lighten_color("#101010", -32) == "#000000"

    def test_three_digit_hex_is_expanded(self):
        assert lighten_color("#000") == "#141414"

    @pytest.mark.parametrize("color", ["red", "rgb(1, 2, 3)", "#12345", "#zzzzzz", ""])
    def test_non_hex_returned_unchanged(self, color):
        assert lighten_color(color) == color

    def test_gradient(self):
        tag = Tag(id="t", name="t", bg_color="#000000")

        assert gradient(tag) == ("#000000", "#141414")
