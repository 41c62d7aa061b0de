"""
BookmarkHub v1 - Browser Bookmarks Parser

Parses bookmark HTML exports (the Netscape anchor convention shared by
Chromium-family browsers and Firefox) into BookmarkRecord objects.

Example export:
    <DT><H3>Research</H3>
    <DL><p>
        <DT><A HREF="https://a.example" ADD_DATE="1700000000" TAGS="work,read-later">A</A>
    </DL><p>
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, Iterator, Optional, Union
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

from shared.errors import FormatError, ImportIOError
from shared.models import BookmarkRecord, utcnow

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class Dialect(str, Enum):
    """Browser export conventions understood by the parser"""
    CHROMIUM = "chromium"
    FIREFOX = "firefox"


DIALECT_ALIASES = {
    "chromium": Dialect.CHROMIUM,
    "chrome": Dialect.CHROMIUM,
    "edge": Dialect.CHROMIUM,
    "firefox": Dialect.FIREFOX,
}


def resolve_dialect(dialect: Union[str, Dialect]) -> Dialect:
    """
    Map a dialect name or alias to a Dialect.

    Raises:
        FormatError: If the dialect is not recognized
    """
    if isinstance(dialect, Dialect):
        return dialect
    if isinstance(dialect, str):
        resolved = DIALECT_ALIASES.get(dialect.strip().lower())
        if resolved is not None:
            return resolved
    raise FormatError(f"Unsupported bookmark dialect: {dialect!r}", detail=str(dialect))


class AnchorExtractor:
    """
    Extracts one BookmarkRecord per <a> element, in document order.

    Recognized attributes:
    - href: destination, required; anchors without a usable URL are skipped
    - add_date: Unix seconds; missing or invalid means "now"
    - tags: comma-separated tag names
    """

    def extract(self, soup: BeautifulSoup, clock: Clock) -> Iterator[BookmarkRecord]:
        for a_tag in soup.find_all("a"):
            url = self.extract_url(a_tag)
            if url is None:
                logger.debug(f"Skipping anchor without a resolvable URL: {a_tag!s:.80}")
                continue

            yield BookmarkRecord(
                url=url,
                title=a_tag.get_text().strip(),
                added_at=self._extract_added_at(a_tag, clock),
                tags=self._extract_tags(a_tag),
            )

    def extract_url(self, a_tag: Tag) -> Optional[str]:
        url = (a_tag.get("href") or "").strip()
        if not url or not urlparse(url).scheme:
            return None
        return url

    def _extract_added_at(self, a_tag: Tag, clock: Clock) -> datetime:
        add_date = (a_tag.get("add_date") or "").strip()
        if not add_date:
            return clock()
        try:
            # Exports store seconds since epoch
            return datetime.fromtimestamp(int(float(add_date)), tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            logger.debug(f"Invalid add_date {add_date!r}, using current time")
            return clock()

    def _extract_tags(self, a_tag: Tag) -> tuple[str, ...]:
        raw = a_tag.get("tags") or ""
        return tuple(tag.strip() for tag in raw.split(",") if tag.strip())


class DialectRegistry:
    """
    Maps each dialect to the extractor that understands it.

    Both supported dialects currently share AnchorExtractor; a browser with
    a divergent export format registers its own extractor here.
    """

    def __init__(self):
        self._extractors: dict[Dialect, AnchorExtractor] = {}

    def register(self, dialect: Dialect, extractor: AnchorExtractor) -> None:
        self._extractors[dialect] = extractor

    def get_extractor(self, dialect: Union[str, Dialect]) -> AnchorExtractor:
        resolved = resolve_dialect(dialect)
        extractor = self._extractors.get(resolved)
        if extractor is None:
            raise FormatError(f"No extractor registered for dialect {resolved.value}")
        return extractor

    def list_dialects(self) -> list[str]:
        return [dialect.value for dialect in self._extractors]


def get_default_registry() -> DialectRegistry:
    """Registry with the built-in dialects"""
    registry = DialectRegistry()
    anchors = AnchorExtractor()
    registry.register(Dialect.CHROMIUM, anchors)
    registry.register(Dialect.FIREFOX, anchors)
    return registry


class BookmarkParser:
    """
    Parser for browser bookmark HTML exports.

    parse() is a pure transform: the same document yields the same records,
    provided the clock used for missing add_date values is fixed.
    """

    def __init__(self, registry: Optional[DialectRegistry] = None, clock: Clock = utcnow):
        self.registry = registry or get_default_registry()
        self.clock = clock

    def parse(self, document: str, dialect: Union[str, Dialect]) -> list[BookmarkRecord]:
        """
        Parse a bookmark document.

        Args:
            document: Raw HTML text of the export
            dialect: Browser dialect (chromium, firefox or an alias)

        Returns:
            BookmarkRecords in document order

        Raises:
            FormatError: If the dialect is unknown or the document is not markup
        """
        extractor = self.registry.get_extractor(dialect)
        soup = self._load(document)
        records = list(extractor.extract(soup, self.clock))
        logger.info(f"Parsed {len(records)} bookmarks ({resolve_dialect(dialect).value})")
        return records

    def parse_file(
        self,
        file_path: Union[str, Path],
        dialect: Union[str, Dialect],
        encoding: str = "utf-8",
    ) -> list[BookmarkRecord]:
        """Read and parse a bookmarks file"""
        return self.parse(read_document(file_path, encoding), dialect)

    def get_stats(self, document: str) -> dict:
        """
        Count what a document contains without building records.

        Returns:
            Dictionary with total_anchors, total_bookmarks, skipped_anchors
            and folders (number of folder headings)
        """
        soup = self._load(document)
        extractor = AnchorExtractor()
        anchors = soup.find_all("a")
        usable = sum(1 for a in anchors if extractor.extract_url(a) is not None)
        return {
            "total_anchors": len(anchors),
            "total_bookmarks": usable,
            "skipped_anchors": len(anchors) - usable,
            "folders": len(soup.find_all("h3")),
        }

    def _load(self, document: str) -> BeautifulSoup:
        if isinstance(document, bytes):
            try:
                document = document.decode("utf-8")
            except UnicodeDecodeError as e:
                raise FormatError("Bookmark document is not valid UTF-8", detail=str(e)) from e
        if not isinstance(document, str):
            raise FormatError(
                f"Bookmark document must be text, got {type(document).__name__}"
            )

        try:
            soup = BeautifulSoup(document, "html.parser")
        except Exception as e:
            raise FormatError("Bookmark document could not be parsed", detail=str(e)) from e

        if document.strip() and soup.find() is None:
            raise FormatError("Bookmark document contains no markup")
        return soup


def read_document(file_path: Union[str, Path], encoding: str = "utf-8") -> str:
    """
    Read an export file as text.

    Raises:
        ImportIOError: If the file is missing or unreadable
    """
    path = Path(file_path)
    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise ImportIOError(f"Cannot read bookmarks file: {path}", detail=str(e)) from e


def parse_bookmarks_file(
    file_path: Union[str, Path],
    dialect: Union[str, Dialect] = Dialect.FIREFOX,
) -> list[BookmarkRecord]:
    """
    Convenience function to parse a bookmarks export file.

    Args:
        file_path: Path to the bookmarks HTML file
        dialect: Browser dialect of the export

    Returns:
        List of BookmarkRecord objects
    """
    return BookmarkParser().parse_file(file_path, dialect)
