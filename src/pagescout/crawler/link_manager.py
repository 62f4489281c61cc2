"""
Link Manager - Order-stable deduplication of classified links.

This module sits between link classification and the crawler queue so that
each page is only handed on once, however many anchors point to it.

Features:
1. Fragment and trailing-slash normalization
2. First occurrence wins, in discovery order
3. Duplicate statistics
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional

import structlog

from ..config import LinkRules
from .link_classifier import LinkClassifier, LinkRecord


@dataclass
class LinkStats:
    """Statistics for link management"""
    total_seen: int = 0
    unique_links: int = 0
    duplicate_count: int = 0
    file_downloads: int = 0


@dataclass
class PageLinks:
    """All unique content links found on one page"""
    links: List[LinkRecord] = field(default_factory=list)
    page_title: str = "Untitled Page"
    current_url: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "links": [link.to_dict() for link in self.links],
            "page_title": self.page_title,
            "current_url": self.current_url,
        }


def link_key(href: str) -> str:
    """Deduplication key: href without fragment and without one trailing slash"""
    key = href.split("#", 1)[0]
    if key.endswith("/"):
        key = key[:-1]
    return key


class LinkManager:
    """
    Collects LinkRecords and keeps one per normalized href.

    Example:
        >>> manager = LinkManager()
        >>> manager.add_links(records)
        >>> unique = manager.get_unique_links()
    """

    def __init__(self):
        """Initialize an empty link manager"""
        self._links: Dict[str, LinkRecord] = {}  # key -> LinkRecord, insertion ordered
        self.stats = LinkStats()
        self.logger = structlog.get_logger(__name__)

    def add_link(self, link: LinkRecord) -> bool:
        """
        Add a link with deduplication.

        Args:
            link: LinkRecord to add

        Returns:
            True if added (new), False if duplicate
        """
        self.stats.total_seen += 1

        key = link_key(link.href)
        if key in self._links:
            self.stats.duplicate_count += 1
            self.logger.debug("link_duplicate", href=link.href)
            return False

        self._links[key] = replace(link, href=key)
        self.stats.unique_links += 1
        if link.is_file_download:
            self.stats.file_downloads += 1

        return True

    def add_links(self, links: Iterable[LinkRecord]) -> int:
        """
        Add multiple links in order.

        Args:
            links: LinkRecords in discovery order

        Returns:
            Number of unique links added
        """
        added_count = 0
        total = 0
        for link in links:
            total += 1
            if self.add_link(link):
                added_count += 1

        self.logger.debug(
            "links_batch_added",
            total=total,
            unique=added_count,
            duplicates=total - added_count,
        )

        return added_count

    def get_unique_links(self) -> List[LinkRecord]:
        """Return unique links in order of first occurrence"""
        return list(self._links.values())

    def get_file_downloads(self) -> List[LinkRecord]:
        """Return only the unique links that point to downloadable files"""
        return [link for link in self._links.values() if link.is_file_download]

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get link statistics.

        Returns:
            Dictionary with statistics
        """
        return {
            "total_seen": self.stats.total_seen,
            "unique_links": self.stats.unique_links,
            "duplicate_count": self.stats.duplicate_count,
            "file_downloads": self.stats.file_downloads,
            "deduplication_rate": (
                self.stats.duplicate_count / self.stats.total_seen
                if self.stats.total_seen > 0
                else 0.0
            ),
        }

    def clear(self):
        """Clear all links and reset statistics"""
        self._links.clear()
        self.stats = LinkStats()

    def __len__(self) -> int:
        return len(self._links)

    def __repr__(self) -> str:
        return (
            f"LinkManager("
            f"unique={self.stats.unique_links}, "
            f"duplicates={self.stats.duplicate_count})"
        )


def dedupe_links(links: Iterable[LinkRecord]) -> List[LinkRecord]:
    """Return one LinkRecord per normalized href, keeping the first seen"""
    manager = LinkManager()
    manager.add_links(links)
    return manager.get_unique_links()


def extract_page_links(
    raw_links: Iterable[Mapping[str, Any]],
    current_url: str,
    page_title: Optional[str] = None,
    rules: Optional[LinkRules] = None,
) -> PageLinks:
    """
    Classify and deduplicate the anchors collected from a page.

    Args:
        raw_links: Mappings with "href" and "text" keys, in DOM order
        current_url: URL of the page the anchors came from
        page_title: Document title (or first heading) of the page
        rules: Link patterns (uses defaults if None)

    Returns:
        PageLinks with unique content links in DOM order
    """
    classifier = LinkClassifier(current_url, rules)

    records = []
    for raw in raw_links:
        record = classifier.classify(raw.get("href") or "", raw.get("text") or "")
        if record is not None:
            records.append(record)

    return PageLinks(
        links=dedupe_links(records),
        page_title=page_title or "Untitled Page",
        current_url=current_url,
    )
