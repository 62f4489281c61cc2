"""
Crawler module - Link discovery and the live-page adapter.

This package contains the pieces a crawler uses to decide where to go next:
- LinkClassifier: Normalization and internal/content classification of hrefs
- LinkManager: Order-stable deduplication
- PlaywrightPageControl: PageControl implementation over a Playwright page
"""

from .link_classifier import LinkClassifier, LinkRecord, classify_link, normalize_href
from .link_manager import LinkManager, LinkStats, PageLinks, dedupe_links, extract_page_links
from .playwright_page import PlaywrightPageControl


__all__ = [
    # Classification
    "LinkClassifier",
    "LinkRecord",
    "classify_link",
    "normalize_href",
    # Deduplication
    "LinkManager",
    "LinkStats",
    "PageLinks",
    "dedupe_links",
    "extract_page_links",
    # Live page
    "PlaywrightPageControl",
]
