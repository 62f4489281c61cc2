"""
Core module - Browser-backed inspection pipeline.

This package ties the crawler and extractor components to a Playwright browser.
"""

from .inspector import PageInspector, PageInspection


__all__ = [
    "PageInspector",
    "PageInspection",
]
