"""
Sitemap module - Re-parsing of generated sitemap documents.
"""

from .parser import (
    SitemapEntry,
    SitemapParser,
    SitemapStatus,
    ParserState,
    parse_sitemap,
    parse_sitemap_file,
)


__all__ = [
    "SitemapEntry",
    "SitemapParser",
    "SitemapStatus",
    "ParserState",
    "parse_sitemap",
    "parse_sitemap_file",
]
