"""
PageScout - Page inspection procedures for documentation crawlers

Classifies and deduplicates in-site links, reveals content hidden behind
tabs, accordions and carousels, selects content images and re-parses
generated sitemap documents.

Copyright (c) 2025
Licensed under MIT License
"""

__version__ = "1.0.0"
__author__ = "PageScout Team"
__status__ = "Development"
