"""
Extractors module - Content extraction from rendered pages.

Available extractors:
- ContentRevealer: Expands tabs, accordions and carousels and captures tab text
- ContentImageSelector: Keeps content images, drops decoration
- check_page_status: Soft error page detection

The revealer talks to the page only through PageControl.
"""

from .page_control import PageControl
from .content_revealer import ContentRevealer, RevealResult, RevealState, clean_tab_text
from .image_selector import (
    AncestorInfo,
    ContentImageSelector,
    ImageCandidate,
    ImageElement,
    select_content_images,
)
from .page_status import PageStatus, check_page_status


__all__ = [
    # Page interface
    "PageControl",
    # Dynamic content
    "ContentRevealer",
    "RevealResult",
    "RevealState",
    "clean_tab_text",
    # Images
    "AncestorInfo",
    "ContentImageSelector",
    "ImageCandidate",
    "ImageElement",
    "select_content_images",
    # Status
    "PageStatus",
    "check_page_status",
]
