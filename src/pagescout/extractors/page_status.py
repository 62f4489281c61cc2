"""
Page Status - Detects error pages from rendered body text.

Browsers report a successful navigation for many soft error pages, so the
status is inferred from what the page actually says.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Tuple


ERROR_MARKERS: Tuple[str, ...] = ("404", "Not Found", "Forbidden", "403")

# Checked in order; the first code found in the body wins
STATUS_CODE_MARKERS: Tuple[Tuple[str, int], ...] = (
    ("404", 404),
    ("403", 403),
    ("500", 500),
)


@dataclass
class PageStatus:
    """Accessibility verdict for a loaded page"""
    accessible: bool
    status_code: int = 200
    page_title: str = "Untitled"
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def check_page_status(
    body_text: Optional[str],
    page_title: Optional[str] = None,
    has_body: bool = True,
) -> PageStatus:
    """
    Classify a loaded page as accessible or as an error page.

    Args:
        body_text: Text content of the page body (None if there is no body)
        page_title: Document title
        has_body: Whether the document has a body element

    Returns:
        PageStatus
    """
    text = body_text or ""
    is_error = any(marker in text for marker in ERROR_MARKERS)

    status_code = 200
    if is_error:
        for marker, code in STATUS_CODE_MARKERS:
            if marker in text:
                status_code = code
                break

    return PageStatus(
        accessible=not is_error and has_body,
        status_code=status_code,
        page_title=page_title or "Untitled",
        error="Page error detected" if is_error else None,
    )
