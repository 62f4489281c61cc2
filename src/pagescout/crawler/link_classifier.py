"""
Link Classifier - Normalization and classification of in-page hrefs.

Decides, for a single href found on a page, whether it points to content
inside the site that the crawler should follow (or download).

Rules:
1. Root-relative and dot-relative hrefs are resolved against the current page
2. Same host, subdomains and root-relative paths count as internal
3. Known document extensions are flagged as file downloads
4. Fragment-only, javascript:, mailto: and tel: hrefs are never followed
"""

import re
from dataclasses import dataclass, asdict
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urljoin, urlsplit

import structlog

from ..config import LinkRules


# Hrefs with these prefixes are navigation anchors or actions, not pages.
EXCLUDED_PREFIXES: Tuple[str, ...] = ("#", "javascript:", "mailto:", "tel:")
SCRIPT_PREFIXES: Tuple[str, ...] = ("javascript:", "mailto:")

logger = structlog.get_logger(__name__)


@dataclass
class LinkRecord:
    """Represents a classified in-site link"""
    href: str
    text: str = ""
    is_internal: bool = True
    is_file_download: bool = False
    file_type: Optional[str] = None
    original_href: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@lru_cache(maxsize=32)
def _file_pattern(extensions: Tuple[str, ...]) -> "re.Pattern[str]":
    alternatives = "|".join(re.escape(ext) for ext in extensions)
    return re.compile(r"\.(" + alternatives + r")$", re.IGNORECASE)


def normalize_href(href: str, current_url: str) -> Optional[str]:
    """
    Turn an href into an absolute URL string.

    Args:
        href: Raw href as found on the page
        current_url: Absolute URL of the page the href was found on

    Returns:
        Absolute URL (fragment kept), or None if it cannot be parsed
    """
    try:
        current = urlsplit(current_url)

        if href.startswith("//"):
            candidate = f"{current.scheme}:{href}"
        elif href.startswith("/"):
            candidate = f"{current.scheme}://{current.netloc}{href}"
        elif href.startswith("./") or href.startswith("../"):
            candidate = urljoin(current_url, href)
        else:
            candidate = href

        parsed = urlsplit(candidate)
        # Accessing .port validates the netloc
        parsed.port
    except ValueError:
        return None

    if not parsed.scheme:
        return None

    return candidate


class LinkClassifier:
    """
    Classifies hrefs found on one page.

    Example:
        >>> classifier = LinkClassifier("https://docs.example.com/guide/")
        >>> record = classifier.classify("/help/setup.html", text="Setup")
        >>> record.href
        'https://docs.example.com/help/setup.html'
    """

    def __init__(self, current_url: str, rules: Optional[LinkRules] = None):
        """
        Initialize the classifier.

        Args:
            current_url: Absolute URL of the page being scanned
            rules: Link patterns (uses defaults if None)
        """
        self.current_url = current_url
        self.rules = rules or LinkRules()
        self.current_hostname = urlsplit(current_url).hostname or ""
        self._file_pattern = _file_pattern(tuple(self.rules.file_extensions))

    def classify(self, href: str, text: str = "") -> Optional[LinkRecord]:
        """
        Classify a single href.

        Args:
            href: Raw href value
            text: Anchor text

        Returns:
            LinkRecord if the href is a content-worthy internal link, else None
        """
        if not href:
            return None

        normalized = normalize_href(href, self.current_url)
        if normalized is None:
            logger.debug("link_rejected", href=href, reason="malformed_url")
            return None

        is_internal = self._is_internal(href, normalized)

        file_match = self._file_pattern.search(href)
        is_file_download = file_match is not None

        if not (is_internal and self._is_content_worthy(href, is_file_download)):
            logger.debug("link_rejected", href=href, reason="not_content")
            return None

        return LinkRecord(
            href=normalized.split("#", 1)[0],
            text=text.strip() or href,
            is_internal=True,
            is_file_download=is_file_download,
            file_type=file_match.group(1) if file_match else None,
            original_href=href,
        )

    def is_file_download(self, href: str) -> bool:
        """Check whether an href points to a downloadable document"""
        return self._file_pattern.search(href) is not None

    def _is_internal(self, href: str, normalized: str) -> bool:
        hostname = urlsplit(normalized).hostname or ""

        if hostname and self.current_hostname:
            if hostname == self.current_hostname:
                return True
            if hostname.endswith("." + self.current_hostname):
                return True

        return href.startswith("/") and not href.startswith("//")

    def _is_content_worthy(self, href: str, is_file_download: bool) -> bool:
        if href.startswith(EXCLUDED_PREFIXES):
            return False

        if any(href.endswith(suffix) for suffix in self.rules.content_suffixes):
            return True
        if any(marker in href for marker in self.rules.content_path_markers):
            return True
        if is_file_download:
            return True

        return "#" not in href and not href.startswith(SCRIPT_PREFIXES)


def classify_link(
    href: str,
    current_url: str,
    text: str = "",
    rules: Optional[LinkRules] = None,
) -> Optional[LinkRecord]:
    """Classify one href against the page it was found on"""
    return LinkClassifier(current_url, rules).classify(href, text)
