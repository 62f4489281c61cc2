"""
Content Image Selector - Separates content images from page decoration.

Works on ImageElement snapshots taken from a live page (see
PlaywrightPageControl.collect_images), so the selection rules are plain
Python and run without a browser.

An image is decorative if it is tiny, carries a decorative keyword in its
alt/class/id, sits inside page chrome (nav, header, footer, menus) or is a
small vector graphic. Everything else is kept, ordered top-to-bottom then
left-to-right.
"""

import math
import re
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urljoin, urlsplit

import structlog

from ..config import ImageRules


logger = structlog.get_logger(__name__)

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+", re.IGNORECASE)


@dataclass
class AncestorInfo:
    """One element in an image's ancestor chain"""
    tag: str
    class_name: str = ""
    element_id: str = ""
    role: str = ""

    @property
    def classes(self) -> List[str]:
        return self.class_name.split()


@dataclass
class ImageElement:
    """Snapshot of an <img> element as rendered on the page"""
    src: str = ""
    data_src: str = ""
    alt: str = ""
    title: str = ""
    class_name: str = ""
    element_id: str = ""
    width: float = 0.0
    height: float = 0.0
    x: float = 0.0
    y: float = 0.0
    dom_index: int = -1
    ancestors: List[AncestorInfo] = field(default_factory=list)  # nearest first
    context_text: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImageElement":
        ancestors = [
            AncestorInfo(
                tag=(a.get("tag") or "").lower(),
                class_name=a.get("class_name") or "",
                element_id=a.get("element_id") or "",
                role=a.get("role") or "",
            )
            for a in data.get("ancestors") or []
        ]
        return cls(
            src=data.get("src") or "",
            data_src=data.get("data_src") or "",
            alt=data.get("alt") or "",
            title=data.get("title") or "",
            class_name=data.get("class_name") or "",
            element_id=data.get("element_id") or "",
            width=float(data.get("width") or 0),
            height=float(data.get("height") or 0),
            x=float(data.get("x") or 0),
            y=float(data.get("y") or 0),
            dom_index=int(data.get("dom_index", -1)),
            ancestors=ancestors,
            context_text=data.get("context_text") or "",
        )


@dataclass
class ImageCandidate:
    """A selected content image"""
    src: str
    alt: str
    title: str
    width: float
    height: float
    x: int
    y: int
    can_download_same_origin: bool
    position_index: int
    context_slug: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def slugify_context(text: str, max_length: int = 30) -> str:
    """Replace non-alphanumeric runs with '-', truncate and lowercase"""
    return _SLUG_PATTERN.sub("-", text)[:max_length].lower()


def is_same_origin(src: str, page_url: str) -> bool:
    """True if src is an inline data/blob URI or resolves to the page's origin"""
    if not src:
        return False
    if src.startswith("data:") or src.startswith("blob:"):
        return True

    try:
        resolved = urlsplit(urljoin(page_url, src))
        page = urlsplit(page_url)
        return (
            resolved.scheme == page.scheme
            and resolved.hostname == page.hostname
            and _effective_port(resolved) == _effective_port(page)
        )
    except ValueError:
        return False


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _effective_port(parts) -> Optional[int]:
    if parts.port is not None:
        return parts.port
    return {"http": 80, "https": 443}.get(parts.scheme)


class ContentImageSelector:
    """
    Filters page images down to the ones that carry content.

    Example:
        >>> selector = ContentImageSelector("https://example.com/guide")
        >>> candidates = selector.select(elements)
    """

    def __init__(self, page_url: str, rules: Optional[ImageRules] = None):
        """
        Initialize the selector.

        Args:
            page_url: URL of the page the images were collected from
            rules: Image thresholds and keyword tables (uses defaults if None)
        """
        self.page_url = page_url
        self.rules = rules or ImageRules()
        self._keyword_pattern = re.compile(
            "|".join(re.escape(k) for k in self.rules.decorative_keywords) or r"(?!)",
            re.IGNORECASE,
        )

    def select(self, elements: Iterable[ImageElement]) -> List[ImageCandidate]:
        """
        Select content images in reading order.

        Args:
            elements: Image snapshots in DOM order

        Returns:
            ImageCandidates sorted by y, then x
        """
        candidates: List[ImageCandidate] = []
        skipped = 0

        for element in elements:
            if self.is_decorative(element):
                skipped += 1
                continue

            # Not decorative is enough to be kept
            candidate = self._to_candidate(element, len(candidates) + 1)
            candidates.append(candidate)
            logger.debug(
                "image_selected",
                src=candidate.src[:120],
                likely_content=self.is_likely_content(element),
            )

        candidates.sort(key=lambda c: (c.y, c.x))

        logger.debug("images_selected", selected=len(candidates), skipped=skipped)
        return candidates

    def is_decorative(self, element: ImageElement) -> bool:
        """Check size, keyword, chrome ancestor and small-vector rules"""
        rules = self.rules
        src = self._source(element)

        if element.width < rules.min_width and element.height < rules.min_height:
            return True

        for text in (element.alt, element.class_name, element.element_id):
            if text and self._keyword_pattern.search(text):
                return True

        if self._has_ancestor(element, rules.chrome_tags, rules.chrome_classes):
            return True

        if (
            rules.vector_marker in src
            and element.width < rules.vector_max_size
            and element.height < rules.vector_max_size
        ):
            return True

        return False

    def is_likely_content(self, element: ImageElement) -> bool:
        """Check size, descriptive alt text and content-region ancestors"""
        rules = self.rules
        return (
            element.width > rules.likely_content_size
            or element.height > rules.likely_content_size
            or len(element.alt) > rules.likely_content_alt_length
            or self._has_ancestor(element, rules.content_tags, rules.content_classes)
        )

    def _to_candidate(self, element: ImageElement, ordinal: int) -> ImageCandidate:
        src = self._source(element)
        context = element.context_text[: self.rules.context_chars].strip()
        slug = slugify_context(context, self.rules.slug_max_length)

        return ImageCandidate(
            src=src,
            alt=element.alt,
            title=element.title,
            width=element.width,
            height=element.height,
            x=_round_half_up(element.x),
            y=_round_half_up(element.y),
            can_download_same_origin=is_same_origin(src, self.page_url),
            position_index=element.dom_index,
            context_slug=slug or f"image-{ordinal}",
        )

    @staticmethod
    def _source(element: ImageElement) -> str:
        return element.src or element.data_src or ""

    @staticmethod
    def _has_ancestor(element: ImageElement, tags: List[str], classes: List[str]) -> bool:
        for ancestor in element.ancestors:
            if ancestor.tag in tags:
                return True
            if any(cls in classes for cls in ancestor.classes):
                return True
        return False


def select_content_images(
    elements: Iterable[ImageElement],
    page_url: str,
    rules: Optional[ImageRules] = None,
) -> List[ImageCandidate]:
    """Select content images from page snapshots in reading order"""
    return ContentImageSelector(page_url, rules).select(elements)
