"""
Playwright Page Control - PageControl implementation over a Playwright page.

Wraps playwright.async_api.Page / ElementHandle so the revealer can drive a
real browser, and adds snapshot helpers that collect anchors, image boxes and
status hints from the rendered DOM in one evaluate() round trip each.

This module does NOT own the browser lifecycle or navigation; see
pagescout.core.inspector for that.
"""

import asyncio
from typing import Any, Dict, List, Optional, Sequence

from playwright.async_api import ElementHandle, Page
from playwright.async_api import Error as PlaywrightError
import structlog

from ..config import ImageRules
from ..exceptions import InteractionError
from ..extractors.image_selector import ImageElement
from ..extractors.page_control import PageControl


_HAS_ANCESTOR_JS = "(el, selector) => el.closest(selector) !== null"

_EXTRACT_TEXT_JS = """
(el, selectors) => {
    const clone = el.cloneNode(true);
    if (selectors.length > 0) {
        clone.querySelectorAll(selectors.join(', ')).forEach(node => node.remove());
    }
    return (clone.textContent || '').trim() || (clone.innerText || '').trim();
}
"""

_IS_DISABLED_JS = "el => el.disabled === true || el.hasAttribute('aria-disabled')"

_DOM_CLICK_JS = "el => el.click()"

_COLLECT_LINKS_JS = """
() => {
    const links = Array.from(document.querySelectorAll('a[href]')).map(a => ({
        href: a.href,
        text: (a.textContent || '').trim(),
    }));
    const h1 = document.querySelector('h1');
    return {
        links: links,
        title: document.title || (h1 ? h1.textContent.trim() : ''),
        url: window.location.href,
    };
}
"""

_COLLECT_IMAGES_JS = """
(opts) => {
    const order = new Map();
    Array.from(document.querySelectorAll('*')).forEach((el, i) => order.set(el, i));

    return Array.from(document.querySelectorAll('img')).map(img => {
        const rect = img.getBoundingClientRect();
        const ancestors = [];
        for (let node = img.parentElement; node; node = node.parentElement) {
            ancestors.push({
                tag: node.tagName.toLowerCase(),
                class_name: node.getAttribute('class') || '',
                element_id: node.id || '',
                role: node.getAttribute('role') || '',
            });
        }
        const block = img.closest(opts.blockSelector);
        return {
            src: img.src || '',
            data_src: img.getAttribute('data-src') || '',
            alt: img.alt || '',
            title: img.title || '',
            class_name: img.getAttribute('class') || '',
            element_id: img.id || '',
            width: rect.width,
            height: rect.height,
            x: rect.x,
            y: rect.y,
            dom_index: order.has(img) ? order.get(img) : -1,
            ancestors: ancestors,
            context_text: block ? (block.textContent || '').substring(0, opts.contextChars) : '',
        };
    });
}
"""

_COLLECT_STATUS_JS = """
() => ({
    body_text: document.body ? document.body.textContent : null,
    title: document.title || '',
    has_body: document.body !== null,
})
"""


class PlaywrightPageControl(PageControl):
    """
    PageControl backed by a live Playwright page.

    Example:
        >>> control = PlaywrightPageControl(page)
        >>> result = await ContentRevealer(control).reveal()
    """

    def __init__(self, page: Page, click_timeout_ms: int = 1500):
        """
        Initialize the page control.

        Args:
            page: Playwright page, already navigated
            click_timeout_ms: Timeout for a trusted click before falling back to el.click()
        """
        self.page = page
        self.click_timeout_ms = click_timeout_ms
        self.logger = structlog.get_logger(__name__)

    @property
    def session(self) -> Page:
        return self.page

    async def query_all(self, selector: str, root: Optional[Any] = None) -> List[Any]:
        scope = root if root is not None else self.page
        try:
            return await scope.query_selector_all(selector)
        except PlaywrightError as e:
            raise InteractionError(f"Query failed for {selector!r}: {e}") from e

    async def query_one(self, selector: str) -> Optional[Any]:
        try:
            return await self.page.query_selector(selector)
        except PlaywrightError as e:
            raise InteractionError(f"Query failed for {selector!r}: {e}") from e

    async def text_content(self, element: ElementHandle) -> str:
        try:
            return await element.text_content() or ""
        except PlaywrightError as e:
            raise InteractionError(f"Could not read text: {e}") from e

    async def get_attribute(self, element: ElementHandle, name: str) -> Optional[str]:
        try:
            return await element.get_attribute(name)
        except PlaywrightError as e:
            raise InteractionError(f"Could not read attribute {name!r}: {e}") from e

    async def has_ancestor(self, element: ElementHandle, selector: str) -> bool:
        try:
            return bool(await element.evaluate(_HAS_ANCESTOR_JS, selector))
        except PlaywrightError as e:
            raise InteractionError(f"Ancestor check failed: {e}") from e

    async def extract_text(self, element: ElementHandle, strip_selectors: Sequence[str]) -> str:
        try:
            return await element.evaluate(_EXTRACT_TEXT_JS, list(strip_selectors)) or ""
        except PlaywrightError as e:
            raise InteractionError(f"Could not extract text: {e}") from e

    async def is_disabled(self, element: ElementHandle) -> bool:
        try:
            return bool(await element.evaluate(_IS_DISABLED_JS))
        except PlaywrightError as e:
            raise InteractionError(f"Disabled check failed: {e}") from e

    async def click(self, element: ElementHandle) -> None:
        """
        Click an element.

        Tries a real (trusted) click first; hidden or covered elements fall
        back to a DOM click, which still fires the page's handlers.
        """
        try:
            await element.click(timeout=self.click_timeout_ms)
            return
        except PlaywrightError as e:
            self.logger.debug("trusted_click_failed", error=str(e))

        try:
            await element.evaluate(_DOM_CLICK_JS)
        except PlaywrightError as e:
            raise InteractionError(f"Element not clickable: {e}") from e

    async def wait(self, ms: int) -> None:
        await asyncio.sleep(ms / 1000)

    async def collect_links(self) -> Dict[str, Any]:
        """
        Collect every anchor on the page.

        Returns:
            {"links": [{"href", "text"}...], "title": str, "url": str}
        """
        try:
            return await self.page.evaluate(_COLLECT_LINKS_JS)
        except PlaywrightError as e:
            self.logger.error("link_collection_error", error=str(e))
            return {"links": [], "title": "", "url": self.page.url}

    async def collect_images(self, rules: Optional[ImageRules] = None) -> List[ImageElement]:
        """
        Snapshot every <img> with its box, ancestor chain and context text.

        Args:
            rules: Image rules (block tags and context length are used here)

        Returns:
            ImageElements in DOM order
        """
        rules = rules or ImageRules()
        options = {
            "blockSelector": ", ".join(rules.block_tags),
            "contextChars": rules.context_chars,
        }
        try:
            raw = await self.page.evaluate(_COLLECT_IMAGES_JS, options)
        except PlaywrightError as e:
            self.logger.error("image_collection_error", error=str(e))
            return []

        return [ImageElement.from_dict(item) for item in raw]

    async def collect_status_inputs(self) -> Dict[str, Any]:
        """Return body text, title and body presence for status detection"""
        try:
            return await self.page.evaluate(_COLLECT_STATUS_JS)
        except PlaywrightError as e:
            self.logger.error("status_collection_error", error=str(e))
            return {"body_text": None, "title": "", "has_body": False}
