"""
Page Inspector - Runs every page-inspection procedure against one URL.

This is the integration point that ties the pieces together:
1. Navigates a Playwright page to the URL
2. Detects soft error pages
3. Reveals tab / accordion / carousel content
4. Extracts and deduplicates content links
5. Selects content images

Usage:
    async with PageInspector() as inspector:
        inspection = await inspector.inspect("https://docs.example.com/guide")
"""

import asyncio
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Optional

from playwright.async_api import async_playwright, Browser, BrowserContext, Page
from playwright.async_api import Error as PlaywrightError
import structlog

from ..config import InspectorConfig
from ..crawler import PlaywrightPageControl, PageLinks, extract_page_links
from ..exceptions import InspectorNotInitializedError
from ..extractors import (
    ContentRevealer,
    ImageCandidate,
    PageStatus,
    RevealResult,
    check_page_status,
    select_content_images,
)


@dataclass
class PageInspection:
    """Everything learned about one page"""
    url: str
    status: PageStatus
    links: PageLinks = field(default_factory=PageLinks)
    reveal: RevealResult = field(default_factory=RevealResult)
    images: List[ImageCandidate] = field(default_factory=list)
    inspected_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "status": self.status.to_dict(),
            "links": self.links.to_dict(),
            "reveal": self.reveal.to_dict(),
            "images": [image.to_dict() for image in self.images],
            "inspected_at": self.inspected_at.isoformat(),
        }


class PageInspector:
    """
    Browser-backed page inspector.

    Example:
        >>> inspector = PageInspector()
        >>> await inspector.initialize()
        >>> inspection = await inspector.inspect("https://example.com")
        >>> await inspector.close()
    """

    def __init__(self, config: Optional[InspectorConfig] = None):
        """
        Initialize the inspector.

        Args:
            config: Inspector configuration (uses defaults if None)
        """
        self.config = config or InspectorConfig()

        # Playwright instances
        self.playwright = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None

        # State tracking
        self.pages_inspected = 0
        self.navigation_errors = 0
        self.reveal_timeouts = 0

        self.logger = structlog.get_logger(__name__)

    async def initialize(self):
        """Launch the browser and create a context"""
        browser_settings = self.config.browser
        self.logger.info("initializing_inspector", headless=browser_settings.headless)

        self.playwright = await async_playwright().start()
        self.browser = await self.playwright.chromium.launch(headless=browser_settings.headless)
        self.context = await self.browser.new_context(
            viewport={
                "width": browser_settings.viewport_width,
                "height": browser_settings.viewport_height,
            },
            user_agent=browser_settings.user_agent,
        )

        self.logger.info("inspector_initialized")

    async def inspect(self, url: str) -> PageInspection:
        """
        Navigate to a URL and inspect it.

        Args:
            url: Page to inspect

        Returns:
            PageInspection (navigation failures produce an inaccessible status)

        Raises:
            InspectorNotInitializedError: If initialize() was not called
        """
        if not self.context:
            raise InspectorNotInitializedError(
                "Inspector not initialized. Call initialize() first."
            )

        browser_settings = self.config.browser
        page = await self.context.new_page()

        try:
            self.logger.debug("navigating", url=url)
            try:
                response = await page.goto(
                    url,
                    wait_until="domcontentloaded",
                    timeout=browser_settings.navigation_timeout_ms,
                )
            except PlaywrightError as e:
                self.navigation_errors += 1
                self.logger.error("navigation_failed", url=url, error=str(e))
                return PageInspection(
                    url=url,
                    status=PageStatus(accessible=False, status_code=0, error=str(e)),
                )

            await asyncio.sleep(browser_settings.wait_after_load_ms / 1000)

            inspection = await self.inspect_page(page)

            if response is not None and response.status >= 400:
                inspection.status = replace(
                    inspection.status,
                    accessible=False,
                    status_code=response.status,
                    error=inspection.status.error or f"HTTP {response.status}",
                )

            return inspection

        finally:
            await page.close()

    async def inspect_page(self, page: Page) -> PageInspection:
        """
        Inspect a page that is already loaded.

        The reveal pass runs before links and images are collected so that
        content exposed by tabs and accordions is included.

        Args:
            page: Loaded Playwright page

        Returns:
            PageInspection
        """
        control = PlaywrightPageControl(page)

        status_inputs = await control.collect_status_inputs()
        status = check_page_status(
            status_inputs.get("body_text"),
            status_inputs.get("title"),
            bool(status_inputs.get("has_body")),
        )

        reveal = await self._reveal(control, page.url)

        raw_links = await control.collect_links()
        current_url = raw_links.get("url") or page.url
        links = extract_page_links(
            raw_links.get("links", []),
            current_url,
            raw_links.get("title"),
            self.config.links,
        )

        elements = await control.collect_images(self.config.images)
        images = select_content_images(elements, current_url, self.config.images)

        self.pages_inspected += 1
        self.logger.info(
            "page_inspected",
            url=current_url,
            accessible=status.accessible,
            links=len(links.links),
            images=len(images),
            tabs_extracted=reveal.tabs_extracted,
        )

        return PageInspection(
            url=current_url,
            status=status,
            links=links,
            reveal=reveal,
            images=images,
        )

    async def _reveal(self, control: PlaywrightPageControl, url: str) -> RevealResult:
        revealer = ContentRevealer(control, self.config.reveal)
        timeout = self.config.browser.reveal_timeout_s

        try:
            if timeout is None:
                return await revealer.reveal()
            return await asyncio.wait_for(revealer.reveal(), timeout=timeout)
        except asyncio.TimeoutError:
            # Partial tab content from a cancelled pass is discarded
            self.reveal_timeouts += 1
            self.logger.warning("reveal_timeout", url=url, timeout=timeout)
            return RevealResult()

    async def close(self):
        """Close the browser and clean up"""
        if self.context:
            await self.context.close()
        if self.browser:
            await self.browser.close()
        if self.playwright:
            await self.playwright.stop()

        self.context = None
        self.browser = None
        self.playwright = None

        self.logger.info("inspector_closed")

    async def __aenter__(self) -> "PageInspector":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    def get_stats(self) -> Dict[str, Any]:
        """
        Get inspector statistics.

        Returns:
            Dictionary with statistics
        """
        return {
            "pages_inspected": self.pages_inspected,
            "navigation_errors": self.navigation_errors,
            "reveal_timeouts": self.reveal_timeouts,
            "headless": self.config.browser.headless,
        }
