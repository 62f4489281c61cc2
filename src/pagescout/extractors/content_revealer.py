"""
Content Revealer - Exposes content hidden behind tabs, accordions and carousels.

Drives a fixed sequence of interactions against a live page through a
PageControl:

    IDLE -> SCANNING_TABS -> (ACTIVATING -> WAITING_STABLE -> EXTRACTING_PANEL)*
         -> EXPANDING_ACCORDIONS -> PAGING_CAROUSEL -> DONE

Every interaction is followed by a settle wait before anything is read back,
because the page renders the result asynchronously. Interaction failures are
logged and skipped; nothing in a reveal pass is fatal.

Example:
    >>> revealer = ContentRevealer(page_control)
    >>> result = await revealer.reveal()
    >>> result.tab_content
    {'Overview': '...', 'Installation': '...'}
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set

import structlog

from ..config import RevealRules
from ..exceptions import InteractionError, PageBusyError
from .page_control import PageControl


class RevealState(Enum):
    """Reveal pass states"""
    IDLE = "idle"
    SCANNING_TABS = "scanning_tabs"
    ACTIVATING = "activating"
    WAITING_STABLE = "waiting_stable"
    EXTRACTING_PANEL = "extracting_panel"
    EXPANDING_ACCORDIONS = "expanding_accordions"
    PAGING_CAROUSEL = "paging_carousel"
    DONE = "done"


@dataclass
class RevealResult:
    """Outcome of one reveal pass"""
    tab_content: Dict[str, str] = field(default_factory=dict)  # label -> text, click order
    tabs_found: int = 0
    tabs_extracted: int = 0
    accordions_expanded: int = 0
    carousel_clicks: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tab_content": dict(self.tab_content),
            "tabs_found": self.tabs_found,
            "tabs_extracted": self.tabs_extracted,
            "accordions_expanded": self.accordions_expanded,
            "carousel_clicks": self.carousel_clicks,
        }


_WHITESPACE_RUN = re.compile(r"\s{3,}")
_BLANK_LINE_RUN = re.compile(r"\n{3,}")


def clean_tab_text(text: str, boilerplate: List["re.Pattern[str]"]) -> str:
    """Strip boilerplate phrases and collapse long whitespace runs"""
    text = text.strip()
    for pattern in boilerplate:
        text = pattern.sub("", text)
    text = _BLANK_LINE_RUN.sub("\n\n", text)
    text = _WHITESPACE_RUN.sub(" ", text)
    return text.strip()


def _css_string(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


class ContentRevealer:
    """
    Runs one reveal pass against a page.

    A page may only have one reveal pass in flight; starting a second one on
    the same page session raises PageBusyError, even through another
    PageControl wrapping that session.
    """

    # ids of page sessions with a pass in flight
    _active_sessions: Set[int] = set()

    def __init__(self, page: PageControl, rules: Optional[RevealRules] = None):
        """
        Initialize the revealer.

        Args:
            page: Page control for the live page
            rules: Selectors, text filters and timings (uses defaults if None)
        """
        self.page = page
        self.rules = rules or RevealRules()
        self.state = RevealState.IDLE
        self.result = RevealResult()

        self._boilerplate = [
            re.compile(p, re.IGNORECASE) for p in self.rules.boilerplate_patterns
        ]

        self.logger = structlog.get_logger(__name__)

    async def reveal(self) -> RevealResult:
        """
        Expand tabs, accordions and carousel slides.

        Returns:
            RevealResult with the text captured from each tab panel

        Raises:
            PageBusyError: If another reveal pass is running on the same page
        """
        session_id = id(self.page.session)
        if session_id in self._active_sessions:
            raise PageBusyError("A reveal pass is already running on this page")

        self._active_sessions.add(session_id)
        self.result = RevealResult()

        try:
            await self._extract_tabs()
            await self._expand_accordions()
            await self._page_carousel()

            await self.page.wait(self.rules.final_settle_ms)
            self._set_state(RevealState.DONE)
        finally:
            self._active_sessions.discard(session_id)

        self.logger.info(
            "reveal_completed",
            tabs_found=self.result.tabs_found,
            tabs_extracted=self.result.tabs_extracted,
            accordions_expanded=self.result.accordions_expanded,
            carousel_clicks=self.result.carousel_clicks,
        )

        return self.result

    async def find_tabs(self) -> List[Any]:
        """Return the matches of the first tab selector that matches anything"""
        for selector in self.rules.tab_selectors:
            found = await self._safe_query_all(selector)
            if found:
                self.logger.debug("tabs_discovered", selector=selector, count=len(found))
                return found
        return []

    def accept_tab_content(self, label: str, content: str) -> bool:
        """
        Record tab text unless it is too short or repeats another tab.

        Args:
            label: Tab label
            content: Cleaned panel text

        Returns:
            True if the content was recorded
        """
        if len(content) <= self.rules.min_tab_content_length:
            self.logger.debug("tab_content_too_short", label=label, length=len(content))
            return False

        prefix_length = self.rules.duplicate_prefix_length
        prefix = content[:prefix_length]
        for existing in self.result.tab_content.values():
            if existing[:prefix_length] == prefix:
                self.logger.debug("tab_content_duplicate", label=label)
                return False

        self.result.tab_content[label] = content
        self.result.tabs_extracted = len(self.result.tab_content)
        return True

    async def _extract_tabs(self):
        self._set_state(RevealState.SCANNING_TABS)

        tabs = await self.find_tabs()
        self.result.tabs_found = len(tabs)

        for index, tab in enumerate(tabs):
            try:
                label = await self._tab_label(tab, index)

                self._set_state(RevealState.ACTIVATING)
                await self.page.click(tab)

                self._set_state(RevealState.WAITING_STABLE)
                await self.page.wait(self.rules.tab_settle_ms)

                self._set_state(RevealState.EXTRACTING_PANEL)
                panel = await self._find_panel(tab)
                if panel is None:
                    self.logger.debug("tab_panel_missing", label=label)
                    continue

                raw = await self.page.extract_text(panel, self.rules.panel_strip_selectors)
                content = clean_tab_text(raw, self._boilerplate)

                if self.accept_tab_content(label, content):
                    self.logger.debug("tab_extracted", label=label, length=len(content))

            except InteractionError as e:
                self.logger.warning("tab_interaction_failed", index=index, error=str(e))

    async def _tab_label(self, tab: Any, index: int) -> str:
        text = (await self.page.text_content(tab) or "").strip()
        if text:
            return text
        aria_label = await self.page.get_attribute(tab, "aria-label")
        if aria_label:
            return aria_label
        return f"Tab {index + 1}"

    async def _find_panel(self, tab: Any) -> Optional[Any]:
        controls = await self.page.get_attribute(tab, "aria-controls")
        if controls:
            panel = await self.page.query_one(f'[id="{_css_string(controls)}"]')
            if panel is not None:
                return panel

        tab_id = await self.page.get_attribute(tab, "id")
        if tab_id:
            return await self.page.query_one(f'[aria-labelledby~="{_css_string(tab_id)}"]')

        return None

    async def _expand_accordions(self):
        self._set_state(RevealState.EXPANDING_ACCORDIONS)

        main_area = None
        for selector in self.rules.main_selectors:
            main_area = await self._safe_query_one(selector)
            if main_area is not None:
                break

        toggles = await self._safe_query_all(self.rules.accordion_selector, root=main_area)

        for toggle in toggles:
            try:
                if await self.page.has_ancestor(toggle, self.rules.accordion_chrome_selector):
                    continue
                await self.page.click(toggle)
                await self.page.wait(self.rules.accordion_settle_ms)
                self.result.accordions_expanded += 1
            except InteractionError as e:
                self.logger.debug("accordion_click_skipped", error=str(e))

        self.logger.debug(
            "accordions_expanded",
            found=len(toggles),
            expanded=self.result.accordions_expanded,
        )

    async def _page_carousel(self):
        self._set_state(RevealState.PAGING_CAROUSEL)

        next_control = await self._safe_query_one(self.rules.carousel_next_selector)
        if next_control is None:
            return

        max_clicks = self.rules.carousel_max_clicks
        while self.result.carousel_clicks < max_clicks:
            try:
                if await self.page.is_disabled(next_control):
                    break
            except InteractionError:
                break

            try:
                await self.page.click(next_control)
            except InteractionError as e:
                self.logger.warning("carousel_click_failed", error=str(e))
                break

            await self.page.wait(self.rules.carousel_settle_ms)
            self.result.carousel_clicks += 1
        else:
            self.logger.info("carousel_cap_reached", clicks=self.result.carousel_clicks)

    async def _safe_query_all(self, selector: str, root: Optional[Any] = None) -> List[Any]:
        try:
            return await self.page.query_all(selector, root=root)
        except InteractionError as e:
            self.logger.warning("query_failed", selector=selector, error=str(e))
            return []

    async def _safe_query_one(self, selector: str) -> Optional[Any]:
        try:
            return await self.page.query_one(selector)
        except InteractionError as e:
            self.logger.warning("query_failed", selector=selector, error=str(e))
            return None

    def _set_state(self, state: RevealState):
        self.state = state
        self.logger.debug("reveal_state", state=state.value)
