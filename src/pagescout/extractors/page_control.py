"""
Page Control - Abstract interface to a live page session.

The content revealer only talks to a page through this interface, so its
sequencing and timing can be tested against a fake page. Element handles are
opaque to callers; each implementation decides what they are.

Design Pattern: Strategy Pattern
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence


class PageControl(ABC):
    """
    Abstract base class for page session adapters.

    Implementations must provide:
    - Read-only DOM queries (elements, attributes, text, ancestry)
    - A click-equivalent interaction on an element handle
    - A timed suspend that yields to the event loop

    Interactions that fail raise InteractionError.
    """

    @property
    def session(self) -> Any:
        """
        The underlying page session.

        Controls wrapping the same browser page must return the same object,
        so that only one reveal pass runs per page.
        """
        return self

    @abstractmethod
    async def query_all(self, selector: str, root: Optional[Any] = None) -> List[Any]:
        """Return all elements matching selector, in document order"""
        pass

    @abstractmethod
    async def query_one(self, selector: str) -> Optional[Any]:
        """Return the first element matching selector, or None"""
        pass

    @abstractmethod
    async def text_content(self, element: Any) -> str:
        """Return the element's text content"""
        pass

    @abstractmethod
    async def get_attribute(self, element: Any, name: str) -> Optional[str]:
        """Return an attribute value, or None if absent"""
        pass

    @abstractmethod
    async def has_ancestor(self, element: Any, selector: str) -> bool:
        """True if the element or one of its ancestors matches selector"""
        pass

    @abstractmethod
    async def extract_text(self, element: Any, strip_selectors: Sequence[str]) -> str:
        """
        Return the text of a copy of element with sub-elements removed.

        Args:
            element: Element to read
            strip_selectors: Selectors of descendants to drop before reading

        The live page must not be modified.
        """
        pass

    @abstractmethod
    async def is_disabled(self, element: Any) -> bool:
        """True if the element is disabled or carries aria-disabled"""
        pass

    @abstractmethod
    async def click(self, element: Any) -> None:
        """
        Trigger a click on the element.

        Raises:
            InteractionError: If the element cannot be clicked
        """
        pass

    @abstractmethod
    async def wait(self, ms: int) -> None:
        """Suspend for ms milliseconds of real time"""
        pass
