"""
Document module for data_extractor.

Defines the query capability the extraction engine runs against. The engine
only ever talks to a QueryScope; how selectors are matched and text is read
is up to the provider (see soup.py and browser.py).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from .exceptions import InvalidSchema


@dataclass(frozen=True)
class BrowserScript:
    """
    JavaScript function source for a custom node's ``extract``.

    A browser-backed scope evaluates the source inside the page with the
    matched element as its only argument, e.g.
    ``BrowserScript("el => Array.from(el.children, c => c.innerText)")``.
    """
    source: str

    def __call__(self, element: Any) -> Any:
        raise InvalidSchema("Browser scripts can only run against a browser-backed document.")


class QueryScope(ABC):
    """
    An element (or whole document) that selectors are resolved against.

    Scopes returned by match_one() and match_all() only see the descendants
    of their element, which is what gives nested schema nodes their relative
    addressing.
    """

    @abstractmethod
    async def match_one(self, selector: str) -> Optional["QueryScope"]:
        """
        Find the first element matching a selector, in document order.

        Args:
            selector: CSS selector

        Returns:
            Scope for the matched element, or None
        """
        pass

    @abstractmethod
    async def match_all(self, selector: str) -> List["QueryScope"]:
        """
        Find every element matching a selector, in document order.

        Args:
            selector: CSS selector

        Returns:
            Scopes for the matched elements, possibly empty
        """
        pass

    @abstractmethod
    async def text_of(self) -> Optional[str]:
        """
        Read the most meaningful text of this scope's element.

        Form controls give their value, images their alt text, meta elements
        their content and everything else its rendered text.
        """
        pass

    @abstractmethod
    async def invoke(self, fn: Callable[[Any], Any]) -> Any:
        """
        Run a callback in the document's own execution context.

        Args:
            fn: Callable (or BrowserScript) receiving the element

        Returns:
            JSON-compatible value returned by the callback
        """
        pass

    async def matches(self, selector: str) -> bool:
        """Check whether any element within this scope matches a selector."""
        return await self.match_one(selector) is not None
