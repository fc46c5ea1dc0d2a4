"""
Browser module for data_extractor.

QueryScope backed by a live Playwright page. Text extraction and
BrowserScript callbacks run inside the page; launching the browser and
navigating is left to the caller (or to fetch.PageFetcher).
"""

import inspect
import logging
from typing import Any, Callable, List, Optional, Union

from playwright.async_api import ElementHandle, Page

from .document import BrowserScript, QueryScope

logger = logging.getLogger(__name__)

# Runs in the page with the element as its only argument.
EXTRACT_TEXT_SCRIPT = """
element => {
    if (!element) {
        return null;
    }

    switch (element.tagName) {
        case "IMG":
            return element.alt;

        case "META":
            return element.content;

        case "SELECT":
        case "TEXTAREA":
        case "INPUT":
            return element.value;

        default:
            return element.innerText;
    }
}
"""


class PlaywrightScope(QueryScope):
    """QueryScope over a Playwright Page or ElementHandle."""

    def __init__(self, handle: Union[Page, ElementHandle]):
        """
        Initialize PlaywrightScope.

        Args:
            handle: Page for the whole document, or an element handle
        """
        self.handle = handle

    async def _element(self) -> Optional[ElementHandle]:
        if isinstance(self.handle, Page):
            return await self.handle.query_selector(":root")
        return self.handle

    async def match_one(self, selector: str) -> Optional["PlaywrightScope"]:
        element = await self.handle.query_selector(selector)
        if element is None:
            return None
        return PlaywrightScope(element)

    async def match_all(self, selector: str) -> List["PlaywrightScope"]:
        elements = await self.handle.query_selector_all(selector)
        return [PlaywrightScope(element) for element in elements]

    async def text_of(self) -> Optional[str]:
        element = await self._element()
        if element is None:
            return None
        return await element.evaluate(EXTRACT_TEXT_SCRIPT)

    async def invoke(self, fn: Callable[[Any], Any]) -> Any:
        """
        Run ``fn`` against this scope's element.

        A BrowserScript is evaluated inside the page and its result is
        serialized back. A Python callable receives the ElementHandle and may
        be a coroutine function.
        """
        element = await self._element()

        if isinstance(fn, BrowserScript):
            logger.debug("Evaluating browser script in page")
            return await element.evaluate(fn.source)

        result = fn(element)
        if inspect.isawaitable(result):
            result = await result
        return result

    def __repr__(self) -> str:
        return f"PlaywrightScope({self.handle!r})"
