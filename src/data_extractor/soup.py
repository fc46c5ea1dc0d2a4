"""
Soup module for data_extractor.

In-memory QueryScope backed by BeautifulSoup. Selectors are CSS, matched by
soupsieve through Tag.select() and Tag.select_one().
"""

import inspect
import logging
from typing import Any, Callable, Iterator, List, Optional, Union

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

from .document import BrowserScript, QueryScope
from .exceptions import InvalidSchema

logger = logging.getLogger(__name__)

# Never part of rendered text
HIDDEN_TAGS = frozenset({"head", "script", "style", "noscript", "template"})

# Rendered on their own line, so their text never runs into a neighbour's
BLOCK_TAGS = frozenset({
    "address", "article", "aside", "blockquote", "br", "dd", "div", "dl", "dt",
    "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2", "h3",
    "h4", "h5", "h6", "header", "hr", "li", "main", "nav", "ol", "p", "pre",
    "section", "table", "tbody", "td", "tfoot", "th", "thead", "tr", "ul",
})


def _rendered_strings(element: Tag) -> Iterator[str]:
    for child in element.children:
        if isinstance(child, Tag):
            if child.name in HIDDEN_TAGS:
                continue
            if child.name in BLOCK_TAGS:
                yield " "
                yield from _rendered_strings(child)
                yield " "
            else:
                yield from _rendered_strings(child)
        elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
            # comments, doctypes and CDATA are PreformattedStrings
            yield str(child)


def rendered_text(element: Tag) -> str:
    """
    Approximate an element's rendered text.

    Hidden elements are skipped and all whitespace runs collapse to a single
    space, so ``<p>Hello <b>World</b></p>`` reads as "Hello World".
    """
    return " ".join("".join(_rendered_strings(element)).split())


def _select_value(element: Tag) -> str:
    options = element.find_all("option")
    if not options:
        return ""

    selected = next((option for option in options if option.has_attr("selected")), options[0])
    if selected.has_attr("value"):
        return selected["value"]
    return " ".join(selected.get_text().split())


def extract_text(element: Optional[Tag]) -> Optional[str]:
    """
    Extract the most useful text from an element given its tag name.

    Args:
        element: Element to read, may be None

    Returns:
        The element's value, alt text, content or rendered text; None for no element
    """
    if element is None:
        return None

    name = (element.name or "").lower()
    if name == "img":
        return element.get("alt", "")
    if name == "meta":
        return element.get("content", "")
    if name == "input":
        return element.get("value", "")
    if name == "textarea":
        return element.get_text()
    if name == "select":
        return _select_value(element)
    return rendered_text(element)


class SoupScope(QueryScope):
    """QueryScope over a parsed BeautifulSoup tree or one of its tags."""

    def __init__(self, node: Union[BeautifulSoup, Tag]):
        """
        Initialize SoupScope.

        Args:
            node: Parsed document or element to scope queries to
        """
        self.node = node

    @classmethod
    def from_html(cls, html: str, parser: str = "html.parser") -> "SoupScope":
        """
        Parse HTML into a document scope.

        Args:
            html: HTML source
            parser: BeautifulSoup tree builder

        Returns:
            Scope for the whole document
        """
        logger.debug(f"Parsing {len(html)} characters of HTML with {parser}")
        return cls(BeautifulSoup(html, parser))

    async def match_one(self, selector: str) -> Optional["SoupScope"]:
        element = self.node.select_one(selector)
        if element is None:
            return None
        return SoupScope(element)

    async def match_all(self, selector: str) -> List["SoupScope"]:
        return [SoupScope(element) for element in self.node.select(selector)]

    async def text_of(self) -> Optional[str]:
        return extract_text(self.node)

    async def invoke(self, fn: Callable[[Any], Any]) -> Any:
        """
        Call ``fn`` with the underlying bs4 element.

        Coroutine functions are awaited. BrowserScript sources cannot run
        here since there is no JavaScript engine behind a parsed tree.
        """
        if isinstance(fn, BrowserScript):
            raise InvalidSchema("Browser scripts can only run against a browser-backed document.")

        result = fn(self.node)
        if inspect.isawaitable(result):
            result = await result
        return result

    def __repr__(self) -> str:
        return f"SoupScope(<{self.node.name}>)"
