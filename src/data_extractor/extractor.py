"""
Extractor module for data_extractor.

DataExtractor is the public entry point of the engine: it walks a schema
against a document and returns the assembled data.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional

from bs4.element import Tag
from playwright.async_api import ElementHandle, Page

from .browser import PlaywrightScope
from .config import ExtractorConfig
from .document import QueryScope
from .exceptions import InvalidSchema, MissingSchema
from .resolvers import ResolverRegistry
from .soup import SoupScope

logger = logging.getLogger(__name__)


def as_scope(target: Any) -> QueryScope:
    """
    Wrap a document in the matching QueryScope.

    Args:
        target: QueryScope, BeautifulSoup tree or tag, Playwright Page or ElementHandle

    Returns:
        Scope for the target

    Raises:
        TypeError: If the target is not a supported document type
    """
    if isinstance(target, QueryScope):
        return target
    if isinstance(target, Tag):
        return SoupScope(target)
    if isinstance(target, (Page, ElementHandle)):
        return PlaywrightScope(target)
    raise TypeError(f"Cannot extract from {type(target).__name__}")


class DataExtractor:
    """
    Extracts data from a document according to a schema.

    The schema maps output keys to schema nodes, for example::

        DataExtractor({
            "title": {"type": "string", "selector": "h1"},
            "price": {"type": "number", "selector": ".price"},
        })

    Top-level nodes with an unrecognized ``type`` are skipped and produce no
    key in the result. The extractor keeps no state between calls.
    """

    def __init__(self, schema: Optional[Mapping], config: Optional[ExtractorConfig] = None):
        """
        Initialize DataExtractor.

        Args:
            schema: Mapping of output keys to schema nodes
            config: Engine options

        Raises:
            MissingSchema: If no schema is given
        """
        if schema is None:
            raise MissingSchema()
        if not isinstance(schema, Mapping):
            raise InvalidSchema(f"Schema must be a mapping, got {type(schema).__name__}.")

        self.schema = schema
        self.config = config or ExtractorConfig()
        self.registry = ResolverRegistry(concurrent_keys=self.config.concurrent_keys)

    async def extract_from(self, document: Any) -> Dict[str, Any]:
        """
        Extract data based on the schema from the given document.

        Args:
            document: QueryScope, bs4 tree or Playwright page/element

        Returns:
            Mapping of schema keys to extracted values

        Raises:
            ElementNotFound: If a required selector matched nothing
            NoCaseMatched: If a switch node had no matching case
            InvalidSchema: If a node reached during the walk is malformed
        """
        scope = as_scope(document)
        logger.debug(f"Extracting {len(self.schema)} keys from {scope!r}")
        return await self.registry.resolve_properties(scope, self.schema)

    async def extract_from_html(self, html: str, parser: str = "html.parser") -> Dict[str, Any]:
        """Parse HTML with BeautifulSoup and extract from it."""
        return await self.extract_from(SoupScope.from_html(html, parser))
