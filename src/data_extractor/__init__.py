"""
data_extractor - Schema-driven structured data extraction from HTML documents

This package walks a declarative schema against a queryable document and
returns JSON-shaped data, with support for:
- String, number and boolean values with type coercion
- Nested objects and arrays resolved relative to their parent element
- HTML tables with per-column specs and column-default fall-through
- Custom extraction callbacks and switch cases
- In-memory (BeautifulSoup) and live browser (Playwright) documents
- Page loading through Crawl4AI
"""

__version__ = "0.4.0"

from .config import load_config, load_schema, Config, Job, ExtractorConfig, FetchConfig
from .converters import identity, to_number, to_boolean
from .document import QueryScope, BrowserScript
from .exceptions import DataExtractorError, ElementNotFound, NoCaseMatched, InvalidSchema, MissingSchema
from .schema import (
    SchemaNode,
    StringNode,
    NumberNode,
    BooleanNode,
    ArrayNode,
    ObjectNode,
    TableNode,
    CustomNode,
    SwitchNode,
    SwitchCase,
)
from .resolvers import Resolver, ResolverRegistry, spec_at
from .soup import SoupScope
from .browser import PlaywrightScope
from .extractor import DataExtractor, as_scope
from .fetch import PageFetcher, FetchError, fetch_document
from .cli import main

__all__ = [
    "load_config",
    "load_schema",
    "Config",
    "Job",
    "ExtractorConfig",
    "FetchConfig",
    "identity",
    "to_number",
    "to_boolean",
    "QueryScope",
    "BrowserScript",
    "DataExtractorError",
    "ElementNotFound",
    "NoCaseMatched",
    "InvalidSchema",
    "MissingSchema",
    "SchemaNode",
    "StringNode",
    "NumberNode",
    "BooleanNode",
    "ArrayNode",
    "ObjectNode",
    "TableNode",
    "CustomNode",
    "SwitchNode",
    "SwitchCase",
    "Resolver",
    "ResolverRegistry",
    "spec_at",
    "SoupScope",
    "PlaywrightScope",
    "DataExtractor",
    "as_scope",
    "PageFetcher",
    "FetchError",
    "fetch_document",
    "main",
]
