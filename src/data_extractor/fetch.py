"""
Fetch module for data_extractor.

Loads pages for extraction: rendered through Crawl4AI's AsyncWebCrawler, or
as raw HTML through requests. Either way the result is wrapped in a
SoupScope. The extraction engine itself never loads pages.
"""

import asyncio
import logging
from typing import Optional

import requests
from crawl4ai import AsyncWebCrawler, BrowserConfig, CacheMode, CrawlerRunConfig

from .config import FetchConfig
from .soup import SoupScope

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """A page could not be loaded."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")


class PageFetcher:
    """
    Renders pages with Crawl4AI.

    Manages the AsyncWebCrawler lifecycle; use as an async context manager.
    """

    def __init__(self, config: Optional[FetchConfig] = None):
        """
        Initialize PageFetcher.

        Args:
            config: Fetch options, defaults to FetchConfig()
        """
        self.config = config or FetchConfig()
        self.crawler: Optional[AsyncWebCrawler] = None
        self.browser_config = self._build_browser_config()

    def _build_browser_config(self) -> BrowserConfig:
        return BrowserConfig(
            headless=self.config.headless,
            verbose=False,
            extra_args=[
                "--disable-gpu",
                "--disable-dev-shm-usage",
                "--no-sandbox",
            ]
        )

    def build_run_config(self) -> CrawlerRunConfig:
        """Build the per-page run configuration."""
        wait_for = f"css:{self.config.wait_for}" if self.config.wait_for else None
        return CrawlerRunConfig(
            cache_mode=CacheMode.BYPASS,
            wait_for=wait_for,
            page_timeout=int(self.config.timeout * 1000),
        )

    async def __aenter__(self):
        logger.info("Starting AsyncWebCrawler")
        self.crawler = AsyncWebCrawler(config=self.browser_config)
        await self.crawler.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.crawler:
            logger.info("Closing AsyncWebCrawler")
            await self.crawler.close()
            self.crawler = None

    async def fetch_html(self, url: str) -> str:
        """
        Render a page and return its HTML.

        Args:
            url: Page URL

        Returns:
            Rendered HTML

        Raises:
            FetchError: If the crawl did not succeed
        """
        if self.crawler is None:
            raise RuntimeError("PageFetcher must be used as an async context manager")

        logger.debug(f"Rendering {url}")
        result = await self.crawler.arun(url=url, config=self.build_run_config())

        if not result.success:
            logger.error(f"Failed to crawl {url}: {result.error_message}")
            raise FetchError(url, result.error_message or "unknown error")

        return result.html

    async def fetch(self, url: str) -> SoupScope:
        """Render a page and return a document scope for it."""
        return SoupScope.from_html(await self.fetch_html(url))


def fetch_static_html(url: str, timeout: float = 30.0) -> str:
    """
    Download a page's HTML without rendering it.

    Args:
        url: Page URL
        timeout: Request timeout in seconds

    Returns:
        Response body

    Raises:
        FetchError: If the request fails
    """
    logger.debug(f"Downloading {url}")
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Error fetching {url}: {e}")
        raise FetchError(url, str(e)) from e

    return response.text


async def fetch_document(url: str, config: Optional[FetchConfig] = None) -> SoupScope:
    """
    Load a single page as a document scope.

    Args:
        url: Page URL
        config: Fetch options; ``render=False`` skips the browser

    Returns:
        Scope for the whole document
    """
    config = config or FetchConfig()

    if not config.render:
        html = await asyncio.to_thread(fetch_static_html, url, config.timeout)
        return SoupScope.from_html(html)

    async with PageFetcher(config) as fetcher:
        return await fetcher.fetch(url)
