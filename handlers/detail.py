"""
Product detail pages: fetch one product's description.

Descriptions are best-effort.  Any failure (navigation timeout, closed
browser, extractor error) is logged and turned into the sentinel, and the
page is always closed before returning.
"""

from __future__ import annotations

import logging

from browser import BrowserSession
from config.settings import SENTINEL
from extractors import TieredExtractor
from .navigation import PacingPolicy, navigate

logger = logging.getLogger(__name__)


class DetailFetcher:
    """Loads a detail page and runs the extraction chain for its description."""

    def __init__(
        self,
        session: BrowserSession,
        extractor: TieredExtractor,
        policy: PacingPolicy | None = None,
    ) -> None:
        self.session = session
        self.extractor = extractor
        self.policy = policy or PacingPolicy()

    async def fetch_description(self, product_url: str) -> str:
        if not product_url or product_url == SENTINEL:
            return SENTINEL
        try:
            async with self.session.open_page() as page:
                html = await navigate(page, product_url, self.policy)
                return await self.extractor.extract_description(html, page)
        except Exception as exc:
            logger.warning("Error scraping product details for %s: %s", product_url, exc)
            return SENTINEL
