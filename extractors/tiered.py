"""
Two-tier extraction policy.

Extractors are tried in order and the first non-empty answer wins; results
from different extractors are never merged for the same page.  With an
extraction-service key configured the chain is ``[AIExtractor,
SelectorExtractor]``, without one it is just ``[SelectorExtractor]``.
"""

from __future__ import annotations

import logging

import httpx
from playwright.async_api import Page

from config import settings
from config.settings import SENTINEL
from models import Product, clean_text
from .ai import AIExtractor
from .base import ProductExtractor
from .dom import SelectorExtractor

logger = logging.getLogger(__name__)


class TieredExtractor:
    """Runs extractors in priority order and normalizes the winner's output."""

    def __init__(self, extractors: list[ProductExtractor]) -> None:
        if not extractors:
            raise ValueError("TieredExtractor needs at least one extractor")
        self.extractors = list(extractors)

    @property
    def names(self) -> list[str]:
        return [e.name for e in self.extractors]

    async def extract_products(
        self, html: str, page: Page | None = None,
    ) -> list[Product]:
        """Return partial products (no description) for a listing page."""
        base_url = page.url if page is not None else None
        for extractor in self.extractors:
            raw = await extractor.extract_products(html, page)
            if raw:
                logger.info(
                    "Extracted %d products via %s", len(raw), extractor.name,
                )
                return [
                    Product.from_raw(item, base_url).with_description(SENTINEL)
                    for item in raw
                ]
            logger.info("%s extraction returned nothing", extractor.name)
        return []

    async def extract_description(
        self, html: str, page: Page | None = None,
    ) -> str:
        for extractor in self.extractors:
            description = clean_text(await extractor.extract_description(html, page))
            if description != SENTINEL:
                return description
        return SENTINEL


def build_extractor(
    client: httpx.AsyncClient | None = None,
    *,
    api_url: str | None = None,
    api_key: str | None = None,
) -> TieredExtractor:
    """Build the default chain from settings (overridable for tests)."""
    api_url = settings.DEEPSEEK_API_URL if api_url is None else api_url
    api_key = settings.DEEPSEEK_API_KEY if api_key is None else api_key

    extractors: list[ProductExtractor] = []
    if client is not None and api_url and api_key:
        extractors.append(AIExtractor(client, api_url=api_url, api_key=api_key))
    else:
        logger.info("Extraction service not configured, using selectors only")
    extractors.append(SelectorExtractor())
    return TieredExtractor(extractors)
