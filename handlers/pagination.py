"""
Listing pagination.

Pages are addressed through the ``_pgn`` query parameter: the listing URL is
expected to contain ``_pgn=1`` and each iteration rewrites it to the current
page number.  A URL without the marker is loaded unchanged on every
iteration.

Termination signals, in order of precedence:
  - an exception while loading / extracting a page  -> stop, keep results
  - a page that yields zero products                -> stop (end of results)
  - ``max_pages`` reached

An empty page is the EXPECTED end condition, not an error.
"""

from __future__ import annotations

import logging
import re

from browser import BrowserSession
from config.settings import DEFAULT_MAX_PAGES, PAGINATION_PARAM, SENTINEL
from extractors import TieredExtractor
from models import Product, ScrapeResult
from .detail import DetailFetcher
from .navigation import PacingPolicy, navigate, pause

logger = logging.getLogger(__name__)

# "_pgn=1" but not "_pgn=10", "_pgn=12", ...
_RE_FIRST_PAGE = re.compile(re.escape(f"{PAGINATION_PARAM}=1") + r"(?!\d)")


def page_url(url: str, page_number: int) -> str:
    """Return *url* with its first-page marker pointed at *page_number*."""
    return _RE_FIRST_PAGE.sub(f"{PAGINATION_PARAM}={page_number}", url, count=1)


class ListingPaginator:
    """Walks listing pages, extracting products and their descriptions."""

    def __init__(
        self,
        session: BrowserSession,
        extractor: TieredExtractor,
        detail_fetcher: DetailFetcher | None = None,
        policy: PacingPolicy | None = None,
    ) -> None:
        self.session = session
        self.extractor = extractor
        self.policy = policy or PacingPolicy()
        self.detail_fetcher = detail_fetcher or DetailFetcher(
            session, extractor, self.policy,
        )

    async def run(self, url: str, max_pages: int = DEFAULT_MAX_PAGES) -> ScrapeResult:
        if max_pages < 1:
            raise ValueError(f"max_pages must be >= 1, got {max_pages}")

        result = ScrapeResult()
        for page_number in range(1, max_pages + 1):
            logger.info("Scraping page %d/%d...", page_number, max_pages)
            result.pages_scraped = page_number

            try:
                products = await self._scrape_page(page_url(url, page_number))
            except Exception as exc:
                logger.error("Error on page %d: %s", page_number, exc)
                result.stop_reason = "error"
                break

            if not products:
                logger.info("No more products found, stopping pagination")
                result.stop_reason = "empty_page"
                break

            result.products.extend(products)
            logger.info("Found %d products on page %d", len(products), page_number)

            if page_number < max_pages:
                await pause(self.policy.between_pages_sec)

        logger.info(
            "Pagination finished: %d products from %d page(s) (%s)",
            result.total, result.pages_scraped, result.stop_reason,
        )
        return result

    async def _scrape_page(self, target_url: str) -> list[Product]:
        async with self.session.open_page() as page:
            html = await navigate(page, target_url, self.policy, settle=True)
            products = await self.extractor.extract_products(html, page)
            if not products:
                return []

            described: list[Product] = []
            for index, product in enumerate(products, start=1):
                if product.has_link:
                    logger.info(
                        "Getting description for product %d/%d", index, len(products),
                    )
                    description = await self.detail_fetcher.fetch_description(product.link)
                else:
                    description = SENTINEL
                described.append(product.with_description(description))
            return described
