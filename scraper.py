"""
Top-level scrape call.

One call = one browser session + one HTTP client for the extraction
service, both released on every exit path (success, early stop, error).
"""

from __future__ import annotations

import logging

import httpx

from browser import BrowserSession
from config import settings
from config.settings import DEFAULT_MAX_PAGES
from extractors import TieredExtractor, build_extractor
from handlers import DetailFetcher, ListingPaginator, PacingPolicy
from models import ScrapeResult

logger = logging.getLogger(__name__)


async def scrape_listing(
    url: str,
    max_pages: int = DEFAULT_MAX_PAGES,
    *,
    session: BrowserSession | None = None,
    extractor: TieredExtractor | None = None,
    policy: PacingPolicy | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> ScrapeResult:
    """Scrape up to *max_pages* listing pages starting at *url*.

    Every collaborator can be injected; by default a fresh browser session
    and extraction client are built from ``config.settings``.
    """
    policy = policy or PacingPolicy()
    session = session or BrowserSession()
    owns_client = http_client is None and extractor is None
    if owns_client:
        http_client = httpx.AsyncClient(timeout=settings.AI_TIMEOUT_SEC)

    try:
        if extractor is None:
            extractor = build_extractor(http_client)
        logger.info(
            "Starting scrape of %s (max_pages=%d, extractors=%s)",
            url, max_pages, ",".join(extractor.names),
        )
        async with session:
            paginator = ListingPaginator(
                session,
                extractor,
                DetailFetcher(session, extractor, policy),
                policy,
            )
            return await paginator.run(url, max_pages)
    finally:
        if owns_client:
            await http_client.aclose()
