"""
Abstract base class for product extractors.

An extractor turns one loaded page into raw product dicts (listing pages)
or a description string (detail pages).  Implementations never raise for
ordinary failures: an empty list / the sentinel means "nothing usable",
which lets ``TieredExtractor`` fall through to the next strategy.
"""

from __future__ import annotations

import abc
from typing import Any

from playwright.async_api import Page


class ProductExtractor(abc.ABC):
    """Interface shared by the AI and DOM-selector extractors."""

    #: short label used in log lines
    name: str = "extractor"

    @abc.abstractmethod
    async def extract_products(
        self, html: str, page: Page | None = None,
    ) -> list[dict[str, Any]]:
        """Return raw product dicts (``name``, ``price``, ``link``,
        ``imageUrl``) found in a listing page.

        *html* is the rendered page content; *page* is the live Playwright
        page for extractors that query the DOM directly.
        """
        ...

    @abc.abstractmethod
    async def extract_description(
        self, html: str, page: Page | None = None,
    ) -> str:
        """Return the product description from a detail page, or the
        sentinel when none could be found."""
        ...
