"""
DOM-selector extractor.

Works on the live Playwright page only, no network calls.  Container
selectors are tried in order and the first one that matches anything is
used; inside each card the name / price / link / image candidates are
tried in order as well, falling back to the sentinel.

The selector lists target eBay search results (classic ``.s-item`` and the
newer ``.s-card`` layout) and eBay item pages.
"""

from __future__ import annotations

import logging
from typing import Any

from playwright.async_api import Locator, Page

from config.settings import SENTINEL
from models import clean_text
from .base import ProductExtractor

logger = logging.getLogger(__name__)

_CONTAINER_SELECTORS = [
    ".s-item",
    ".srp-results .s-item",
    '[data-testid="item-cell"]',
    "li.s-card",
]

_NAME_SELECTORS = [
    ".s-item__title",
    ".s-card__title",
    ".s-item__link",
    "h3",
    '[data-testid="item-title"]',
]

_PRICE_SELECTORS = [
    ".s-item__price",
    ".s-card__price",
    ".notranslate",
    '[data-testid="item-price"]',
]

_LINK_SELECTORS = [
    "a.s-item__link",
    "a",
]

_IMAGE_SELECTORS = [
    "img",
]

# Lazy-loaded images keep the real URL in data-src until scrolled into view.
_IMAGE_ATTRIBUTES = ("src", "data-src")

_DESCRIPTION_SELECTORS = [
    "#x-item-description-label + div",
    ".x-item-description",
    ".item-description",
    '[data-testid="x-item-description-label"] + div',
    ".u-flL.condText",
]

# Cards that look like listings but are banners ("Shop on eBay" ghost item).
_PLACEHOLDER_NAMES = ("Shop on eBay",)


def is_placeholder(name: str) -> bool:
    if name == SENTINEL:
        return True
    return any(marker.lower() in name.lower() for marker in _PLACEHOLDER_NAMES)


async def _first_text(card: Locator | Page, selectors: list[str]) -> str:
    for selector in selectors:
        found = card.locator(selector).first
        if await found.count() == 0:
            continue
        text = clean_text(await found.text_content())
        if text != SENTINEL:
            return text
    return SENTINEL


async def _first_attribute(
    card: Locator, selectors: list[str], attributes: tuple[str, ...],
) -> str:
    for selector in selectors:
        found = card.locator(selector).first
        if await found.count() == 0:
            continue
        for attribute in attributes:
            value = (await found.get_attribute(attribute) or "").strip()
            # Lazy-load placeholders are inline data: GIFs; keep looking.
            if value and not value.lower().startswith("data:"):
                return value
    return SENTINEL


class SelectorExtractor(ProductExtractor):
    """Fallback extractor that reads fields straight out of the DOM."""

    name = "selectors"

    async def extract_products(
        self, html: str, page: Page | None = None,
    ) -> list[dict[str, Any]]:
        if page is None:
            return []
        try:
            return await self._extract_cards(page)
        except Exception as exc:
            logger.warning("Fallback extraction failed: %s", exc)
            return []

    async def extract_description(
        self, html: str, page: Page | None = None,
    ) -> str:
        if page is None:
            return SENTINEL
        try:
            return await _first_text(page, _DESCRIPTION_SELECTORS)
        except Exception as exc:
            logger.warning("Fallback description lookup failed: %s", exc)
            return SENTINEL

    async def _extract_cards(self, page: Page) -> list[dict[str, Any]]:
        cards: list[Locator] = []
        for selector in _CONTAINER_SELECTORS:
            cards = await page.locator(selector).all()
            if cards:
                logger.debug("Selector %r matched %d cards", selector, len(cards))
                break

        products: list[dict[str, Any]] = []
        for card in cards:
            try:
                name = await _first_text(card, _NAME_SELECTORS)
                if is_placeholder(name):
                    continue
                products.append({
                    "name": name,
                    "price": await _first_text(card, _PRICE_SELECTORS),
                    "link": await _first_attribute(card, _LINK_SELECTORS, ("href",)),
                    "imageUrl": await _first_attribute(
                        card, _IMAGE_SELECTORS, _IMAGE_ATTRIBUTES,
                    ),
                })
            except Exception:
                logger.debug("Failed to extract a product card", exc_info=True)
        return products
