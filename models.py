"""
Product record and the helpers that keep it well-formed.

Extractors return loose dicts (model output or DOM text).  ``Product.from_raw``
is the single place where those dicts are coerced into the public shape:
every field a non-empty string, unresolved fields set to the sentinel, and
links/images either absolute http(s) URLs or the sentinel.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import urljoin, urlparse

from config.settings import DEFAULT_SITE_ORIGIN, SENTINEL

_RE_WS = re.compile(r"\s+")

# Keys the model or DOM layer may use for the image field.
_IMAGE_KEYS = ("imageUrl", "image_url", "image")


def clean_text(value: Any) -> str:
    """Collapse whitespace; anything blank or non-textual becomes the sentinel."""
    if value is None or isinstance(value, (dict, list, tuple, set)):
        return SENTINEL
    text = _RE_WS.sub(" ", str(value)).strip()
    return text or SENTINEL


def site_origin(url: str | None) -> str:
    """Return ``scheme://host`` for *url*, or the default site origin."""
    try:
        parsed = urlparse(url or "")
    except ValueError:
        return DEFAULT_SITE_ORIGIN
    if parsed.scheme in ("http", "https") and parsed.netloc:
        return f"{parsed.scheme}://{parsed.netloc}"
    return DEFAULT_SITE_ORIGIN


def absolute_url(value: Any, base_url: str | None = None) -> str:
    """Complete a possibly-relative URL against *base_url*.

    Absolute http(s) URLs pass through unchanged.  Protocol-relative and
    path-relative values are joined onto the base.  Anything that still is
    not an http(s) URL (``javascript:``, ``data:``, ``#``) is the sentinel.
    """
    text = clean_text(value)
    if text == SENTINEL:
        return SENTINEL

    try:
        return _resolve(text, base_url)
    except ValueError:
        # urlparse rejects malformed netlocs such as "http://[broken".
        return SENTINEL


def _has_host(url: str | None) -> bool:
    try:
        return bool(url and urlparse(url).netloc)
    except ValueError:
        return False


def _resolve(text: str, base_url: str | None) -> str:
    parsed = urlparse(text)
    if parsed.scheme in ("http", "https") and parsed.netloc:
        return text
    if parsed.scheme and parsed.scheme not in ("http", "https"):
        return SENTINEL
    if text.startswith("#"):
        return SENTINEL

    base = base_url if _has_host(base_url) else site_origin(base_url)
    joined = urljoin(base, text)
    joined_parsed = urlparse(joined)
    if joined_parsed.scheme in ("http", "https") and joined_parsed.netloc:
        return joined
    return SENTINEL


@dataclass(frozen=True)
class Product:
    """One product summary from a listing page."""

    name: str = SENTINEL
    price: str = SENTINEL
    link: str = SENTINEL
    image_url: str = SENTINEL
    description: str = SENTINEL

    @classmethod
    def from_raw(cls, raw: dict[str, Any], base_url: str | None = None) -> "Product":
        image = SENTINEL
        for key in _IMAGE_KEYS:
            if key in raw:
                image = raw[key]
                break
        return cls(
            name=clean_text(raw.get("name")),
            price=clean_text(raw.get("price")),
            link=absolute_url(raw.get("link"), base_url),
            image_url=absolute_url(image, base_url),
            description=clean_text(raw.get("description")),
        )

    @property
    def has_link(self) -> bool:
        return self.link != SENTINEL

    def with_description(self, description: Any) -> "Product":
        return replace(self, description=clean_text(description))

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "price": self.price,
            "description": self.description,
            "link": self.link,
            "imageUrl": self.image_url,
        }


@dataclass
class ScrapeResult:
    """Accumulated output of one paginated scrape."""

    products: list[Product] = field(default_factory=list)
    pages_scraped: int = 0
    stop_reason: str = "max_pages"

    @property
    def total(self) -> int:
        return len(self.products)

    def to_payload(self) -> dict[str, Any]:
        return {
            "success": True,
            "totalProducts": self.total,
            "products": [p.to_dict() for p in self.products],
        }
