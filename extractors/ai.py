"""
Language-model extractor.

Sends the first ``AI_HTML_CHAR_LIMIT`` characters of a page to a
chat-completion endpoint together with a fixed instruction prompt, then
pulls the first JSON object out of the model's free-text answer.

Model output is never trusted: network errors, non-2xx responses, replies
without a JSON object, and objects of the wrong shape all collapse to an
empty result (``{"products": []}`` or ``{"description": "-"}``) so the
caller can fall back to DOM selectors.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from playwright.async_api import Page

from config.settings import (
    AI_HTML_CHAR_LIMIT, AI_MAX_TOKENS, AI_TEMPERATURE, DEEPSEEK_MODEL, SENTINEL,
)
from models import site_origin
from .base import ProductExtractor

logger = logging.getLogger(__name__)

LISTING = "listing"
DETAIL = "detail"

_LISTING_PROMPT = """\
You are an expert web scraper. Extract product information from this \
e-commerce search results HTML.
Return a JSON object with the following structure:
{{
  "products": [
    {{
      "name": "product name",
      "price": "price with currency symbol",
      "link": "product detail page URL",
      "imageUrl": "main product image URL"
    }}
  ]
}}

Rules:
- Extract ALL products from the page
- If any field is missing or empty, use "{sentinel}"
- Ensure URLs are complete (prefix {origin} to relative URLs)
- Only return valid JSON, no additional text

HTML Content:
{html}
"""

_DETAIL_PROMPT = """\
You are an expert web scraper. Extract the seller's product description \
from this e-commerce product page HTML.
Return a JSON object with the following structure:
{{
  "description": "plain-text product description"
}}

Rules:
- Summarise nothing, copy the description text as written
- If there is no description, use "{sentinel}"
- Only return valid JSON, no additional text

HTML Content:
{html}
"""

_DECODER = json.JSONDecoder()


def parse_json_object(text: str | None) -> dict[str, Any] | None:
    """Return the first JSON object embedded in *text*, or ``None``.

    Scans each ``{`` in order and decodes from there, ignoring whatever
    prose or code fences surround the object.
    """
    if not text:
        return None
    start = text.find("{")
    while start != -1:
        try:
            obj, _ = _DECODER.raw_decode(text, start)
        except ValueError:
            start = text.find("{", start + 1)
            continue
        if isinstance(obj, dict):
            return obj
        start = text.find("{", start + 1)
    return None


def empty_result(kind: str) -> dict[str, Any]:
    if kind == DETAIL:
        return {"description": SENTINEL}
    return {"products": []}


class AIExtractor(ProductExtractor):
    """Extraction through a chat-completion model (DeepSeek-compatible)."""

    name = "ai"

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        api_url: str,
        api_key: str,
        model: str = DEEPSEEK_MODEL,
        char_limit: int = AI_HTML_CHAR_LIMIT,
        temperature: float = AI_TEMPERATURE,
        max_tokens: int = AI_MAX_TOKENS,
    ) -> None:
        self._client = client
        self.api_url = api_url
        self.api_key = api_key
        self.model = model
        self.char_limit = char_limit
        self.temperature = temperature
        self.max_tokens = max_tokens

    def build_prompt(self, html: str, kind: str, base_url: str | None = None) -> str:
        snippet = (html or "")[: self.char_limit]
        if kind == DETAIL:
            return _DETAIL_PROMPT.format(sentinel=SENTINEL, html=snippet)
        return _LISTING_PROMPT.format(
            sentinel=SENTINEL, origin=site_origin(base_url), html=snippet,
        )

    async def extract(
        self, html: str, kind: str = LISTING, *, base_url: str | None = None,
    ) -> dict[str, Any]:
        """Run one extraction call.

        Returns ``{"products": [...]}`` for listing pages and
        ``{"description": str}`` for detail pages.  Never raises.
        """
        try:
            content = await self._complete(self.build_prompt(html, kind, base_url))
            data = parse_json_object(content)
            if data is None:
                raise ValueError("Invalid JSON response from AI")
            return self._validate(data, kind)
        except Exception as exc:
            logger.warning("AI extraction (%s) failed: %s", kind, exc)
            return empty_result(kind)

    async def extract_products(
        self, html: str, page: Page | None = None,
    ) -> list[dict[str, Any]]:
        base_url = page.url if page is not None else None
        result = await self.extract(html, LISTING, base_url=base_url)
        return result["products"]

    async def extract_description(
        self, html: str, page: Page | None = None,
    ) -> str:
        result = await self.extract(html, DETAIL)
        return result["description"]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _complete(self, prompt: str) -> str:
        response = await self._client.post(
            self.api_url,
            json={
                "model": self.model,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": self.temperature,
                "max_tokens": self.max_tokens,
            },
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
        )
        response.raise_for_status()
        return response.json()["choices"][0]["message"]["content"]

    @staticmethod
    def _validate(data: dict[str, Any], kind: str) -> dict[str, Any]:
        if kind == DETAIL:
            description = data.get("description")
            if not isinstance(description, str) or not description.strip():
                return {"description": SENTINEL}
            return {"description": description.strip()}

        products = data.get("products")
        if not isinstance(products, list):
            raise ValueError("AI response has no 'products' list")
        return {"products": [p for p in products if isinstance(p, dict)]}
