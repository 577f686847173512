"""Shared fixtures for the listing scraper test suite.

The Playwright fakes below model just enough of the async API used by the
scraper: ``browser.new_context()``, ``context.new_page()``, ``page.goto()``,
``page.content()``, ``page.locator()`` and the locator methods ``all()``,
``first``, ``count()``, ``locator()``, ``text_content()`` and
``get_attribute()``.  A ``FakeSite`` maps URLs to documents so tests can
describe listing and detail pages declaratively.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

# Ensure the project modules are importable from tests/
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from browser import BrowserSession
from extractors import ProductExtractor
from handlers import PacingPolicy


# ---------------------------------------------------------------------------
# DOM fakes
# ---------------------------------------------------------------------------


@dataclass
class FakeNode:
    text: str | None = None
    attrs: dict[str, str] = field(default_factory=dict)
    children: dict[str, list["FakeNode"]] = field(default_factory=dict)
    broken: bool = False


class FakeLocator:
    def __init__(self, nodes: list[FakeNode]) -> None:
        self._nodes = nodes

    async def all(self) -> list["FakeLocator"]:
        return [FakeLocator([n]) for n in self._nodes]

    @property
    def first(self) -> "FakeLocator":
        return FakeLocator(self._nodes[:1])

    async def count(self) -> int:
        return len(self._nodes)

    def locator(self, selector: str) -> "FakeLocator":
        found: list[FakeNode] = []
        for node in self._nodes:
            if node.broken:
                raise RuntimeError("element detached from DOM")
            found.extend(node.children.get(selector, []))
        return FakeLocator(found)

    async def text_content(self) -> str | None:
        return self._nodes[0].text

    async def get_attribute(self, name: str) -> str | None:
        return self._nodes[0].attrs.get(name)


@dataclass
class FakeDocument:
    html: str = "<html></html>"
    dom: dict[str, list[FakeNode]] = field(default_factory=dict)


class FakeSite:
    """URL -> document map plus a log of every navigation."""

    def __init__(self) -> None:
        self.documents: dict[str, FakeDocument] = {}
        self.errors: dict[str, Exception] = {}
        self.visits: list[str] = []
        self.goto_kwargs: list[dict[str, Any]] = []

    def add(self, url: str, document: FakeDocument) -> None:
        self.documents[url] = document

    def fail(self, url: str, exc: Exception) -> None:
        self.errors[url] = exc


class FakePage:
    def __init__(self, site: FakeSite, context: "FakeContext") -> None:
        self._site = site
        self.context = context
        self.url = "about:blank"
        self.closed = False

    async def goto(self, url: str, **kwargs: Any) -> None:
        self._site.visits.append(url)
        self._site.goto_kwargs.append(kwargs)
        if url in self._site.errors:
            raise self._site.errors[url]
        self.url = url

    def _document(self) -> FakeDocument:
        return self._site.documents.get(self.url, FakeDocument())

    async def content(self) -> str:
        return self._document().html

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self._document().dom.get(selector, []))

    async def close(self) -> None:
        self.closed = True


class FakeContext:
    def __init__(self, site: FakeSite, options: dict[str, Any]) -> None:
        self._site = site
        self.options = options
        self.pages: list[FakePage] = []
        self.closed = False

    async def new_page(self) -> FakePage:
        page = FakePage(self._site, self)
        self.pages.append(page)
        return page

    async def close(self) -> None:
        self.closed = True


class FakeBrowser:
    def __init__(self, site: FakeSite) -> None:
        self._site = site
        self.contexts: list[FakeContext] = []
        self.closed = False

    async def new_context(self, **options: Any) -> FakeContext:
        context = FakeContext(self._site, options)
        self.contexts.append(context)
        return context

    async def close(self) -> None:
        self.closed = True

    @property
    def pages(self) -> list[FakePage]:
        return [p for c in self.contexts for p in c.pages]


class FakeLauncher:
    """Callable injected into ``BrowserSession``; counts launches."""

    def __init__(self, site: FakeSite) -> None:
        self.site = site
        self.browsers: list[FakeBrowser] = []

    async def __call__(self) -> FakeBrowser:
        browser = FakeBrowser(self.site)
        self.browsers.append(browser)
        return browser

    @property
    def last(self) -> FakeBrowser:
        return self.browsers[-1]


# ---------------------------------------------------------------------------
# Page builders
# ---------------------------------------------------------------------------


def make_card(
    *,
    name: str | None = "Item",
    price: str | None = "$10.00",
    href: str | None = "/itm/1",
    src: str | None = "https://i.example.com/1.jpg",
    broken: bool = False,
) -> FakeNode:
    children: dict[str, list[FakeNode]] = {}
    if name is not None:
        children[".s-item__title"] = [FakeNode(text=name)]
    if price is not None:
        children[".s-item__price"] = [FakeNode(text=price)]
    if href is not None:
        children["a.s-item__link"] = [FakeNode(attrs={"href": href})]
    if src is not None:
        children["img"] = [FakeNode(attrs={"src": src})]
    return FakeNode(children=children, broken=broken)


def listing_document(
    count: int, *, base: str = "https://site", with_links: bool = True,
    selector: str = ".s-item", page: int = 1,
) -> FakeDocument:
    cards = [
        make_card(
            name=f"Item {page}-{i}",
            price=f"${i}.99",
            href=f"{base}/itm/{page}-{i}" if with_links else None,
            src=f"{base}/img/{page}-{i}.jpg",
        )
        for i in range(1, count + 1)
    ]
    return FakeDocument(html=f"<html>listing page {page}</html>", dom={selector: cards})


def detail_document(description: str | None) -> FakeDocument:
    dom: dict[str, list[FakeNode]] = {}
    if description is not None:
        dom["#x-item-description-label + div"] = [FakeNode(text=description)]
    return FakeDocument(html="<html>detail</html>", dom=dom)


class StubExtractor(ProductExtractor):
    """Extractor with canned answers that records how often it ran."""

    def __init__(self, name: str, products=None, description: str = "-") -> None:
        self.name = name
        self.products = products or []
        self.description = description
        self.product_calls = 0
        self.description_calls = 0

    async def extract_products(self, html, page=None):
        self.product_calls += 1
        return [dict(p) for p in self.products]

    async def extract_description(self, html, page=None):
        self.description_calls += 1
        return self.description


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def site():
    return FakeSite()


@pytest.fixture
def launcher(site):
    return FakeLauncher(site)


@pytest.fixture
def session(launcher):
    """Browser session backed by fake Playwright objects (no stealth)."""
    return BrowserSession(launcher=launcher, stealth=False)


@pytest.fixture
def fast_policy():
    return PacingPolicy.immediate()
