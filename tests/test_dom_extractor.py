"""Tests for extractors/dom.py: selector priority, placeholders, isolation."""

from __future__ import annotations

import pytest

from conftest import FakeDocument, FakeNode, FakePage, FakeSite, make_card
from extractors.dom import SelectorExtractor, is_placeholder


def _page(document: FakeDocument, url: str = "https://www.ebay.com/sch/i.html?_pgn=1") -> FakePage:
    site = FakeSite()
    site.add(url, document)
    page = FakePage(site, context=None)
    page.url = url
    return page


@pytest.mark.asyncio
async def test_extracts_fields_from_cards():
    page = _page(FakeDocument(dom={".s-item": [
        make_card(name="Canon AE-1", price="$120.00", href="https://www.ebay.com/itm/1",
                  src="https://i.ebayimg.com/1.jpg"),
    ]}))

    products = await SelectorExtractor().extract_products("<html/>", page)

    assert products == [{
        "name": "Canon AE-1",
        "price": "$120.00",
        "link": "https://www.ebay.com/itm/1",
        "imageUrl": "https://i.ebayimg.com/1.jpg",
    }]


@pytest.mark.asyncio
async def test_first_matching_container_selector_wins():
    page = _page(FakeDocument(dom={
        '[data-testid="item-cell"]': [make_card(name="From test id")],
        ".srp-results .s-item": [make_card(name="From results list")],
    }))

    products = await SelectorExtractor().extract_products("", page)

    assert [p["name"] for p in products] == ["From results list"]


@pytest.mark.asyncio
async def test_new_card_layout_selectors():
    card = FakeNode(children={
        ".s-card__title": [FakeNode(text="Leica M6")],
        ".s-card__price": [FakeNode(text="$2,400.00")],
        "a": [FakeNode(attrs={"href": "/itm/77"})],
        "img": [FakeNode(attrs={"data-src": "https://i.ebayimg.com/77.jpg"})],
    })
    page = _page(FakeDocument(dom={"li.s-card": [card]}))

    products = await SelectorExtractor().extract_products("", page)

    assert products == [{
        "name": "Leica M6",
        "price": "$2,400.00",
        "link": "/itm/77",
        "imageUrl": "https://i.ebayimg.com/77.jpg",
    }]


@pytest.mark.asyncio
async def test_lazy_image_placeholder_falls_through_to_data_src():
    card = make_card(name="Lazy", src=None)
    card.children["img"] = [FakeNode(attrs={
        "src": "data:image/gif;base64,R0lGODlhAQABAIAAAP",
        "data-src": "https://i.ebayimg.com/lazy.jpg",
    })]
    page = _page(FakeDocument(dom={".s-item": [card]}))

    [product] = await SelectorExtractor().extract_products("", page)

    assert product["imageUrl"] == "https://i.ebayimg.com/lazy.jpg"


@pytest.mark.asyncio
async def test_missing_fields_become_sentinel():
    page = _page(FakeDocument(dom={".s-item": [
        make_card(name="Bare listing", price=None, href=None, src=None),
    ]}))

    products = await SelectorExtractor().extract_products("", page)

    assert products == [{"name": "Bare listing", "price": "-", "link": "-", "imageUrl": "-"}]


@pytest.mark.asyncio
async def test_placeholder_and_nameless_cards_are_dropped():
    page = _page(FakeDocument(dom={".s-item": [
        make_card(name="Shop on eBay"),
        make_card(name=None),
        make_card(name="   "),
        make_card(name="Real item"),
    ]}))

    products = await SelectorExtractor().extract_products("", page)

    assert [p["name"] for p in products] == ["Real item"]


@pytest.mark.asyncio
async def test_broken_card_does_not_abort_page():
    page = _page(FakeDocument(dom={".s-item": [
        make_card(name="First"),
        make_card(name="Detached", broken=True),
        make_card(name="Third"),
    ]}))

    products = await SelectorExtractor().extract_products("", page)

    assert [p["name"] for p in products] == ["First", "Third"]


@pytest.mark.asyncio
async def test_no_containers_returns_empty_list():
    page = _page(FakeDocument(dom={}))
    assert await SelectorExtractor().extract_products("", page) == []


@pytest.mark.asyncio
async def test_without_page_returns_empty_list():
    assert await SelectorExtractor().extract_products("<html/>", None) == []


@pytest.mark.asyncio
async def test_repeated_extraction_is_identical():
    page = _page(FakeDocument(dom={".s-item": [
        make_card(name=f"Item {i}", href=f"/itm/{i}") for i in range(5)
    ]}))
    extractor = SelectorExtractor()

    first = await extractor.extract_products("", page)
    second = await extractor.extract_products("", page)

    assert first == second
    assert len(first) == 5


class TestDescription:

    @pytest.mark.asyncio
    async def test_first_matching_description_selector(self):
        page = _page(FakeDocument(dom={
            ".item-description": [FakeNode(text="Lower priority")],
            ".x-item-description": [FakeNode(text="  Used, works\n great ")],
        }))
        assert await SelectorExtractor().extract_description("", page) == "Used, works great"

    @pytest.mark.asyncio
    async def test_condition_text_fallback(self):
        page = _page(FakeDocument(dom={".u-flL.condText": [FakeNode(text="New")]}))
        assert await SelectorExtractor().extract_description("", page) == "New"

    @pytest.mark.asyncio
    async def test_no_description_returns_sentinel(self):
        page = _page(FakeDocument(dom={}))
        assert await SelectorExtractor().extract_description("", page) == "-"


@pytest.mark.parametrize("name,expected", [
    ("-", True),
    ("Shop on eBay", True),
    ("SHOP ON EBAY banner", True),
    ("Sony A7 III", False),
])
def test_is_placeholder(name, expected):
    assert is_placeholder(name) is expected
