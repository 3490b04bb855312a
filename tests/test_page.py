import pytest

import menus.extractor.page as page_module
from menus.extractor import (
    ExtractedItem,
    ExtractionTier,
    MenuItemRecord,
    MenuPageExtractor,
    PRICE_BLOCK_ITEM_NAME,
    PageReport,
    SoupDocument,
)


URL = "https://tonys.example/menu"


class _BrokenDocument:
    """Document whose selector queries always fail."""

    def body_text(self):
        return "menu"

    def select(self, selector):
        raise RuntimeError("selector engine exploded")

    def select_one(self, selector):
        return None

    def all_elements(self):
        raise RuntimeError("selector engine exploded")


def test_price_block_fallback(parse):
    document = parse(
        """
        <body>
          <section><h2>Our price list</h2><p>Ask our staff</p></section>
          <div class="price">€8</div>
        </body>
        """
    )

    items, report = MenuPageExtractor().extract_all(document, URL)

    assert len(items) == 1
    assert items[0].tier is ExtractionTier.FALLBACK
    assert items[0].record.to_json() == {
        "restaurant_name": "",
        "item_name": PRICE_BLOCK_ITEM_NAME,
        "category": "",
        "price": "€8",
        "currency": "€",
        "description": "",
        "url": URL,
    }
    assert report.records_by_tier == {"fallback": 1}


def test_fallback_not_used_when_items_found(parse):
    document = parse(
        """
        <body>
          <section><ul><li>Cola $2</li></ul></section>
          <div class="price">€8</div>
        </body>
        """
    )

    items, _ = MenuPageExtractor().extract_all(document, URL)

    assert [item.tier for item in items] == [ExtractionTier.LIST]


def test_no_records_and_no_price_block(parse):
    items, report = MenuPageExtractor().extract_all(parse("<body><p>See our menu soon</p></body>"), URL)

    assert items == []
    assert not report.skipped
    assert report.record_count == 0


def test_non_menu_page_is_skipped(parse):
    document = parse("<body><div class='price'>€8</div><p>About us</p></body>")

    items, report = MenuPageExtractor().extract_all(document, "https://tonys.example/about")

    assert items == []
    assert report.skipped


def test_extraction_errors_are_contained():
    items, report = MenuPageExtractor().extract_all(_BrokenDocument(), URL)

    assert items == []
    assert report.failed
    assert report.error.startswith("RuntimeError")


def test_records_emitted_before_failure_are_kept(parse, monkeypatch):
    record = MenuItemRecord(
        restaurant_name="",
        item_name="Cola",
        category="",
        price="$2",
        currency="$",
        description="",
        url=URL,
    )

    class _FailingItemExtractor:
        def __init__(self, restaurant_name, url):
            pass

        def extract(self, container, seen):
            seen.add_if_new(record.dedup_key)
            yield ExtractedItem(record=record, tier=ExtractionTier.LIST)
            raise ValueError("bad markup")

    monkeypatch.setattr(page_module, "ItemExtractor", _FailingItemExtractor)
    document = parse('<body><div class="menu">Cola $2</div><span class="price">$9</span></body>')

    report = PageReport(url=URL)
    items = list(MenuPageExtractor().extract(document, URL, report=report))

    assert [item.record for item in items] == [record]
    assert report.error == "ValueError: bad markup"


def test_fallback_limit_must_be_positive():
    with pytest.raises(ValueError):
        MenuPageExtractor(fallback_limit=0)


def test_declared_charset_is_honored():
    html = (
        '<html><head><meta charset="windows-1252"></head><body>'
        '<ul class="menu"><li>Fish and Chips - Cod, mushy peas £9.50</li></ul>'
        "</body></html>"
    ).encode("cp1252")

    items, report = MenuPageExtractor().extract_all(SoupDocument.from_html(html), URL)

    assert [item.record.price for item in items] == ["£9.50"]
    assert items[0].record.item_name == "Fish and Chips"
    assert items[0].record.currency == "£"
    assert report.container_count == 1


def test_menu_tier_without_items_does_not_fall_through_to_sweep(parse):
    document = parse(
        """
        <body>
          <section><h2>Prices</h2><p>Ask about our price list</p></section>
          <div><p>Coffee $3</p></div>
        </body>
        """
    )

    items, report = MenuPageExtractor().extract_all(document, URL)

    assert items == []
    assert report.container_tier == "menu"
    assert report.container_count == 1
    assert report.record_count == 0
