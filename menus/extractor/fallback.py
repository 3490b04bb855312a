"""Page-level price-block fallback for pages where item parsing found nothing."""

from __future__ import annotations

import logging

from .document import PageDocument
from .patterns import detect_currency
from .types import MenuItemRecord


LOGGER = logging.getLogger(__name__)

PRICE_BLOCK_SELECTOR = '[class*="price"], .price, .cost, .amount'
PRICE_BLOCK_ITEM_NAME = "price_block"


def price_block_record(
    document: PageDocument,
    *,
    restaurant_name: str,
    url: str,
) -> MenuItemRecord | None:
    """Build one record from the first price-like element on the page."""

    node = document.select_one(PRICE_BLOCK_SELECTOR)
    text = node.text().strip() if node is not None else ""
    if not text:
        LOGGER.debug("No menu items or price blocks extracted url=%s", url)
        return None

    LOGGER.debug("Found fallback price block url=%s price=%r", url, text)
    return MenuItemRecord(
        restaurant_name=restaurant_name,
        item_name=PRICE_BLOCK_ITEM_NAME,
        category="",
        price=text,
        currency=detect_currency(text),
        description="",
        url=url,
    )


__all__ = [
    "PRICE_BLOCK_ITEM_NAME",
    "PRICE_BLOCK_SELECTOR",
    "price_block_record",
]
