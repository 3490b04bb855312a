"""Menu-item extraction: classifier, containers, item parsing, and fallback."""

from .classifier import looks_like_menu, restaurant_name
from .containers import (
    CandidateContainer,
    ContainerTier,
    MAX_FALLBACK_CONTAINERS,
    fallback_containers,
    menu_containers,
    select_containers,
)
from .document import PageDocument, PageNode, SoupDocument, SoupNode
from .fallback import PRICE_BLOCK_ITEM_NAME, price_block_record
from .items import ItemExtractor, container_category
from .page import MenuPageExtractor, PageReport
from .patterns import (
    collapse_whitespace,
    detect_currency,
    has_currency_number,
    looks_like_menu_container_text,
    match_price,
    split_name_description,
)
from .types import (
    DedupKey,
    ExtractedItem,
    ExtractionTier,
    MenuItemRecord,
    PriceMatch,
    SeenKeys,
)

__all__ = [
    "CandidateContainer",
    "ContainerTier",
    "DedupKey",
    "ExtractedItem",
    "ExtractionTier",
    "ItemExtractor",
    "MAX_FALLBACK_CONTAINERS",
    "MenuItemRecord",
    "MenuPageExtractor",
    "PRICE_BLOCK_ITEM_NAME",
    "PageDocument",
    "PageNode",
    "PageReport",
    "PriceMatch",
    "SeenKeys",
    "SoupDocument",
    "SoupNode",
    "collapse_whitespace",
    "container_category",
    "detect_currency",
    "fallback_containers",
    "has_currency_number",
    "looks_like_menu",
    "looks_like_menu_container_text",
    "match_price",
    "menu_containers",
    "price_block_record",
    "restaurant_name",
    "select_containers",
    "split_name_description",
]
