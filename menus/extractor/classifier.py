"""Page-level gate and restaurant-name heuristics."""

from __future__ import annotations

from .document import PageDocument


MENU_URL_MARKER = "menu"
MENU_TEXT_MARKERS: tuple[str, ...] = ("menu", "price", "$")

RESTAURANT_META_SELECTORS: tuple[str, ...] = (
    'meta[property="og:site_name"]',
    'meta[property="og:title"]',
)
RESTAURANT_TEXT_SELECTORS: tuple[str, ...] = ("h1", "title")


def looks_like_menu(url: str, page_text: str) -> bool:
    """Cheap, permissive check for whether a page may hold a menu."""

    if MENU_URL_MARKER in (url or "").lower():
        return True
    lowered = (page_text or "").lower()
    return any(marker in lowered for marker in MENU_TEXT_MARKERS)


def restaurant_name(document: PageDocument) -> str:
    """Best guess at the restaurant name: OpenGraph tags, then h1, then title."""

    for selector in RESTAURANT_META_SELECTORS:
        node = document.select_one(selector)
        if node is None:
            continue
        content = (node.attr("content") or "").strip()
        if content:
            return content

    for selector in RESTAURANT_TEXT_SELECTORS:
        node = document.select_one(selector)
        if node is None:
            continue
        text = node.text().strip()
        if text:
            return text

    return ""


__all__ = [
    "MENU_TEXT_MARKERS",
    "MENU_URL_MARKER",
    "looks_like_menu",
    "restaurant_name",
]
