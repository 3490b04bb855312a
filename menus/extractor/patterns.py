"""Text heuristics for prices, currencies, and item name/description splits.

Every heuristic here is a pure function of its input text so each one can be
tuned and tested without touching the extraction control flow.
"""

from __future__ import annotations

import re

from .types import PriceMatch


# Symbol-prefixed amount, or amount followed by an ISO code. Leftmost match wins.
PRICE_RE = re.compile(
    r"(?:[$£€]\s?\d+[,\d]*(?:\.\d+)?|\d+[,\d]*(?:\.\d+)?\s?(?:USD|EUR|GBP))"
)
CURRENCY_RE = re.compile(r"(?:\$|€|£|USD|EUR|GBP)", re.IGNORECASE)
NAME_DESCRIPTION_DELIMITER_RE = re.compile(r"\s[-–—:]\s")
WHITESPACE_RE = re.compile(r"\s+")

# Looser than PRICE_RE: used to sweep the whole document for anything price-ish.
CURRENCY_NUMBER_RE = re.compile(
    r"\$[\s\d,.]+|£[\s\d,.]+|€[\s\d,.]+|\d+\s?USD|\d+\s?EUR"
)

MENU_CONTAINER_MARKERS: tuple[str, ...] = (
    "$",
    "€",
    "£",
    "price",
    "ingredients",
    "cal",
)


def collapse_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim."""

    return WHITESPACE_RE.sub(" ", text or "").strip()


def detect_currency(text: str) -> str:
    """Return the first currency symbol/code found in `text`, or ''."""

    match = CURRENCY_RE.search(text or "")
    return match.group(0) if match else ""


def match_price(text: str) -> PriceMatch | None:
    """Find the leftmost price token in a line of text."""

    if not text:
        return None

    match = PRICE_RE.search(text)
    if match is None:
        return None

    return PriceMatch(
        price_text=match.group(0).strip(),
        currency=detect_currency(match.group(0)),
        start=match.start(),
        end=match.end(),
    )


def split_name_description(text: str) -> tuple[str, str]:
    """Split price-free item text into `(name, description)`.

    A spaced dash or colon wins when it separates two non-empty parts.
    Otherwise the first sentence is the name and the rest is the description.
    """

    text = (text or "").strip()

    parts = NAME_DESCRIPTION_DELIMITER_RE.split(text, maxsplit=1)
    if len(parts) == 2:
        name, description = parts[0].strip(), parts[1].strip()
        if name and description:
            return name, description

    name, _, remainder = text.partition(".")
    description = remainder.strip().rstrip(".").strip()
    return name.strip(), description


def has_currency_number(text: str) -> bool:
    """Return True if `text` contains a currency-number pattern anywhere."""

    return bool(CURRENCY_NUMBER_RE.search(text or ""))


def looks_like_menu_container_text(text: str) -> bool:
    """Return True if container text carries a price or menu-ish marker."""

    lowered = (text or "").lower()
    return any(marker in lowered for marker in MENU_CONTAINER_MARKERS)


__all__ = [
    "CURRENCY_NUMBER_RE",
    "CURRENCY_RE",
    "MENU_CONTAINER_MARKERS",
    "NAME_DESCRIPTION_DELIMITER_RE",
    "PRICE_RE",
    "collapse_whitespace",
    "detect_currency",
    "has_currency_number",
    "looks_like_menu_container_text",
    "match_price",
    "split_name_description",
]
