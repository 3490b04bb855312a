"""Record types produced by the menu extraction pipeline.

Kept free of parser imports so crawler modules can depend on these records
without pulling in the document layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import threading


JSONPrimitive = str | int | float | bool | None
JSONValue = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]
JSONDict = dict[str, JSONValue]

DedupKey = tuple[str, str, str]


class ExtractionTier(str, Enum):
    """Which extraction path produced a record."""

    LIST = "list"
    LINE = "line"
    FALLBACK = "fallback"


@dataclass(frozen=True, slots=True)
class PriceMatch:
    """A currency-tagged price located in a line of text."""

    price_text: str
    currency: str
    start: int
    end: int

    @property
    def span(self) -> tuple[int, int]:
        return (self.start, self.end)

    def strip_from(self, text: str) -> str:
        """Return `text` with the matched price removed and trimmed."""

        return (text[: self.start] + text[self.end :]).strip()


@dataclass(frozen=True, slots=True)
class MenuItemRecord:
    """One dataset row describing a menu item found on a page."""

    restaurant_name: str
    item_name: str
    category: str
    price: str
    currency: str
    description: str
    url: str

    @property
    def dedup_key(self) -> DedupKey:
        """Key built from the emitted row.

        When the name splitter finds no name, `item_name` falls back to the
        whole text but the extractor claims the key with an empty name. Use
        `ExtractedItem.claimed_key` for the key actually held in `SeenKeys`.
        """

        return (self.restaurant_name, self.item_name, self.price)

    def to_json(self) -> JSONDict:
        return {
            "restaurant_name": self.restaurant_name,
            "item_name": self.item_name,
            "category": self.category,
            "price": self.price,
            "currency": self.currency,
            "description": self.description,
            "url": self.url,
        }


@dataclass(frozen=True, slots=True)
class ExtractedItem:
    """A record paired with the tier that produced it."""

    record: MenuItemRecord
    tier: ExtractionTier
    # Key claimed in `SeenKeys` when this item was emitted.
    claimed_key: DedupKey | None = None


class SeenKeys:
    """Per-page dedup set.

    `add_if_new` is the only mutation and runs under a lock, so concurrent
    emitters for the same page never both claim one key.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._keys: set[DedupKey] = set()

    def add_if_new(self, key: DedupKey) -> bool:
        with self._lock:
            if key in self._keys:
                return False
            self._keys.add(key)
            return True

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._keys

    def __len__(self) -> int:
        with self._lock:
            return len(self._keys)

    def is_empty(self) -> bool:
        return len(self) == 0


__all__ = [
    "DedupKey",
    "ExtractedItem",
    "ExtractionTier",
    "JSONDict",
    "JSONPrimitive",
    "JSONValue",
    "MenuItemRecord",
    "PriceMatch",
    "SeenKeys",
]
