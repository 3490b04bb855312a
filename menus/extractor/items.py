"""Per-container item extraction: list markup first, raw lines second."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from .containers import CandidateContainer
from .document import PageNode
from .patterns import collapse_whitespace, match_price, split_name_description
from .types import DedupKey, ExtractedItem, ExtractionTier, MenuItemRecord, SeenKeys


LIST_ITEM_SELECTOR = "li, .menu-item, .dish, .item"
CATEGORY_SCOPE_SELECTOR = "section, .menu-section, .category"
CATEGORY_HEADING_SELECTOR = "h2, h3"


@dataclass(frozen=True, slots=True)
class ItemExtractor:
    """Turn candidate containers into deduplicated menu records for one page."""

    restaurant_name: str
    url: str

    def extract(
        self,
        container: CandidateContainer,
        seen: SeenKeys,
    ) -> Iterator[ExtractedItem]:
        """Yield records from `container`, claiming dedup keys in `seen`.

        The line tier only runs while `seen` is still empty, i.e. nothing on
        the whole page has been extracted yet.
        """

        yield from self.extract_list_items(container, seen)
        if seen.is_empty():
            yield from self.extract_lines(container, seen)

    def extract_list_items(
        self,
        container: CandidateContainer,
        seen: SeenKeys,
    ) -> Iterator[ExtractedItem]:
        category = container_category(container.node)
        for node in container.node.select(LIST_ITEM_SELECTOR):
            parsed = self.parse_text(collapse_whitespace(node.text()), category=category)
            if parsed is None:
                continue
            key = self._dedup_key(parsed)
            if seen.add_if_new(key):
                yield ExtractedItem(record=parsed.record, tier=ExtractionTier.LIST, claimed_key=key)

    def extract_lines(
        self,
        container: CandidateContainer,
        seen: SeenKeys,
    ) -> Iterator[ExtractedItem]:
        for line in split_lines(container.text):
            parsed = self.parse_text(line, category="")
            if parsed is None:
                continue
            key = self._dedup_key(parsed)
            if seen.add_if_new(key):
                yield ExtractedItem(record=parsed.record, tier=ExtractionTier.LINE, claimed_key=key)

    def parse_text(self, text: str, *, category: str) -> "_ParsedItem | None":
        """Parse one item's text; None when there is no price."""

        if not text:
            return None

        price = match_price(text)
        if price is None:
            return None

        remainder = price.strip_from(text)
        name, description = split_name_description(remainder)
        return _ParsedItem(
            split_name=name,
            record=MenuItemRecord(
                restaurant_name=self.restaurant_name,
                item_name=name or remainder,
                category=category,
                price=price.price_text,
                currency=price.currency,
                description=description,
                url=self.url,
            ),
        )

    def _dedup_key(self, parsed: "_ParsedItem") -> DedupKey:
        return (self.restaurant_name, parsed.split_name, parsed.record.price)


@dataclass(frozen=True, slots=True)
class _ParsedItem:
    # Dedup uses the splitter's name, before falling back to the full text.
    split_name: str
    record: MenuItemRecord


def container_category(node: PageNode) -> str:
    """Heading text of the nearest section-like scope, or ''."""

    scope = node.closest(CATEGORY_SCOPE_SELECTOR)
    if scope is None:
        return ""
    headings = scope.select(CATEGORY_HEADING_SELECTOR)
    if not headings:
        return ""
    return headings[0].text().strip()


def split_lines(text: str) -> Iterable[str]:
    for line in (text or "").split("\n"):
        line = line.strip()
        if line:
            yield line


__all__ = [
    "CATEGORY_HEADING_SELECTOR",
    "CATEGORY_SCOPE_SELECTOR",
    "ItemExtractor",
    "LIST_ITEM_SELECTOR",
    "container_category",
    "split_lines",
]
