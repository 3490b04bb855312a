"""One-page extraction driver: gate, containers, items, fallback."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Iterator

from .classifier import looks_like_menu, restaurant_name
from .containers import MAX_FALLBACK_CONTAINERS, select_containers
from .document import PageDocument
from .fallback import price_block_record
from .items import ItemExtractor
from .types import ExtractedItem, ExtractionTier, JSONDict, SeenKeys


LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class PageReport:
    """What happened while extracting one page."""

    url: str
    skipped: bool = False
    restaurant_name: str = ""
    container_count: int = 0
    container_tier: str | None = None
    records_by_tier: dict[str, int] = field(default_factory=dict)
    error: str | None = None

    @property
    def record_count(self) -> int:
        return sum(self.records_by_tier.values())

    @property
    def failed(self) -> bool:
        return self.error is not None

    def count(self, tier: ExtractionTier) -> None:
        self.records_by_tier[tier.value] = self.records_by_tier.get(tier.value, 0) + 1

    def to_json(self) -> JSONDict:
        return {
            "url": self.url,
            "skipped": self.skipped,
            "restaurant_name": self.restaurant_name,
            "container_count": self.container_count,
            "container_tier": self.container_tier,
            "records_by_tier": dict(self.records_by_tier),
            "error": self.error,
        }


class MenuPageExtractor:
    """Extract menu items from one parsed page.

    `extract` is a lazy generator: records are produced as containers are
    walked, and the caller decides how to sink them. Each call owns a fresh
    `SeenKeys`, so dedup never leaks across pages.
    """

    def __init__(self, *, fallback_limit: int = MAX_FALLBACK_CONTAINERS) -> None:
        if fallback_limit <= 0:
            raise ValueError("fallback_limit must be > 0")
        self.fallback_limit = fallback_limit

    def extract(
        self,
        document: PageDocument,
        url: str,
        *,
        report: PageReport | None = None,
    ) -> Iterator[ExtractedItem]:
        report = report if report is not None else PageReport(url=url)

        if not looks_like_menu(url, document.body_text()):
            LOGGER.debug("Page does not look like a menu; skipping url=%s", url)
            report.skipped = True
            return

        seen = SeenKeys()
        name = ""

        try:
            name = restaurant_name(document)
            report.restaurant_name = name

            containers = select_containers(document, fallback_limit=self.fallback_limit)
            report.container_count = len(containers)
            report.container_tier = containers[0].tier.value if containers else None

            extractor = ItemExtractor(restaurant_name=name, url=url)
            for container in containers:
                for item in extractor.extract(container, seen):
                    report.count(item.tier)
                    yield item
        except Exception as exc:
            LOGGER.warning("Extraction failed url=%s message=%s", url, exc)
            report.error = f"{exc.__class__.__name__}: {exc}"

        if not seen.is_empty():
            return

        try:
            record = price_block_record(document, restaurant_name=name, url=url)
        except Exception as exc:
            LOGGER.warning("Fallback extraction failed url=%s message=%s", url, exc)
            report.error = report.error or f"{exc.__class__.__name__}: {exc}"
            return

        if record is None:
            return

        seen.add_if_new(record.dedup_key)
        report.count(ExtractionTier.FALLBACK)
        LOGGER.info("Saved fallback price block url=%s price=%r", url, record.price)
        yield ExtractedItem(record=record, tier=ExtractionTier.FALLBACK, claimed_key=record.dedup_key)

    def extract_all(self, document: PageDocument, url: str) -> tuple[list[ExtractedItem], PageReport]:
        """Eagerly run `extract` and return the items with their report."""

        report = PageReport(url=url)
        items = list(self.extract(document, url, report=report))
        return items, report


__all__ = [
    "MenuPageExtractor",
    "PageReport",
]
