"""Candidate container selection.

Tier 1 looks for menu-shaped markup. Tier 2 sweeps every element for
currency-number text and only runs when Tier 1 finds nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .document import PageDocument, PageNode
from .patterns import has_currency_number, looks_like_menu_container_text


MENU_CONTAINER_SELECTOR = ", ".join(
    (
        '[class*="menu"]',
        '[id*="menu"]',
        '[class*="dish"]',
        '[id*="dish"]',
        '[class*="item"]',
        '[id*="item"]',
        ".menu",
        ".menu-section",
        "section",
    )
)
MAX_FALLBACK_CONTAINERS = 200


class ContainerTier(str, Enum):
    """Which selection tier proposed a container."""

    MENU = "menu"
    FALLBACK = "fallback"


@dataclass(slots=True)
class CandidateContainer:
    """A DOM subtree hypothesized to hold menu items."""

    node: PageNode
    tier: ContainerTier
    _text: str | None = field(default=None, repr=False)

    @property
    def text(self) -> str:
        if self._text is None:
            self._text = self.node.text()
        return self._text


def menu_containers(document: PageDocument) -> list[CandidateContainer]:
    """Tier 1: menu/dish/item-named elements whose text looks price-bearing."""

    containers: list[CandidateContainer] = []
    for node in document.select(MENU_CONTAINER_SELECTOR):
        candidate = CandidateContainer(node=node, tier=ContainerTier.MENU)
        if looks_like_menu_container_text(candidate.text):
            containers.append(candidate)
    return containers


def fallback_containers(
    document: PageDocument,
    *,
    limit: int = MAX_FALLBACK_CONTAINERS,
) -> list[CandidateContainer]:
    """Tier 2: any element whose text contains a currency-number pattern."""

    containers: list[CandidateContainer] = []
    for node in document.all_elements():
        if len(containers) >= limit:
            break
        candidate = CandidateContainer(node=node, tier=ContainerTier.FALLBACK)
        if has_currency_number(candidate.text):
            containers.append(candidate)
    return containers


def select_containers(
    document: PageDocument,
    *,
    fallback_limit: int = MAX_FALLBACK_CONTAINERS,
) -> list[CandidateContainer]:
    """Return Tier 1 containers, or Tier 2 when Tier 1 is empty."""

    containers = menu_containers(document)
    if containers:
        return containers
    return fallback_containers(document, limit=fallback_limit)


__all__ = [
    "CandidateContainer",
    "ContainerTier",
    "MAX_FALLBACK_CONTAINERS",
    "MENU_CONTAINER_SELECTOR",
    "fallback_containers",
    "menu_containers",
    "select_containers",
]
