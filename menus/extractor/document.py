"""Document query layer used by the extractor.

The extractor only talks to `PageDocument`/`PageNode`. `SoupDocument` is the
BeautifulSoup + lxml implementation used by the crawler.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from bs4 import BeautifulSoup, Tag


class PageNode(Protocol):
    """One element of a parsed page."""

    @property
    def name(self) -> str: ...

    def text(self) -> str: ...

    def attr(self, name: str) -> str | None: ...

    def select(self, selector: str) -> Sequence["PageNode"]: ...

    def closest(self, selector: str) -> "PageNode | None": ...


class PageDocument(Protocol):
    """A parsed page that can be queried with CSS selectors."""

    def select(self, selector: str) -> Sequence[PageNode]: ...

    def select_one(self, selector: str) -> PageNode | None: ...

    def all_elements(self) -> Sequence[PageNode]: ...

    def body_text(self) -> str: ...


class SoupNode:
    """`PageNode` backed by a bs4 `Tag`."""

    __slots__ = ("tag",)

    def __init__(self, tag: Tag) -> None:
        self.tag = tag

    @property
    def name(self) -> str:
        return self.tag.name or ""

    def text(self) -> str:
        # Raw concatenation keeps source newlines for line-based parsing.
        return self.tag.get_text()

    def attr(self, name: str) -> str | None:
        value = self.tag.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(str(item) for item in value)
        return str(value)

    def select(self, selector: str) -> list["SoupNode"]:
        return [SoupNode(tag) for tag in self.tag.select(selector)]

    def closest(self, selector: str) -> "SoupNode | None":
        found = self.tag.css.closest(selector)
        return None if found is None else SoupNode(found)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SoupNode) and other.tag is self.tag

    def __hash__(self) -> int:
        return id(self.tag)

    def __repr__(self) -> str:
        return f"SoupNode(<{self.name}>)"


class SoupDocument:
    """`PageDocument` backed by a BeautifulSoup tree."""

    def __init__(self, soup: BeautifulSoup) -> None:
        self.soup = soup

    @classmethod
    def from_html(cls, html: str | bytes, *, encoding: str | None = None) -> "SoupDocument":
        """Parse a page; bytes go to bs4 so the declared `<meta charset>` is honored.

        `encoding`, typically the HTTP Content-Type charset, takes precedence.
        """

        if isinstance(html, (bytes, bytearray)):
            return cls(BeautifulSoup(bytes(html), "lxml", from_encoding=encoding))
        return cls(BeautifulSoup(html, "lxml"))

    def select(self, selector: str) -> list[SoupNode]:
        return [SoupNode(tag) for tag in self.soup.select(selector)]

    def select_one(self, selector: str) -> SoupNode | None:
        tag = self.soup.select_one(selector)
        return None if tag is None else SoupNode(tag)

    def all_elements(self) -> list[SoupNode]:
        return [SoupNode(tag) for tag in self.soup.find_all(True)]

    def body_text(self) -> str:
        body = self.soup.body
        if body is None:
            return self.soup.get_text()
        return body.get_text()


__all__ = [
    "PageDocument",
    "PageNode",
    "SoupDocument",
    "SoupNode",
]
