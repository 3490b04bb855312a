"""Records passed between crawl stages: queued URLs, fetches, errors, totals."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from ..extractor.types import JSONDict, JSONValue


HTML_CONTENT_TYPES = frozenset({"text/html", "application/xhtml+xml"})


class CrawlStage(str, Enum):
    """Where in the pipeline an error row was raised."""

    FRONTIER = "frontier"
    FETCH = "fetch"
    EXTRACT = "extract"
    STORE = "store"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def is_html_content_type(content_type: str | None) -> bool:
    """True for HTML media types; a missing header is assumed to be HTML."""

    media_type, _, _ = (content_type or "").partition(";")
    media_type = media_type.strip().lower()
    return not media_type or media_type in HTML_CONTENT_TYPES


@dataclass(frozen=True, slots=True)
class FrontierItem:
    url: str
    depth: int
    referrer: str | None = None
    queued_at: str = field(default_factory=utc_now_iso)


@dataclass(slots=True)
class FetchResult:
    """Final outcome of downloading one page, after retries."""

    requested_url: str
    final_url: str | None
    status_code: int | None
    content_type: str | None
    body: bytes | None
    fetched_at: str = field(default_factory=utc_now_iso)
    elapsed_ms: int | None = None
    proxy_url: str | None = None
    error: str | None = None

    @classmethod
    def failure(
        cls,
        url: str,
        error: str,
        *,
        elapsed_ms: int | None = None,
        proxy_url: str | None = None,
    ) -> "FetchResult":
        return cls(
            requested_url=url,
            final_url=None,
            status_code=None,
            content_type=None,
            body=None,
            elapsed_ms=elapsed_ms,
            proxy_url=proxy_url,
            error=error,
        )

    @property
    def ok(self) -> bool:
        if self.error is not None or self.body is None or self.status_code is None:
            return False
        return 200 <= self.status_code < 300

    @property
    def loaded_url(self) -> str:
        """URL after redirects; this is what records are attributed to."""

        return self.final_url or self.requested_url

    @property
    def is_html(self) -> bool:
        return is_html_content_type(self.content_type)

    @property
    def charset(self) -> str | None:
        """`charset` parameter of the Content-Type header, if any."""

        _, _, params = (self.content_type or "").partition(";")
        for param in params.split(";"):
            name, _, value = param.partition("=")
            value = value.strip().strip("\"'")
            if name.strip().lower() == "charset" and value:
                return value
        return None

    @property
    def content_length(self) -> int | None:
        return len(self.body) if self.body is not None else None


@dataclass(frozen=True, slots=True)
class ErrorRecord:
    """One row of dataset/errors.jsonl."""

    stage: CrawlStage
    url: str
    message: str
    error_type: str | None = None
    referrer: str | None = None
    status_code: int | None = None
    created_at: str = field(default_factory=utc_now_iso)
    metadata: dict[str, JSONValue] = field(default_factory=dict)

    @classmethod
    def from_exception(
        cls,
        *,
        stage: CrawlStage,
        url: str,
        exc: Exception,
        **extra: Any,
    ) -> "ErrorRecord":
        return cls(stage=stage, url=url, message=str(exc), error_type=type(exc).__name__, **extra)

    def to_json(self) -> JSONDict:
        row = asdict(self)
        row["stage"] = self.stage.value
        return row


@dataclass(slots=True)
class CrawlStats:
    """Headline counters for one run."""

    frontier_enqueued: int = 0
    frontier_skipped_seen: int = 0
    frontier_skipped_budget: int = 0
    frontier_skipped_depth: int = 0

    fetched_ok: int = 0
    fetched_error: int = 0

    pages_processed: int = 0
    pages_skipped_not_menu: int = 0
    pages_without_items: int = 0
    extraction_failed: int = 0

    items_list_tier: int = 0
    items_line_tier: int = 0
    items_fallback: int = 0
    stored_items: int = 0

    started_at: str = field(default_factory=utc_now_iso)
    finished_at: str | None = None

    def finish(self) -> None:
        self.finished_at = utc_now_iso()

    def to_json(self) -> JSONDict:
        return asdict(self)


__all__ = [
    "CrawlStage",
    "CrawlStats",
    "ErrorRecord",
    "FetchResult",
    "FrontierItem",
    "JSONDict",
    "JSONValue",
    "is_html_content_type",
    "utc_now_iso",
]
