"""Request queue for crawl workers.

Every URL is normalized and claimed once. The queue stops accepting work when
the per-run request budget (`max_requests_per_crawl`) is spent.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import queue
import threading
from typing import Iterable

from .config import CrawlConfig
from .types import FrontierItem
from .url import normalize_url


class EnqueueStatus(str, Enum):
    """Why a URL was or was not queued."""

    ENQUEUED = "enqueued"
    SKIPPED_INVALID_URL = "skipped_invalid_url"
    SKIPPED_DEPTH = "skipped_depth"
    SKIPPED_SEEN = "skipped_seen"
    SKIPPED_BUDGET = "skipped_budget"
    SKIPPED_CLOSED = "skipped_closed"


@dataclass(frozen=True, slots=True)
class EnqueueResult:
    status: EnqueueStatus
    normalized_url: str | None = None
    item: FrontierItem | None = None

    @property
    def accepted(self) -> bool:
        return self.status is EnqueueStatus.ENQUEUED


class Frontier:
    """FIFO of pending requests, shared by all workers.

    A URL counts against the budget when it is queued, not when it is
    fetched, so the crawl never visits more than `max_requests_per_crawl`
    pages.
    """

    def __init__(self, config: CrawlConfig) -> None:
        self.config = config

        self._pending: queue.Queue[FrontierItem] = queue.Queue()
        self._lock = threading.Lock()
        self._claimed: set[str] = set()
        self._queued_total = 0
        self._handed_out = 0
        self._closed = False

    def seed(self, urls: Iterable[str]) -> list[EnqueueResult]:
        return self.push_many(urls, depth=0)

    def push(self, url: str, *, depth: int, referrer: str | None = None) -> EnqueueResult:
        canonical = normalize_url(url)
        if canonical is None:
            return EnqueueResult(EnqueueStatus.SKIPPED_INVALID_URL)

        with self._lock:
            status = self._admission(canonical, depth)
            if status is not EnqueueStatus.ENQUEUED:
                return EnqueueResult(status, normalized_url=canonical)

            self._claimed.add(canonical)
            self._queued_total += 1
            item = FrontierItem(url=canonical, depth=depth, referrer=referrer)
            self._pending.put(item)

        return EnqueueResult(EnqueueStatus.ENQUEUED, normalized_url=canonical, item=item)

    def _admission(self, canonical: str, depth: int) -> EnqueueStatus:
        # Caller holds self._lock.
        max_depth = self.config.max_depth
        if max_depth is not None and depth > max_depth:
            return EnqueueStatus.SKIPPED_DEPTH
        if self._closed:
            return EnqueueStatus.SKIPPED_CLOSED
        if canonical in self._claimed:
            return EnqueueStatus.SKIPPED_SEEN
        if self._queued_total >= self.config.max_requests_per_crawl:
            return EnqueueStatus.SKIPPED_BUDGET
        return EnqueueStatus.ENQUEUED

    def push_many(
        self,
        urls: Iterable[str],
        *,
        depth: int,
        referrer: str | None = None,
    ) -> list[EnqueueResult]:
        return [self.push(url, depth=depth, referrer=referrer) for url in urls]

    def pop(self, *, block: bool = True, timeout: float | None = None) -> FrontierItem | None:
        """Next pending request, or None if none arrived in time."""

        try:
            item = self._pending.get(block=block, timeout=timeout if block else None)
        except queue.Empty:
            return None

        with self._lock:
            self._handed_out += 1
        return item

    def task_done(self) -> None:
        self._pending.task_done()

    def join(self) -> None:
        """Wait until every queued request has been handled."""

        self._pending.join()

    def close(self) -> None:
        with self._lock:
            self._closed = True

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def empty(self) -> bool:
        return self._pending.empty()

    def snapshot(self) -> dict[str, int | bool]:
        with self._lock:
            return {
                "closed": self._closed,
                "pending": self._pending.qsize(),
                "claimed_urls": len(self._claimed),
                "queued_total": self._queued_total,
                "dequeued": self._handed_out,
                "max_requests_per_crawl": self.config.max_requests_per_crawl,
            }


__all__ = [
    "EnqueueResult",
    "EnqueueStatus",
    "Frontier",
]
