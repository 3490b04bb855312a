"""Run counters for crawls and extraction passes.

Workers report outcomes as they happen; `to_json` folds them into the summary
written to `manifests/crawl_stats.json` and printed by the CLI.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import replace
from datetime import datetime, timezone
import threading
from typing import Any, Iterable, Mapping

from ..extractor.page import PageReport
from ..extractor.types import ExtractionTier
from .frontier import EnqueueResult, EnqueueStatus
from .types import CrawlStats, FetchResult


# Enqueue outcomes that have a dedicated `CrawlStats` field.
_ENQUEUE_FIELDS: dict[EnqueueStatus, str] = {
    EnqueueStatus.ENQUEUED: "frontier_enqueued",
    EnqueueStatus.SKIPPED_SEEN: "frontier_skipped_seen",
    EnqueueStatus.SKIPPED_BUDGET: "frontier_skipped_budget",
    EnqueueStatus.SKIPPED_DEPTH: "frontier_skipped_depth",
}

_TIER_FIELDS: dict[str, str] = {
    ExtractionTier.LIST.value: "items_list_tier",
    ExtractionTier.LINE.value: "items_line_tier",
    ExtractionTier.FALLBACK.value: "items_fallback",
}


class StatsCollector:
    """Thread-safe tally shared by all crawl workers."""

    def __init__(self, base: CrawlStats | None = None) -> None:
        self._lock = threading.Lock()
        self._core = base or CrawlStats()

        self._other_enqueue = Counter()
        self._frontier_snapshot: dict[str, int | bool] = {}

        self._status_codes = Counter()
        self._fetch_errors = Counter()
        self._fetch_ms: list[int] = []
        self._bytes_downloaded = 0

        self._container_tiers = Counter()
        self._error_rows = 0
        self._counters = Counter()

    def record_enqueue(self, outcome: EnqueueResult | EnqueueStatus) -> None:
        status = outcome.status if isinstance(outcome, EnqueueResult) else outcome
        field_name = _ENQUEUE_FIELDS.get(status)

        with self._lock:
            if field_name is None:
                self._other_enqueue[status.value] += 1
            else:
                setattr(self._core, field_name, getattr(self._core, field_name) + 1)

    def record_enqueue_many(self, outcomes: Iterable[EnqueueResult]) -> None:
        for outcome in outcomes:
            self.record_enqueue(outcome)

    def record_frontier_snapshot(self, snapshot: Mapping[str, int | bool]) -> None:
        with self._lock:
            self._frontier_snapshot = dict(snapshot)

    def record_fetch(self, result: FetchResult) -> None:
        """Count one final fetch outcome (after retries)."""

        with self._lock:
            if result.ok:
                self._core.fetched_ok += 1
            else:
                self._core.fetched_error += 1

            if result.status_code is not None:
                self._status_codes[str(result.status_code)] += 1
            if result.error:
                kind, _, _ = result.error.partition(":")
                self._fetch_errors[kind.strip() or "Unknown"] += 1
            if result.elapsed_ms is not None:
                self._fetch_ms.append(int(result.elapsed_ms))
            self._bytes_downloaded += result.content_length or 0

    def record_page(self, report: PageReport) -> None:
        """Fold one page's extraction report into the run totals."""

        with self._lock:
            if report.skipped:
                self._core.pages_skipped_not_menu += 1
                return

            self._core.pages_processed += 1
            self._core.extraction_failed += int(report.failed)
            self._core.pages_without_items += int(report.record_count == 0)
            if report.container_tier:
                self._container_tiers[report.container_tier] += 1

            for tier, count in report.records_by_tier.items():
                field_name = _TIER_FIELDS.get(tier)
                if field_name is not None:
                    setattr(self._core, field_name, getattr(self._core, field_name) + count)

    def record_item_stored(self, count: int = 1) -> None:
        if count > 0:
            with self._lock:
                self._core.stored_items += count

    def record_error_saved(self, count: int = 1) -> None:
        if count > 0:
            with self._lock:
                self._error_rows += count

    def increment(self, name: str, value: int = 1) -> None:
        """Bump a free-form counter, e.g. `skipped_non_html`."""

        if name and value:
            with self._lock:
                self._counters[name] += value

    def finish(self) -> None:
        with self._lock:
            self._core.finish()

    def core(self) -> CrawlStats:
        """Snapshot of the headline counters."""

        with self._lock:
            return replace(self._core)

    def to_json(self) -> dict[str, Any]:
        with self._lock:
            duration = _elapsed_seconds(self._core.started_at, self._core.finished_at)
            fetched = self._core.fetched_ok + self._core.fetched_error

            return {
                **self._core.to_json(),
                "duration_seconds": duration,
                "throughput": {
                    "fetched_per_second": _rate(fetched, duration),
                    "stored_items_per_second": _rate(self._core.stored_items, duration),
                },
                "frontier": {
                    "other_status_counts": dict(self._other_enqueue),
                    "snapshot": dict(self._frontier_snapshot),
                },
                "fetch": {
                    "status_code_counts": dict(self._status_codes),
                    "error_type_counts": dict(self._fetch_errors),
                    "elapsed_ms_avg": (
                        sum(self._fetch_ms) / len(self._fetch_ms) if self._fetch_ms else 0.0
                    ),
                    "elapsed_ms_max": max(self._fetch_ms, default=0),
                    "bytes_total": self._bytes_downloaded,
                },
                "extract": {
                    "container_tier_counts": dict(self._container_tiers),
                },
                "storage": {
                    "error_rows": self._error_rows,
                },
                "custom_counters": dict(self._counters),
            }


def _rate(count: int, seconds: float) -> float:
    return count / seconds if seconds > 0 else 0.0


def _elapsed_seconds(started_at: str, finished_at: str | None) -> float:
    start = _as_utc(started_at)
    end = _as_utc(finished_at) if finished_at else datetime.now(timezone.utc)
    if start is None or end is None:
        return 0.0
    return max(0.0, (end - start).total_seconds())


def _as_utc(value: str | None) -> datetime | None:
    try:
        parsed = datetime.fromisoformat(value or "")
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


__all__ = ["StatsCollector"]
