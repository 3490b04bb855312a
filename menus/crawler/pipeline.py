"""Wires frontier, fetcher, extractor, and storage into one crawl run."""

from __future__ import annotations

from enum import Enum
import logging
from pathlib import Path
import threading
from typing import Any

from tqdm import tqdm

from ..extractor import MenuPageExtractor, PageReport, SoupDocument
from .config import CrawlConfig
from .fetcher import Fetcher
from .frontier import EnqueueResult, Frontier
from .stats import StatsCollector
from .storage import Storage
from .types import CrawlStage, ErrorRecord, FetchResult, FrontierItem
from .url import extract_links_from_html, filter_enqueue_links


LOGGER = logging.getLogger(__name__)

WORKER_POLL_SECONDS = 0.5
WORKER_JOIN_SECONDS = 5.0


class PipelineMode(str, Enum):
    CRAWL = "crawl"
    EXTRACT_ONLY = "extract_only"


class Pipeline:
    """One run over a `CrawlConfig`.

    In `crawl` mode, worker threads pull URLs from the frontier, fetch them,
    cache the HTML, enqueue matching links, and extract menu items. In
    `extract_only` mode the cached HTML is re-extracted without network access.
    """

    def __init__(
        self,
        config: CrawlConfig,
        *,
        output_dir: str | Path,
        storage: Storage | None = None,
        fetcher: Fetcher | None = None,
        extractor: MenuPageExtractor | None = None,
        stats: StatsCollector | None = None,
    ) -> None:
        self.config = config
        self.storage = storage if storage is not None else Storage(output_dir)
        self.extractor = extractor if extractor is not None else MenuPageExtractor()
        self.stats = stats if stats is not None else StatsCollector()

        self._close_fetcher = fetcher is None
        self.fetcher = Fetcher(config) if fetcher is None else fetcher

    def run(self, mode: PipelineMode | str = PipelineMode.CRAWL) -> dict[str, Any]:
        """Run to completion and return `{"mode", "paths", "stats"}`."""

        if not isinstance(mode, PipelineMode):
            mode = PipelineMode(mode.strip().lower())

        self.storage.save_crawl_config(self.config)
        try:
            if mode is PipelineMode.EXTRACT_ONLY:
                self.extract_cached()
            else:
                self.crawl()
        finally:
            if self._close_fetcher:
                self.fetcher.close()

        self.stats.finish()
        stats = self.stats.to_json()
        self.storage.save_crawl_stats(stats)
        return {"mode": mode.value, "paths": self.storage.paths, "stats": stats}

    def crawl(self) -> None:
        """Crawl from the configured seeds until the frontier drains."""

        frontier = Frontier(self.config)
        self.stats.record_enqueue_many(frontier.seed(self.config.start_urls))

        threads = []
        for index in range(self.config.concurrency):
            thread = threading.Thread(
                target=self._work,
                args=(frontier,),
                name=f"menu-worker-{index}",
                daemon=True,
            )
            thread.start()
            threads.append(thread)

        frontier.join()
        frontier.close()
        for thread in threads:
            thread.join(timeout=WORKER_JOIN_SECONDS)

        self.stats.record_frontier_snapshot(frontier.snapshot())

    def extract_cached(self) -> None:
        """Rebuild the dataset from the raw page cache."""

        pages = list(self.storage.iter_raw_pages())
        self.storage.reset_dataset()
        LOGGER.info("Re-extracting cached pages count=%d raw_dir=%s", len(pages), self.storage.raw_dir)

        for url, path in tqdm(pages, desc="menu pages", unit="page"):
            try:
                html = path.read_bytes()
            except OSError as exc:
                self._save_error(ErrorRecord.from_exception(stage=CrawlStage.EXTRACT, url=url, exc=exc))
                continue
            self.process_page(url, html)

    def process_page(self, url: str, html: str | bytes, *, encoding: str | None = None) -> int:
        """Extract one page into the dataset and return how many rows were written.

        Extraction errors never escape. Rows yielded before a failure stay in
        the dataset and the failure becomes an `extract` error row.
        """

        report = PageReport(url=url)
        written = 0
        try:
            document = SoupDocument.from_html(html, encoding=encoding)
            for item in self.extractor.extract(document, url, report=report):
                self.storage.push_item(item.record)
                written += 1
        except Exception as exc:
            LOGGER.warning("Extraction failed url=%s message=%s", url, exc)
            if not report.error:
                report.error = f"{type(exc).__name__}: {exc}"

        self.stats.record_item_stored(written)
        self.stats.record_page(report)

        if report.error:
            error_type, sep, message = report.error.partition(": ")
            self._save_error(
                ErrorRecord(
                    stage=CrawlStage.EXTRACT,
                    url=url,
                    message=message if sep else report.error,
                    error_type=error_type if sep else None,
                    metadata={"records_pushed": written},
                )
            )
        elif not report.skipped:
            LOGGER.info(
                "Extracted url=%s items=%d containers=%d tier=%s",
                url,
                written,
                report.container_count,
                report.container_tier,
            )
        return written

    def _work(self, frontier: Frontier) -> None:
        while not (frontier.closed and frontier.empty()):
            item = frontier.pop(block=True, timeout=WORKER_POLL_SECONDS)
            if item is None:
                continue
            try:
                self._visit(frontier, item)
            except Exception as exc:
                LOGGER.warning("Page handling failed url=%s message=%s", item.url, exc)
                self._save_error(
                    ErrorRecord.from_exception(
                        stage=CrawlStage.STORE,
                        url=item.url,
                        exc=exc,
                        referrer=item.referrer,
                    )
                )
            finally:
                frontier.task_done()

    def _visit(self, frontier: Frontier, item: FrontierItem) -> None:
        LOGGER.info("Fetching url=%s depth=%d", item.url, item.depth)
        result = self.fetcher.fetch(item.url)
        self.stats.record_fetch(result)

        if not result.ok:
            error = _fetch_error(result, referrer=item.referrer)
            LOGGER.warning("Fetch failed url=%s message=%s", error.url, error.message)
            self._save_error(error)
            return
        if not result.is_html:
            LOGGER.debug("Skipping non-HTML url=%s content_type=%s", item.url, result.content_type)
            self.stats.increment("skipped_non_html")
            return

        page_url, body = result.loaded_url, result.body or b""
        self.storage.save_raw(url=page_url, body=body, overwrite=self.config.force_download)
        self._follow_links(frontier, item, page_url, body)
        self.process_page(page_url, body, encoding=result.charset)

    def _follow_links(
        self,
        frontier: Frontier,
        item: FrontierItem,
        page_url: str,
        body: bytes,
    ) -> list[EnqueueResult]:
        candidates = filter_enqueue_links(
            extract_links_from_html(body, base_url=page_url),
            page_url=page_url,
            globs=self.config.enqueue_globs,
            same_hostname_only=self.config.same_hostname_only,
        )
        outcomes = frontier.push_many(candidates, depth=item.depth + 1, referrer=page_url)
        self.stats.record_enqueue_many(outcomes)

        accepted = sum(outcome.accepted for outcome in outcomes)
        if accepted:
            LOGGER.debug("Enqueued links url=%s accepted=%d candidates=%d", page_url, accepted, len(candidates))
        return outcomes

    def _save_error(self, error: ErrorRecord) -> None:
        self.storage.save_error(error)
        self.stats.record_error_saved()


def _fetch_error(result: FetchResult, *, referrer: str | None) -> ErrorRecord:
    if result.error:
        message = result.error
        error_type, sep, _ = message.partition(": ")
    elif result.status_code is not None:
        message, error_type, sep = f"HTTP status {result.status_code}", "", ""
    else:
        message, error_type, sep = "Unknown fetch failure", "", ""

    return ErrorRecord(
        stage=CrawlStage.FETCH,
        url=result.requested_url,
        message=message,
        error_type=error_type if sep else None,
        referrer=referrer,
        status_code=result.status_code,
        metadata={"final_url": result.final_url},
    )


__all__ = [
    "Pipeline",
    "PipelineMode",
]
