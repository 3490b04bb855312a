"""Static page downloads over requests, with retries, pacing, and proxies."""

from __future__ import annotations

import itertools
import logging
import threading
import time

import requests

from .config import CrawlConfig
from .types import FetchResult
from .url import host_from_url, normalize_url


LOGGER = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({408, 429})


class Fetcher:
    """Download pages for crawl workers.

    Each worker thread gets its own `requests.Session`. Requests to the same
    host are spaced by `rate_limit_seconds`, and each attempt goes through
    the next entry of `proxy_urls` when proxies are configured.
    """

    def __init__(self, config: CrawlConfig) -> None:
        self.config = config

        self._local = threading.local()
        self._sessions: list[requests.Session] = []
        self._lock = threading.Lock()
        self._closed = False

        self._host_ready_at: dict[str, float] = {}
        self._proxies = itertools.cycle(config.proxy_urls) if config.proxy_urls else None

    def fetch(self, url: str) -> FetchResult:
        target = normalize_url(url)
        if target is None:
            return FetchResult.failure(url, "Invalid or unsupported URL")

        attempts = self.config.retries + 1
        result = FetchResult.failure(target, "Unknown fetch failure")
        for attempt in range(1, attempts + 1):
            if self._is_closed():
                return FetchResult.failure(target, "Fetcher is closed")

            result = self._attempt(target)
            if not self._should_retry(result):
                return result

            LOGGER.debug(
                "Retrying fetch url=%s attempt=%d/%d status=%s error=%s",
                target,
                attempt,
                attempts,
                result.status_code,
                result.error,
            )
            if attempt < attempts and self.config.retry_backoff_seconds > 0:
                time.sleep(self.config.retry_backoff_seconds * attempt)

        return result

    def close(self) -> None:
        with self._lock:
            self._closed = True
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _is_closed(self) -> bool:
        with self._lock:
            return self._closed

    @staticmethod
    def _should_retry(result: FetchResult) -> bool:
        if result.error is not None or result.status_code is None:
            return True
        return result.status_code in RETRYABLE_STATUS_CODES or result.status_code >= 500

    def _attempt(self, url: str) -> FetchResult:
        self._pace(url)
        proxy_url = self._next_proxy()
        started = time.perf_counter()

        try:
            response = self._session().get(
                url,
                headers=self.config.headers(),
                timeout=self.config.timeout_seconds,
                allow_redirects=True,
                proxies={"http": proxy_url, "https": proxy_url} if proxy_url else None,
            )
        except requests.RequestException as exc:
            return FetchResult.failure(
                url,
                f"{type(exc).__name__}: {exc}",
                elapsed_ms=_elapsed_ms(started),
                proxy_url=proxy_url,
            )

        return FetchResult(
            requested_url=url,
            final_url=response.url or url,
            status_code=response.status_code,
            content_type=response.headers.get("Content-Type"),
            body=response.content or b"",
            elapsed_ms=_elapsed_ms(started),
            proxy_url=proxy_url,
        )

    def _next_proxy(self) -> str | None:
        if self._proxies is None:
            return None
        with self._lock:
            return next(self._proxies)

    def _session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
            with self._lock:
                self._sessions.append(session)
        return session

    def _pace(self, url: str) -> None:
        """Block until `url`'s host may be requested again."""

        interval = self.config.rate_limit_seconds
        if interval <= 0:
            return

        host = host_from_url(url)
        while True:
            with self._lock:
                now = time.monotonic()
                ready_at = self._host_ready_at.get(host, 0.0)
                if now >= ready_at:
                    self._host_ready_at[host] = now + interval
                    return
            time.sleep(ready_at - now)


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


__all__ = ["Fetcher"]
