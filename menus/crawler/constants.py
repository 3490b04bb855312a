"""Default values for crawler configuration."""

from __future__ import annotations

DEFAULT_START_URLS: tuple[str, ...] = ("https://apify.com",)
DEFAULT_MAX_REQUESTS_PER_CRAWL = 200
DEFAULT_MAX_DEPTH: int | None = None
DEFAULT_CONCURRENCY = 4

DEFAULT_ENQUEUE_GLOBS: tuple[str, ...] = (
    "**/menu**",
    "**/menus**",
    "**/restaurant/**",
    "**/restaurants/**",
    "**/food/**",
)
DEFAULT_SAME_HOSTNAME_ONLY = True

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_RETRIES = 2
DEFAULT_RETRY_BACKOFF_SECONDS = 1.0
DEFAULT_RATE_LIMIT_SECONDS = 0.0

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36 menu-crawler/0.1"
)
DEFAULT_HTTP_HEADERS: dict[str, str] = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}

DEFAULT_FORCE_DOWNLOAD = False

JSON_INDENT = 2
SUPPORTED_CONFIG_SUFFIXES: tuple[str, ...] = (".json", ".yaml", ".yml")
