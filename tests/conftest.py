import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from menus.crawler import CrawlConfig  # noqa: E402
from menus.extractor import SoupDocument  # noqa: E402


@pytest.fixture
def parse():
    """Parse an HTML snippet into a `SoupDocument`."""

    return SoupDocument.from_html


@pytest.fixture
def config():
    return CrawlConfig(
        start_urls=["https://tonys.example/menu"],
        max_requests_per_crawl=10,
        concurrency=1,
        retries=0,
        retry_backoff_seconds=0.0,
    )
