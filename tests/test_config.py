import json

import pytest
import yaml

from menus.crawler import CrawlConfig, load_config, save_config
from menus.crawler.constants import DEFAULT_ENQUEUE_GLOBS, DEFAULT_MAX_REQUESTS_PER_CRAWL


def test_defaults():
    config = CrawlConfig.from_dict({})

    assert config.start_urls == ["https://apify.com"]
    assert config.max_requests_per_crawl == DEFAULT_MAX_REQUESTS_PER_CRAWL == 200
    assert config.enqueue_globs == list(DEFAULT_ENQUEUE_GLOBS)
    assert config.same_hostname_only is True
    assert config.proxy_urls == []
    assert config.headers()["User-Agent"] == config.user_agent


def test_camel_case_input_with_request_objects():
    config = CrawlConfig.from_dict(
        {
            "startUrls": [{"url": "https://tonys.example/menu"}, "https://luigis.example/"],
            "maxRequestsPerCrawl": 5,
            "maxConcurrency": 2,
            "proxyUrls": ["http://proxy-1:8000", " "],
        }
    )

    assert config.start_urls == ["https://tonys.example/menu", "https://luigis.example/"]
    assert config.max_requests_per_crawl == 5
    assert config.concurrency == 2
    assert config.proxy_urls == ["http://proxy-1:8000"]


def test_single_start_url_string():
    assert CrawlConfig.from_dict({"start_urls": "https://tonys.example"}).start_urls == [
        "https://tonys.example"
    ]


@pytest.mark.parametrize(
    "payload",
    [
        {"start_urls": []},
        {"start_urls": ["ftp://tonys.example/menu"]},
        {"start_urls": [{"href": "https://tonys.example"}]},
        {"max_requests_per_crawl": 0},
        {"max_depth": -1},
        {"concurrency": 0},
        {"timeout_seconds": 0},
        {"retries": -1},
        {"same_hostname_only": "yes"},
    ],
)
def test_invalid_config_rejected(payload):
    with pytest.raises(ValueError):
        CrawlConfig.from_dict(payload)


def test_yaml_and_json_files(tmp_path):
    config = CrawlConfig(start_urls=["https://tonys.example/menu"], max_depth=2)

    save_config(config, tmp_path / "crawl.yaml")
    save_config(config, tmp_path / "crawl.json")

    assert yaml.safe_load((tmp_path / "crawl.yaml").read_text())["max_depth"] == 2
    assert json.loads((tmp_path / "crawl.json").read_text())["start_urls"] == [
        "https://tonys.example/menu"
    ]
    assert load_config(tmp_path / "crawl.yaml") == config
    assert load_config(tmp_path / "crawl.json") == config


def test_unsupported_suffix(tmp_path):
    path = tmp_path / "crawl.toml"
    path.write_text("")

    with pytest.raises(ValueError):
        load_config(path)
    with pytest.raises(ValueError):
        save_config(CrawlConfig(), tmp_path / "out.toml")
