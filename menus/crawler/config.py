"""Crawl configuration: dataclass, validation, and JSON/YAML files."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
import json
from pathlib import Path
from typing import Any, Callable, Mapping
from urllib.parse import urlparse

import yaml  # type: ignore

from .constants import (
    DEFAULT_CONCURRENCY,
    DEFAULT_ENQUEUE_GLOBS,
    DEFAULT_FORCE_DOWNLOAD,
    DEFAULT_HTTP_HEADERS,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_REQUESTS_PER_CRAWL,
    DEFAULT_RATE_LIMIT_SECONDS,
    DEFAULT_RETRIES,
    DEFAULT_RETRY_BACKOFF_SECONDS,
    DEFAULT_SAME_HOSTNAME_ONLY,
    DEFAULT_START_URLS,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    JSON_INDENT,
    SUPPORTED_CONFIG_SUFFIXES,
)
from .types import JSONDict, JSONValue


# Input keys as written by actor-style INPUT.json files.
CAMEL_CASE_KEYS: dict[str, str] = {
    "startUrls": "start_urls",
    "maxRequestsPerCrawl": "max_requests_per_crawl",
    "maxDepth": "max_depth",
    "enqueueGlobs": "enqueue_globs",
    "sameHostnameOnly": "same_hostname_only",
    "maxConcurrency": "concurrency",
    "proxyUrls": "proxy_urls",
    "userAgent": "user_agent",
}


@dataclass(slots=True)
class CrawlConfig:
    """Everything a crawl run needs: seeds, limits, link policy, and HTTP settings."""

    start_urls: list[str] = field(default_factory=lambda: list(DEFAULT_START_URLS))
    max_requests_per_crawl: int = DEFAULT_MAX_REQUESTS_PER_CRAWL
    max_depth: int | None = DEFAULT_MAX_DEPTH

    enqueue_globs: list[str] = field(default_factory=lambda: list(DEFAULT_ENQUEUE_GLOBS))
    same_hostname_only: bool = DEFAULT_SAME_HOSTNAME_ONLY
    concurrency: int = DEFAULT_CONCURRENCY

    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    retries: int = DEFAULT_RETRIES
    retry_backoff_seconds: float = DEFAULT_RETRY_BACKOFF_SECONDS
    rate_limit_seconds: float = DEFAULT_RATE_LIMIT_SECONDS

    user_agent: str = DEFAULT_USER_AGENT
    default_headers: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_HTTP_HEADERS))
    proxy_urls: list[str] = field(default_factory=list)

    force_download: bool = DEFAULT_FORCE_DOWNLOAD

    metadata: dict[str, JSONValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.start_urls = _clean_list(self.start_urls)
        self.enqueue_globs = _clean_list(self.enqueue_globs)
        self.proxy_urls = _clean_list(self.proxy_urls)

        if not self.start_urls:
            raise ValueError("start_urls must contain at least one URL")
        bad = [url for url in self.start_urls if urlparse(url).scheme not in ("http", "https")]
        if bad:
            raise ValueError(f"start_urls must be http(s) URLs: {bad!r}")

        _require(self.max_requests_per_crawl > 0, "max_requests_per_crawl must be > 0")
        _require(self.max_depth is None or self.max_depth >= 0, "max_depth must be >= 0 when set")
        _require(self.concurrency > 0, "concurrency must be > 0")
        _require(self.timeout_seconds > 0, "timeout_seconds must be > 0")
        _require(self.retries >= 0, "retries must be >= 0")
        _require(self.retry_backoff_seconds >= 0, "retry_backoff_seconds must be >= 0")
        _require(self.rate_limit_seconds >= 0, "rate_limit_seconds must be >= 0")

    def headers(self) -> dict[str, str]:
        """Request headers, with `user_agent` unless a header already sets one."""

        return {"User-Agent": self.user_agent, **self.default_headers}

    def to_dict(self) -> JSONDict:
        out: JSONDict = {}
        for config_field in fields(self):
            value = getattr(self, config_field.name)
            out[config_field.name] = list(value) if isinstance(value, list) else (
                dict(value) if isinstance(value, dict) else value
            )
        return out

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "CrawlConfig":
        """Build a config from snake_case or camelCase keys; missing keys keep defaults."""

        data = {CAMEL_CASE_KEYS.get(str(key), str(key)): value for key, value in payload.items()}

        kwargs: dict[str, Any] = {}
        for name, coerce in _COERCERS.items():
            if name in data and data[name] is not None:
                kwargs[name] = coerce(data[name], name)
        if "max_depth" in data:
            kwargs["max_depth"] = _to_optional_int(data["max_depth"], "max_depth")
        return cls(**kwargs)


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ValueError(message)


def _clean_list(values: list[str]) -> list[str]:
    return [value.strip() for value in values if value and value.strip()]


def _to_int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Invalid int for '{key}': {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid int for '{key}': {value!r}") from exc


def _to_optional_int(value: Any, key: str) -> int | None:
    return None if value is None else _to_int(value, key)


def _to_float(value: Any, key: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid float for '{key}': {value!r}") from exc


def _to_bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"Invalid bool for '{key}': {value!r}")
    return value


def _to_str_list(value: Any, key: str) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    raise ValueError(f"Invalid list for '{key}': {value!r}")


def _to_start_urls(value: Any, key: str) -> list[str]:
    """Accept a URL, a `{"url": ...}` request object, or a list of either."""

    entries = [value] if isinstance(value, (str, Mapping)) else value
    if not isinstance(entries, (list, tuple)):
        raise ValueError(f"Invalid list for '{key}': {value!r}")

    urls: list[str] = []
    for entry in entries:
        url = entry.get("url") if isinstance(entry, Mapping) else entry
        if not isinstance(url, str):
            raise ValueError(f"Invalid start URL entry: {entry!r}")
        urls.append(url)
    return urls


def _to_str_dict(value: Any, key: str) -> dict[str, str]:
    if not isinstance(value, Mapping):
        raise ValueError(f"Invalid mapping for '{key}': {value!r}")
    return {str(k): str(v) for k, v in value.items()}


def _to_metadata(value: Any, key: str) -> dict[str, JSONValue]:
    if not isinstance(value, Mapping):
        raise ValueError(f"Invalid mapping for '{key}': {value!r}")
    return dict(value)


_COERCERS: dict[str, Callable[[Any, str], Any]] = {
    "start_urls": _to_start_urls,
    "max_requests_per_crawl": _to_int,
    "enqueue_globs": _to_str_list,
    "same_hostname_only": _to_bool,
    "concurrency": _to_int,
    "timeout_seconds": _to_float,
    "retries": _to_int,
    "retry_backoff_seconds": _to_float,
    "rate_limit_seconds": _to_float,
    "user_agent": lambda value, key: str(value),
    "default_headers": _to_str_dict,
    "proxy_urls": _to_str_list,
    "force_download": _to_bool,
    "metadata": _to_metadata,
}


def _check_suffix(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_CONFIG_SUFFIXES:
        raise ValueError(f"Unsupported config suffix '{suffix}'. Supported: {SUPPORTED_CONFIG_SUFFIXES}")
    return suffix


def load_config(path: str | Path) -> CrawlConfig:
    """Read a JSON or YAML crawl config."""

    config_path = Path(path)
    suffix = _check_suffix(config_path)
    text = config_path.read_text(encoding="utf-8")

    payload = json.loads(text) if suffix == ".json" else (yaml.safe_load(text) or {})
    if not isinstance(payload, dict):
        raise ValueError(f"Config at {config_path} must be a mapping at top level")
    return CrawlConfig.from_dict(payload)


def save_config(config: CrawlConfig, path: str | Path) -> None:
    """Write `config` as JSON or YAML, chosen by file suffix."""

    out_path = Path(path)
    suffix = _check_suffix(out_path)
    payload = config.to_dict()

    if suffix == ".json":
        text = json.dumps(payload, indent=JSON_INDENT, sort_keys=True) + "\n"
    else:
        text = yaml.safe_dump(payload, sort_keys=False)

    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(text, encoding="utf-8")


__all__ = [
    "CAMEL_CASE_KEYS",
    "CrawlConfig",
    "load_config",
    "save_config",
]
