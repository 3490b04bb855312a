"""On-disk layout for one crawl run.

```
<output_dir>/
  dataset/items.jsonl      menu item rows
  dataset/errors.jsonl     error rows
  raw/html/<host>/<sha256>.html (+ .url sidecar)
  manifests/crawl_config.json, manifests/crawl_stats.json
  logs/
```
"""

from __future__ import annotations

import hashlib
import json
import os
from pathlib import Path
import re
import tempfile
import threading
from typing import Any, Iterator, Mapping

from ..extractor.types import MenuItemRecord
from .config import CrawlConfig
from .types import CrawlStats, ErrorRecord, JSONDict
from .url import host_from_url


RAW_SUFFIX = ".html"
URL_SIDECAR_SUFFIX = ".url"
_UNSAFE_HOST_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class Storage:
    """Dataset sink plus raw-page cache and run manifests."""

    def __init__(self, output_dir: str | Path) -> None:
        self.output_dir = Path(output_dir)

        self.dataset_dir = self.output_dir / "dataset"
        self.raw_dir = self.output_dir / "raw" / "html"
        self.manifests_dir = self.output_dir / "manifests"
        self.logs_dir = self.output_dir / "logs"

        self.items_path = self.dataset_dir / "items.jsonl"
        self.errors_path = self.dataset_dir / "errors.jsonl"
        self.crawl_config_path = self.manifests_dir / "crawl_config.json"
        self.crawl_stats_path = self.manifests_dir / "crawl_stats.json"

        self._append_lock = threading.Lock()
        self._raw_lock = threading.Lock()

        for directory in (self.dataset_dir, self.raw_dir, self.manifests_dir, self.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)

    @property
    def paths(self) -> JSONDict:
        return {
            "output_dir": str(self.output_dir),
            "items": str(self.items_path),
            "errors": str(self.errors_path),
            "raw_dir": str(self.raw_dir),
            "crawl_config": str(self.crawl_config_path),
            "crawl_stats": str(self.crawl_stats_path),
            "log_dir": str(self.logs_dir),
        }

    # Dataset

    def push_item(self, record: MenuItemRecord) -> None:
        """Append one menu item row to the dataset."""

        self._append_row(self.items_path, record.to_json())

    def iter_items(self) -> Iterator[JSONDict]:
        yield from _read_jsonl(self.items_path)

    def save_error(self, record: ErrorRecord) -> None:
        self._append_row(self.errors_path, record.to_json())

    def reset_dataset(self) -> None:
        """Drop dataset rows and errors before a re-extraction run."""

        with self._append_lock:
            for path in (self.items_path, self.errors_path):
                path.unlink(missing_ok=True)

    # Raw page cache

    def raw_path_for(self, url: str) -> Path:
        host = _UNSAFE_HOST_CHARS.sub("_", host_from_url(url)) or "unknown"
        digest = hashlib.sha256(url.encode("utf-8")).hexdigest()
        return self.raw_dir / host / f"{digest}{RAW_SUFFIX}"

    def has_raw(self, url: str) -> bool:
        return self.raw_path_for(url).exists()

    def read_raw(self, url: str) -> bytes | None:
        path = self.raw_path_for(url)
        return path.read_bytes() if path.exists() else None

    def save_raw(self, *, url: str, body: bytes, overwrite: bool = False) -> Path:
        """Cache a fetched page; the `.url` sidecar lets extract-only runs recover its URL."""

        if not isinstance(body, (bytes, bytearray)):
            raise TypeError(f"save_raw expects bytes, got {type(body).__name__}")

        path = self.raw_path_for(url)
        with self._raw_lock:
            if path.exists() and not overwrite:
                return path
            path.parent.mkdir(parents=True, exist_ok=True)
            _write_atomic(path, bytes(body))
            _write_atomic(path.with_suffix(URL_SIDECAR_SUFFIX), url.encode("utf-8"))
        return path

    def iter_raw_pages(self) -> Iterator[tuple[str, Path]]:
        """Yield `(url, html_path)` for every cached page, in path order."""

        for sidecar in sorted(self.raw_dir.glob(f"*/*{URL_SIDECAR_SUFFIX}")):
            html_path = sidecar.with_suffix(RAW_SUFFIX)
            url = sidecar.read_text(encoding="utf-8").strip()
            if url and html_path.exists():
                yield url, html_path

    # Manifests

    def save_crawl_config(self, config: CrawlConfig | Mapping[str, Any]) -> None:
        payload = config.to_dict() if isinstance(config, CrawlConfig) else dict(config)
        _write_json_atomic(self.crawl_config_path, payload)

    def save_crawl_stats(self, stats: CrawlStats | Mapping[str, Any]) -> None:
        payload = stats.to_json() if isinstance(stats, CrawlStats) else dict(stats)
        _write_json_atomic(self.crawl_stats_path, payload)

    def _append_row(self, path: Path, row: Mapping[str, Any]) -> None:
        line = json.dumps(row, ensure_ascii=False, sort_keys=True) + "\n"
        with self._append_lock:
            with path.open("a", encoding="utf-8") as handle:
                handle.write(line)


def _read_jsonl(path: Path) -> Iterator[JSONDict]:
    if not path.exists():
        return
    with path.open("r", encoding="utf-8") as handle:
        for line in handle:
            line = line.strip()
            if not line:
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError:
                continue


def _write_atomic(path: Path, data: bytes) -> None:
    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f"{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _write_json_atomic(path: Path, payload: Mapping[str, Any]) -> None:
    text = json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n"
    _write_atomic(path, text.encode("utf-8"))


__all__ = ["Storage"]
