"""Crawler package: config, shared types, and pipeline components."""

from .config import CrawlConfig, load_config, save_config
from .fetcher import Fetcher
from .frontier import EnqueueResult, EnqueueStatus, Frontier
from .pipeline import Pipeline, PipelineMode
from .stats import StatsCollector
from .storage import Storage
from .types import (
    CrawlStage,
    CrawlStats,
    ErrorRecord,
    FetchResult,
    FrontierItem,
    utc_now_iso,
)
from .url import (
    extract_links_from_html,
    filter_enqueue_links,
    host_from_url,
    matches_any_glob,
    normalize_url,
    resolve_url,
)

__all__ = [
    "CrawlConfig",
    "CrawlStage",
    "CrawlStats",
    "EnqueueResult",
    "EnqueueStatus",
    "ErrorRecord",
    "FetchResult",
    "Fetcher",
    "Frontier",
    "FrontierItem",
    "Pipeline",
    "PipelineMode",
    "StatsCollector",
    "Storage",
    "extract_links_from_html",
    "filter_enqueue_links",
    "host_from_url",
    "load_config",
    "matches_any_glob",
    "normalize_url",
    "resolve_url",
    "save_config",
    "utc_now_iso",
]
