"""Command line entry point: crawl restaurant sites into a menu item dataset."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import Any

if __package__ in {None, ""}:
    sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from menus.crawler import CrawlConfig, Pipeline, PipelineMode, load_config


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Scalar flags copied onto the config payload when given.
SCALAR_OVERRIDES = (
    "max_requests_per_crawl",
    "concurrency",
    "timeout_seconds",
    "retries",
    "rate_limit_seconds",
    "user_agent",
)

SUMMARY_KEYS = (
    "frontier_enqueued",
    "fetched_ok",
    "fetched_error",
    "pages_processed",
    "pages_skipped_not_menu",
    "pages_without_items",
    "extraction_failed",
    "items_list_tier",
    "items_line_tier",
    "items_fallback",
    "stored_items",
    "duration_seconds",
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Crawl restaurant pages and extract menu items into a JSONL dataset.",
    )

    source = parser.add_argument_group("configuration sources")
    source.add_argument("--config", type=Path, help="JSON or YAML crawl config file.")
    source.add_argument(
        "--input",
        type=Path,
        help="INPUT.json with camelCase keys such as startUrls and maxRequestsPerCrawl.",
    )

    run = parser.add_argument_group("run")
    run.add_argument("--output_dir", type=Path, default=Path("storage"))
    run.add_argument(
        "--mode",
        choices=[mode.value for mode in PipelineMode],
        default=PipelineMode.CRAWL.value,
        help="crawl the web, or extract_only from cached raw pages.",
    )
    run.add_argument("--print_stats_json", action="store_true", help="Dump every counter after the run.")
    run.add_argument("--verbose", action="store_true", help="Log at DEBUG level.")

    crawl = parser.add_argument_group("crawl overrides")
    crawl.add_argument("--start_url", action="append", default=[], help="Repeatable; replaces configured seeds.")
    crawl.add_argument("--max_requests_per_crawl", type=int)
    crawl.add_argument("--max_depth", type=int, help="Negative means unlimited.")
    crawl.add_argument("--concurrency", type=int)

    http = parser.add_argument_group("http overrides")
    http.add_argument("--timeout_seconds", type=float)
    http.add_argument("--retries", type=int)
    http.add_argument("--rate_limit_seconds", type=float)
    http.add_argument("--proxy_url", action="append", default=[], help="Repeatable; used round-robin.")
    http.add_argument("--user_agent")
    http.add_argument("--force_download", action="store_true", help="Refetch pages already cached.")

    return parser.parse_args(argv)


def _read_input_json(path: Path) -> dict[str, Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Input at {path} must be a JSON object")
    return data


def build_config(args: argparse.Namespace) -> CrawlConfig:
    """Merge config file, then INPUT.json, then command line flags."""

    payload: dict[str, Any] = load_config(args.config).to_dict() if args.config else {}
    if args.input:
        # Round trip so camelCase input keys land on their snake_case fields.
        payload = CrawlConfig.from_dict({**payload, **_read_input_json(args.input)}).to_dict()

    overrides: dict[str, Any] = {
        name: getattr(args, name) for name in SCALAR_OVERRIDES if getattr(args, name) is not None
    }
    if args.max_depth is not None:
        overrides["max_depth"] = args.max_depth if args.max_depth >= 0 else None
    if args.start_url:
        overrides["start_urls"] = args.start_url
    if args.proxy_url:
        overrides["proxy_urls"] = args.proxy_url
    if args.force_download:
        overrides["force_download"] = True

    return CrawlConfig.from_dict({**payload, **overrides})


def setup_logging(output_dir: Path, verbose: bool) -> None:
    """Log to stdout and to <output_dir>/logs/crawl.log."""

    level = logging.DEBUG if verbose else logging.INFO
    log_path = output_dir / "logs" / "crawl.log"
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handlers: list[logging.Handler] = [
        logging.StreamHandler(sys.stdout),
        logging.FileHandler(log_path, encoding="utf-8"),
    ]
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S", handlers=handlers, force=True)

    # urllib3 logs every connection at DEBUG.
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def print_summary(result: dict[str, Any], *, print_stats_json: bool) -> None:
    paths = result.get("paths", {})
    stats = result.get("stats", {})

    print(f"\nMenu crawl finished (mode={result.get('mode')})")
    for label in ("output_dir", "items", "errors", "crawl_stats"):
        print(f"  {label:<12} {paths.get(label)}")

    print()
    for key in SUMMARY_KEYS:
        if key in stats:
            print(f"  {key:<24} {stats[key]}")

    if print_stats_json:
        print()
        print(json.dumps(stats, indent=2, sort_keys=True))


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.output_dir, verbose=args.verbose)
    logger = logging.getLogger("menus.crawl")

    try:
        config = build_config(args)
    except Exception as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    logger.info(
        "Starting menu crawl mode=%s output_dir=%s seeds=%d budget=%d",
        args.mode,
        args.output_dir,
        len(config.start_urls),
        config.max_requests_per_crawl,
    )

    try:
        result = Pipeline(config, output_dir=args.output_dir).run(args.mode)
    except KeyboardInterrupt:
        logger.error("Crawl interrupted")
        return 130
    except Exception:
        logger.exception("Crawl failed")
        return 1

    print_summary(result, print_stats_json=args.print_stats_json)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
