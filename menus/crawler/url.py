"""URL canonicalization, link discovery, and enqueue-glob filtering."""

from __future__ import annotations

from fnmatch import fnmatchcase
import posixpath
import re
from typing import Iterable, Sequence
from urllib.parse import parse_qsl, urlencode, urljoin, urlsplit, urlunsplit

from bs4 import BeautifulSoup


DEFAULT_ALLOWED_SCHEMES = ("http", "https")
DEFAULT_PORTS = {"http": 80, "https": 443}
SKIP_HREF_PREFIXES = ("#", "javascript:", "mailto:", "tel:", "data:")

# Query keys dropped during canonicalization: utm_* plus common click ids.
TRACKING_PARAM_RE = re.compile(r"^(?:utm_.*|fbclid|gclid|mc_cid|mc_eid|igshid)$", re.IGNORECASE)
REPEATED_SLASHES_RE = re.compile(r"/{2,}")


def host_from_url(url: str) -> str:
    """Lowercased host without a leading `www.`."""

    host = (urlsplit(url).hostname or "").strip(".").lower()
    return host[4:] if host.startswith("www.") else host


def is_http_url(url: str, allowed_schemes: Sequence[str] = DEFAULT_ALLOWED_SCHEMES) -> bool:
    parts = urlsplit(url)
    return bool(parts.netloc) and parts.scheme.lower() in _lowered(allowed_schemes)


def normalize_url(
    url: str | None,
    *,
    allowed_schemes: Sequence[str] = DEFAULT_ALLOWED_SCHEMES,
) -> str | None:
    """Canonical form used for frontier dedup, or None for unusable URLs.

    Lowercases scheme and host, drops default ports, fragments, and tracking
    parameters, sorts the query, and trims trailing slashes from the path.
    """

    parts = urlsplit((url or "").strip())
    scheme = parts.scheme.lower()
    if not parts.netloc or scheme not in _lowered(allowed_schemes):
        return None

    netloc = _canonical_netloc(scheme, parts)
    if not netloc:
        return None
    return urlunsplit((scheme, netloc, _canonical_path(parts.path), _canonical_query(parts.query), ""))


def _lowered(values: Iterable[str]) -> set[str]:
    return {value.lower() for value in values}


def _canonical_netloc(scheme: str, parts) -> str:  # urllib.parse.SplitResult
    host = (parts.hostname or "").lower()
    if not host:
        return parts.netloc.lower()
    try:
        port = parts.port
    except ValueError:
        port = None
    if port is None or DEFAULT_PORTS.get(scheme) == port:
        return host
    return f"{host}:{port}"


def _canonical_path(path: str) -> str:
    if not path:
        return "/"
    collapsed = REPEATED_SLASHES_RE.sub("/", path)
    cleaned = posixpath.normpath(collapsed)
    if cleaned in {"", "."}:
        return "/"
    if not cleaned.startswith("/"):
        cleaned = "/" + cleaned
    return cleaned.rstrip("/") or "/"


def _canonical_query(query: str) -> str:
    kept = sorted(
        (key, value)
        for key, value in parse_qsl(query, keep_blank_values=True)
        if not TRACKING_PARAM_RE.match(key.strip())
    )
    return urlencode(kept, doseq=True)


def resolve_url(base_url: str, href: str | None, *, normalize: bool = True) -> str | None:
    """Absolute http(s) URL for `href` on `base_url`, or None if not followable."""

    candidate = (href or "").strip()
    if not candidate or candidate.lower().startswith(SKIP_HREF_PREFIXES):
        return None

    absolute = urljoin(base_url, candidate)
    if normalize:
        return normalize_url(absolute)
    return absolute if is_http_url(absolute) else None


def matches_any_glob(url: str, globs: Iterable[str]) -> bool:
    """Shell-style match where `*` also spans `/`, as in `**/menu**`."""

    # Looser than minimatch globs: there `*` stops at `/`, so `**/menu**` would not admit `/menu/a/b`.
    return any(fnmatchcase(url, pattern) for pattern in globs)


def extract_links_from_html(html: str | bytes, *, base_url: str) -> list[str]:
    """Absolute `a`/`area` targets in document order, first occurrence only."""

    soup = BeautifulSoup(html, "lxml")
    links: dict[str, None] = {}
    for anchor in soup.find_all(["a", "area"], href=True):
        resolved = resolve_url(base_url, anchor["href"], normalize=False)
        if resolved:
            links.setdefault(resolved)
    return list(links)


def filter_enqueue_links(
    links: Iterable[str],
    *,
    page_url: str,
    globs: Sequence[str],
    same_hostname_only: bool = True,
) -> list[str]:
    """Links worth enqueueing from `page_url`, normalized and deduplicated.

    Globs match the absolute URL as written on the page. An empty glob list
    accepts every link.
    """

    page_host = host_from_url(page_url)
    kept: dict[str, None] = {}
    for link in links:
        if same_hostname_only and host_from_url(link) != page_host:
            continue
        if globs and not matches_any_glob(link, globs):
            continue
        normalized = normalize_url(link)
        if normalized is not None:
            kept.setdefault(normalized)
    return list(kept)


__all__ = [
    "DEFAULT_ALLOWED_SCHEMES",
    "SKIP_HREF_PREFIXES",
    "extract_links_from_html",
    "filter_enqueue_links",
    "host_from_url",
    "is_http_url",
    "matches_any_glob",
    "normalize_url",
    "resolve_url",
]
