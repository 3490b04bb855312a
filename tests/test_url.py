from menus.crawler import (
    extract_links_from_html,
    filter_enqueue_links,
    matches_any_glob,
    normalize_url,
)
from menus.crawler.constants import DEFAULT_ENQUEUE_GLOBS


def test_default_globs():
    assert matches_any_glob("https://tonys.example/menu", DEFAULT_ENQUEUE_GLOBS)
    assert matches_any_glob("https://tonys.example/menus/dinner", DEFAULT_ENQUEUE_GLOBS)
    assert matches_any_glob("https://dir.example/restaurants/tonys", DEFAULT_ENQUEUE_GLOBS)
    assert matches_any_glob("https://dir.example/food/pizza", DEFAULT_ENQUEUE_GLOBS)
    assert not matches_any_glob("https://tonys.example/about", DEFAULT_ENQUEUE_GLOBS)
    assert not matches_any_glob("https://tonys.example/food", DEFAULT_ENQUEUE_GLOBS)


def test_normalize_url():
    assert (
        normalize_url("HTTPS://WWW.Tonys.example:443/menu/?utm_source=x&b=2&a=1#dinner")
        == "https://www.tonys.example/menu?a=1&b=2"
    )
    assert normalize_url("mailto:tony@tonys.example") is None
    assert normalize_url("/relative") is None


def test_extract_links_in_document_order():
    html = """
    <a href="/menu">Menu</a>
    <a href="mailto:tony@tonys.example">Mail</a>
    <a href="#top">Top</a>
    <a href="https://other.example/menu">Other</a>
    <a href="/menu">Menu again</a>
    """

    assert extract_links_from_html(html, base_url="https://tonys.example/") == [
        "https://tonys.example/menu",
        "https://other.example/menu",
    ]


def test_filter_enqueue_links():
    links = [
        "https://tonys.example/menu/",
        "https://tonys.example/menu",
        "https://tonys.example/about",
        "https://other.example/menu",
    ]

    kept = filter_enqueue_links(
        links,
        page_url="https://www.tonys.example/",
        globs=DEFAULT_ENQUEUE_GLOBS,
    )

    assert kept == ["https://tonys.example/menu"]


def test_filter_enqueue_links_across_hosts_without_globs():
    kept = filter_enqueue_links(
        ["https://tonys.example/about", "https://other.example/"],
        page_url="https://tonys.example/",
        globs=[],
        same_hostname_only=False,
    )

    assert kept == ["https://tonys.example/about", "https://other.example/"]


def test_glob_star_spans_path_segments():
    assert matches_any_glob("https://tonys.example/menu/lunch/specials/today", ["**/menu**"])
    assert not matches_any_glob("https://tonys.example/MENU", ["**/menu**"])
