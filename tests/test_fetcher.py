from types import SimpleNamespace

import requests

from menus.crawler import CrawlConfig, FetchResult, Fetcher


class _FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []
        self.closed = False

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self):
        self.closed = True


def _response(status_code, body=b"<html>menu</html>", url="https://tonys.example/menu"):
    return SimpleNamespace(
        url=url,
        status_code=status_code,
        headers={"Content-Type": "text/html; charset=utf-8"},
        content=body,
    )


def _fetcher(session, **overrides):
    options = {
        "start_urls": ["https://tonys.example/menu"],
        "retries": 2,
        "retry_backoff_seconds": 0.0,
        **overrides,
    }
    fetcher = Fetcher(CrawlConfig(**options))
    fetcher._local.session = session
    fetcher._sessions.append(session)
    return fetcher


def test_retries_transient_status_then_succeeds():
    session = _FakeSession([_response(503), _response(200)])

    result = _fetcher(session).fetch("https://tonys.example/menu")

    assert result.ok
    assert result.is_html
    assert result.body == b"<html>menu</html>"
    assert len(session.calls) == 2


def test_client_error_is_not_retried():
    session = _FakeSession([_response(404)])

    result = _fetcher(session).fetch("https://tonys.example/menu")

    assert not result.ok
    assert result.status_code == 404
    assert len(session.calls) == 1


def test_request_exception_becomes_error_result():
    session = _FakeSession([requests.ConnectionError("refused")] * 3)

    result = _fetcher(session).fetch("https://tonys.example/menu")

    assert not result.ok
    assert result.error.startswith("ConnectionError")
    assert len(session.calls) == 3


def test_proxies_rotate_round_robin():
    session = _FakeSession([_response(200), _response(200), _response(200)])
    fetcher = _fetcher(session, proxy_urls=["http://p1:8000", "http://p2:8000"])

    for _ in range(3):
        fetcher.fetch("https://tonys.example/menu")

    used = [kwargs["proxies"]["https"] for _, kwargs in session.calls]
    assert used == ["http://p1:8000", "http://p2:8000", "http://p1:8000"]


def test_invalid_url_and_close():
    session = _FakeSession([])
    fetcher = _fetcher(session)

    assert fetcher.fetch("mailto:tony@tonys.example").error == "Invalid or unsupported URL"

    fetcher.close()

    assert session.closed
    assert fetcher.fetch("https://tonys.example/menu").error == "Fetcher is closed"


def test_charset_from_content_type():
    def result(content_type):
        return FetchResult(
            requested_url="https://tonys.example/menu",
            final_url=None,
            status_code=200,
            content_type=content_type,
            body=b"",
        )

    assert result('text/html; charset="Windows-1252"').charset == "Windows-1252"
    assert result("text/html;charset=utf-8; boundary=x").charset == "utf-8"
    assert result("text/html").charset is None
    assert result(None).charset is None
