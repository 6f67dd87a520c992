import httpx
import pytest

from domain.errors import FetchError
from infrastructure.config.models import FetchConfig
from infrastructure.web.extractor import extract_text
from infrastructure.web.fetcher import HttpFetcher


def test_extract_text_drops_scripts_styles_and_tags() -> None:
    markup = """
    <html>
      <head><title>Docs</title><style>body { color: red; }</style></head>
      <body>
        <script>console.log("hidden")</script>
        <h1>Getting   started</h1>
        <p>Install the <b>package</b>.</p>
      </body>
    </html>
    """
    assert extract_text(markup) == "Docs Getting started Install the package ."


@pytest.mark.parametrize("markup", [None, "", "<script>x()</script><style>p{}</style>", "<div>   \n\t </div>"])
def test_extract_text_empty(markup) -> None:
    assert extract_text(markup) == ""


def _fetcher(handler, **cfg_kwargs) -> HttpFetcher:
    return HttpFetcher(FetchConfig(**cfg_kwargs), transport=httpx.MockTransport(handler))


def test_fetch_sends_browser_user_agent() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text="<p>ok</p>")

    with _fetcher(handler) as fetcher:
        result = fetcher.fetch("https://example.com/")

    assert result.status == 200
    assert result.body == "<p>ok</p>"
    assert "Mozilla/5.0" in seen[0].headers["User-Agent"]


def test_fetch_follows_redirects() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old":
            return httpx.Response(301, headers={"Location": "https://example.com/new"})
        return httpx.Response(200, text="moved here")

    with _fetcher(handler) as fetcher:
        assert fetcher.fetch("https://example.com/old").body == "moved here"


def test_fetch_non_success_status_raises() -> None:
    with _fetcher(lambda request: httpx.Response(403, text="denied")) as fetcher:
        with pytest.raises(FetchError) as exc_info:
            fetcher.fetch("https://example.com/")

    assert exc_info.value.status == 403
    assert str(exc_info.value) == (
        "Failed to fetch the URL (Status: 403). Site might be down or blocking requests."
    )


def test_fetch_timeout_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with _fetcher(handler, timeout_s=2) as fetcher:
        with pytest.raises(FetchError, match="Timed out"):
            fetcher.fetch("https://example.com/")


def test_fetch_redirect_loop_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(302, headers={"Location": "https://example.com/loop"})

    with _fetcher(handler, max_redirects=3) as fetcher:
        with pytest.raises(FetchError, match="too many redirects"):
            fetcher.fetch("https://example.com/loop")


def test_fetch_malformed_url_raises_fetch_error() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, text="unreachable")

    with _fetcher(handler) as fetcher:
        with pytest.raises(FetchError, match="invalid URL"):
            fetcher.fetch("http://[::1")
    assert calls == []
