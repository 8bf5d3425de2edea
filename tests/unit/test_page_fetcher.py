"""Unit tests for HttpxPageFetcher."""

from __future__ import annotations

import httpx
import pytest

from src.providers.page.httpx_page_fetcher import HttpxPageFetcher, build_scrape_client
from src.utils.errors import ScrapeError


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestHttpxPageFetcher:
    @pytest.mark.asyncio
    async def test_returns_body_text(self) -> None:
        fetcher = HttpxPageFetcher(
            http_client=_client(lambda request: httpx.Response(200, text="<h1>Hi</h1>"))
        )
        assert await fetcher.fetch_html("https://fest.example/") == "<h1>Hi</h1>"

    @pytest.mark.asyncio
    async def test_http_error_status_raises_scrape_error(self) -> None:
        fetcher = HttpxPageFetcher(http_client=_client(lambda request: httpx.Response(503)))
        with pytest.raises(ScrapeError, match="HTTP 503"):
            await fetcher.fetch_html("https://fest.example/")

    @pytest.mark.asyncio
    async def test_transport_error_raises_scrape_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        fetcher = HttpxPageFetcher(http_client=_client(handler))
        with pytest.raises(ScrapeError) as exc_info:
            await fetcher.fetch_html("https://fest.example/")
        assert exc_info.value.provider_name == "http_page"

    def test_scrape_client_sends_descriptive_headers(self) -> None:
        client = build_scrape_client(timeout=5.0, user_agent="lineup-sync-test")
        assert client.headers["User-Agent"] == "lineup-sync-test"
        assert client.headers["Accept"] == "text/html,application/xhtml+xml"
        assert client.timeout.read == 5.0

    @pytest.mark.asyncio
    async def test_injected_client_stays_open_across_fetches(self) -> None:
        client = _client(lambda request: httpx.Response(200, text="ok"))
        fetcher = HttpxPageFetcher(http_client=client)

        await fetcher.fetch_html("https://fest.example/a")
        await fetcher.fetch_html("https://fest.example/b")

        assert client.is_closed is False
        assert not hasattr(fetcher, "aclose")
        await client.aclose()
