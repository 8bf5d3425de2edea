"""Unit tests for SpotifyCatalogProvider using an httpx mock transport."""

from __future__ import annotations

import base64

import httpx
import pytest

from src.config.settings import Settings
from src.providers.catalog.spotify_provider import SpotifyCatalogProvider
from src.utils.errors import CatalogError, ConfigurationError, RateLimitError

TOKEN_URL = "https://accounts.spotify.com/api/token"


def _settings(**overrides) -> Settings:
    defaults = {"spotify_client_id": "client-id", "spotify_client_secret": "client-secret"}
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)


def _artist(artist_id: str, name: str, popularity: int = 50) -> dict:
    return {
        "id": artist_id,
        "name": name,
        "popularity": popularity,
        "genres": ["metalcore"],
        "external_urls": {"spotify": f"https://open.spotify.com/artist/{artist_id}"},
        "images": [{"url": f"https://i.scdn.co/{artist_id}-640"}, {"url": "small"}],
    }


class _Router:
    """Records requests and answers token and search calls."""

    def __init__(self, search_responses: list[httpx.Response] | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self.search_responses = list(search_responses or [])

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if str(request.url) == TOKEN_URL:
            return httpx.Response(200, json={"access_token": "tok-1", "expires_in": 3600})
        return self.search_responses.pop(0)


def _provider(router: _Router, **overrides) -> SpotifyCatalogProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(router))
    return SpotifyCatalogProvider(settings=_settings(**overrides), http_client=client)


class TestSpotifyToken:
    @pytest.mark.asyncio
    async def test_client_credentials_exchange(self) -> None:
        router = _Router()
        token = await _provider(router).get_access_token()

        assert token == "tok-1"
        request = router.requests[0]
        expected = base64.b64encode(b"client-id:client-secret").decode()
        assert request.headers["Authorization"] == f"Basic {expected}"
        assert request.content == b"grant_type=client_credentials"

    @pytest.mark.asyncio
    async def test_token_cached_in_memory(self) -> None:
        router = _Router()
        provider = _provider(router)
        await provider.get_access_token()
        await provider.get_access_token()
        assert len(router.requests) == 1

    @pytest.mark.asyncio
    async def test_missing_credentials(self) -> None:
        provider = _provider(_Router(), spotify_client_id="", spotify_client_secret="")
        assert provider.is_available() is False
        with pytest.raises(ConfigurationError):
            await provider.get_access_token()

    @pytest.mark.asyncio
    async def test_token_http_failure(self) -> None:
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(401)))
        provider = SpotifyCatalogProvider(settings=_settings(), http_client=client)
        with pytest.raises(CatalogError, match="HTTP 401"):
            await provider.get_access_token()


class TestSpotifySearch:
    @pytest.mark.asyncio
    async def test_search_maps_results(self) -> None:
        router = _Router([httpx.Response(200, json={"artists": {"items": [_artist("a1", "Architects", 71)]}})])

        results = await _provider(router).search_artists("Architects", limit=5)

        assert len(results) == 1
        artist = results[0]
        assert (artist.id, artist.name, artist.popularity) == ("a1", "Architects", 71)
        assert artist.genres == ["metalcore"]
        assert artist.url == "https://open.spotify.com/artist/a1"
        assert artist.image_url == "https://i.scdn.co/a1-640"

        search = router.requests[-1]
        assert search.url.params["type"] == "artist"
        assert search.url.params["limit"] == "5"
        assert search.url.params["q"] == "Architects"
        assert search.headers["Authorization"] == "Bearer tok-1"

    @pytest.mark.asyncio
    async def test_rate_limit_carries_retry_after(self) -> None:
        router = _Router([httpx.Response(429, headers={"Retry-After": "2"})])
        with pytest.raises(RateLimitError) as exc_info:
            await _provider(router).search_artists("Architects")
        assert exc_info.value.retry_after == 2.0

    @pytest.mark.asyncio
    async def test_rate_limit_default_retry_after(self) -> None:
        router = _Router([httpx.Response(429)])
        with pytest.raises(RateLimitError) as exc_info:
            await _provider(router).search_artists("Architects")
        assert exc_info.value.retry_after == 60.0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("header", "expected"),
        [("inf", 60.0), ("nan", 60.0), ("-5", 0.0), ("86400", 300.0), ("soon", 60.0)],
    )
    async def test_rate_limit_retry_after_is_bounded(self, header: str, expected: float) -> None:
        router = _Router([httpx.Response(429, headers={"Retry-After": header})])
        with pytest.raises(RateLimitError) as exc_info:
            await _provider(router).search_artists("Architects")
        assert exc_info.value.retry_after == expected

    @pytest.mark.asyncio
    async def test_server_error_is_catalog_error(self) -> None:
        router = _Router([httpx.Response(500)])
        with pytest.raises(CatalogError, match="HTTP 500"):
            await _provider(router).search_artists("Architects")

    @pytest.mark.asyncio
    async def test_empty_results(self) -> None:
        router = _Router([httpx.Response(200, json={"artists": {"items": []}})])
        assert await _provider(router).search_artists("Nobody") == []
