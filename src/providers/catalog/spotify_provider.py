"""Spotify Web API catalog provider.

Implements :class:`ICatalogProvider` with the client-credentials flow: the
client id and secret are exchanged for a bearer token, which is cached in
memory until shortly before it expires.  Artist search is a single
``GET /search?type=artist`` call.

HTTP 429 is surfaced as :class:`RateLimitError` carrying the server's
``Retry-After`` value (60 seconds when absent) so the enrichment matcher
decides how to wait.  Every other failure becomes :class:`CatalogError`.
"""

from __future__ import annotations

import base64
import math
import time
from typing import Any

import httpx

from src.config.settings import Settings
from src.interfaces.catalog_provider import CatalogArtist, ICatalogProvider
from src.utils.errors import CatalogError, ConfigurationError, RateLimitError
from src.utils.logging import get_logger

_PROVIDER_NAME = "spotify"
_DEFAULT_RETRY_AFTER = 60.0
_MAX_RETRY_AFTER = 300.0
_TOKEN_EXPIRY_MARGIN = 30.0  # refresh this many seconds before expiry


def _parse_retry_after(response: httpx.Response) -> float:
    """Seconds to wait from ``Retry-After``, clamped to ``[0, _MAX_RETRY_AFTER]``."""
    raw = response.headers.get("Retry-After")
    if raw is None:
        return _DEFAULT_RETRY_AFTER
    try:
        seconds = float(raw)
    except ValueError:
        return _DEFAULT_RETRY_AFTER
    if not math.isfinite(seconds):
        return _DEFAULT_RETRY_AFTER
    return min(max(seconds, 0.0), _MAX_RETRY_AFTER)


def _to_catalog_artist(item: dict[str, Any]) -> CatalogArtist:
    images = item.get("images") or []
    return CatalogArtist(
        id=item["id"],
        name=item.get("name", ""),
        popularity=int(item.get("popularity") or 0),
        genres=list(item.get("genres") or []),
        url=(item.get("external_urls") or {}).get("spotify"),
        image_url=images[0].get("url") if images else None,
    )


class SpotifyCatalogProvider(ICatalogProvider):
    """Artist search against the Spotify Web API.

    The ``httpx.AsyncClient`` is injected for testability; the provider
    never closes it.
    """

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient) -> None:
        self._client_id = settings.spotify_client_id
        self._client_secret = settings.spotify_client_secret
        self._token_url = settings.spotify_token_url
        self._api_base = settings.spotify_api_base.rstrip("/")
        self._http = http_client
        self._token: str | None = None
        self._token_expires_at: float = 0.0
        self._logger = get_logger(__name__)

    def is_available(self) -> bool:
        return bool(self._client_id and self._client_secret)

    def get_provider_name(self) -> str:
        return _PROVIDER_NAME

    async def get_access_token(self) -> str:
        if self._token and time.monotonic() < self._token_expires_at:
            return self._token

        if not self.is_available():
            raise ConfigurationError(
                message="SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET must be set",
                provider_name=_PROVIDER_NAME,
            )

        credentials = f"{self._client_id}:{self._client_secret}".encode()
        headers = {
            "Authorization": f"Basic {base64.b64encode(credentials).decode()}",
            "Content-Type": "application/x-www-form-urlencoded",
        }
        try:
            response = await self._http.post(
                self._token_url,
                headers=headers,
                data={"grant_type": "client_credentials"},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise CatalogError(
                message=f"Token exchange failed: HTTP {exc.response.status_code}",
                provider_name=_PROVIDER_NAME,
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise CatalogError(
                message=f"Token exchange failed: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc

        token = payload.get("access_token")
        if not token:
            raise CatalogError(
                message="Token response did not contain an access_token",
                provider_name=_PROVIDER_NAME,
            )

        expires_in = float(payload.get("expires_in") or 3600)
        self._token = token
        self._token_expires_at = time.monotonic() + max(expires_in - _TOKEN_EXPIRY_MARGIN, 0.0)
        self._logger.debug("spotify_token_acquired", expires_in=expires_in)
        return token

    async def search_artists(self, name: str, limit: int = 5) -> list[CatalogArtist]:
        token = await self.get_access_token()
        try:
            response = await self._http.get(
                f"{self._api_base}/search",
                params={"q": name, "type": "artist", "limit": limit},
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as exc:
            raise CatalogError(
                message=f"Artist search failed for {name!r}: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc

        if response.status_code == 429:
            retry_after = _parse_retry_after(response)
            self._logger.warning("spotify_rate_limited", artist=name, retry_after=retry_after)
            raise RateLimitError(
                message=f"Rate limited while searching {name!r}",
                provider_name=_PROVIDER_NAME,
                retry_after=retry_after,
            )
        if response.status_code == 401:
            # Token revoked or expired early; the next call fetches a fresh one.
            self._token = None

        try:
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise CatalogError(
                message=f"Artist search failed for {name!r}: HTTP {exc.response.status_code}",
                provider_name=_PROVIDER_NAME,
            ) from exc
        except ValueError as exc:
            raise CatalogError(
                message=f"Artist search returned invalid JSON for {name!r}",
                provider_name=_PROVIDER_NAME,
            ) from exc

        items = (payload.get("artists") or {}).get("items") or []
        return [_to_catalog_artist(item) for item in items if item.get("id")]
