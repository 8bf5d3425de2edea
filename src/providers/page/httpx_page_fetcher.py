"""HTML page fetcher backed by httpx.

Sends a descriptive User-Agent and an HTML-only Accept header, and bounds
every request with a single timeout (no retry loop).  All transport
failures surface as :class:`~src.utils.errors.ScrapeError`.
"""

from __future__ import annotations

import httpx
import structlog

from src.interfaces.page_fetcher import IPageFetcher
from src.utils.errors import ScrapeError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_TIMEOUT = 15.0
_DEFAULT_USER_AGENT = "lineup-sync/1.0 (+festival lineup scraper)"
_ACCEPT = "text/html,application/xhtml+xml"


def build_scrape_client(
    timeout: float = _DEFAULT_TIMEOUT,
    user_agent: str = _DEFAULT_USER_AGENT,
) -> httpx.AsyncClient:
    """Return an ``httpx.AsyncClient`` preconfigured for festival sites."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        headers={"User-Agent": user_agent, "Accept": _ACCEPT},
        follow_redirects=True,
    )


class HttpxPageFetcher(IPageFetcher):
    """Page fetcher using a shared ``httpx.AsyncClient``.

    The caller owns the client (see :func:`build_scrape_client`) so a
    single connection pool serves the whole run.
    """

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._client = http_client

    async def fetch_html(self, url: str) -> str:
        """GET *url* and return the body text."""
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise ScrapeError(
                message=f"Timeout fetching {url}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise ScrapeError(
                message=f"HTTP {exc.response.status_code} for {url}",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPError as exc:
            raise ScrapeError(
                message=f"HTTP error fetching {url}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.debug("page_fetched", url=url, status=response.status_code, size=len(response.text))
        return response.text

    def get_provider_name(self) -> str:
        return "http_page"
