"""Abstract base class for HTML page fetchers.

The link collector and detail extractor never talk to an HTTP client
directly; they receive an ``IPageFetcher``.  Tests inject a fake that
serves canned HTML by URL.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class IPageFetcher(ABC):
    """Contract for fetching festival web pages as HTML text."""

    @abstractmethod
    async def fetch_html(self, url: str) -> str:
        """Fetch *url* and return the response body.

        Raises
        ------
        src.utils.errors.ScrapeError
            On timeout, transport failure or a non-2xx status.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this fetcher."""
