"""Page fetcher implementations.

HttpxPageFetcher fetches festival index and artist pages over HTTP with a
descriptive User-Agent and a bounded timeout.
"""

from src.providers.page.httpx_page_fetcher import HttpxPageFetcher, build_scrape_client

__all__ = ["HttpxPageFetcher", "build_scrape_client"]
