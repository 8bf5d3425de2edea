"""Collects artist detail-page links from a festival's lineup index pages.

Every index page of a source is load-bearing: if any of them cannot be
fetched, the whole source is aborted for this run rather than continuing
with a partial link list.
"""

from __future__ import annotations

from urllib.parse import urljoin

from bs4 import BeautifulSoup

from src.interfaces.page_fetcher import IPageFetcher
from src.models.site_profile import SiteProfile
from src.utils.errors import ScrapeError
from src.utils.logging import get_logger


def extract_links(html: str, profile: SiteProfile) -> list[str]:
    """Apply *profile*'s link rule to one index page.

    Enumerates elements matching ``link_selector``, resolves relative hrefs
    against ``base_url``, keeps URLs matching the allow pattern and drops
    those matching the deny pattern.  Order of first appearance is kept.
    """
    soup = BeautifulSoup(html, "html.parser")
    seen: dict[str, None] = {}
    for element in soup.select(profile.link_selector):
        href = element.get("href")
        if not href or not isinstance(href, str):
            continue
        href = href.strip()
        absolute = href if href.startswith(("http://", "https://")) else urljoin(profile.base_url, href)
        if profile.link_allow_pattern and not profile.link_allow_pattern.search(absolute):
            continue
        if profile.link_deny_pattern and profile.link_deny_pattern.search(absolute):
            continue
        seen.setdefault(absolute, None)
    return list(seen)


class LinkCollector:
    """Fetches index pages for a source and extracts candidate artist links."""

    def __init__(self, fetcher: IPageFetcher) -> None:
        self._fetcher = fetcher
        self._logger = get_logger(__name__)

    async def collect(self, profile: SiteProfile) -> list[str]:
        """Return the de-duplicated union of artist links across all index pages.

        Raises
        ------
        ScrapeError
            If any index page fails to load; the source must be aborted.
        """
        links: dict[str, None] = {}
        for index_url in profile.index_urls:
            try:
                html = await self._fetcher.fetch_html(index_url)
            except ScrapeError as exc:
                self._logger.error(
                    "index_page_failed",
                    source=profile.id,
                    url=index_url,
                    error=str(exc),
                )
                raise ScrapeError(
                    message=f"Index page {index_url} for '{profile.id}' failed: {exc.message}",
                    provider_name=exc.provider_name,
                ) from exc

            page_links = extract_links(html, profile)
            for link in page_links:
                links.setdefault(link, None)
            self._logger.debug(
                "index_page_links",
                source=profile.id,
                url=index_url,
                links=len(page_links),
            )

        self._logger.info("links_collected", source=profile.id, links=len(links))
        return list(links)
