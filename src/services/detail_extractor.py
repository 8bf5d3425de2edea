"""Extracts artist performance records from festival detail pages.

For each artist URL the extractor:

  1. fetches the page through the injected :class:`IPageFetcher`;
  2. reads name/day/stage/time via the profile's CSS selectors;
  3. runs the profile's free-text parser over the whole page text as a
     fallback for any field the selectors missed;
  4. sanitizes stage and time (artifact rejection, strict ``HH:MM``),
     defaulting both to the ``TBA`` placeholder.

A failure on one URL is recorded as ``{url, reason}`` and the batch moves
on; partial success is the normal outcome of a run.  Fetches within one
source are sequential with a fixed delay so the festival site is not
hammered.
"""

from __future__ import annotations

import asyncio

from bs4 import BeautifulSoup

from src.interfaces.page_fetcher import IPageFetcher
from src.models.scrape import ArtistDetail, ExtractionResult, ScrapeFailure
from src.models.site_profile import SiteProfile
from src.services.text_parsers import get_text_parser
from src.utils.logging import get_logger
from src.utils.text_normalizer import (
    PLACEHOLDER,
    extract_slug,
    normalize_text,
    sanitize_stage,
    sanitize_time,
    split_name_and_country,
)

_DEFAULT_DELAY = 0.2
_DEFAULT_LOW_YIELD_THRESHOLD = 0.5
_DEFAULT_LOW_YIELD_MIN_RECORDS = 5


def _pick(soup: BeautifulSoup, selector: str | None) -> str | None:
    if not selector:
        return None
    element = soup.select_one(selector)
    if element is None:
        return None
    return normalize_text(element.get_text())


def _page_text(soup: BeautifulSoup) -> str:
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    return normalize_text(soup.get_text(" ")) or ""


def parse_detail(profile: SiteProfile, url: str, html: str) -> ArtistDetail:
    """Build an :class:`ArtistDetail` from the HTML of one artist page."""
    soup = BeautifulSoup(html, "html.parser")
    selectors = profile.selectors

    name, country = split_name_and_country(_pick(soup, selectors.name))
    day = _pick(soup, selectors.day)
    stage = _pick(soup, selectors.stage)
    time = _pick(soup, selectors.time)

    # _page_text strips script tags, so it runs after the selector picks.
    fallback = get_text_parser(profile.text_parser)(_page_text(soup))

    return ArtistDetail(
        source=profile.id,
        url=url,
        slug=extract_slug(url),
        name=name,
        country=country,
        day=day or fallback.day,
        stage=sanitize_stage(stage or fallback.stage) or PLACEHOLDER,
        time=sanitize_time(time or fallback.time) or PLACEHOLDER,
    )


def is_blank_detail(detail: ArtistDetail) -> bool:
    """True when neither day, stage nor time carries real information."""
    return (
        detail.day is None
        and detail.stage in (None, PLACEHOLDER)
        and detail.time in (None, PLACEHOLDER)
    )


class DetailExtractor:
    """Fetches and parses artist detail pages for one source at a time."""

    def __init__(
        self,
        fetcher: IPageFetcher,
        delay: float = _DEFAULT_DELAY,
        low_yield_threshold: float = _DEFAULT_LOW_YIELD_THRESHOLD,
        low_yield_min_records: int = _DEFAULT_LOW_YIELD_MIN_RECORDS,
    ) -> None:
        self._fetcher = fetcher
        self._delay = delay
        self._low_yield_threshold = low_yield_threshold
        self._low_yield_min_records = low_yield_min_records
        self._logger = get_logger(__name__)

    async def extract(self, profile: SiteProfile, url: str) -> ArtistDetail:
        """Fetch and parse a single artist page.

        Raises
        ------
        src.utils.errors.ScrapeError
            If the page cannot be fetched.
        """
        html = await self._fetcher.fetch_html(url)
        return parse_detail(profile, url, html)

    async def extract_many(
        self,
        profile: SiteProfile,
        urls: list[str],
        limit: int | None = None,
    ) -> ExtractionResult:
        """Extract every URL in order, collecting per-URL failures.

        *limit* caps the number of pages fetched for this source.
        """
        batch = urls[:limit] if limit is not None else urls
        details: list[ArtistDetail] = []
        failures: list[ScrapeFailure] = []

        for index, url in enumerate(batch):
            if index > 0 and self._delay > 0:
                await asyncio.sleep(self._delay)
            try:
                detail = await self.extract(profile, url)
            except Exception as exc:
                reason = f"Failed to scrape {url}: {exc or type(exc).__name__}"
                failures.append(ScrapeFailure(url=url, reason=reason))
                self._logger.warning(
                    "detail_scrape_failed",
                    source=profile.id,
                    url=url,
                    error=str(exc),
                )
                continue

            details.append(detail)
            self._logger.debug(
                "detail_scraped",
                source=profile.id,
                url=url,
                artist=detail.name,
                day=detail.day,
                stage=detail.stage,
                time=detail.time,
            )

        low_yield = self._check_yield(profile, details)
        self._logger.info(
            "details_extracted",
            source=profile.id,
            requested=len(batch),
            extracted=len(details),
            failures=len(failures),
        )
        return ExtractionResult(
            source=profile.id,
            details=details,
            failures=failures,
            low_yield=low_yield,
        )

    def _check_yield(self, profile: SiteProfile, details: list[ArtistDetail]) -> bool:
        """Warn when most records came back blank, a sign the site markup changed."""
        if len(details) < self._low_yield_min_records:
            return False
        blank = sum(1 for detail in details if is_blank_detail(detail))
        ratio = blank / len(details)
        if ratio <= self._low_yield_threshold:
            return False
        self._logger.warning(
            "extraction_low_yield",
            source=profile.id,
            blank_records=blank,
            total_records=len(details),
            blank_ratio=round(ratio, 2),
            threshold=self._low_yield_threshold,
        )
        return True
