"""Shared pytest fixtures for the lineup sync test suite."""

from __future__ import annotations

import logging
import re
from datetime import date

import pytest
import pytest_asyncio
import structlog

from src.interfaces.page_fetcher import IPageFetcher
from src.models.scrape import ArtistDetail
from src.models.site_profile import ArtistSelectors, SiteProfile
from src.providers.storage.sqlite_lineup_store import SQLiteLineupStore
from src.utils.errors import ScrapeError

FEST_BASE = "https://fest.example"


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop logging config so a CLI test's captured stderr does not outlive it."""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


class FakePageFetcher(IPageFetcher):
    """In-memory page fetcher: URL -> HTML, unknown URLs raise ScrapeError."""

    def __init__(self, pages: dict[str, str] | None = None) -> None:
        self.pages: dict[str, str] = dict(pages or {})
        self.requested: list[str] = []

    async def fetch_html(self, url: str) -> str:
        self.requested.append(url)
        if url not in self.pages:
            raise ScrapeError(message=f"HTTP 404 for {url}", provider_name="fake_page")
        return self.pages[url]

    def get_provider_name(self) -> str:
        return "fake_page"


def build_index_page(*hrefs: str) -> str:
    """Build a lineup index page linking to *hrefs*."""
    links = "\n".join(f'<a class="artist" href="{href}">{href}</a>' for href in hrefs)
    return f"<html><body><nav><a href='/lineup/'>Lineup</a></nav>{links}</body></html>"


def build_artist_page(
    name: str,
    day: str | None = None,
    stage: str | None = None,
    time: str | None = None,
    body_text: str = "",
) -> str:
    """Build an artist detail page with optional day / stage / time elements."""
    parts = [f"<h1>{name}</h1>"]
    if day is not None:
        parts.append(f'<span class="day">{day}</span>')
    if stage is not None:
        parts.append(f'<span class="stage">{stage}</span>')
    if time is not None:
        parts.append(f'<span class="time">{time}</span>')
    if body_text:
        parts.append(f"<p>{body_text}</p>")
    return f"<html><body>{''.join(parts)}<script>var x = 'SHOW DAY';</script></body></html>"


@pytest.fixture
def fest_profile() -> SiteProfile:
    """A site profile for the fake festival at FEST_BASE."""
    return SiteProfile(
        id="testfest",
        festival_id="festival-0001",
        name="Test Fest",
        year=2026,
        start_date=date(2026, 6, 11),
        index_urls=[f"{FEST_BASE}/lineup/"],
        base_url=FEST_BASE,
        link_selector="a[href]",
        link_allow_pattern=re.compile(r"/artist/[a-z0-9-]+/?$"),
        link_deny_pattern=re.compile(r"/artist/cancelled-"),
        selectors=ArtistSelectors(name="h1", day=".day", stage=".stage", time=".time"),
        text_parser="show_day_block",
    )


@pytest.fixture
def index_page():
    return build_index_page


@pytest.fixture
def artist_page():
    return build_artist_page


@pytest.fixture
def fake_fetcher() -> FakePageFetcher:
    return FakePageFetcher()


@pytest.fixture
def make_detail():
    """Factory for ArtistDetail records with sensible defaults."""

    def _make(name: str | None = "Architects", **overrides) -> ArtistDetail:
        slug = overrides.pop("slug", name.lower().replace(" ", "-") if name else None)
        fields = {
            "source": "testfest",
            "url": f"{FEST_BASE}/artist/{slug}/" if slug else None,
            "slug": slug,
            "name": name,
            "country": None,
            "day": "Fri, 12. June",
            "stage": "Red Stage",
            "time": "20:30",
        }
        fields.update(overrides)
        return ArtistDetail(**fields)

    return _make


@pytest_asyncio.fixture
async def lineup_store(tmp_path) -> SQLiteLineupStore:
    """An initialized SQLite lineup store in a temp directory."""
    store = SQLiteLineupStore(db_path=tmp_path / "lineups.db")
    await store.initialize()
    return store
