"""Integration tests for the LineupSyncPipeline.

Everything below the page fetcher is real: link collection, detail
extraction with text-parser fallback, JSON snapshots, SQLite reconciliation
and Spotify enrichment over an httpx mock transport.
"""

from __future__ import annotations

from datetime import date

import httpx
import pytest
import pytest_asyncio

from src.config.settings import Settings
from src.models.sync import SyncOptions
from src.pipeline.orchestrator import LineupSyncPipeline
from src.providers.catalog.spotify_provider import SpotifyCatalogProvider
from src.providers.snapshot.json_snapshot_store import JSONSnapshotStore
from src.services.detail_extractor import DetailExtractor
from src.services.enrichment_matcher import EnrichmentMatcher
from src.services.link_collector import LinkCollector
from src.services.reconciler import LineupReconciler
from src.services.snapshot_service import SnapshotService

BASE = "https://fest.example"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _spotify_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/api/token":
        return httpx.Response(200, json={"access_token": "tok", "expires_in": 3600})
    query = request.url.params["q"]
    if query == "Architects":
        items = [
            {"id": "sp-arch-tribute", "name": "Architects Tribute", "popularity": 12},
            {
                "id": "sp-arch",
                "name": "Architects",
                "popularity": 74,
                "genres": ["metalcore"],
                "external_urls": {"spotify": "https://open.spotify.com/artist/sp-arch"},
                "images": [{"url": "https://i.scdn.co/arch"}],
            },
        ]
    else:
        items = []
    return httpx.Response(200, json={"artists": {"items": items}})


@pytest.fixture
def serve_site(fake_fetcher, index_page, artist_page):
    fake_fetcher.pages.update(
        {
            f"{BASE}/lineup/": index_page(
                "/artist/architects/",
                "/artist/kraftklub/",
                "/artist/sleep-token/",
                "/artist/cancelled-band/",
                "/artist/missing/",
                "https://elsewhere.example/tickets",
            ),
            f"{BASE}/artist/architects/": artist_page(
                "Architects (GB)", day="Fri, 12. June", stage="Red Stage", time="20:30"
            ),
            f"{BASE}/artist/kraftklub/": artist_page(
                "Kraftklub", day="Thu, 11. June", stage="Blue Stage", time="9:15"
            ),
            f"{BASE}/artist/sleep-token/": artist_page(
                "Sleep Token",
                body_text="SHOW DAY Sun, 14. June STAGE Red Stage STAGE TIME 22:15",
            ),
        }
    )


@pytest_asyncio.fixture
async def pipeline(tmp_path, fest_profile, fake_fetcher, lineup_store):
    async with httpx.AsyncClient(transport=httpx.MockTransport(_spotify_handler)) as client:
        catalog = SpotifyCatalogProvider(
            settings=Settings(_env_file=None, spotify_client_id="id", spotify_client_secret="s"),
            http_client=client,
        )
        yield LineupSyncPipeline(
            registry={fest_profile.id: fest_profile},
            collector=LinkCollector(fake_fetcher),
            extractor=DetailExtractor(fake_fetcher, delay=0),
            snapshots=SnapshotService(JSONSnapshotStore(tmp_path / "scrape")),
            reconciler=LineupReconciler(lineup_store),
            enrichment=EnrichmentMatcher(catalog, lineup_store, delay=0),
        )


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestFullSync:
    @pytest.mark.asyncio
    async def test_scrape_reconcile_enrich(self, pipeline, serve_site, lineup_store, tmp_path) -> None:
        summary = await pipeline.run(SyncOptions())

        report = summary.sources[0]
        assert report.ok
        assert report.scrape.links_found == 4
        assert report.scrape.details_extracted == 3
        assert report.scrape.failures == 1
        assert report.failure_samples[0].url == f"{BASE}/artist/missing/"
        assert report.reconcile.bands_inserted == 3
        assert report.reconcile.lineups_upserted == 3

        assert summary.enrichment.matched == 1
        assert summary.enrichment.not_found == 2

        architects = await lineup_store.get_band_by_name("Architects")
        assert architects.country == "GB"
        assert architects.catalog_id == "sp-arch"
        assert architects.catalog_genres == ["metalcore"]

        slots = {s.band_id: s for s in await lineup_store.list_lineup_slots("festival-0001")}
        kraftklub = await lineup_store.get_band_by_name("Kraftklub")
        assert slots[kraftklub.id].performance_time == "09:15"
        assert slots[kraftklub.id].day_number == 1

        sleep_token = await lineup_store.get_band_by_name("Sleep Token")
        fallback_slot = slots[sleep_token.id]
        assert fallback_slot.stage_label == "Red Stage"
        assert fallback_slot.performance_date == date(2026, 6, 14)
        assert fallback_slot.day_number == 4

        assert (tmp_path / "scrape" / "testfest-links.json").exists()
        assert (tmp_path / "scrape" / "testfest-details.json").exists()

    @pytest.mark.asyncio
    async def test_second_run_is_idempotent(self, pipeline, serve_site, lineup_store) -> None:
        options = SyncOptions(skip_enrichment=True)
        await pipeline.run(options)
        slots_before = await lineup_store.list_lineup_slots("festival-0001")

        summary = await pipeline.run(options)

        totals = summary.reconcile_totals
        assert totals.bands_inserted == 0
        assert totals.bands_updated == 3
        assert await lineup_store.list_lineup_slots("festival-0001") == slots_before
        assert summary.sources[0].scrape.links_total == 4

    @pytest.mark.asyncio
    async def test_snapshot_survives_site_outage(
        self, pipeline, serve_site, fake_fetcher, lineup_store
    ) -> None:
        await pipeline.run(SyncOptions(skip_enrichment=True))
        fake_fetcher.pages.clear()

        failed = await pipeline.run(SyncOptions(skip_enrichment=True))
        assert failed.all_sources_failed is True

        replay = await pipeline.run(SyncOptions(skip_scrape=True, skip_enrichment=True))
        assert replay.sources[0].reconcile.lineups_upserted == 3
        assert len(await lineup_store.list_lineup_slots("festival-0001")) == 3
