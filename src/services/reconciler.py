"""Seeds the relational lineup store from merged scrape snapshots.

For one source the reconciler:

  1. ensures the festival row exists (inserting it with the profile's
     name, year and optional start date the first time);
  2. upserts each named artist as a band by exact name, unioning its known
     source URLs and filling only a country or slug that is still null;
  3. derives the zero-padded performance time, the calendar date and the
     1-based festival day from the raw labels;
  4. upserts the lineup slot on (festival, band), replacing every
     non-identity column.

Reconciliation never writes the ``catalog_*`` band columns; those belong
to the enrichment matcher.
"""

from __future__ import annotations

from src.interfaces.lineup_store import ILineupStore
from src.models.scrape import ArtistDetail
from src.models.site_profile import SiteProfile
from src.models.storage import Band, Festival, LineupSlot
from src.models.sync import ReconcileStats, RecomputeStats
from src.services.merge import merge_links
from src.utils.errors import StorageError
from src.utils.lineup_calendar import compute_calendar_fields, parse_performance_time
from src.utils.logging import get_logger


def build_lineup_slot(festival: Festival, band: Band, detail: ArtistDetail) -> LineupSlot:
    """Derive the full lineup slot row for *band* at *festival*."""
    performance_date, day_number = compute_calendar_fields(
        detail.day, festival.year, festival.start_date
    )
    return LineupSlot(
        festival_id=festival.id,
        band_id=band.id,
        slug=detail.slug,
        source_url=detail.url,
        day_label=detail.day,
        stage_label=detail.stage,
        time_label=detail.time,
        performance_time=parse_performance_time(detail.time),
        performance_date=performance_date,
        day_number=day_number,
    )


class LineupReconciler:
    """Writes merged artist details for a source into an :class:`ILineupStore`."""

    def __init__(self, store: ILineupStore) -> None:
        self._store = store
        self._logger = get_logger(__name__)

    async def ensure_festival(self, profile: SiteProfile) -> Festival:
        """Return the festival row for *profile*, inserting it if absent.

        An existing row is returned as stored; its year and start date are
        never rewritten from the profile.
        """
        existing = await self._store.get_festival_by_id(profile.festival_id)
        if existing is not None:
            return existing

        festival = await self._store.insert_festival(
            Festival(
                id=profile.festival_id,
                name=profile.name,
                year=profile.year,
                start_date=profile.start_date,
            )
        )
        self._logger.info(
            "festival_created",
            source=profile.id,
            festival_id=festival.id,
            year=festival.year,
            start_date=str(festival.start_date) if festival.start_date else None,
        )
        return festival

    async def upsert_band(self, detail: ArtistDetail) -> tuple[Band, bool]:
        """Insert or refresh the band named by *detail*.

        Returns ``(band, created)``.
        """
        name = detail.name or ""
        source_urls = [detail.url] if detail.url else []

        existing = await self._store.get_band_by_name(name)
        if existing is None:
            band = await self._store.insert_band(
                name=name,
                country=detail.country,
                slug=detail.slug,
                source_urls=source_urls,
            )
            return band, True

        merged_urls = merge_links(existing.source_urls, source_urls)
        country = existing.country or detail.country
        slug = existing.slug or detail.slug
        await self._store.update_band(
            existing.id, source_urls=merged_urls, country=country, slug=slug
        )
        band = existing.model_copy(
            update={"source_urls": merged_urls, "country": country, "slug": slug}
        )
        return band, False

    async def reconcile(self, profile: SiteProfile, details: list[ArtistDetail]) -> ReconcileStats:
        """Reconcile every merged detail of *profile* into storage.

        Storage failures propagate as :class:`StorageError`; the caller
        decides whether that fails the source.
        """
        festival = await self.ensure_festival(profile)

        inserted = updated = upserted = skipped = 0
        for detail in details:
            if not detail.name:
                skipped += 1
                self._logger.debug(
                    "reconcile_skipped_unnamed", source=profile.id, url=detail.url
                )
                continue

            band, created = await self.upsert_band(detail)
            if created:
                inserted += 1
            else:
                updated += 1

            await self._store.upsert_lineup_slot(build_lineup_slot(festival, band, detail))
            upserted += 1

        stats = ReconcileStats(
            bands_inserted=inserted,
            bands_updated=updated,
            lineups_upserted=upserted,
            skipped=skipped,
        )
        self._logger.info("source_reconciled", source=profile.id, **stats.model_dump())
        return stats

    async def recompute_days(self, festival_id: str) -> RecomputeStats:
        """Re-derive performance date and day number for stored slots.

        Used after a festival's start date has been set or corrected.  Slots
        whose day label does not parse are counted as skipped and keep their
        stored values.
        """
        festival = await self._store.get_festival_by_id(festival_id)
        if festival is None:
            self._logger.warning("recompute_unknown_festival", festival_id=festival_id)
            return RecomputeStats()
        if festival.start_date is None:
            self._logger.warning("recompute_missing_start_date", festival_id=festival_id)

        updated = skipped = errors = 0
        for slot in await self._store.list_lineup_slots(festival_id):
            performance_date, day_number = compute_calendar_fields(
                slot.day_label, festival.year, festival.start_date
            )
            if performance_date is None:
                skipped += 1
                continue
            if performance_date == slot.performance_date and day_number == slot.day_number:
                skipped += 1
                continue
            try:
                await self._store.update_lineup_calendar(
                    festival_id, slot.band_id, performance_date, day_number
                )
            except StorageError as exc:
                errors += 1
                self._logger.error(
                    "recompute_update_failed",
                    festival_id=festival_id,
                    band_id=slot.band_id,
                    error=str(exc),
                )
                continue
            updated += 1

        stats = RecomputeStats(updated=updated, skipped=skipped, errors=errors)
        self._logger.info("days_recomputed", festival_id=festival_id, **stats.model_dump())
        return stats
