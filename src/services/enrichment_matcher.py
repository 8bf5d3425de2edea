"""Matches stored bands against a music catalog and writes back metadata.

Bands are looked up one at a time with a fixed delay between lookups.
For each band the best candidate is the exact case-insensitive name match
when one exists, otherwise the most popular of the returned results.

A rate-limited lookup sleeps for the catalog's ``retry_after`` and is
retried exactly once; a second rate limit counts as an error for that
band.  Any other catalog or storage failure is also counted per band and
the run continues.
"""

from __future__ import annotations

import asyncio

from src.interfaces.catalog_provider import CatalogArtist, ICatalogProvider
from src.interfaces.lineup_store import ILineupStore
from src.models.storage import Band
from src.models.sync import EnrichmentStats
from src.utils.errors import CatalogError, RateLimitError, StorageError
from src.utils.logging import get_logger

_DEFAULT_DELAY = 0.1
_DEFAULT_SEARCH_LIMIT = 5


def select_best_match(name: str, candidates: list[CatalogArtist]) -> CatalogArtist | None:
    """Pick the exact (case-insensitive) match, else the most popular candidate."""
    if not candidates:
        return None
    wanted = name.casefold()
    for candidate in candidates:
        if candidate.name.casefold() == wanted:
            return candidate
    return max(candidates, key=lambda candidate: candidate.popularity)


class EnrichmentMatcher:
    """Fills the ``catalog_*`` columns of bands from an :class:`ICatalogProvider`."""

    def __init__(
        self,
        catalog: ICatalogProvider,
        store: ILineupStore,
        delay: float = _DEFAULT_DELAY,
        search_limit: int = _DEFAULT_SEARCH_LIMIT,
    ) -> None:
        self._catalog = catalog
        self._store = store
        self._delay = delay
        self._search_limit = search_limit
        self._logger = get_logger(__name__)

    def is_available(self) -> bool:
        return self._catalog.is_available()

    async def _search(self, name: str) -> list[CatalogArtist]:
        return await self._catalog.search_artists(name, limit=self._search_limit)

    async def match_band(self, band: Band) -> EnrichmentStats:
        """Look up one band and write back its catalog metadata."""
        rate_limited = 0
        try:
            try:
                candidates = await self._search(band.name)
            except RateLimitError as exc:
                rate_limited = 1
                self._logger.warning(
                    "catalog_rate_limited_retrying",
                    band=band.name,
                    retry_after=exc.retry_after,
                )
                await asyncio.sleep(exc.retry_after)
                candidates = await self._search(band.name)

            match = select_best_match(band.name, candidates)
            if match is None:
                self._logger.info("catalog_not_found", band=band.name)
                return EnrichmentStats(not_found=1, rate_limited=rate_limited)

            await self._store.update_band_catalog(
                band.id,
                catalog_id=match.id,
                catalog_url=match.url,
                image_url=match.image_url,
                popularity=match.popularity,
                genres=list(match.genres),
            )
        except (CatalogError, RateLimitError, StorageError) as exc:
            self._logger.error("catalog_match_failed", band=band.name, error=str(exc))
            return EnrichmentStats(errors=1, rate_limited=rate_limited)

        self._logger.info(
            "catalog_matched",
            band=band.name,
            catalog_name=match.name,
            catalog_id=match.id,
            popularity=match.popularity,
        )
        return EnrichmentStats(matched=1, rate_limited=rate_limited)

    async def run(
        self,
        *,
        force: bool = False,
        band_name: str | None = None,
        limit: int | None = None,
    ) -> EnrichmentStats:
        """Enrich the selected bands.

        Parameters
        ----------
        force:
            Re-match every band, not only those without catalog data.
        band_name:
            Match only this band (case-insensitive).
        limit:
            Cap on the number of lookups.

        Raises
        ------
        src.utils.errors.ConfigurationError
            If catalog credentials are missing.
        src.utils.errors.CatalogError
            If the access token cannot be obtained.
        """
        await self._catalog.get_access_token()

        bands = await self._store.list_bands(
            missing_catalog_only=not force, name=band_name, limit=limit
        )
        self._logger.info(
            "enrichment_started",
            provider=self._catalog.get_provider_name(),
            bands=len(bands),
            force=force,
            band_name=band_name,
        )

        stats = EnrichmentStats()
        for index, band in enumerate(bands):
            if index > 0 and self._delay > 0:
                await asyncio.sleep(self._delay)
            stats = stats + await self.match_band(band)

        self._logger.info("enrichment_completed", **stats.model_dump())
        return stats
