"""Orchestrator for the lineup sync pipeline.

Runs each selected source through the same sequence of stages:

    collect links -> merge links -> extract details over the merged links
    -> merge details -> reconcile into the lineup store

and, once every source has been reconciled, a single enrichment pass over
the bands in storage.  Scraping and enrichment are independently
skippable; reconciliation always runs, since it is the only path that
makes scraped data visible in the lineup store.

Each source is an independent unit of work: a failure inside one source's
stages is recorded on its :class:`SourceReport` and the next source runs
normally.  Every stage returns its own counters and the orchestrator sums
them into the :class:`SyncSummary`; no counters are shared across
sources.
"""

from __future__ import annotations

from src.config.site_profiles import resolve_targets
from src.models.scrape import ArtistDetail, ScrapeFailure
from src.models.site_profile import SiteProfile
from src.models.sync import (
    EnrichmentStats,
    ScrapeStats,
    SourceReport,
    SyncOptions,
    SyncSummary,
)
from src.services.detail_extractor import DetailExtractor
from src.services.enrichment_matcher import EnrichmentMatcher
from src.services.link_collector import LinkCollector
from src.services.reconciler import LineupReconciler
from src.services.snapshot_service import SnapshotService
from src.utils.errors import ConfigurationError
from src.utils.logging import get_logger

_MAX_FAILURE_SAMPLES = 5


class LineupSyncPipeline:
    """Coordinates collector, extractor, snapshots, reconciler and enrichment.

    All collaborators are injected; the CLI wires the concrete providers.
    ``enrichment`` may be ``None`` when no catalog is configured, in which
    case every run must set ``skip_enrichment``.
    """

    def __init__(
        self,
        registry: dict[str, SiteProfile],
        collector: LinkCollector,
        extractor: DetailExtractor,
        snapshots: SnapshotService,
        reconciler: LineupReconciler,
        enrichment: EnrichmentMatcher | None = None,
    ) -> None:
        self._registry = registry
        self._collector = collector
        self._extractor = extractor
        self._snapshots = snapshots
        self._reconciler = reconciler
        self._enrichment = enrichment
        self._logger = get_logger(__name__)

    async def run(self, options: SyncOptions) -> SyncSummary:
        """Run the pipeline for every source selected by ``options.festival``.

        Raises
        ------
        src.utils.errors.ConfigurationError
            For an unknown festival id, or when enrichment is requested but
            no catalog credentials are configured.  Raised before any
            source is touched.
        """
        targets = resolve_targets(self._registry, options.festival)
        if not options.skip_enrichment and (
            self._enrichment is None or not self._enrichment.is_available()
        ):
            raise ConfigurationError(
                message=(
                    "Catalog credentials are not configured; set SPOTIFY_CLIENT_ID "
                    "and SPOTIFY_CLIENT_SECRET or pass --skip-spotify."
                ),
                provider_name="spotify",
            )

        self._logger.info(
            "sync_started",
            sources=[profile.id for profile in targets],
            skip_scrape=options.skip_scrape,
            skip_enrichment=options.skip_enrichment,
            scrape_limit=options.scrape_limit,
            enrichment_limit=options.enrichment_limit,
        )

        reports: list[SourceReport] = []
        for profile in targets:
            reports.append(await self.run_source(profile, options))

        enrichment: EnrichmentStats | None = None
        enrichment_error: str | None = None
        if options.skip_enrichment:
            self._logger.info("enrichment_skipped")
        elif all(not report.ok for report in reports):
            self._logger.warning("enrichment_skipped_all_sources_failed")
        elif self._enrichment is not None:
            enrichment, enrichment_error = await self._run_enrichment(self._enrichment, options)

        summary = SyncSummary(
            sources=reports,
            enrichment=enrichment,
            enrichment_error=enrichment_error,
        )
        self._logger.info(
            "sync_completed",
            failed_sources=summary.failed_sources,
            **summary.reconcile_totals.model_dump(),
        )
        return summary

    async def run_source(self, profile: SiteProfile, options: SyncOptions) -> SourceReport:
        """Run scrape (unless skipped) and reconcile for one source."""
        scrape: ScrapeStats | None = None
        samples: list[ScrapeFailure] = []
        self._logger.info("source_started", source=profile.id)

        try:
            if options.skip_scrape:
                details = await self._load_snapshot_details(profile)
            else:
                scrape, samples, details = await self._scrape(profile, options.scrape_limit)
            reconcile = await self._reconciler.reconcile(profile, details)
        except Exception as exc:
            self._logger.error("source_failed", source=profile.id, error=str(exc))
            return SourceReport(
                source=profile.id,
                scrape=scrape,
                failure_samples=samples,
                error=str(exc),
            )

        self._logger.info("source_completed", source=profile.id)
        return SourceReport(
            source=profile.id,
            scrape=scrape,
            reconcile=reconcile,
            failure_samples=samples,
        )

    async def _scrape(
        self,
        profile: SiteProfile,
        limit: int | None,
    ) -> tuple[ScrapeStats, list[ScrapeFailure], list[ArtistDetail]]:
        links = await self._collector.collect(profile)
        merged_links = await self._snapshots.merge_links(profile.id, links)

        extraction = await self._extractor.extract_many(profile, merged_links, limit=limit)
        outcome = await self._snapshots.merge_details(profile.id, extraction.details)

        stats = ScrapeStats(
            links_found=len(links),
            links_total=len(merged_links),
            details_extracted=len(extraction.details),
            details_total=len(outcome.details),
            failures=len(extraction.failures),
            merge_skipped=outcome.skipped,
            low_yield=extraction.low_yield,
        )
        return stats, extraction.failures[:_MAX_FAILURE_SAMPLES], outcome.details

    async def _load_snapshot_details(self, profile: SiteProfile) -> list[ArtistDetail]:
        snapshot = await self._snapshots.load(profile.id)
        if not snapshot.details:
            self._logger.warning("snapshot_empty", source=profile.id)
        return snapshot.details

    async def _run_enrichment(
        self, matcher: EnrichmentMatcher, options: SyncOptions
    ) -> tuple[EnrichmentStats | None, str | None]:
        try:
            stats = await matcher.run(limit=options.enrichment_limit)
        except Exception as exc:
            self._logger.error("enrichment_failed", error=str(exc))
            return None, str(exc)
        return stats, None
