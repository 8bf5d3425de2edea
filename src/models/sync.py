"""Run options and counter models for the lineup sync pipeline.

Every stage returns its own frozen counter model; the orchestrator sums
them with ``+`` instead of sharing mutable counters across sources.  The
resulting :class:`SyncSummary` is the only operator-facing output of a
batch run, so fatal, record-level and transient failures each get their
own field.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from src.models.scrape import ScrapeFailure


class SyncOptions(BaseModel):
    """Options for one sync run (mirrors the ``sync`` CLI flags)."""

    model_config = ConfigDict(frozen=True)

    festival: str = Field(default="all", description="Source id or 'all'.")
    skip_scrape: bool = False
    skip_enrichment: bool = False
    scrape_limit: int | None = Field(
        default=None, ge=0, description="Max detail fetches per source."
    )
    enrichment_limit: int | None = Field(
        default=None, ge=0, description="Max catalog lookups for the run."
    )


class ScrapeStats(BaseModel):
    """Collector + extractor + merge counters for one source."""

    model_config = ConfigDict(frozen=True)

    links_found: int = 0
    links_total: int = 0
    details_extracted: int = 0
    details_total: int = 0
    failures: int = 0
    merge_skipped: int = 0
    low_yield: bool = False

    def __add__(self, other: ScrapeStats) -> ScrapeStats:
        return ScrapeStats(
            links_found=self.links_found + other.links_found,
            links_total=self.links_total + other.links_total,
            details_extracted=self.details_extracted + other.details_extracted,
            details_total=self.details_total + other.details_total,
            failures=self.failures + other.failures,
            merge_skipped=self.merge_skipped + other.merge_skipped,
            low_yield=self.low_yield or other.low_yield,
        )


class ReconcileStats(BaseModel):
    """Reconciler counters for one source."""

    model_config = ConfigDict(frozen=True)

    bands_inserted: int = 0
    bands_updated: int = 0
    lineups_upserted: int = 0
    skipped: int = 0

    def __add__(self, other: ReconcileStats) -> ReconcileStats:
        return ReconcileStats(
            bands_inserted=self.bands_inserted + other.bands_inserted,
            bands_updated=self.bands_updated + other.bands_updated,
            lineups_upserted=self.lineups_upserted + other.lineups_upserted,
            skipped=self.skipped + other.skipped,
        )


class EnrichmentStats(BaseModel):
    """Enrichment matcher counters.

    ``rate_limited`` counts lookups that hit a rate limit and were retried;
    it is informational and does not imply a failure.
    """

    model_config = ConfigDict(frozen=True)

    matched: int = 0
    not_found: int = 0
    errors: int = 0
    rate_limited: int = 0

    def __add__(self, other: EnrichmentStats) -> EnrichmentStats:
        return EnrichmentStats(
            matched=self.matched + other.matched,
            not_found=self.not_found + other.not_found,
            errors=self.errors + other.errors,
            rate_limited=self.rate_limited + other.rate_limited,
        )


class RecomputeStats(BaseModel):
    """Counters for re-deriving calendar fields on stored lineup slots."""

    model_config = ConfigDict(frozen=True)

    updated: int = 0
    skipped: int = 0
    errors: int = 0


class SourceReport(BaseModel):
    """Outcome of the pipeline for one source."""

    model_config = ConfigDict(frozen=True)

    source: str
    scrape: ScrapeStats | None = Field(
        default=None, description="None when scraping was skipped or never ran."
    )
    reconcile: ReconcileStats | None = None
    failure_samples: list[ScrapeFailure] = Field(default_factory=list)
    error: str | None = Field(
        default=None, description="Set when the source failed wholesale."
    )

    @property
    def ok(self) -> bool:
        return self.error is None


class SyncSummary(BaseModel):
    """Run-level summary across all processed sources."""

    model_config = ConfigDict(frozen=True)

    sources: list[SourceReport] = Field(default_factory=list)
    enrichment: EnrichmentStats | None = None
    enrichment_error: str | None = None

    @property
    def scrape_totals(self) -> ScrapeStats:
        total = ScrapeStats()
        for report in self.sources:
            if report.scrape is not None:
                total = total + report.scrape
        return total

    @property
    def reconcile_totals(self) -> ReconcileStats:
        total = ReconcileStats()
        for report in self.sources:
            if report.reconcile is not None:
                total = total + report.reconcile
        return total

    @property
    def failed_sources(self) -> list[str]:
        return [report.source for report in self.sources if not report.ok]

    @property
    def all_sources_failed(self) -> bool:
        return bool(self.sources) and all(not report.ok for report in self.sources)
