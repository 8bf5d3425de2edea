"""Lineup sync domain models — re-exports all public model classes.

Other modules can import from ``src.models`` directly instead of the
individual submodules:
    - site_profile.py — festival website profiles and field selectors
    - scrape.py       — scraped artist records, failures, merge results
    - storage.py      — festival / band / lineup slot rows
    - sync.py         — run options and per-stage counters

If you add a new model class, add it to ``__all__`` too.
"""

from __future__ import annotations

from src.models.scrape import (
    ArtistDetail,
    ExtractionResult,
    MergeOutcome,
    MergeSnapshot,
    ScrapeFailure,
)
from src.models.site_profile import ArtistSelectors, SiteProfile
from src.models.storage import Band, Festival, LineupSlot
from src.models.sync import (
    EnrichmentStats,
    ReconcileStats,
    RecomputeStats,
    ScrapeStats,
    SourceReport,
    SyncOptions,
    SyncSummary,
)

__all__ = [
    "ArtistDetail",
    "ArtistSelectors",
    "Band",
    "EnrichmentStats",
    "ExtractionResult",
    "Festival",
    "LineupSlot",
    "MergeOutcome",
    "MergeSnapshot",
    "ReconcileStats",
    "RecomputeStats",
    "ScrapeFailure",
    "ScrapeStats",
    "SiteProfile",
    "SourceReport",
    "SyncOptions",
    "SyncSummary",
]
