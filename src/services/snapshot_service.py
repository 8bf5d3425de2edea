"""Read-merge-write persistence for per-source scrape snapshots.

Each sync run loads the previous snapshot for a source (empty on the first
run), merges the newly scraped links and details into it with the pure
functions from ``merge.py``, and writes both documents back in full.  The
snapshot therefore only grows; repeated runs are incremental rather than
full re-scrapes.

The cycle is not safe against concurrent writers; ``sync`` holds a run
lock (``src/utils/run_lock.py``) around it.
"""

from __future__ import annotations

from src.interfaces.snapshot_store import ISnapshotStore
from src.models.scrape import ArtistDetail, MergeOutcome, MergeSnapshot
from src.services.merge import merge_details, merge_links
from src.utils.logging import get_logger


class SnapshotService:
    """Loads, merges and stores :class:`MergeSnapshot` values for sources."""

    def __init__(self, store: ISnapshotStore) -> None:
        self._store = store
        self._logger = get_logger(__name__)

    async def load(self, source: str) -> MergeSnapshot:
        """Return the stored snapshot for *source* (empty if never written)."""
        links = await self._store.load_links(source)
        details = await self._store.load_details(source)
        return MergeSnapshot(source=source, links=links, details=details)

    async def merge_links(self, source: str, links: list[str]) -> list[str]:
        """Union *links* into the stored link list and persist it."""
        existing = await self._store.load_links(source)
        merged = merge_links(existing, links)
        await self._store.save_links(source, merged)
        self._logger.info(
            "links_merged",
            source=source,
            previous=len(existing),
            incoming=len(links),
            total=len(merged),
        )
        return merged

    async def merge_details(self, source: str, details: list[ArtistDetail]) -> MergeOutcome:
        """Merge *details* into the stored records and persist them."""
        existing = await self._store.load_details(source)
        outcome = merge_details(existing, details)
        await self._store.save_details(source, outcome.details)
        self._logger.info(
            "details_merged",
            source=source,
            previous=len(existing),
            incoming=len(details),
            total=len(outcome.details),
            skipped=outcome.skipped,
        )
        return outcome
