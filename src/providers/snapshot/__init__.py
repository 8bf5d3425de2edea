"""Scrape snapshot store implementations.

JSONSnapshotStore keeps each source's link list and detail records as two
JSON documents under data/scrape/.
"""

from src.providers.snapshot.json_snapshot_store import JSONSnapshotStore

__all__ = ["JSONSnapshotStore"]
