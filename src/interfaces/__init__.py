"""Public interface definitions for the pipeline's external collaborators.

Festival websites, the snapshot files, the relational store and the music
catalog are accessed only through the abstract base classes in this
package.  Concrete adapters live in ``src/providers/`` and are wired by the
CLI entry points; tests inject fakes or mocks instead.

CONCRETE PROVIDER MAP:
    Interface          →  Concrete implementation (in src/providers/)
    ─────────────────────────────────────────────────────────────
    IPageFetcher       →  HttpxPageFetcher
    ISnapshotStore     →  JSONSnapshotStore
    ILineupStore       →  SQLiteLineupStore
    ICatalogProvider   →  SpotifyCatalogProvider
"""

from src.interfaces.catalog_provider import CatalogArtist, ICatalogProvider
from src.interfaces.lineup_store import ILineupStore
from src.interfaces.page_fetcher import IPageFetcher
from src.interfaces.snapshot_store import ISnapshotStore

__all__ = [
    "CatalogArtist",
    "ICatalogProvider",
    "ILineupStore",
    "IPageFetcher",
    "ISnapshotStore",
]
