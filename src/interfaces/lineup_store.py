"""Abstract base class for the relational lineup store.

The ingestion core only relies on lookup / insert / update / upsert
semantics over three entities (festival, band, lineup slot).  Row-level
security, query language and transport are left to the implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Any

from src.models.storage import Band, Festival, LineupSlot


class ILineupStore(ABC):
    """Contract for festival / band / lineup persistence.

    All operations are async to support network-backed stores.
    Implementations raise :class:`src.utils.errors.StorageError` on failure.
    """

    async def initialize(self) -> None:
        """Prepare the backing store (create tables etc.).  Optional."""

    # -- Festivals ---------------------------------------------------------

    @abstractmethod
    async def get_festival_by_id(self, festival_id: str) -> Festival | None:
        """Return the festival row for *festival_id*, or ``None``."""

    @abstractmethod
    async def insert_festival(self, festival: Festival) -> Festival:
        """Insert *festival* with its pre-assigned id and return the stored row."""

    # -- Bands -------------------------------------------------------------

    @abstractmethod
    async def get_band_by_name(self, name: str) -> Band | None:
        """Return the band whose name equals *name* exactly, or ``None``."""

    @abstractmethod
    async def insert_band(
        self,
        name: str,
        country: str | None,
        slug: str | None,
        source_urls: list[str],
    ) -> Band:
        """Insert a new band and return it with its generated id."""

    @abstractmethod
    async def update_band(
        self,
        band_id: str,
        source_urls: list[str],
        country: str | None,
        slug: str | None,
    ) -> None:
        """Overwrite the reconciliation-owned fields of an existing band."""

    @abstractmethod
    async def list_bands(
        self,
        *,
        missing_catalog_only: bool = True,
        name: str | None = None,
        limit: int | None = None,
    ) -> list[Band]:
        """Select bands for enrichment, ordered by name.

        *name* selects one band case-insensitively and takes precedence over
        *missing_catalog_only*.
        """

    @abstractmethod
    async def update_band_catalog(
        self,
        band_id: str,
        catalog_id: str,
        catalog_url: str | None,
        image_url: str | None,
        popularity: int | None,
        genres: list[str],
    ) -> None:
        """Write catalog metadata for a band, replacing any previous values."""

    # -- Lineup slots ------------------------------------------------------

    @abstractmethod
    async def upsert_lineup_slot(self, slot: LineupSlot) -> None:
        """Insert or fully replace the slot keyed on (festival_id, band_id)."""

    @abstractmethod
    async def list_lineup_slots(self, festival_id: str) -> list[LineupSlot]:
        """Return every lineup slot for *festival_id*."""

    @abstractmethod
    async def update_lineup_calendar(
        self,
        festival_id: str,
        band_id: str,
        performance_date: date | None,
        day_number: int | None,
    ) -> None:
        """Overwrite the derived calendar fields of one lineup slot."""

    @abstractmethod
    async def get_festival_stats(self, festival_id: str) -> dict[str, Any]:
        """Return aggregate lineup counts for *festival_id*."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this store."""
