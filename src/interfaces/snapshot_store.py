"""Abstract base class for the intermediate scrape snapshot store.

Each source owns two documents: its link list and its detail list.  Reads
of a missing document return an empty list (first run); writes replace the
document wholesale.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.scrape import ArtistDetail


class ISnapshotStore(ABC):
    """Contract for persisting per-source link and detail snapshots."""

    @abstractmethod
    async def load_links(self, source: str) -> list[str]:
        """Return the stored link list for *source*, or ``[]`` if absent."""

    @abstractmethod
    async def save_links(self, source: str, links: list[str]) -> None:
        """Replace the stored link list for *source*."""

    @abstractmethod
    async def load_details(self, source: str) -> list[ArtistDetail]:
        """Return the stored detail records for *source*, or ``[]`` if absent."""

    @abstractmethod
    async def save_details(self, source: str, details: list[ArtistDetail]) -> None:
        """Replace the stored detail records for *source*."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this store."""
