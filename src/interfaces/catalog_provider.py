"""Abstract base class for third-party music-catalog providers.

The enrichment matcher looks each band up in a catalog (Spotify in
production) and writes back popularity, genres and artwork.  The adapter
keeps the matcher independent of the catalog's auth flow and payloads.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CatalogArtist:
    """A single artist returned by a catalog search.

    Attributes
    ----------
    id:
        Catalog-specific artist identifier.
    name:
        Artist name as listed in the catalog.
    popularity:
        Catalog popularity score, 0-100.
    genres:
        Genre tags, most specific first.
    url:
        Public catalog page for the artist.
    image_url:
        Largest artist image, if any.
    """

    id: str
    name: str
    popularity: int = 0
    genres: list[str] = field(default_factory=list)
    url: str | None = None
    image_url: str | None = None


class ICatalogProvider(ABC):
    """Contract for music-catalog artist search."""

    @abstractmethod
    async def get_access_token(self) -> str:
        """Obtain (or return the cached) short-lived bearer token.

        Raises
        ------
        src.utils.errors.ConfigurationError
            If credentials are not configured.
        src.utils.errors.CatalogError
            If the token exchange fails.
        """

    @abstractmethod
    async def search_artists(self, name: str, limit: int = 5) -> list[CatalogArtist]:
        """Search the catalog for artists matching *name*, best ranked first.

        Raises
        ------
        src.utils.errors.RateLimitError
            When the catalog signals rate limiting.
        src.utils.errors.CatalogError
            For any other API failure.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider has the credentials it needs."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this catalog."""
