"""Music-catalog provider implementations."""

from src.providers.catalog.spotify_provider import SpotifyCatalogProvider

__all__ = ["SpotifyCatalogProvider"]
