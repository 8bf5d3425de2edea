"""Application settings loaded from environment variables via pydantic-settings.

Settings are read from two sources, in priority order:

  1. **Environment variables** — e.g. ``SPOTIFY_CLIENT_ID=abc123``
  2. **.env file** — key=value lines in the project root ``.env`` file

Field ``spotify_client_id`` maps to env var ``SPOTIFY_CLIENT_ID``.  Defaults
apply when neither source sets a value.  The ``.env`` file holds catalog
credentials and must never be committed.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Lineup sync settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Music catalog (Spotify Web API, client-credentials flow) ===
    # Empty string = "not configured"; enrichment refuses to start without both.
    spotify_client_id: str = ""
    spotify_client_secret: str = ""
    spotify_token_url: str = "https://accounts.spotify.com/api/token"
    spotify_api_base: str = "https://api.spotify.com/v1"

    # === Storage ===
    lineup_db_path: str = "data/lineups.db"
    snapshot_dir: str = "data/scrape"

    # === Scraping ===
    scrape_timeout: float = 15.0
    scrape_delay: float = 0.2  # seconds between consecutive detail fetches
    scrape_user_agent: str = "lineup-sync/1.0 (+festival lineup scraper)"
    # Low-yield alarm: warn when more than this fraction of a source's
    # records come back with no day, stage or time.
    low_yield_threshold: float = 0.5
    low_yield_min_records: int = 5

    # === Enrichment ===
    enrichment_delay: float = 0.1  # seconds between consecutive catalog lookups
    enrichment_search_limit: int = 5

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"

    def has_catalog_credentials(self) -> bool:
        """Return ``True`` when both catalog credentials are configured."""
        return bool(self.spotify_client_id and self.spotify_client_secret)
