"""Utility modules for the lineup sync pipeline.

- **errors** -- exception hierarchy rooted at LineupSyncError; each failure
  class (scrape, storage, catalog, rate limit, configuration, pipeline) has
  its own subclass.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **text_normalizer** -- whitespace collapsing, name/country splitting,
  URL slugs, and stage/time sanitization for scraped fields.
- **lineup_calendar** -- day-label parsing and festival day numbers.
- **run_lock** (not re-exported here) -- single-writer lock file for sync runs.
"""

from src.utils.errors import (
    CatalogError,
    ConfigurationError,
    LineupSyncError,
    PipelineError,
    RateLimitError,
    ScrapeError,
    StorageError,
)
from src.utils.lineup_calendar import (
    calculate_day_number,
    compute_calendar_fields,
    parse_day_label,
    parse_performance_time,
)
from src.utils.logging import configure_logging, get_logger
from src.utils.text_normalizer import (
    PLACEHOLDER,
    extract_slug,
    normalize_text,
    sanitize_stage,
    sanitize_time,
    split_name_and_country,
)

__all__ = [
    "PLACEHOLDER",
    "CatalogError",
    "ConfigurationError",
    "LineupSyncError",
    "PipelineError",
    "RateLimitError",
    "ScrapeError",
    "StorageError",
    "calculate_day_number",
    "compute_calendar_fields",
    "configure_logging",
    "extract_slug",
    "get_logger",
    "normalize_text",
    "parse_day_label",
    "parse_performance_time",
    "sanitize_stage",
    "sanitize_time",
    "split_name_and_country",
]
