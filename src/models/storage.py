"""Pydantic v2 models for rows in the relational lineup store.

Festival, Band and LineupSlot mirror the three tables the reconciler and
enrichment matcher write.  Rows are frozen; updates go through the store's
explicit update methods and come back as new instances.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class Festival(BaseModel):
    """A festival edition, keyed by its pre-assigned identifier."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    year: int
    start_date: date | None = None


class Band(BaseModel):
    """A performing act, unique by exact name.

    The ``catalog_*`` fields are written only by the enrichment matcher.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    country: str | None = None
    slug: str | None = None
    source_urls: list[str] = Field(default_factory=list)
    catalog_id: str | None = None
    catalog_url: str | None = None
    catalog_image_url: str | None = None
    catalog_popularity: int | None = Field(default=None, ge=0, le=100)
    catalog_genres: list[str] = Field(default_factory=list)


class LineupSlot(BaseModel):
    """One band's appearance at one festival; unique on (festival, band)."""

    model_config = ConfigDict(frozen=True)

    festival_id: str
    band_id: str
    slug: str | None = None
    source_url: str | None = None
    day_label: str | None = None
    stage_label: str | None = None
    time_label: str | None = None
    performance_time: str | None = Field(
        default=None, description="Zero-padded HH:MM when the time label parses."
    )
    performance_date: date | None = None
    day_number: int | None = Field(
        default=None, ge=0, description="1-based festival day; 0 for pre-festival dates."
    )
