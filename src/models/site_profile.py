"""Pydantic v2 models for per-festival scrape configuration.

A :class:`SiteProfile` is everything the pipeline knows about one festival
website: where the lineup index lives, how to recognise artist detail
links, and which CSS selectors hold the artist fields.  Profiles are
frozen and loaded once at startup (see ``src/config/site_profiles.py``).
"""

from __future__ import annotations

import re
from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class ArtistSelectors(BaseModel):
    """CSS selectors for the fields of an artist detail page.

    Comma-separated selector lists are allowed; the first matching element
    in document order wins.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Selector for the artist name heading.")
    day: str | None = Field(default=None, description="Selector for the day label.")
    stage: str | None = Field(default=None, description="Selector for the stage label.")
    time: str | None = Field(default=None, description="Selector for the set time.")


class SiteProfile(BaseModel):
    """Static scrape configuration for one festival source."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Stable source identifier, e.g. 'rfp'.")
    festival_id: str = Field(
        description="Pre-assigned festival row id in the lineup store."
    )
    name: str = Field(description="Festival display name.")
    year: int = Field(description="Festival edition year.")
    start_date: date | None = Field(
        default=None,
        description="First festival day; stored only when the festival row is created.",
    )
    index_urls: list[str] = Field(
        min_length=1, description="Lineup index pages listing artist links."
    )
    base_url: str = Field(description="Base URL for resolving relative hrefs.")
    link_selector: str = Field(description="Selector for candidate artist links.")
    link_allow_pattern: re.Pattern[str] | None = Field(
        default=None, description="Absolute URLs must match this to be kept."
    )
    link_deny_pattern: re.Pattern[str] | None = Field(
        default=None, description="Absolute URLs matching this are dropped."
    )
    selectors: ArtistSelectors
    text_parser: str = Field(
        default="none",
        description="Name of the free-text day/stage/time parser for this site.",
    )
