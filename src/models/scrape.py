"""Pydantic v2 models for scraped lineup records.

These are the run-scoped values produced by the link collector and detail
extractor and persisted between runs by the snapshot store.  All models are
frozen; a record only changes through the field overlay performed in
``src/services/merge.py``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ArtistDetail(BaseModel):
    """One artist performance entry extracted from a detail page.

    ``url``, ``slug`` and ``name`` are all optional because records loaded
    from older snapshots may lack any of them; merge identity falls back
    across the three.
    """

    model_config = ConfigDict(frozen=True)

    source: str = Field(description="Site profile identifier the record came from.")
    url: str | None = Field(default=None, description="Detail page URL.")
    slug: str | None = Field(default=None, description="Last non-empty URL path segment.")
    name: str | None = Field(default=None, description="Artist name without country suffix.")
    country: str | None = Field(default=None, description="Two-letter country code.")
    day: str | None = Field(default=None, description="Free-text day label.")
    stage: str | None = Field(default=None, description="Stage label or placeholder.")
    time: str | None = Field(default=None, description="HH:MM set time or placeholder.")


class ScrapeFailure(BaseModel):
    """A detail page that could not be fetched or parsed."""

    model_config = ConfigDict(frozen=True)

    url: str
    reason: str


class ExtractionResult(BaseModel):
    """Output of one detail-extraction batch for a source."""

    model_config = ConfigDict(frozen=True)

    source: str
    details: list[ArtistDetail] = Field(default_factory=list)
    failures: list[ScrapeFailure] = Field(default_factory=list)
    low_yield: bool = Field(
        default=False,
        description="True when most records came back without day, stage and time.",
    )


class MergeSnapshot(BaseModel):
    """Durable intermediate state for one source: links plus keyed details."""

    model_config = ConfigDict(frozen=True)

    source: str
    links: list[str] = Field(default_factory=list)
    details: list[ArtistDetail] = Field(default_factory=list)


class MergeOutcome(BaseModel):
    """Result of merging a detail batch into existing records."""

    model_config = ConfigDict(frozen=True)

    details: list[ArtistDetail] = Field(default_factory=list)
    skipped: int = Field(
        default=0, description="Records dropped for lacking slug, URL and name."
    )
