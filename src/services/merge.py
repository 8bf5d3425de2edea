"""Pure merge functions for scrape snapshots.

Snapshots are treated as values: ``merge_links`` and ``merge_details``
take the previous and the new state and return the merged state without
touching storage.  Persistence lives in ``snapshot_service.py``.

Detail identity is resolved by an ordered list of key extractors (slug,
then URL, then ``name:<name>``); the first one that yields a value is the
key.  A record for which none applies is counted as skipped, never
dropped silently.
"""

from __future__ import annotations

from collections.abc import Callable

from src.models.scrape import ArtistDetail, MergeOutcome
from src.utils.logging import get_logger

logger = get_logger(__name__)

KeyExtractor = Callable[[ArtistDetail], "str | None"]


def key_by_slug(detail: ArtistDetail) -> str | None:
    return detail.slug or None


def key_by_url(detail: ArtistDetail) -> str | None:
    return detail.url or None


def key_by_name(detail: ArtistDetail) -> str | None:
    return f"name:{detail.name}" if detail.name else None


IDENTITY_EXTRACTORS: tuple[KeyExtractor, ...] = (key_by_slug, key_by_url, key_by_name)


def identity_key(detail: ArtistDetail) -> str | None:
    """Return the merge identity of *detail*, or ``None`` if it has none."""
    for extractor in IDENTITY_EXTRACTORS:
        key = extractor(detail)
        if key:
            return key
    return None


def overlay(previous: ArtistDetail, newer: ArtistDetail) -> ArtistDetail:
    """Shallow field overlay: present fields of *newer* replace *previous*."""
    return previous.model_copy(update=newer.model_dump(exclude_none=True))


def merge_links(existing: list[str], incoming: list[str]) -> list[str]:
    """Set union of two link lists, keeping first-seen order."""
    merged: dict[str, None] = dict.fromkeys(existing)
    for link in incoming:
        merged.setdefault(link, None)
    return list(merged)


def merge_details(existing: list[ArtistDetail], incoming: list[ArtistDetail]) -> MergeOutcome:
    """Merge *incoming* records over *existing* ones by identity key.

    Records present in both are overlaid field by field; records lacking
    slug, URL and name are excluded and counted in ``skipped``.
    """
    merged: dict[str, ArtistDetail] = {}
    skipped = 0

    for origin, batch in (("existing", existing), ("incoming", incoming)):
        for detail in batch:
            key = identity_key(detail)
            if key is None:
                skipped += 1
                logger.warning(
                    "detail_without_identity",
                    origin=origin,
                    source=detail.source,
                    detail=detail.model_dump(exclude_none=True),
                )
                continue
            previous = merged.get(key)
            merged[key] = overlay(previous, detail) if previous else detail

    if skipped:
        logger.warning("details_skipped_missing_identity", skipped=skipped)
    return MergeOutcome(details=list(merged.values()), skipped=skipped)
