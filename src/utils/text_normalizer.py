"""Text normalization helpers for scraped festival pages.

Festival sites render artist names, day labels and stage names with
arbitrary whitespace (line breaks inside headings, non-breaking spaces,
indentation).  Every extracted value passes through :func:`normalize_text`
before it is compared, stored, or parsed further.
"""

from __future__ import annotations

import re
from urllib.parse import urlparse

PLACEHOLDER = "TBA"

_WHITESPACE_RE = re.compile(r"\s+")
# "Architects GB" or "Architects (GB)" -> ("Architects", "GB")
_COUNTRY_SUFFIX_RE = re.compile(r"^(.*?)\s+(?:\(([A-Z]{2})\)|([A-Z]{2}))$")
_STRICT_TIME_RE = re.compile(r"^(\d{1,2}:\d{2})$")
_TBA_RE = re.compile(r"^tba$", re.IGNORECASE)
# Container class name that some selectors match instead of the stage text.
_STAGE_ARTIFACT_RE = re.compile(r"event-card", re.IGNORECASE)


def normalize_text(value: str | None) -> str | None:
    """Collapse whitespace runs and trim; empty results become ``None``."""
    if not value:
        return None
    cleaned = _WHITESPACE_RE.sub(" ", value).strip()
    return cleaned or None


def split_name_and_country(raw: str | None) -> tuple[str | None, str | None]:
    """Split a trailing two-letter uppercase country code off an artist name.

    >>> split_name_and_country("Architects GB")
    ('Architects', 'GB')
    >>> split_name_and_country("Architects")
    ('Architects', None)
    """
    clean = normalize_text(raw)
    if clean is None:
        return None, None
    match = _COUNTRY_SUFFIX_RE.match(clean)
    if match:
        return normalize_text(match.group(1)), match.group(2) or match.group(3)
    return clean, None


def extract_slug(url: str | None) -> str | None:
    """Return the last non-empty path segment of *url*."""
    if not url:
        return None
    try:
        path = urlparse(url).path
    except ValueError:
        return None
    parts = [part for part in path.split("/") if part]
    return parts[-1] if parts else None


def sanitize_stage(value: str | None) -> str | None:
    """Clean a stage label.

    Returns ``None`` for empty values and markup artifacts, the placeholder
    for any-case ``tba``, otherwise the normalized label.
    """
    clean = normalize_text(value)
    if clean is None:
        return None
    if _STAGE_ARTIFACT_RE.search(clean):
        return None
    if _TBA_RE.match(clean):
        return PLACEHOLDER
    return clean


def sanitize_time(value: str | None) -> str | None:
    """Accept only strict ``H:MM`` / ``HH:MM``; ``tba`` becomes the placeholder."""
    clean = normalize_text(value)
    if clean is None:
        return None
    if _TBA_RE.match(clean):
        return PLACEHOLDER
    match = _STRICT_TIME_RE.match(clean)
    return match.group(1) if match else None
