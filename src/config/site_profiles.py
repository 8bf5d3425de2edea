"""Site profile registry: the festival websites the pipeline knows how to scrape.

Built-in profiles live in ``BUILTIN_PROFILES``.  Additional sites can be
declared under ``sites:`` in ``config/config.yaml`` using the same field
names as :class:`~src.models.site_profile.SiteProfile`; a YAML entry with
a built-in id replaces the built-in profile.

Profile ids are storage join keys (snapshot file names, log context) and
must never change once a festival has been synced.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any

from pydantic import ValidationError

from src.models.site_profile import ArtistSelectors, SiteProfile
from src.services.text_parsers import TEXT_PARSERS
from src.utils.errors import ConfigurationError

ALL_FESTIVALS = "all"

BUILTIN_PROFILES: tuple[SiteProfile, ...] = (
    SiteProfile(
        id="rfp",
        festival_id="64d1f7b0-8003-437b-bf72-fac602140673",
        name="Rock for People",
        year=2026,
        index_urls=["https://rockforpeople.cz/lineup/"],
        base_url="https://rockforpeople.cz",
        link_selector='a[href*="/lineup/"]',
        link_allow_pattern=re.compile(r"/lineup/[^/]+/?$"),
        link_deny_pattern=re.compile(r"/(en/)?lineup/?$"),
        selectors=ArtistSelectors(
            name="h1",
            day='.day, .date, [class*="day"]',
            stage='.stage, [class*="stage"]',
            time='.time, [class*="time"]',
        ),
        text_parser="czech_weekday",
    ),
    SiteProfile(
        id="novarock",
        festival_id="7dfcafdf-32e2-4fb1-8c29-af94f25a800e",
        name="Nova Rock",
        year=2026,
        start_date=date(2026, 6, 11),
        index_urls=[
            "https://www.novarock.at/en/lineup/#tab-2026-06-11",
            "https://www.novarock.at/en/lineup/#tab-2026-06-12",
            "https://www.novarock.at/en/lineup/#tab-2026-06-13",
            "https://www.novarock.at/en/lineup/#tab-2026-06-14",
        ],
        base_url="https://www.novarock.at",
        link_selector='a[href*="/artist/"]',
        link_allow_pattern=re.compile(r"/(en/)?artist/[A-Za-z0-9-]+/?$"),
        selectors=ArtistSelectors(
            name="h1, .artist-title",
            day=".performance-date, .date",
            stage=".performance-stage, .stage",
            time=".performance-time, .time",
        ),
        text_parser="show_day_block",
    ),
)


def build_registry(config: dict[str, Any] | None = None) -> dict[str, SiteProfile]:
    """Return the profile registry keyed by id, overlaying YAML-declared sites.

    Raises
    ------
    ConfigurationError
        If a YAML site entry is invalid or names an unknown text parser.
    """
    registry = {profile.id: profile for profile in BUILTIN_PROFILES}
    for raw in (config or {}).get("sites") or []:
        try:
            profile = SiteProfile.model_validate(raw)
        except ValidationError as exc:
            site_id = raw.get("id", "?") if isinstance(raw, dict) else "?"
            raise ConfigurationError(
                message=f"Invalid site profile '{site_id}': {exc}"
            ) from exc
        registry[profile.id] = profile

    for profile in registry.values():
        if profile.text_parser not in TEXT_PARSERS:
            raise ConfigurationError(
                message=(
                    f"Site profile '{profile.id}' uses unknown text parser "
                    f"'{profile.text_parser}'. Known: {', '.join(sorted(TEXT_PARSERS))}"
                )
            )
    return registry


def resolve_targets(registry: dict[str, SiteProfile], festival: str) -> list[SiteProfile]:
    """Expand a ``--festival`` value (an id or ``all``) into profiles."""
    key = festival.strip().lower()
    if key == ALL_FESTIVALS:
        return list(registry.values())
    profile = {profile_id.lower(): p for profile_id, p in registry.items()}.get(key)
    if profile is None:
        raise ConfigurationError(
            message=(
                f"Unknown festival '{festival}'. "
                f"Use one of: {', '.join(sorted(registry))}, or {ALL_FESTIVALS}."
            )
        )
    return [profile]
