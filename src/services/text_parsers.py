"""Free-text day/stage/time parsers for festival detail pages.

Selectors do not always hit: some sites render the performance info as
loose text, others change class names between editions.  Each site
profile names one of the parsers below, which is run over the whole page
text as a fallback.  Values found via selectors always win over these.

Parsers are plain functions ``(text) -> ParsedMeta`` registered in
``TEXT_PARSERS``.  They are best-effort regex heuristics: a page that no
longer matches yields empty fields rather than an error.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from src.utils.text_normalizer import normalize_text


@dataclass(frozen=True)
class ParsedMeta:
    """Fields recovered from page text; ``None`` when not found."""

    day: str | None = None
    stage: str | None = None
    time: str | None = None


TextParser = Callable[[str], ParsedMeta]

# "Čtvrtek 11. 6." / "Thu 11. 6."
_CZECH_DAY_RE = re.compile(
    r"(Pondělí|Úterý|Středa|Čtvrtek|Pátek|Sobota|Neděle|Mon|Tue|Wed|Thu|Fri|Sat|Sun)"
    r"[^\d]{0,10}\s?(\d{1,2}\.\s*\d{1,2}\.)",
    re.IGNORECASE,
)

# "SHOW DAY Thu, 11. June STAGE Red Stage STAGE TIME 20:30"
_SHOW_DAY_BLOCK_RE = re.compile(
    r"SHOW DAY\s+(.+?)\s+STAGE\s+(.+?)\s+STAGE TIME\s+(\S+)",
    re.IGNORECASE,
)
_EN_DAY_RE = re.compile(
    r"(Mon|Tue|Wed|Thu|Fri|Sat|Sun)[^\d]{0,10}\s?\d{1,2}\.\s*"
    r"(January|February|March|April|May|June|July|August|September|October|November|December"
    r"|Jan|Feb|Mar|Apr|Jun|Jul|Aug|Sep|Oct|Nov|Dec)",
    re.IGNORECASE,
)
_TIME_TOKEN_RE = re.compile(r"(\d{1,2}:\d{2})")
_STAGE_TOKEN_RE = re.compile(r"STAGE\s+([A-Za-z0-9\- ]{2,40})", re.IGNORECASE)


def parse_none(text: str) -> ParsedMeta:
    """Parser for sites whose selectors are reliable enough on their own."""
    return ParsedMeta()


def parse_czech_weekday(text: str) -> ParsedMeta:
    """Recognise a Czech or abbreviated English weekday followed by ``D. M.``.

    Only the day is recoverable from these pages; stage and time stay empty.
    """
    normalized = normalize_text(text) or ""
    match = _CZECH_DAY_RE.search(normalized)
    return ParsedMeta(day=match.group(0) if match else None)


def parse_show_day_block(text: str) -> ParsedMeta:
    """Recognise a ``SHOW DAY / STAGE / STAGE TIME`` block.

    Falls back to independent weekday+month, ``HH:MM`` and ``STAGE <name>``
    tokens when the block is missing.
    """
    normalized = normalize_text(text) or ""
    block = _SHOW_DAY_BLOCK_RE.search(normalized)
    if block:
        return ParsedMeta(
            day=normalize_text(block.group(1)),
            stage=normalize_text(block.group(2)),
            time=normalize_text(block.group(3)),
        )

    day = _EN_DAY_RE.search(normalized)
    time = _TIME_TOKEN_RE.search(normalized)
    stage = _STAGE_TOKEN_RE.search(normalized)
    return ParsedMeta(
        day=day.group(0) if day else None,
        stage=normalize_text(stage.group(1)) if stage else None,
        time=time.group(1) if time else None,
    )


TEXT_PARSERS: dict[str, TextParser] = {
    "none": parse_none,
    "czech_weekday": parse_czech_weekday,
    "show_day_block": parse_show_day_block,
}


def get_text_parser(name: str) -> TextParser:
    """Return the parser registered under *name* (``parse_none`` if unknown)."""
    return TEXT_PARSERS.get(name, parse_none)
