"""Calendar math for lineup slots.

Turns the free-text day labels scraped from festival pages into calendar
dates and 1-based festival day numbers.  Two label shapes are understood:

* numeric month (Czech sites):  ``"Čtvrtek 11. 6."``
* month name (English sites):   ``"Thu, 11. June"`` / ``"Fri 12. Jun"``

All arithmetic uses :class:`datetime.date`, which has no time-zone
component, so a label can never shift by a day depending on where the
job runs.
"""

from __future__ import annotations

import re
from datetime import date

_NUMERIC_MONTH_RE = re.compile(r"(\d+)\.\s*(\d+)\.?")
_MONTH_NAME_RE = re.compile(r"(\d+)\.?\s*([^\W\d_]+)")
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

MONTHS: dict[str, int] = {
    "january": 1, "february": 2, "march": 3, "april": 4,
    "may": 5, "june": 6, "july": 7, "august": 8,
    "september": 9, "october": 10, "november": 11, "december": 12,
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}


def _safe_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_day_label(day_label: str | None, festival_year: int) -> date | None:
    """Parse *day_label* into a date within *festival_year*.

    Returns ``None`` when neither label shape matches or the day/month pair
    is not a real calendar date.
    """
    if not day_label:
        return None
    normalized = day_label.lower().strip()

    numeric = _NUMERIC_MONTH_RE.search(normalized)
    if numeric:
        return _safe_date(festival_year, int(numeric.group(2)), int(numeric.group(1)))

    named = _MONTH_NAME_RE.search(normalized)
    if named:
        month = MONTHS.get(named.group(2))
        if month:
            return _safe_date(festival_year, month, int(named.group(1)))

    return None


def calculate_day_number(performance_date: date, festival_start: date) -> int:
    """Return the 1-based festival day; dates before the start are day 0."""
    diff_days = (performance_date - festival_start).days
    if diff_days < 0:
        return 0
    return diff_days + 1


def parse_performance_time(time_label: str | None) -> str | None:
    """Normalize a strict ``H:MM`` label to zero-padded ``HH:MM``."""
    if not time_label:
        return None
    match = _TIME_RE.match(time_label.strip())
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return f"{hour:02d}:{minute:02d}"


def compute_calendar_fields(
    day_label: str | None,
    festival_year: int,
    festival_start: date | None,
) -> tuple[date | None, int | None]:
    """Return ``(performance_date, day_number)`` for a lineup slot.

    Both are ``None`` unless a day label and a festival start date exist and
    the label parses.
    """
    if not day_label or festival_start is None:
        return None, None
    performance_date = parse_day_label(day_label, festival_year)
    if performance_date is None:
        return None, None
    return performance_date, calculate_day_number(performance_date, festival_start)
