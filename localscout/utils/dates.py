"""Calendar-date detection in free text ("14th December", "dec 14", "tonight").

Used to narrow event cards to a single day.  Dates without a year resolve to
the next occurrence on or after *today*.
"""

from __future__ import annotations

import re
from datetime import date, timedelta

_MONTHS: dict[str, int] = {
    "january": 1, "jan": 1, "february": 2, "feb": 2, "march": 3, "mar": 3,
    "april": 4, "apr": 4, "may": 5, "june": 6, "jun": 6, "july": 7, "jul": 7,
    "august": 8, "aug": 8, "september": 9, "sept": 9, "sep": 9,
    "october": 10, "oct": 10, "november": 11, "nov": 11, "december": 12, "dec": 12,
}

_MONTH_ALT = "|".join(sorted(_MONTHS, key=len, reverse=True))
_DAY_FIRST_RE = re.compile(
    rf"\b(\d{{1,2}})(?:st|nd|rd|th)?\s+(?:of\s+)?({_MONTH_ALT})\b", re.IGNORECASE
)
_MONTH_FIRST_RE = re.compile(
    rf"\b({_MONTH_ALT})\.?\s+(\d{{1,2}})(?:st|nd|rd|th)?\b", re.IGNORECASE
)
_RELATIVE_RE = re.compile(r"\b(today|tonight|tomorrow)\b", re.IGNORECASE)


def _next_occurrence(month: int, day: int, today: date) -> date | None:
    for year in (today.year, today.year + 1):
        try:
            candidate = date(year, month, day)
        except ValueError:
            continue
        if candidate >= today:
            return candidate
    return None


def detect_calendar_date(text: str, today: date | None = None) -> date | None:
    """Return the first calendar date mentioned in *text*, or ``None``."""
    today = today or date.today()

    relative = _RELATIVE_RE.search(text)
    if relative:
        word = relative.group(1).lower()
        return today + timedelta(days=1) if word == "tomorrow" else today

    match = _DAY_FIRST_RE.search(text)
    if match:
        return _next_occurrence(_MONTHS[match.group(2).lower()], int(match.group(1)), today)

    match = _MONTH_FIRST_RE.search(text)
    if match:
        return _next_occurrence(_MONTHS[match.group(1).lower()], int(match.group(2)), today)

    return None
