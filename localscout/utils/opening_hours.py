"""Best-effort "is this business open right now" evaluation.

Directory rows carry opening hours in one of two shapes:

* a weekday map -- ``{"monday": {"open": "09:00", "close": "17:00"},
  "sunday": {"closed": true}, ...}`` -- where a close time earlier than the
  open time means the span runs past midnight;
* a free-text string copied from a listing ("Open 24 hours", "Closed").

Anything unparseable is treated as "not known to be open", never as an
error: the answer only decorates a result, it must not fail a turn.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Any, Mapping
from zoneinfo import ZoneInfo

_DAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")
_ALWAYS_OPEN_RE = re.compile(r"\b(open\s+24\s*(hours|hrs|/7)|24\s*/\s*7|always open)\b", re.IGNORECASE)


def parse_time_to_minutes(value: Any) -> int | None:
    """``"09:30"`` -> 570.  Returns ``None`` for anything that is not HH:MM."""
    if not isinstance(value, str):
        return None
    match = _TIME_RE.match(value)
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 24 or minutes > 59:
        return None
    return hours * 60 + minutes


def _day_entry(hours: Mapping[str, Any], day_index: int) -> Any:
    name = _DAY_NAMES[day_index]
    return hours.get(name, hours.get(name[:3]))


def _within(entry: Any, minute_of_day: int, *, from_previous_day: bool) -> bool:
    if not isinstance(entry, Mapping) or entry.get("closed"):
        return False
    open_m = parse_time_to_minutes(entry.get("open"))
    close_m = parse_time_to_minutes(entry.get("close"))
    if open_m is None or close_m is None:
        return False

    overnight = close_m <= open_m
    if from_previous_day:
        # Only the after-midnight tail of yesterday's overnight span counts.
        return overnight and minute_of_day < close_m
    if overnight:
        return minute_of_day >= open_m
    return open_m <= minute_of_day < close_m


def is_open_now(
    opening_hours: Any,
    now: datetime | None = None,
    timezone: str | None = None,
) -> bool:
    """Return ``True`` when *opening_hours* says the business is open at *now*.

    *now* defaults to the current time in *timezone* (UTC when unset).
    A naive *now* is taken as already being local time.
    """
    if not opening_hours:
        return False

    if isinstance(opening_hours, str):
        return bool(_ALWAYS_OPEN_RE.search(opening_hours))

    if not isinstance(opening_hours, Mapping):
        return False

    if now is None:
        now = datetime.now(ZoneInfo(timezone or "UTC"))
    elif timezone and now.tzinfo is not None:
        now = now.astimezone(ZoneInfo(timezone))

    minute_of_day = now.hour * 60 + now.minute
    today = now.weekday()
    yesterday = (now - timedelta(days=1)).weekday()

    if _within(_day_entry(opening_hours, today), minute_of_day, from_previous_day=False):
        return True
    return _within(_day_entry(opening_hours, yesterday), minute_of_day, from_previous_day=True)
