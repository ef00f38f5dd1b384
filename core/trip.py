# core/trip.py
"""
Date arithmetic and season inference for a trip.

Dates arrive as the strings the client sent (``YYYY-MM-DD`` or a full ISO
timestamp). Everything here is pure, except the defaults used by
:func:`best_effort_context`, which read the current time.
"""

from __future__ import annotations
import calendar
import datetime as dt
import math
from typing import Any, Optional

from core.models import TripContext

MAX_SUGGESTIONS = 10
MAX_FALLBACK = 5

_SOUTHERN_HINTS = ("australia", "new zealand", "chile", "argentina", "south africa")

# month (1-12) → season, northern hemisphere
_NORTHERN = {
    3: "spring", 4: "spring", 5: "spring",
    6: "summer", 7: "summer", 8: "summer",
    9: "fall", 10: "fall", 11: "fall",
    12: "winter", 1: "winter", 2: "winter",
}
_OPPOSITE = {"spring": "fall", "summer": "winter", "fall": "spring", "winter": "summer"}


def parse_date(value: Any) -> dt.datetime:
    """Parse an ISO date/datetime string into a naive UTC datetime."""
    if isinstance(value, dt.datetime):
        parsed = value
    elif isinstance(value, dt.date):
        parsed = dt.datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = dt.datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"Invalid date: {value!r}") from None
    else:
        raise ValueError(f"Invalid date: {value!r}")

    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone(dt.timezone.utc).replace(tzinfo=None)
        except OverflowError:
            # e.g. 0001-01-01T00:00:00+01:00 falls before datetime.min in UTC
            raise ValueError(f"Invalid date: {value!r}") from None
    return parsed


def calculate_days(start: Any, end: Any) -> int:
    """Whole days between two dates, rounded up, at least 1. Order does not matter."""
    delta = abs(parse_date(end) - parse_date(start))
    return max(1, math.ceil(delta.total_seconds() / 86400))


def is_southern_hemisphere(location: str) -> bool:
    text = (location or "").lower()
    return any(hint in text for hint in _SOUTHERN_HINTS)


def get_season(date: Any, location: str) -> str:
    season = _NORTHERN[parse_date(date).month]
    if is_southern_hemisphere(location):
        return _OPPOSITE[season]
    return season


def month_name(date: Any) -> str:
    return calendar.month_name[parse_date(date).month]


def suggestion_count(trip_days: int, cap: int = MAX_SUGGESTIONS) -> int:
    return min(trip_days + 2, cap)


def build_trip_context(location: str, start_date: Any, end_date: Any) -> TripContext:
    """Derive the trip context of a request. Raises ValueError on bad dates."""
    return TripContext(
        location=location,
        trip_days=calculate_days(start_date, end_date),
        season=get_season(start_date, location),
        month_name=month_name(start_date),
    )


def _or_now(value: Any, now: dt.datetime) -> dt.datetime:
    if not value:
        return now
    try:
        return parse_date(value)
    except ValueError:
        return now


def best_effort_context(payload: Optional[dict]) -> TripContext:
    """
    Same as build_trip_context, but for a payload that may be missing,
    partial or malformed: absent/unparseable dates become "now" and an
    absent location becomes "". Never raises.
    """
    if not isinstance(payload, dict):
        payload = {}
    now = dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)

    location = payload.get("location") or ""
    if not isinstance(location, str):
        location = str(location)

    return build_trip_context(
        location,
        _or_now(payload.get("startDate"), now),
        _or_now(payload.get("endDate"), now),
    )
