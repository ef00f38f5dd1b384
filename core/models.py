# core/models.py

from dataclasses import dataclass


@dataclass(frozen=True)
class TripContext:
    location: str
    trip_days: int
    season: str
    month_name: str
