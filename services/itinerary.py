"""
services/itinerary.py
---------------------
Builds the activity list for one request:
- trip length / season from the dates
- one Gemini call (timeout or unparseable answer → canned activities)
- every activity normalized to the four public fields
"""

from __future__ import annotations
import datetime as dt
import logging
from typing import Any, List, Optional

from ai.gemini import (
    GeminiClient,
    GenerationParseError,
    GenerationTimeout,
    build_prompt,
    extract_json_array,
)
from core.fallback import fallback_activities
from core.trip import best_effort_context, build_trip_context, suggestion_count

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = (
    "Missing required fields: location, startDate, and endDate are required"
)
FAILURE_MESSAGE = "Failed to generate itinerary suggestions"


class MissingFieldsError(ValueError):
    def __init__(self):
        super().__init__(MISSING_FIELDS_MESSAGE)


def _field(value: Any, default: str) -> str:
    if not value:
        return default
    return value if isinstance(value, str) else str(value)


def normalize_activities(items: List[Any], season: str, limit: int) -> List[dict]:
    """Fill in missing fields of each activity and keep the first `limit`."""
    activities = []
    for index, item in enumerate(items):
        raw = item if isinstance(item, dict) else {}
        activities.append(
            {
                "activity": _field(raw.get("activity"), f"Activity {index + 1}"),
                "description": _field(
                    raw.get("description"), "Explore this popular local attraction."
                ),
                "category": _field(raw.get("category"), "Recreation"),
                "seasonalNote": _field(
                    raw.get("seasonalNote"), f"Perfect for {season} travel."
                ),
            }
        )
    return activities[:limit]


def _utc_timestamp() -> str:
    now = dt.datetime.now(dt.timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ItineraryPlanner:
    def __init__(self, client: GeminiClient):
        self.client = client

    async def _suggest(self, prompt: str) -> Optional[Any]:
        """Raw parsed answer, or None when it timed out or could not be parsed."""
        try:
            text = await self.client.generate(prompt)
        except GenerationTimeout as e:
            logger.warning("Gemini call abandoned: %s", e)
            return None

        try:
            return extract_json_array(text)
        except GenerationParseError as e:
            logger.error("Failed to parse AI response: %s", e)
            logger.error("AI response: %s", e.response)
            return None

    async def plan(self, location: str, start_date: str, end_date: str) -> dict:
        """
        Return the success payload for a request.

        Raises MissingFieldsError when a field is empty; transport errors
        and bad dates propagate to the caller.
        """
        if not (location and start_date and end_date):
            raise MissingFieldsError()

        ctx = build_trip_context(location, start_date, end_date)
        logger.info(
            "Generating itinerary for %s, %d days in %s (%s)",
            location, ctx.trip_days, ctx.season, ctx.month_name,
        )

        suggestions = await self._suggest(build_prompt(ctx))
        if not isinstance(suggestions, list) or not suggestions:
            suggestions = fallback_activities(ctx.season, ctx.trip_days)

        activities = normalize_activities(
            suggestions, ctx.season, suggestion_count(ctx.trip_days)
        )
        logger.info("Successfully generated %d activities for %s", len(activities), location)

        return {
            "success": True,
            "location": location,
            "startDate": start_date,
            "endDate": end_date,
            "tripDays": ctx.trip_days,
            "season": ctx.season,
            "activities": activities,
            "generatedAt": _utc_timestamp(),
        }


def build_error_response(payload: Any, exc: BaseException) -> dict:
    """500 payload: the error plus canned activities for whatever the request held."""
    ctx = best_effort_context(payload)
    return {
        "success": False,
        "error": FAILURE_MESSAGE,
        "details": str(exc),
        "fallbackActivities": fallback_activities(ctx.season, ctx.trip_days),
    }
