# tests/test_itinerary.py

import asyncio
import json

import pytest

from ai.gemini import GenerationTransportError
from core.fallback import fallback_activities
from services.itinerary import (
    FAILURE_MESSAGE,
    ItineraryPlanner,
    MissingFieldsError,
    build_error_response,
    normalize_activities,
)

FIELDS = ("activity", "description", "category", "seasonalNote")


def _activities(n):
    return [
        {
            "activity": f"Thing {i}",
            "description": "Do it.",
            "category": "Entertainment",
            "seasonalNote": "Nice.",
        }
        for i in range(n)
    ]


def test_normalize_fills_defaults():
    out = normalize_activities([{"activity": "Louvre"}, "oops", {"category": ""}], "summer", 10)
    assert out[0] == {
        "activity": "Louvre",
        "description": "Explore this popular local attraction.",
        "category": "Recreation",
        "seasonalNote": "Perfect for summer travel.",
    }
    assert out[1]["activity"] == "Activity 2"
    assert out[2]["category"] == "Recreation"


def test_normalize_keeps_unknown_categories_and_truncates():
    items = _activities(8)
    items[0]["category"] = "Nightlife"
    out = normalize_activities(items, "winter", 6)
    assert len(out) == 6
    assert out[0]["category"] == "Nightlife"


def test_normalize_is_idempotent():
    once = normalize_activities([{"activity": "A"}, {}, {"seasonalNote": 3}], "fall", 10)
    assert normalize_activities(once, "fall", 10) == once


def test_plan_success(make_client):
    planner = ItineraryPlanner(make_client(text=json.dumps(_activities(9))))
    result = asyncio.run(planner.plan("Paris", "2024-06-01", "2024-06-05"))
    assert result["success"] is True
    assert result["tripDays"] == 4
    assert result["season"] == "summer"
    assert len(result["activities"]) == 6
    assert result["generatedAt"].endswith("Z")


@pytest.mark.parametrize(
    "text",
    [
        "no brackets here",
        "{}",
        "[]",
        '{"a": [1, 2]} trailing ]',
        "[" * 100000 + "]" * 100000,
    ],
)
def test_plan_falls_back_on_unusable_answer(make_client, text):
    planner = ItineraryPlanner(make_client(text=text))
    result = asyncio.run(planner.plan("Paris", "2024-06-01", "2024-06-02"))
    assert result["activities"] == fallback_activities("summer", 1)


def test_plan_caps_long_trips_at_ten_activities(make_client):
    planner = ItineraryPlanner(make_client(text=json.dumps(_activities(15))))
    result = asyncio.run(planner.plan("Rome", "2024-01-01", "2024-02-01"))
    assert result["tripDays"] == 31
    assert len(result["activities"]) == 10


def test_plan_falls_back_on_timeout(make_client):
    planner = ItineraryPlanner(make_client(delay=1.0, timeout_s=0.01))
    result = asyncio.run(planner.plan("Paris", "2024-06-01", "2024-06-05"))
    assert result["success"] is True
    assert result["activities"] == fallback_activities("summer", 4)


def test_plan_requires_all_fields(make_client):
    planner = ItineraryPlanner(make_client())
    with pytest.raises(MissingFieldsError):
        asyncio.run(planner.plan("Paris", "2024-06-01", ""))


def test_plan_propagates_transport_errors(make_client):
    planner = ItineraryPlanner(make_client(error=RuntimeError("quota exceeded")))
    with pytest.raises(GenerationTransportError):
        asyncio.run(planner.plan("Paris", "2024-06-01", "2024-06-05"))


@pytest.mark.parametrize("payload", [None, {}, [1, 2], {"location": 42, "startDate": "x"}])
def test_error_response_survives_malformed_payloads(payload):
    body = build_error_response(payload, ValueError("boom"))
    assert body["success"] is False
    assert body["error"] == FAILURE_MESSAGE
    assert body["details"] == "boom"
    assert 1 <= len(body["fallbackActivities"]) <= 5
    for a in body["fallbackActivities"]:
        assert all(a[k] for k in FIELDS)
