# core/fallback.py

from core.trip import MAX_FALLBACK, suggestion_count

# (activity, description, category, seasonal note template)
_FALLBACK_TABLE = [
    (
        "Explore Local Museums",
        "Visit popular museums and cultural sites to learn about local history and art.",
        "Cultural",
        "Indoor activities are great year-round, especially during {season}.",
    ),
    (
        "Try Local Cuisine",
        "Experience authentic local restaurants and try regional specialties.",
        "Dining",
        "Seasonal ingredients make {season} dining experiences unique.",
    ),
    (
        "Walking Tour",
        "Take a guided or self-guided tour of the main attractions and historic areas.",
        "Cultural",
        "{season} weather makes for pleasant walking conditions.",
    ),
    (
        "Local Markets",
        "Browse local markets for souvenirs, crafts, and fresh local products.",
        "Shopping",
        "Markets often feature seasonal products during {season}.",
    ),
    (
        "Parks and Gardens",
        "Relax in local parks and botanical gardens, enjoying nature and outdoor spaces.",
        "Nature",
        "{season} is a beautiful time to enjoy outdoor green spaces.",
    ),
]


def fallback_activities(season: str, trip_days: int) -> list[dict]:
    """First min(trip_days + 2, 5) canned activities, in table order."""
    count = suggestion_count(trip_days, MAX_FALLBACK)
    return [
        {
            "activity": name,
            "description": description,
            "category": category,
            "seasonalNote": note.format(season=season),
        }
        for name, description, category, note in _FALLBACK_TABLE[:count]
    ]
