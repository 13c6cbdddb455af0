"""
Mock discovery service for the enrichment graph.

Generates hardcoded but contextually aware candidates and a day-by-day
itinerary for exercising the full planning flow without external APIs.
"""

import re
from typing import Dict, Any, List, Optional

from quickplan.orchestrator.prompts import destination_name
from quickplan.orchestrator.splits import create_minimal_area


# Area templates: (suffix, type, description, best_for)
_AREA_TEMPLATES = [
    ("Old Town", "neighborhood", "Historic centre with walkable streets and cafes", ["culture", "food"]),
    ("Beachfront", "beach", "Relaxed coastal strip with sunset views", ["beach", "relaxation"]),
    ("Highlands", "region", "Cooler hills with trails and viewpoints", ["nature", "hiking"]),
]

# Hotel templates: (name, tier, price per night)
_HOTEL_TEMPLATES = [
    ("Boutique Courtyard Hotel", "boutique", 120),
    ("Grand Resort & Spa", "luxury", 340),
    ("Friendly Guesthouse", "budget", 55),
]

_PACE_SLOTS = {"chill": 1, "balanced": 2, "packed": 3}


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def _place(preferences: Dict[str, Any]) -> str:
    return destination_name(preferences) or "Your Destination"


def _generate_area(place: str, suffix: str, area_type: str, description: str, best_for: List[str]) -> Dict[str, Any]:
    name = f"{place} {suffix}"
    area = create_minimal_area(_slug(name), name)
    area.update(
        {
            "type": area_type,
            "description": description,
            "best_for": best_for,
            "overall_score": 0.8,
            "confidence_score": 0.7,
            "suggested_nights": 3,
            "why_it_fits": [f"Good base for {best_for[0]}"],
        }
    )
    return area


class MockDiscoveryService:
    """
    DiscoveryService backed by templates.

    Set fail_on to a step name ("areas", "hotels", "restaurants",
    "experiences", "itinerary") to make that step raise.
    """

    def __init__(self, fail_on: Optional[str] = None):
        self.fail_on = fail_on
        self.calls: List[str] = []

    def _record(self, step: str) -> None:
        self.calls.append(step)
        if step == self.fail_on:
            raise RuntimeError(f"mock {step} discovery unavailable")

    def discover_areas(self, preferences: Dict[str, Any]) -> List[Dict[str, Any]]:
        self._record("areas")
        place = _place(preferences)
        return [_generate_area(place, *template) for template in _AREA_TEMPLATES]

    def discover_hotels(
        self, areas: List[Dict[str, Any]], preferences: Dict[str, Any]
    ) -> Dict[str, List[Dict[str, Any]]]:
        self._record("hotels")
        budget = preferences.get("budget_per_night") or {}
        ceiling = budget.get("max")
        hotels: Dict[str, List[Dict[str, Any]]] = {}
        for area in areas:
            candidates = []
            for name, tier, price in _HOTEL_TEMPLATES:
                if ceiling and not budget.get("unlimited") and price > ceiling:
                    continue
                candidates.append(
                    {
                        "id": f"{area['id']}-{_slug(name)}",
                        "name": f"{name} {area.get('name', '')}".strip(),
                        "tier": tier,
                        "price_per_night": price,
                        "rating": 4.4,
                        "area_id": area["id"],
                    }
                )
            hotels[area["id"]] = candidates
        return hotels

    def discover_restaurants(
        self, cuisines: List[str], areas: List[Dict[str, Any]], preferences: Dict[str, Any]
    ) -> Dict[str, List[Dict[str, Any]]]:
        self._record("restaurants")
        area_name = areas[0].get("name") if areas else _place(preferences)
        return {
            cuisine: [
                {
                    "id": f"{_slug(cuisine)}-{n}",
                    "name": f"{cuisine.replace('_', ' ').title()} Kitchen #{n}",
                    "cuisine_type": cuisine,
                    "area": area_name,
                    "price_level": n + 1,
                    "rating": 4.5 - n * 0.1,
                }
                for n in range(1, 3)
            ]
            for cuisine in cuisines
        }

    def discover_experiences(
        self, activity_types: List[str], areas: List[Dict[str, Any]], preferences: Dict[str, Any]
    ) -> Dict[str, List[Dict[str, Any]]]:
        self._record("experiences")
        area_name = areas[0].get("name") if areas else _place(preferences)
        return {
            activity: [
                {
                    "id": f"{_slug(activity)}-experience",
                    "name": f"Guided {activity.replace('_', ' ')} outing near {area_name}",
                    "activity_type": activity,
                    "duration_hours": 3.0,
                    "price": 45,
                }
            ]
            for activity in activity_types
        }

    def generate_itinerary(self, preferences: Dict[str, Any], discovered: Dict[str, Any]) -> Dict[str, Any]:
        """
        Lay the split's stops out day by day.

        Each day gets the stop's hotel plus a number of picked experiences
        and restaurants that follows the pace preference.
        """
        self._record("itinerary")
        split = preferences.get("selected_split") or {}
        stops = split.get("stops") or []
        hotels = preferences.get("selected_hotels") or {}
        slots = _PACE_SLOTS.get(preferences.get("pace") or "balanced", 2)

        experiences = [e for picks in (preferences.get("selected_experiences") or {}).values() for e in picks]
        restaurants = [r for picks in (preferences.get("selected_restaurants") or {}).values() for r in picks]
        extras = [{"name": item} for item in preferences.get("must_include") or []]

        days = []
        day_number = 1
        for stop in stops:
            hotel = hotels.get(stop["area_id"])
            for _ in range(stop["nights"]):
                activities = (extras + experiences)[(day_number - 1) * slots:day_number * slots]
                meal = restaurants[(day_number - 1) % len(restaurants)] if restaurants else None
                days.append(
                    {
                        "day": day_number,
                        "area_id": stop["area_id"],
                        "hotel": hotel.get("name") if hotel else None,
                        "activities": [a.get("name") for a in activities],
                        "dinner": meal.get("name") if meal else None,
                    }
                )
                day_number += 1

        return {
            "destination": _place(preferences),
            "split_id": split.get("id"),
            "pace": preferences.get("pace"),
            "avoid_touristy": bool(preferences.get("avoid_touristy")),
            "days": days,
        }
