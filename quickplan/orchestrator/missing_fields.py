"""
Missing-field computation.

Decides which fields still need a question given the current state.
Every rule is gated on confidence rather than preference values, so a
skipped optional field (confidence inferred) is never asked again.
"""

import logging
from typing import List

from quickplan.orchestrator import options as opts
from quickplan.orchestrator.advisories import AdvisoryService
from quickplan.orchestrator.detection import detect_multi_country
from quickplan.orchestrator.schemas import SessionState
from quickplan.orchestrator.splits import is_valid_split


logger = logging.getLogger(__name__)

# Smart follow-ups sit right after the field whose answer triggers them
FIELD_PRIORITY = (
    "destination",
    "theme_park_preferences",
    "multi_country_logistics",
    "dates",
    "party",
    "child_needs",
    "trip_occasion",
    "workation_needs",
    "traveling_with_pets",
    "pet_type",
    "accessibility",
    "accessibility_type",
    "budget",
    "accommodation_type",
    "sustainability_preference",
    "activities",
    "pace",
    "surfing_details",
    "activity_skill_level",
    "vibe",
    "user_notes",
    "communities",
    "areas",
    "split",
    "hotel_preferences",
    "hotels",
    "dining",
    "dietary_restrictions",
    "cuisine_preferences",
    "restaurants",
    "experiences",
)

HANDLED = ("complete", "partial")


def _priority(field: str) -> int:
    return FIELD_PRIORITY.index(field)


def areas_handled(state: SessionState) -> bool:
    return state.get_confidence("areas") in HANDLED


def hotels_awaiting_pick(state: SessionState) -> bool:
    return opts.next_hotel_area(state) is not None


def enforce_split_first(missing: List[str]) -> List[str]:
    """Drop hotel_preferences while the split is still unanswered."""
    if "split" in missing and "hotel_preferences" in missing:
        logger.error(
            "[orchestrator] [step=missing_fields] split and hotel_preferences both missing, "
            "dropping hotel_preferences"
        )
        return [field for field in missing if field != "hotel_preferences"]
    return missing


def get_missing_fields(state: SessionState, advisories: AdvisoryService) -> List[str]:
    """
    Compute the ordered list of fields that still need asking.

    Args:
        state: Current session state
        advisories: Used to detect theme-park destinations

    Returns:
        Missing fields sorted by FIELD_PRIORITY
    """
    prefs = state.preferences
    known = state.is_known
    conf = state.get_confidence
    missing: List[str] = []

    # Trip basics
    if not known("destination"):
        missing.append("destination")
    if conf("destination") == "complete":
        raw = opts.destination_raw(prefs)
        if advisories.detect_theme_park(raw) and not known("theme_park_preferences"):
            missing.append("theme_park_preferences")
        if detect_multi_country(raw).is_multi_country and not known("multi_country_logistics"):
            missing.append("multi_country_logistics")
    if not known("dates"):
        missing.append("dates")
    if not known("party"):
        missing.append("party")
    if (
        conf("party") == "confirmed"
        and any(age < 10 for age in prefs.get("child_ages") or [])
        and not known("child_needs")
    ):
        missing.append("child_needs")

    # Occasion, pets, accessibility
    if known("party") and not known("trip_occasion"):
        missing.append("trip_occasion")
    if prefs.get("trip_occasion") == "workation" and not known("workation_needs"):
        missing.append("workation_needs")
    if known("party") and known("trip_occasion") and not known("traveling_with_pets"):
        missing.append("traveling_with_pets")
    if prefs.get("has_pets") is True and not known("pet_type"):
        missing.append("pet_type")
    if known("party") and known("traveling_with_pets") and not known("accessibility"):
        missing.append("accessibility")
    if prefs.get("has_accessibility_needs") is True and not known("accessibility_type"):
        missing.append("accessibility_type")

    # Budget and accommodation
    if not known("budget"):
        missing.append("budget")
    if known("budget") and not known("accommodation_type"):
        missing.append("accommodation_type")
    if (
        known("budget")
        and known("accommodation_type")
        and prefs.get("accommodation_type") != "eco_lodge"
        and not known("sustainability_preference")
    ):
        missing.append("sustainability_preference")

    # Activities and style
    if not known("activities"):
        missing.append("activities")
    if known("activities") and not known("pace"):
        missing.append("pace")
    activity_types = opts.activity_types(prefs)
    if conf("activities") == "complete" and "surf" in activity_types and not known("surfing_details"):
        missing.append("surfing_details")
    if known("activities") and opts.skill_activities(prefs) and not known("activity_skill_level"):
        missing.append("activity_skill_level")
    if known("pace") and not known("vibe"):
        missing.append("vibe")
    if known("activities") and not known("communities"):
        missing.append("communities")

    # Areas, split, hotels
    if state.phase != "gathering" and not known("areas") and state.discovered.areas:
        missing.append("areas")
    valid_split = is_valid_split(prefs.get("selected_split"))
    if areas_handled(state) and not valid_split and len(state.selected_areas) >= 2:
        missing.append("split")
    if areas_handled(state) and valid_split and not known("hotel_preferences"):
        missing.append("hotel_preferences")
    if (
        areas_handled(state)
        and known("hotel_preferences")
        and conf("hotels") != "complete"
        and hotels_awaiting_pick(state)
    ):
        missing.append("hotels")

    # Dining sub-flow
    if conf("hotels") in HANDLED and not known("dining"):
        missing.append("dining")
    planning_dining = prefs.get("dining_mode") == "plan"
    if planning_dining and known("dining") and not known("dietary_restrictions"):
        missing.append("dietary_restrictions")
    if planning_dining and known("dietary_restrictions") and not known("cuisine_preferences"):
        missing.append("cuisine_preferences")
    if (
        planning_dining
        and prefs.get("cuisine_preferences")
        and conf("restaurants") not in ("complete", "inferred")
        and opts.next_restaurant_cuisine(state) is not None
    ):
        missing.append("restaurants")

    restaurants_done = conf("restaurants") in ("complete", "inferred", "partial") or not planning_dining
    if (
        conf("experiences") not in ("complete", "inferred")
        and known("dining")
        and restaurants_done
        and activity_types
        and opts.next_experience_activity(state) is not None
    ):
        missing.append("experiences")

    return sorted(enforce_split_first(missing), key=_priority)
