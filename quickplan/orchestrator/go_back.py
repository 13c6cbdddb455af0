"""
Go-back controller.

Rewinds to the most recently answered field: clears the preference keys
that field wrote plus everything downstream of it, resets the matching
confidences and moves the phase back when the target belongs to an
earlier part of the flow.
"""

import logging
from typing import Dict, List, Optional

from quickplan.orchestrator.modes import MODE_PREFERENCE_KEYS
from quickplan.orchestrator.schemas import ENRICHMENT_CATEGORIES, DiscoveredData, SessionState, phase_index


logger = logging.getLogger(__name__)

# Field -> preference keys it (and its downstream fields) wrote
FIELD_CLEAR_MAP: Dict[str, List[str]] = {
    "destination": ["destination_context"],
    "dates": ["start_date", "end_date", "trip_length", "is_flexible_dates", "local_events"],
    "party": ["adults", "children", "child_ages", "estimated_rooms_needed", "suggested_accommodation_type"],
    "trip_occasion": ["trip_occasion", *MODE_PREFERENCE_KEYS],
    "traveling_with_pets": ["has_pets", "traveling_with_pets"],
    "pet_type": ["traveling_with_pets"],
    "accessibility": ["has_accessibility_needs", "accessibility_needs"],
    "accessibility_type": ["accessibility_needs"],
    "budget": ["budget_per_night", "budget_unlimited", "budget_value"],
    "accommodation_type": ["accommodation_type"],
    "sustainability_preference": ["sustainability_preference"],
    "pace": ["pace"],
    "activities": ["selected_activities"],
    "surfing_details": ["surfing_details", "surf_school_required", "surf_break_type", "allow_advanced_spots"],
    "activity_skill_level": ["activity_skill_level"],
    "vibe": ["vibe", "must_dos", "hard_nos"],
    "communities": ["selected_communities"],
    "user_notes": ["user_notes"],
    "areas": ["selected_areas", "selected_split", "hotel_preferences", "selected_hotels"],
    "split": ["selected_split", "hotel_preferences", "selected_hotels"],
    "hotel_preferences": [
        "hotel_preferences",
        "adults_only_preferred",
        "all_inclusive_preferred",
        "hotel_vibe_preferences",
        "selected_hotels",
    ],
    "hotels": ["selected_hotels"],
    "dining": ["dining_mode", "dietary_restrictions", "cuisine_preferences", "selected_restaurants"],
    "dietary_restrictions": ["dietary_restrictions", "cuisine_preferences", "selected_restaurants"],
    "cuisine_preferences": ["cuisine_preferences", "selected_restaurants"],
    "restaurants": ["selected_restaurants"],
    "experiences": ["selected_experiences"],
    "child_needs": ["child_needs"],
    "workation_needs": ["workation_needs"],
    "multi_country_logistics": ["multi_country_logistics"],
    "theme_park_preferences": ["theme_park_preferences", "parks_per_day", "prefer_low_crowd_times"],
}

# Cleared preference key -> downstream field whose confidence resets with it
PROP_TO_CONFIDENCE: Dict[str, str] = {
    "selected_areas": "areas",
    "selected_split": "split",
    "hotel_preferences": "hotel_preferences",
    "selected_hotels": "hotels",
    "dining_mode": "dining",
    "dietary_restrictions": "dietary_restrictions",
    "cuisine_preferences": "cuisine_preferences",
    "selected_restaurants": "restaurants",
    "selected_experiences": "experiences",
    "traveling_with_pets": "pet_type",
    "accessibility_needs": "accessibility_type",
}

ENRICHING_PHASE_FIELDS = (
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

GO_BACK_MESSAGE = "Going back to the previous question."
GO_BACK_FAILED_MESSAGE = "Can't go back from here - this is the first question."


def _clear_last_hotel(state: SessionState) -> None:
    selected = dict(state.preferences.get("selected_hotels") or {})
    if selected:
        last_area = list(selected)[-1]
        selected.pop(last_area)
        logger.info(f"[orchestrator] [step=go_back] Cleared hotel pick | area={last_area}")
    state.preferences["selected_hotels"] = selected
    state.set_confidence("hotels", "partial" if selected else "unknown", force=True)


def _clear_field(state: SessionState, target: str) -> None:
    prefs = state.preferences
    keys = FIELD_CLEAR_MAP.get(target, [target])
    for key in keys:
        prefs.pop(key, None)
    prefs.pop(f"{target}_skipped", None)
    for key in keys:
        downstream = PROP_TO_CONFIDENCE.get(key)
        if downstream and downstream != target:
            state.set_confidence(downstream, "unknown", force=True)


def _rewind_to_gathering(state: SessionState) -> None:
    state.phase = "gathering"
    for category in ENRICHMENT_CATEGORIES:
        state.enrichment_status[category] = "pending"
    state.discovered = DiscoveredData()
    state.itinerary = None
    state.itinerary_failed = False


def go_back(state: SessionState) -> Optional[str]:
    """
    Undo the most recently answered field.

    Hotels are special: only the last area's pick is removed, so the
    other areas keep their hotels.

    Returns:
        The field that will be re-asked, or None when nothing has been
        answered yet
    """
    history = state.question_history
    if not history:
        logger.info("[orchestrator] [step=go_back] Nothing to go back to")
        return None

    target = history.pop()
    displayed = state.current_question.field if state.current_question else None

    if target == "hotels":
        _clear_last_hotel(state)
    else:
        state.set_confidence(target, "unknown", force=True)
        _clear_field(state, target)

    state.current_question = None

    previous_phase = state.phase
    if target not in ENRICHING_PHASE_FIELDS:
        if state.phase != "gathering":
            _rewind_to_gathering(state)
    elif phase_index(state.phase) > phase_index("enriching"):
        state.phase = "enriching"
        state.itinerary = None
        state.itinerary_failed = False

    logger.info(
        f"[orchestrator] [step=go_back] Went back | from={displayed} | to={target} | "
        f"phase={previous_phase} -> {state.phase}"
    )
    return target
