"""
Inference engine.

Small predicate functions that look at the user's transcript and the
preferences gathered so far and, when confident, produce an answer for a
field without asking. Predicates know nothing about SessionState; the
apply step at the bottom is the only part that touches it.
"""

import logging
from typing import Callable, Dict, Any, List, Optional

from quickplan.orchestrator.budget import budget_ceiling
from quickplan.orchestrator.modes import apply_mode
from quickplan.orchestrator.schemas import SessionState


logger = logging.getLogger(__name__)

Predicate = Callable[[List[str], Dict[str, Any]], Optional[Dict[str, Any]]]


def _contains(transcript: List[str], *phrases: str) -> bool:
    return any(phrase in text.lower() for text in transcript for phrase in phrases)


# =============================================================================
# Party
# =============================================================================


def infer_solo_party(transcript: List[str], preferences: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if _contains(transcript, "solo"):
        return {"adults": 1, "children": 0, "child_ages": []}
    return None


def infer_couple_party(transcript: List[str], preferences: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if _contains(transcript, "honeymoon", "couple"):
        return {"adults": 2, "children": 0, "child_ages": []}
    return None


# =============================================================================
# Trip Occasion
# =============================================================================


def _occasion_keyword(keyword: str, occasion_id: str) -> Predicate:
    def predicate(transcript: List[str], preferences: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if _contains(transcript, keyword):
            return {"id": occasion_id}
        return None

    predicate.__name__ = f"infer_{occasion_id}_occasion"
    return predicate


def infer_workation_occasion(transcript: List[str], preferences: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    for text in transcript:
        lower = text.lower()
        if "work" in lower and "travel" in lower:
            return {"id": "workation"}
    return None


# =============================================================================
# Accommodation and Sustainability
# =============================================================================


def infer_hostel_for_tight_budget(transcript: List[str], preferences: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if budget_ceiling(preferences) <= 70:
        return {"id": "hostel"}
    return None


def infer_resort_for_honeymoon(transcript: List[str], preferences: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if preferences.get("trip_occasion") == "honeymoon" and budget_ceiling(preferences) >= 400:
        return {"id": "resort"}
    return None


def infer_suggested_accommodation(transcript: List[str], preferences: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    suggested = preferences.get("suggested_accommodation_type")
    if suggested:
        return {"id": suggested}
    return None


def infer_eco_focus(transcript: List[str], preferences: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if preferences.get("accommodation_type") == "eco_lodge":
        return {"id": "eco_focused"}
    return None


# =============================================================================
# Dining
# =============================================================================


def infer_skip_dining(transcript: List[str], preferences: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if _contains(transcript, "find food", "wing it", "figure out food"):
        return {"id": "none"}
    return None


# Fields are evaluated in this order; a field's predicates run first to last
INFERENCE_RULES: Dict[str, List[Predicate]] = {
    "party": [infer_solo_party, infer_couple_party],
    "trip_occasion": [
        _occasion_keyword("honeymoon", "honeymoon"),
        _occasion_keyword("bachelor", "bachelor"),
        _occasion_keyword("anniversary", "anniversary"),
        _occasion_keyword("wedding", "wedding"),
        infer_workation_occasion,
    ],
    "accommodation_type": [
        infer_hostel_for_tight_budget,
        infer_resort_for_honeymoon,
        infer_suggested_accommodation,
    ],
    "sustainability_preference": [infer_eco_focus],
    "dining": [infer_skip_dining],
}


def infer_field(
    field: str, transcript: List[str], preferences: Dict[str, Any]
) -> Optional[Dict[str, Any]]:
    """Run a field's predicates in order and return the first hit."""
    for predicate in INFERENCE_RULES.get(field, []):
        value = predicate(transcript, preferences)
        if value is not None:
            return value
    return None


def user_transcript(state: SessionState) -> List[str]:
    return [message.content for message in state.messages if message.role == "user"]


# =============================================================================
# Applying Inferences
# =============================================================================


def apply_inferred_value(state: SessionState, field: str, value: Dict[str, Any]) -> None:
    """Write an inferred value into preferences and mark its confidence."""
    prefs = state.preferences
    if field == "party":
        prefs["adults"] = value["adults"]
        prefs["children"] = value["children"]
        prefs["child_ages"] = list(value["child_ages"])
        state.set_confidence("party", "inferred")
    elif field == "dining":
        prefs["dining_mode"] = value["id"]
        if value["id"] == "none":
            prefs["dietary_restrictions"] = ["none"]
            state.set_confidence("dining", "complete")
        else:
            state.set_confidence("dining", "confirmed")
    elif field == "trip_occasion":
        prefs["trip_occasion"] = value["id"]
        apply_mode(prefs, value["id"])
        state.set_confidence("trip_occasion", "inferred")
    elif field == "accommodation_type":
        prefs["accommodation_type"] = value["id"]
        state.set_confidence("accommodation_type", "inferred")
    elif field == "sustainability_preference":
        prefs["sustainability_preference"] = value["id"]
        state.set_confidence("sustainability_preference", "inferred")


def run_inference_pass(state: SessionState) -> List[str]:
    """
    Infer every inferable field still at unknown confidence.

    Re-run on every selector pass so new transcript content can make an
    inference newly possible.

    Returns:
        Fields that were inferred on this pass
    """
    transcript = user_transcript(state)
    inferred: List[str] = []
    for field in INFERENCE_RULES:
        if state.get_confidence(field) != "unknown":
            continue
        value = infer_field(field, transcript, state.preferences)
        if value is None:
            continue
        apply_inferred_value(state, field, value)
        inferred.append(field)
        logger.info(f"[orchestrator] [step=inference] Inferred {field} | value={value}")
    return inferred
