"""
Dissatisfaction handler.

Maps each feedback reason from the satisfaction gate to a surgical reset
of the affected preferences and the phase the session must return to.
When several reasons are given, the session rewinds to the earliest of
their target phases.
"""

import logging
from typing import Callable, Dict, List, Optional

from quickplan.orchestrator.budget import budget_ceiling, round_half_up
from quickplan.orchestrator.config import OrchestratorConfig, DEFAULT_CONFIG
from quickplan.orchestrator.schemas import SessionState, new_message, phase_index


logger = logging.getLogger(__name__)

ACKNOWLEDGEMENT = "Got it! Let me adjust the plan based on your feedback..."

ReasonAction = Callable[[SessionState, Optional[str], OrchestratorConfig], str]


# =============================================================================
# Reason Actions
# =============================================================================


def _wrong_areas(state: SessionState, feedback: Optional[str], config: OrchestratorConfig) -> str:
    prefs = state.preferences
    prefs["selected_areas"] = []
    prefs["selected_split"] = None
    prefs["selected_hotels"] = {}
    state.discovered.areas = []
    state.discovered.hotels = {}
    for field in ("areas", "split", "hotels"):
        state.set_confidence(field, "unknown", force=True)
    state.enrichment_status["areas"] = "pending"
    state.enrichment_status["hotels"] = "pending"
    return "enriching"


def _wrong_vibe(state: SessionState, feedback: Optional[str], config: OrchestratorConfig) -> str:
    state.preferences.pop("vibe", None)
    state.preferences["must_dos"] = []
    state.set_confidence("vibe", "unknown", force=True)
    return "gathering"


def _too_packed(state: SessionState, feedback: Optional[str], config: OrchestratorConfig) -> str:
    state.preferences["pace"] = "chill"
    return "generating"


def _too_chill(state: SessionState, feedback: Optional[str], config: OrchestratorConfig) -> str:
    state.preferences["pace"] = "packed"
    return "generating"


def _hotel_wrong(state: SessionState, feedback: Optional[str], config: OrchestratorConfig) -> str:
    # Discovered hotels stay; only the picks are redone
    state.preferences["selected_hotels"] = {}
    state.set_confidence("hotels", "unknown", force=True)
    return "enriching"


def _dining_wrong(state: SessionState, feedback: Optional[str], config: OrchestratorConfig) -> str:
    prefs = state.preferences
    prefs.pop("selected_restaurants", None)
    prefs.pop("cuisine_preferences", None)
    state.discovered.restaurants = {}
    state.enrichment_status["restaurants"] = "pending"
    # The plan-dining choice stands, only cuisines are re-asked
    state.set_confidence("dining", "confirmed", force=True)
    state.set_confidence("cuisine_preferences", "unknown", force=True)
    state.set_confidence("restaurants", "unknown", force=True)
    return "enriching"


def _too_touristy(state: SessionState, feedback: Optional[str], config: OrchestratorConfig) -> str:
    state.preferences["avoid_touristy"] = True
    return "generating"


def _missing_activity(state: SessionState, feedback: Optional[str], config: OrchestratorConfig) -> str:
    if feedback:
        state.preferences.setdefault("must_include", []).append(feedback)
    return "generating"


def _surf_days_wrong(state: SessionState, feedback: Optional[str], config: OrchestratorConfig) -> str:
    for key in ("surfing_details", "surf_school_required", "surf_break_type", "allow_advanced_spots"):
        state.preferences.pop(key, None)
    state.set_confidence("surfing_details", "unknown", force=True)
    return "gathering"


def _budget_exceeded(state: SessionState, feedback: Optional[str], config: OrchestratorConfig) -> str:
    prefs = state.preferences
    band = prefs.get("budget_per_night")
    if band:
        # The unlimited sentinel is not a real price; scale the slider value instead
        if prefs.get("budget_unlimited"):
            ceiling = prefs.get("budget_value") or config.budget_max
        else:
            ceiling = budget_ceiling(prefs)
        band["max"] = round_half_up(ceiling * config.dissatisfaction_budget_factor)
        band["min"] = min(band.get("min") or 0, band["max"])
        prefs["budget_unlimited"] = False
    prefs["selected_hotels"] = {}
    state.discovered.hotels = {}
    state.set_confidence("hotels", "unknown", force=True)
    state.enrichment_status["hotels"] = "pending"
    return "enriching"


def _other(state: SessionState, feedback: Optional[str], config: OrchestratorConfig) -> str:
    if feedback:
        state.preferences["custom_feedback"] = feedback
    return "generating"


DISSATISFACTION_ACTIONS: Dict[str, ReasonAction] = {
    "wrong_areas": _wrong_areas,
    "wrong_vibe": _wrong_vibe,
    "too_packed": _too_packed,
    "too_chill": _too_chill,
    "hotel_wrong": _hotel_wrong,
    "dining_wrong": _dining_wrong,
    "too_touristy": _too_touristy,
    "missing_activity": _missing_activity,
    "surf_days_wrong": _surf_days_wrong,
    "budget_exceeded": _budget_exceeded,
    "other": _other,
}


def handle_dissatisfaction(
    state: SessionState,
    reasons: List[str],
    custom_feedback: Optional[str] = None,
    config: OrchestratorConfig = DEFAULT_CONFIG,
) -> str:
    """
    Apply every reason's reset and rewind to the earliest target phase.

    Unknown reasons are treated like "other". The generated itinerary is
    always discarded so it is rebuilt from the adjusted preferences.

    Args:
        state: Session state to update
        reasons: Reason ids from the satisfaction question
        custom_feedback: Free text the user typed alongside the reasons
        config: Supplies the budget reduction factor

    Returns:
        The phase the session was moved to
    """
    feedback = (custom_feedback or "").strip() or None
    targets = []
    for reason in reasons or ["other"]:
        action = DISSATISFACTION_ACTIONS.get(reason, _other)
        targets.append(action(state, feedback, config))

    target = min(targets, key=phase_index)
    previous = state.phase
    state.phase = target
    state.itinerary = None
    state.itinerary_failed = False
    state.messages.append(new_message("assistant", ACKNOWLEDGEMENT, mood="thinking"))

    logger.info(
        f"[orchestrator] [step=dissatisfaction] {previous} -> {target} | "
        f"reasons={reasons} | has_feedback={feedback is not None}"
    )
    return target
