"""
Routing logic for the enrichment graph.

Determines which discovery step to run next from enrichment status and
the preferences gathered so far.
"""

import logging
from typing import Literal

from quickplan.orchestrator.splits import is_valid_split
from quickplan.pipeline.state import EnrichmentState


logger = logging.getLogger(__name__)

Step = Literal[
    "discover_areas",
    "discover_hotels",
    "discover_restaurants",
    "discover_experiences",
    "generate_itinerary",
    "complete",
]

HANDLED = ("complete", "partial")


def _pending(state: EnrichmentState, category: str) -> bool:
    return state["enrichment_status"].get(category) == "pending"


def route_next_step(state: EnrichmentState) -> Step:
    """
    Determine the next step to execute based on populated state.

    Routing logic:
    1. Areas pending (outside gathering) -> discover areas
    2. Areas picked, split valid, hotel preferences known -> discover hotels
    3. Planning dining with cuisines chosen -> discover restaurants
    4. Activities chosen and dining decided -> discover experiences
    5. Generating with no itinerary yet -> generate itinerary
    6. Otherwise -> complete

    Args:
        state: Current enrichment state

    Returns:
        Name of the next node to execute
    """
    session_id = state.get("session_id") or "unknown"
    _log = f"[session={session_id}] [graph=enrichment] [router=route_next_step] "

    phase = state["phase"]
    prefs = state["preferences"]
    confidence = state["confidence"]
    status = state["enrichment_status"]

    def route(step: Step) -> Step:
        logger.info(f"{_log}Routing to '{step}' | phase={phase}, status={status}")
        return step

    if phase == "gathering":
        return route("complete")

    if _pending(state, "areas"):
        return route("discover_areas")

    if (
        confidence.get("areas") in HANDLED
        and is_valid_split(prefs.get("selected_split"))
        and confidence.get("hotel_preferences", "unknown") != "unknown"
        and _pending(state, "hotels")
    ):
        return route("discover_hotels")

    if (
        prefs.get("dining_mode") == "plan"
        and prefs.get("cuisine_preferences")
        and _pending(state, "restaurants")
    ):
        return route("discover_restaurants")

    if (
        prefs.get("selected_activities")
        and confidence.get("dining", "unknown") != "unknown"
        and prefs.get("selected_areas")
        and _pending(state, "experiences")
    ):
        return route("discover_experiences")

    if phase == "generating" and state.get("itinerary") is None and not state.get("itinerary_failed"):
        return route("generate_itinerary")

    return route("complete")
