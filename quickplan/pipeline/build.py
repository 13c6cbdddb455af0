"""
Enrichment graph construction.

Builds the graph that sequences discovery steps for a planning session:
areas -> hotels -> restaurants -> experiences -> itinerary. The router
re-enters after every step, so each run executes only the steps the
session is ready for. Results are applied back to the orchestrator
through its setters.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional

from langgraph.graph import StateGraph, END

from quickplan.orchestrator.options import activity_types
from quickplan.orchestrator.orchestrator import PlanningOrchestrator
from quickplan.orchestrator.selector import Selection
from quickplan.pipeline.router import route_next_step
from quickplan.pipeline.services import DiscoveryService
from quickplan.pipeline.state import EnrichmentState


logger = logging.getLogger(__name__)

# Category -> orchestrator setter applied when the step succeeds
RESULT_SETTERS = {
    "areas": "set_discovered_areas",
    "hotels": "set_discovered_hotels",
    "restaurants": "set_discovered_restaurants",
    "experiences": "set_discovered_experiences",
}


def _system_message(content: str) -> Dict[str, str]:
    return {"role": "system", "agent": "enrichment", "content": content}


def _discovery_node(
    category: str, discover: Callable[[EnrichmentState], Any]
) -> Callable[[EnrichmentState], Dict[str, Any]]:
    """
    Wrap a discovery call as a graph node.

    A failing call marks the category "error" and records the error so
    the router moves on instead of retrying.
    """

    def node(state: EnrichmentState) -> Dict[str, Any]:
        session_id = state.get("session_id") or "unknown"
        _log = f"[session={session_id}] [graph=enrichment] [node=discover_{category}] "
        logger.info(f"{_log}Entering node | phase={state['phase']}")

        try:
            result = discover(state)
            logger.info(f"{_log}Discovery returned {len(result)} entries")
            return {
                category: result,
                "enrichment_status": {**state["enrichment_status"], category: "done"},
                "current_step": f"{category}_complete",
                "messages": [_system_message(f"Discovered {len(result)} {category} entries.")],
            }
        except Exception as e:
            logger.exception(f"{_log}{category.title()} discovery failed: {e}")
            return {
                "enrichment_status": {**state["enrichment_status"], category: "error"},
                "current_step": f"{category}_failed",
                "errors": [f"{category.title()} discovery error: {str(e)}"],
                "messages": [_system_message(f"{category.title()} discovery failed: {str(e)}")],
            }

    node.__name__ = f"discover_{category}"
    return node


def _complete_node(state: EnrichmentState) -> Dict[str, Any]:
    """
    Final node that marks the enrichment run as complete.

    Args:
        state: Current enrichment state

    Returns:
        Completion tracking message
    """
    session_id = state.get("session_id") or "unknown"
    _log = f"[session={session_id}] [graph=enrichment] [node=complete] "

    num_errors = len(state.get("errors", []))
    logger.info(
        f"{_log}Enrichment complete | status={state['enrichment_status']}, "
        f"itinerary={'done' if state.get('itinerary') else 'none'}, errors={num_errors} -> END"
    )
    return {
        "current_step": "complete",
        "messages": [_system_message(f"Enrichment run complete with {num_errors} errors.")],
    }


def create_enrichment_graph(services: DiscoveryService):
    """
    Build and compile the enrichment graph.

    Graph structure:
        route_next_step -> discover_areas | discover_hotels |
                           discover_restaurants | discover_experiences |
                           generate_itinerary | complete
        every step -> route_next_step
        complete -> END

    Args:
        services: Discovery service the nodes call

    Returns:
        Compiled LangGraph StateGraph
    """

    def areas(state: EnrichmentState):
        return services.discover_areas(state["preferences"])

    def hotels(state: EnrichmentState):
        return services.discover_hotels(state["preferences"].get("selected_areas") or [], state["preferences"])

    def restaurants(state: EnrichmentState):
        prefs = state["preferences"]
        return services.discover_restaurants(
            list(prefs.get("cuisine_preferences") or []), prefs.get("selected_areas") or [], prefs
        )

    def experiences(state: EnrichmentState):
        prefs = state["preferences"]
        return services.discover_experiences(activity_types(prefs), prefs.get("selected_areas") or [], prefs)

    def generate_itinerary(state: EnrichmentState) -> Dict[str, Any]:
        session_id = state.get("session_id") or "unknown"
        _log = f"[session={session_id}] [graph=enrichment] [node=generate_itinerary] "
        logger.info(f"{_log}Entering node")

        discovered = dict(state["discovered"])
        for category in RESULT_SETTERS:
            if state.get(category) is not None:
                discovered[category] = state[category]

        try:
            itinerary = services.generate_itinerary(state["preferences"], discovered)
            logger.info(f"{_log}Itinerary generated | days={len(itinerary.get('days') or [])}")
            return {
                "itinerary": itinerary,
                "current_step": "itinerary_complete",
                "messages": [_system_message("Itinerary generated.")],
            }
        except Exception as e:
            logger.exception(f"{_log}Itinerary generation failed: {e}")
            return {
                "itinerary_failed": True,
                "current_step": "itinerary_failed",
                "errors": [f"Itinerary generation error: {str(e)}"],
                "messages": [_system_message(f"Itinerary generation failed: {str(e)}")],
            }

    steps = {
        "discover_areas": _discovery_node("areas", areas),
        "discover_hotels": _discovery_node("hotels", hotels),
        "discover_restaurants": _discovery_node("restaurants", restaurants),
        "discover_experiences": _discovery_node("experiences", experiences),
        "generate_itinerary": generate_itinerary,
    }
    routes = {name: name for name in steps}
    routes["complete"] = "complete"

    graph = StateGraph(EnrichmentState)
    for name, node in steps.items():
        graph.add_node(name, node)
    graph.add_node("complete", _complete_node)

    graph.set_conditional_entry_point(route_next_step, routes)
    for name in steps:
        graph.add_conditional_edges(name, route_next_step, routes)
    graph.add_edge("complete", END)

    compiled = graph.compile()
    logger.info(f"[graph=enrichment] Graph compiled | nodes={list(routes)}")
    return compiled


# =============================================================================
# Session Integration
# =============================================================================


def build_enrichment_state(orchestrator: PlanningOrchestrator) -> EnrichmentState:
    """Project the orchestrator's session into a fresh graph state."""
    state = orchestrator.state
    return {
        "session_id": orchestrator.session_id,
        "phase": state.phase,
        "preferences": state.model_dump(mode="json")["preferences"],
        "confidence": dict(state.confidence),
        "discovered": state.discovered.model_dump(mode="json"),
        "enrichment_status": dict(state.enrichment_status),
        "areas": None,
        "hotels": None,
        "restaurants": None,
        "experiences": None,
        "itinerary": state.itinerary,
        "itinerary_failed": state.itinerary_failed,
        "current_step": "start",
        "errors": [],
        "messages": [],
    }


def has_pending_step(orchestrator: PlanningOrchestrator) -> bool:
    return route_next_step(build_enrichment_state(orchestrator)) != "complete"


def run_enrichment(
    orchestrator: PlanningOrchestrator,
    services: DiscoveryService,
    graph: Optional[Any] = None,
) -> EnrichmentState:
    """
    Run every discovery step the session is ready for and apply results.

    Successful steps go through the orchestrator's set_discovered_*
    setters; failed steps mark their category "error" so the selector can
    self-heal. A generated itinerary is stored with set_itinerary, a
    failed attempt is recorded with set_itinerary_failed.

    Args:
        orchestrator: Session to enrich
        services: Discovery service the graph calls
        graph: Previously compiled graph to reuse

    Returns:
        Final graph state, including accumulated errors
    """
    graph = graph or create_enrichment_graph(services)
    initial = build_enrichment_state(orchestrator)
    _log = f"[session={orchestrator.session_id}] [graph=enrichment] "

    start = time.perf_counter()
    final = graph.invoke(initial, config={"recursion_limit": orchestrator.config.recursion_limit})
    duration_ms = (time.perf_counter() - start) * 1000

    for category, setter in RESULT_SETTERS.items():
        before = initial["enrichment_status"].get(category)
        after = final["enrichment_status"].get(category)
        if after == before:
            continue
        if after == "done":
            getattr(orchestrator, setter)(final.get(category) or ({} if category != "areas" else []))
        elif after == "error":
            orchestrator.set_enrichment_status(category, "error")

    if final.get("itinerary") is not None and initial["itinerary"] is None:
        orchestrator.set_itinerary(final["itinerary"])
    elif final.get("itinerary_failed") and not initial["itinerary_failed"]:
        orchestrator.set_itinerary_failed()

    errors = final.get("errors", [])
    if errors:
        logger.warning(f"{_log}Enrichment finished with errors | errors={errors}")
    logger.info(f"{_log}Enrichment applied | status={orchestrator.state.enrichment_status} | duration_ms={duration_ms:.1f}")
    if orchestrator.debug_logger is not None:
        orchestrator.debug_logger.log_event(
            "pipeline", "Enrichment run", {"errors": errors, "last_step": final.get("current_step")}, duration_ms
        )
    return final


async def advance_session(
    orchestrator: PlanningOrchestrator,
    services: DiscoveryService,
    max_rounds: int = 6,
) -> Selection:
    """
    Alternate enrichment and selection until there is something to show.

    Stops at the first question or completion, or when a round neither
    ran a discovery step nor changed phase.

    Returns:
        The last Selection from the orchestrator
    """
    graph = create_enrichment_graph(services)
    selection = Selection(status="wait")
    for _ in range(max_rounds):
        phase_before = orchestrator.phase
        ran = has_pending_step(orchestrator)
        if ran:
            run_enrichment(orchestrator, services, graph=graph)

        selection = await orchestrator.get_next_question()
        if selection.status != "wait":
            return selection
        if not ran and orchestrator.phase == phase_before:
            break

    logger.info(f"[session={orchestrator.session_id}] [graph=enrichment] Session waiting | phase={orchestrator.phase}")
    return selection
