"""
Tests for the enrichment graph: routing, nodes and session integration.
"""

import asyncio

from quickplan.pipeline.build import (
    build_enrichment_state,
    create_enrichment_graph,
    has_pending_step,
    run_enrichment,
)
from quickplan.pipeline.mock_data import MockDiscoveryService
from quickplan.pipeline.router import route_next_step
from quickplan.orchestrator.splits import create_minimal_area, create_single_area_split
from quickplan.tests.factories import drive, make_orchestrator


class EmptyAreasDiscovery(MockDiscoveryService):
    """Discovery that succeeds but finds no areas."""

    def discover_areas(self, preferences):
        self.calls.append("areas")
        return []


def _make_state(phase="enriching", preferences=None, confidence=None, **status):
    """Create an EnrichmentState with every category pending unless overridden."""
    enrichment_status = {c: "pending" for c in ("areas", "hotels", "restaurants", "experiences")}
    enrichment_status.update(status)
    return {
        "session_id": "pipeline-test",
        "phase": phase,
        "preferences": preferences or {},
        "confidence": confidence or {},
        "discovered": {"areas": [], "hotels": {}, "activities": [], "restaurants": {}, "experiences": {}},
        "enrichment_status": enrichment_status,
        "areas": None,
        "hotels": None,
        "restaurants": None,
        "experiences": None,
        "itinerary": None,
        "itinerary_failed": False,
        "current_step": "start",
        "errors": [],
        "messages": [],
    }


def _area_preferences():
    area = create_minimal_area("bali-old-town", "Bali Old Town")
    return {
        "destination_context": {"raw_input": "Bali", "canonical_name": "Bali"},
        "selected_areas": [area],
        "selected_split": create_single_area_split(area, 5).model_dump(),
        "selected_activities": [{"type": "beach", "priority": "must-do"}],
        "budget_per_night": {"min": 150, "max": 250},
    }


# ============================================================================
# TestRouteNextStep
# ============================================================================


class TestRouteNextStep:
    """Tests for route_next_step."""

    def test_gathering_routes_to_complete(self):
        """Nothing is discovered while gathering."""
        assert route_next_step(_make_state(phase="gathering")) == "complete"

    def test_areas_first(self):
        """Pending areas are discovered first."""
        assert route_next_step(_make_state()) == "discover_areas"

    def test_hotels_need_split_and_preferences(self):
        """Hotels wait for a valid split and hotel preferences."""
        prefs = _area_preferences()
        without_prefs = _make_state(preferences=prefs, confidence={"areas": "complete"}, areas="done")
        ready = _make_state(
            preferences=prefs,
            confidence={"areas": "complete", "hotel_preferences": "complete"},
            areas="done",
        )

        assert route_next_step(without_prefs) == "complete"
        assert route_next_step(ready) == "discover_hotels"

    def test_restaurants_need_cuisines(self):
        """Restaurants are discovered once cuisines are chosen for planned dining."""
        prefs = {**_area_preferences(), "dining_mode": "plan", "cuisine_preferences": ["seafood"]}
        state = _make_state(preferences=prefs, areas="done", hotels="done")

        assert route_next_step(state) == "discover_restaurants"

    def test_experiences_need_dining_decision(self):
        """Experiences wait until dining is decided."""
        prefs = _area_preferences()
        undecided = _make_state(preferences=prefs, areas="done", hotels="done")
        decided = _make_state(preferences=prefs, confidence={"dining": "complete"}, areas="done", hotels="done")

        assert route_next_step(undecided) == "complete"
        assert route_next_step(decided) == "discover_experiences"

    def test_itinerary_only_when_generating(self):
        """The itinerary is generated once, in the generating phase."""
        done = {"areas": "done", "hotels": "done", "restaurants": "done", "experiences": "done"}
        generating = _make_state(phase="generating", **done)
        failed = {**generating, "itinerary_failed": True}

        assert route_next_step(_make_state(phase="reviewing", **done)) == "complete"
        assert route_next_step(generating) == "generate_itinerary"
        assert route_next_step(failed) == "complete"


# ============================================================================
# TestEnrichmentGraph
# ============================================================================


class TestEnrichmentGraph:
    """Tests for the compiled enrichment graph."""

    def test_areas_node_populates_state(self):
        """A run from scratch discovers areas and then completes."""
        services = MockDiscoveryService()
        graph = create_enrichment_graph(services)
        prefs = {"destination_context": {"raw_input": "Bali", "canonical_name": "Bali"}}

        final = graph.invoke(_make_state(preferences=prefs))

        assert [a["id"] for a in final["areas"]] == ["bali-old-town", "bali-beachfront", "bali-highlands"]
        assert final["enrichment_status"]["areas"] == "done"
        assert final["current_step"] == "complete"
        assert final["errors"] == []
        assert services.calls == ["areas"]

    def test_chained_steps_in_one_run(self):
        """Hotels and experiences run back to back when both are ready."""
        services = MockDiscoveryService()
        graph = create_enrichment_graph(services)
        state = _make_state(
            preferences=_area_preferences(),
            confidence={"areas": "complete", "hotel_preferences": "complete", "dining": "complete"},
            areas="done",
        )

        final = graph.invoke(state)

        assert services.calls == ["hotels", "experiences"]
        prices = [h["price_per_night"] for h in final["hotels"]["bali-old-town"]]
        assert prices == [120, 55]
        assert list(final["experiences"]) == ["beach"]

    def test_failed_step_marks_error(self):
        """A failing discovery is recorded and not retried."""
        services = MockDiscoveryService(fail_on="areas")
        graph = create_enrichment_graph(services)

        final = graph.invoke(_make_state())

        assert final["enrichment_status"]["areas"] == "error"
        assert final["errors"] == ["Areas discovery error: mock areas discovery unavailable"]
        assert services.calls == ["areas"]


# ============================================================================
# TestSessionIntegration
# ============================================================================


class TestSessionIntegration:
    """Tests for running the graph against an orchestrator session."""

    def test_projection_of_session(self):
        """The graph state mirrors the session record."""
        orchestrator = make_orchestrator(session_id="projection")
        asyncio.run(drive(orchestrator, stop_at="party"))

        state = build_enrichment_state(orchestrator)

        assert state["session_id"] == "projection"
        assert state["phase"] == "gathering"
        assert state["preferences"]["trip_length"] == 7
        assert state["errors"] == []
        assert has_pending_step(orchestrator) is False

    def test_run_enrichment_applies_results(self):
        """Discovered areas reach the session through its setters."""
        orchestrator = make_orchestrator()
        asyncio.run(drive(orchestrator, stop_at="communities"))
        asyncio.run(orchestrator.process_response(["travel"]))
        asyncio.run(orchestrator.get_next_question())

        run_enrichment(orchestrator, MockDiscoveryService())

        assert len(orchestrator.state.discovered.areas) == 3
        assert orchestrator.state.enrichment_status["areas"] == "done"

    def test_area_failure_falls_back_to_destination(self):
        """When areas cannot be discovered the destination becomes the only area."""
        orchestrator = make_orchestrator()
        services = MockDiscoveryService(fail_on="areas")

        selection = asyncio.run(drive(orchestrator, services, stop_at="hotel_preferences"))
        state = orchestrator.state

        assert selection.question.field == "hotel_preferences"
        assert state.enrichment_status["areas"] == "error"
        assert [a["id"] for a in state.selected_areas] == ["bali"]
        assert state.get_confidence("areas") == "partial"
        assert state.preferences["selected_split"]["stops"][0]["nights"] == 7

    def test_empty_area_discovery_falls_back_to_destination(self):
        """An area search that finds nothing still lets the session continue."""
        orchestrator = make_orchestrator()
        services = EmptyAreasDiscovery()

        selection = asyncio.run(drive(orchestrator, services, stop_at="hotel_preferences"))
        state = orchestrator.state

        assert selection.status == "question"
        assert selection.question.field == "hotel_preferences"
        assert state.enrichment_status["areas"] == "done"
        assert [a["id"] for a in state.selected_areas] == ["bali"]
        assert state.get_confidence("areas") == "partial"
        assert services.calls.count("areas") == 1

    def test_hotel_failure_moves_on_to_dining(self):
        """Without hotel candidates the flow continues to dining."""
        orchestrator = make_orchestrator()
        services = MockDiscoveryService(fail_on="hotels")

        selection = asyncio.run(drive(orchestrator, services, stop_at="dining"))

        assert selection.question.field == "dining"
        assert orchestrator.state.get_confidence("hotels") == "partial"

    def test_itinerary_failure_still_reaches_review(self):
        """A failed itinerary is reported and the session moves to review."""
        orchestrator = make_orchestrator()
        services = MockDiscoveryService(fail_on="itinerary")

        selection = asyncio.run(drive(orchestrator, services))

        assert selection.question.field == "satisfaction"
        assert orchestrator.state.itinerary is None
        assert services.calls.count("itinerary") == 1
