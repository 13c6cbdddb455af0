"""
Tests for the go-back controller.
"""

import asyncio

from quickplan.orchestrator.go_back import go_back
from quickplan.orchestrator.schemas import SessionState
from quickplan.pipeline.build import advance_session
from quickplan.pipeline.mock_data import MockDiscoveryService
from quickplan.tests.factories import answer_for, drive, make_orchestrator


class TestGoBack:
    """Tests for go_back on hand-built and driven sessions."""

    def test_nothing_to_go_back_to(self):
        """An empty history cannot be rewound."""
        state = SessionState()
        assert go_back(state) is None
        assert state.phase == "gathering"

    def test_rewinds_last_answered_field(self):
        """The last answer is cleared and asked again."""
        orchestrator = make_orchestrator()

        async def run():
            await drive(orchestrator, stop_at="party")
            target = orchestrator.go_back()
            selection = await orchestrator.get_next_question()
            return target, selection

        target, selection = asyncio.run(run())

        assert target == "dates"
        assert not orchestrator.state.is_known("dates")
        assert "trip_length" not in orchestrator.state.preferences
        assert selection.question.field == "dates"
        assert orchestrator.state.question_history == ["destination"]

    def test_areas_stays_in_enriching(self):
        """Going back to areas keeps discovery but clears downstream picks."""
        orchestrator = make_orchestrator()
        services = MockDiscoveryService()

        async def run():
            await drive(orchestrator, services, stop_at="hotel_preferences")
            target = orchestrator.go_back()
            selection = await advance_session(orchestrator, services)
            return target, selection

        target, selection = asyncio.run(run())
        state = orchestrator.state

        assert target == "areas"
        assert state.phase == "enriching"
        assert state.discovered.areas
        assert "selected_split" not in state.preferences
        assert state.get_confidence("split") == "unknown"
        assert selection.question.field == "areas"
        assert services.calls.count("areas") == 1

    def test_gathering_field_rewinds_phase(self):
        """Going back past the areas question returns to gathering."""
        orchestrator = make_orchestrator()

        async def run():
            await drive(orchestrator, stop_at="hotel_preferences")
            orchestrator.go_back()
            return orchestrator.go_back()

        target = asyncio.run(run())
        state = orchestrator.state

        assert target == "communities"
        assert state.phase == "gathering"
        assert state.discovered.areas == []
        assert state.enrichment_status["areas"] == "pending"
        assert state.itinerary is None

    def test_hotels_removes_only_last_pick(self):
        """Other areas keep their hotel when the last pick is undone."""
        state = SessionState(phase="enriching", question_history=["areas", "hotels"])
        state.preferences["selected_hotels"] = {"north": {"id": "n1"}, "south": {"id": "s1"}}
        state.set_confidence("hotels", "complete")

        target = go_back(state)

        assert target == "hotels"
        assert state.preferences["selected_hotels"] == {"north": {"id": "n1"}}
        assert state.get_confidence("hotels") == "partial"

    def test_review_rewinds_to_enriching(self):
        """Undoing a late answer from review drops the itinerary."""
        state = SessionState(phase="reviewing", question_history=["experiences"], itinerary={"days": []})
        state.preferences["selected_experiences"] = {"beach": []}

        go_back(state)

        assert state.phase == "enriching"
        assert state.itinerary is None
        assert "selected_experiences" not in state.preferences


def _session_record(state: SessionState) -> dict:
    """Everything downstream of an answer, without history or timestamps."""
    return state.model_dump(
        mode="json",
        include={"phase", "preferences", "confidence", "enrichment_status", "discovered", "itinerary"},
    )


class TestGoBackThenReanswer:
    """Tests that re-answering with the original value restores the session."""

    def _rewind_and_reanswer(self, stop_at: str):
        orchestrator = make_orchestrator()
        services = MockDiscoveryService()

        async def run():
            await drive(orchestrator, services, stop_at=stop_at)
            before = _session_record(orchestrator.state)
            target = orchestrator.go_back()
            selection = await advance_session(orchestrator, services)
            assert selection.question.field == target
            result = await orchestrator.process_response(answer_for(selection.question))
            assert result.accepted
            after_selection = await advance_session(orchestrator, services)
            return before, after_selection

        before, selection = asyncio.run(run())
        return orchestrator, before, selection

    def test_same_dates_reproduce_state(self):
        """Dates and the derived trip length come back unchanged."""
        orchestrator, before, selection = self._rewind_and_reanswer("party")

        assert selection.question.field == "party"
        assert _session_record(orchestrator.state) == before
        assert orchestrator.state.question_history == ["destination", "dates"]

    def test_same_hotel_reproduces_state(self):
        """Re-picking the same hotel restores every downstream field."""
        orchestrator, before, selection = self._rewind_and_reanswer("dining")

        assert selection.question.field == "dining"
        assert _session_record(orchestrator.state) == before
