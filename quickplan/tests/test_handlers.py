"""
Tests for the response processor and field handlers.
"""

from quickplan.orchestrator.context import PlanningContext
from quickplan.orchestrator.handlers import EMPTY_ACTIVITIES_MESSAGE, ResponseProcessor
from quickplan.orchestrator.registry import is_required
from quickplan.orchestrator.schemas import QuestionConfig, SessionState, Tradeoff, TradeoffOption
from quickplan.orchestrator.splits import create_minimal_area
from quickplan.orchestrator.tradeoffs import build_tradeoff_question


def _ask(state: SessionState, field: str, **input_config) -> QuestionConfig:
    """Make field the current question, as the selector would."""
    question = QuestionConfig(
        id=f"q-{field}-1",
        field=field,
        message=f"Question for {field}",
        input_type="chips",
        input_config=input_config,
        required=is_required(field),
    )
    state.current_question = question
    return question


def _make_processor(detector=None) -> ResponseProcessor:
    if detector is None:
        return ResponseProcessor(PlanningContext())
    return ResponseProcessor(PlanningContext(detector=detector))


def _state_with_areas(*area_ids: str) -> SessionState:
    state = SessionState()
    areas = [create_minimal_area(area_id, area_id.title()) for area_id in area_ids]
    state.discovered.areas = areas
    state.preferences["selected_areas"] = areas
    state.discovered.hotels = {
        area_id: [{"id": f"{area_id}-hotel", "name": f"{area_id.title()} Hotel"}] for area_id in area_ids
    }
    return state


# ============================================================================
# TestProcessorGuards
# ============================================================================


class TestProcessorGuards:
    """Tests for rejections that happen before any handler runs."""

    def test_no_current_question(self):
        """Answers with nothing asked are rejected."""
        result = _make_processor().process(SessionState(), "Bali")

        assert result.accepted is False
        assert result.reason == "No question is waiting for an answer"

    def test_question_id_mismatch(self):
        """An answer for a stale question is rejected."""
        state = SessionState()
        _ask(state, "destination")

        result = _make_processor().process(state, "Bali", question_id="q-destination-0")

        assert result.accepted is False
        assert "not the current question" in result.reason
        assert not state.is_known("destination")

    def test_required_blank_rejected(self):
        """A required field cannot be left blank."""
        state = SessionState()
        _ask(state, "dates")

        result = _make_processor().process(state, None)

        assert result.accepted is False
        assert result.reason == "dates needs an answer"
        assert state.question_history == []

    def test_empty_activities_uses_friendly_message(self):
        """An empty activity list gets the activity-specific message."""
        state = SessionState()
        _ask(state, "activities")

        result = _make_processor().process(state, [])

        assert result.accepted is False
        assert result.reason == EMPTY_ACTIVITIES_MESSAGE

    def test_rejected_answer_leaves_state_untouched(self):
        """A handler error commits nothing, not even history."""
        state = SessionState()
        question = _ask(state, "dates")

        result = _make_processor().process(state, {"start_date": "2026-06-17", "end_date": "2026-06-10"})

        assert result.accepted is False
        assert "start_date" not in state.preferences
        assert state.question_history == []
        assert state.current_question == question


# ============================================================================
# TestSkipsAndHistory
# ============================================================================


class TestSkipsAndHistory:
    """Tests for optional skips and question history bookkeeping."""

    def test_optional_skip_marks_inferred(self):
        """Skipping an optional field records it as inferred."""
        state = SessionState()
        _ask(state, "trip_occasion")

        result = _make_processor().process(state, "SKIP")

        assert result.accepted is True
        assert result.skipped is True
        assert state.get_confidence("trip_occasion") == "inferred"
        assert state.preferences["trip_occasion_skipped"] is True
        assert state.question_history == ["trip_occasion"]
        assert state.current_question is None

    def test_history_has_no_consecutive_duplicates(self):
        """Per-area hotel picks add a single history entry."""
        state = _state_with_areas("north", "south")
        processor = _make_processor()

        _ask(state, "hotels", area_id="north")
        processor.process(state, {"id": "north-hotel"})
        _ask(state, "hotels", area_id="south")
        processor.process(state, {"id": "south-hotel"})

        assert state.question_history == ["hotels"]
        assert state.get_confidence("hotels") == "complete"

    def test_satisfaction_not_recorded_in_history(self):
        """The satisfaction gate is not a navigation step."""
        state = SessionState(phase="reviewing")
        _ask(state, "satisfaction")

        result = _make_processor().process(state, True)

        assert result.accepted is True
        assert state.phase == "satisfied"
        assert state.question_history == []


# ============================================================================
# TestTripBasics
# ============================================================================


class TestTripBasics:
    """Tests for destination, dates, party and budget handlers."""

    def test_destination_strips_markup(self):
        """HTML in the destination is removed."""
        state = SessionState()
        _ask(state, "destination")

        _make_processor().process(state, "<b>Lisbon</b> ")

        assert state.preferences["destination_context"]["canonical_name"] == "Lisbon"
        assert state.get_confidence("destination") == "complete"

    def test_dates_compute_nights(self):
        """Nights come from the date range when not given."""
        state = SessionState()
        _ask(state, "dates")

        _make_processor().process(state, {"start_date": "2026-06-10", "end_date": "2026-06-17"})

        assert state.preferences["trip_length"] == 7
        assert state.preferences["start_date"] == "2026-06-10"

    def test_dates_clamped_to_bounds(self):
        """Trip length is clamped to the configured range."""
        processor = _make_processor()

        long_trip = SessionState()
        _ask(long_trip, "dates")
        processor.process(long_trip, {"nights": 90})

        short_trip = SessionState()
        _ask(short_trip, "dates")
        processor.process(short_trip, {"nights": 0})

        assert long_trip.preferences["trip_length"] == 60
        assert short_trip.preferences["trip_length"] == 1

    def test_large_party_suggests_vacation_rental(self):
        """Eight or more travelers suggest a vacation rental."""
        state = SessionState()
        _ask(state, "party")

        _make_processor().process(state, {"adults": 6, "children": 2, "child_ages": [9, 11]})

        assert state.preferences["suggested_accommodation_type"] == "vacation_rental"
        assert state.get_confidence("party") == "confirmed"

    def test_party_needs_an_adult(self):
        """A party without adults is rejected."""
        state = SessionState()
        _ask(state, "party")

        result = _make_processor().process(state, {"adults": 0, "children": 2})

        assert result.accepted is False

    def test_budget_band(self):
        """The slider value becomes a nightly band."""
        state = SessionState()
        _ask(state, "budget")

        _make_processor().process(state, {"value": 200})

        assert state.preferences["budget_per_night"] == {"min": 150, "max": 250}
        assert state.preferences["budget_unlimited"] is False

    def test_budget_rejects_non_numbers(self):
        """Text and booleans are not budgets."""
        processor = _make_processor()
        for answer in ("lots", True, -5):
            state = SessionState()
            _ask(state, "budget")
            assert processor.process(state, answer).accepted is False


# ============================================================================
# TestActivitiesAndDining
# ============================================================================


class TestActivitiesAndDining:
    """Tests for activities, dining and candidate pick handlers."""

    def test_activities_priorities_and_child_warnings(self):
        """The first three picks are must-dos; age limits queue warnings."""
        state = SessionState()
        state.preferences.update({"children": 1, "child_ages": [5]})
        _ask(state, "activities")

        _make_processor().process(state, ["dive", "beach", "food_tour", "nightlife"])

        priorities = [a["priority"] for a in state.preferences["selected_activities"]]
        assert priorities == ["must-do", "must-do", "must-do", "nice-to-have"]
        assert state.alerts.activity_warnings

    def test_dining_none_completes_dining(self):
        """Skipping dining completes it with no restrictions."""
        state = SessionState()
        _ask(state, "dining")

        _make_processor().process(state, "none")

        assert state.preferences["dietary_restrictions"] == ["none"]
        assert state.get_confidence("dining") == "complete"

    def test_dining_plan_is_only_confirmed(self):
        """Planning dining leaves the dietary follow-ups open."""
        state = SessionState()
        _ask(state, "dining")

        _make_processor().process(state, "plan")

        assert state.get_confidence("dining") == "confirmed"

    def test_hotel_skip_stored_as_none(self):
        """Skipping an area's hotel still counts as a pick."""
        state = _state_with_areas("north")
        _ask(state, "hotels", area_id="north")

        _make_processor().process(state, {"skip": True})

        assert state.preferences["selected_hotels"] == {"north": None}
        assert state.get_confidence("hotels") == "complete"

    def test_unknown_area_rejected(self):
        """Area ids must come from the discovered list."""
        state = _state_with_areas("north")
        _ask(state, "areas")

        result = _make_processor().process(state, ["atlantis"])

        assert result.accepted is False

    def test_split_must_cover_trip(self):
        """A split whose nights do not add up is rejected."""
        state = _state_with_areas("north")
        state.preferences["trip_length"] = 7
        _ask(state, "split")

        result = _make_processor().process(
            state,
            {"id": "short", "name": "Short", "stops": [{"area_id": "north", "nights": 3}]},
        )

        assert result.accepted is False
        assert "3 nights" in result.reason


# ============================================================================
# TestTradeoffs
# ============================================================================


class TestTradeoffs:
    """Tests for tradeoff detection and resolution."""

    @staticmethod
    def _detector(preferences):
        if any(a["type"] == "nightlife" for a in preferences.get("selected_activities") or []):
            return [
                Tradeoff(
                    id="quiet-vs-nightlife",
                    type="vibe",
                    title="Quiet vs nightlife",
                    description="Nightlife areas are rarely quiet.",
                    resolution_options=[TradeoffOption(id="keep", label="Keep nightlife")],
                )
            ]
        return []

    def test_detected_then_resolved(self):
        """Activities trigger detection; answering the tradeoff resolves it."""
        state = SessionState()
        processor = _make_processor(detector=self._detector)

        _ask(state, "activities")
        processor.process(state, ["nightlife"])
        assert [t.id for t in state.active_tradeoffs] == ["quiet-vs-nightlife"]

        state.current_question = build_tradeoff_question(state.active_tradeoffs[0])
        result = processor.process(state, "keep")

        assert result.accepted is True
        assert state.active_tradeoffs == []
        assert state.resolved_tradeoffs[0].selected_option_id == "keep"
        assert state.question_history == ["activities"]

    def test_resolved_tradeoff_not_detected_again(self):
        """A resolved conflict stays resolved on later detections."""
        state = SessionState()
        processor = _make_processor(detector=self._detector)

        _ask(state, "activities")
        processor.process(state, ["nightlife"])
        state.current_question = build_tradeoff_question(state.active_tradeoffs[0])
        processor.process(state, {"custom_input": "We'll nap in the afternoon"})

        _ask(state, "activities")
        processor.process(state, ["nightlife", "beach"])

        assert state.active_tradeoffs == []
