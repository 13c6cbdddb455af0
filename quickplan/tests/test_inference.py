"""
Tests for the inference engine.
"""

from quickplan.orchestrator.inference import infer_field, run_inference_pass
from quickplan.orchestrator.schemas import SessionState, new_message


def _state_with_transcript(*texts: str) -> SessionState:
    """Create a session whose user transcript holds the given texts."""
    state = SessionState()
    for text in texts:
        state.messages.append(new_message("user", text))
    return state


# ============================================================================
# TestInferField
# ============================================================================


class TestInferField:
    """Tests for individual predicates via infer_field."""

    def test_solo_party(self):
        """'solo' in the transcript infers one adult."""
        value = infer_field("party", ["Planning a solo trip"], {})
        assert value == {"adults": 1, "children": 0, "child_ages": []}

    def test_honeymoon_party_and_occasion(self):
        """'honeymoon' infers a couple and the honeymoon occasion."""
        transcript = ["It's our honeymoon!"]

        assert infer_field("party", transcript, {})["adults"] == 2
        assert infer_field("trip_occasion", transcript, {}) == {"id": "honeymoon"}

    def test_work_and_travel_infers_workation(self):
        """Work and travel in the same message infers a workation."""
        assert infer_field("trip_occasion", ["I want to work while I travel"], {}) == {"id": "workation"}

    def test_tight_budget_infers_hostel(self):
        """A ceiling of 70 or less infers a hostel."""
        prefs = {"budget_per_night": {"min": 30, "max": 60}}
        assert infer_field("accommodation_type", [], prefs) == {"id": "hostel"}

    def test_honeymoon_with_big_budget_infers_resort(self):
        """A honeymoon with a 400+ ceiling infers a resort."""
        prefs = {"trip_occasion": "honeymoon", "budget_per_night": {"max": 500}}
        assert infer_field("accommodation_type", [], prefs) == {"id": "resort"}

    def test_suggested_accommodation_used_last(self):
        """The party handler's suggestion applies when nothing else fires."""
        prefs = {"suggested_accommodation_type": "villa"}
        assert infer_field("accommodation_type", [], prefs) == {"id": "villa"}

    def test_eco_lodge_infers_eco_focus(self):
        """An eco lodge implies an eco-focused sustainability preference."""
        prefs = {"accommodation_type": "eco_lodge"}
        assert infer_field("sustainability_preference", [], prefs) == {"id": "eco_focused"}

    def test_no_match_returns_none(self):
        """Fields without a matching predicate infer nothing."""
        assert infer_field("party", ["Going with friends"], {}) is None
        assert infer_field("vibe", ["solo"], {}) is None


# ============================================================================
# TestRunInferencePass
# ============================================================================


class TestRunInferencePass:
    """Tests for run_inference_pass against a session."""

    def test_inferred_fields_marked_inferred(self):
        """Inferred fields get 'inferred' confidence and installed modes."""
        state = _state_with_transcript("Planning our honeymoon in Bali")

        inferred = run_inference_pass(state)

        assert "party" in inferred
        assert "trip_occasion" in inferred
        assert state.get_confidence("party") == "inferred"
        assert state.preferences["trip_occasion"] == "honeymoon"
        assert state.preferences["special_mode"] == "romantic"

    def test_known_fields_not_overwritten(self):
        """A confirmed answer is never replaced by an inference."""
        state = _state_with_transcript("solo trip")
        state.preferences["adults"] = 3
        state.set_confidence("party", "confirmed")

        run_inference_pass(state)

        assert state.preferences["adults"] == 3
        assert state.get_confidence("party") == "confirmed"

    def test_skip_dining_completes_dining(self):
        """Wanting to wing it with food marks dining complete."""
        state = _state_with_transcript("We'll just wing it with food")

        run_inference_pass(state)

        assert state.preferences["dining_mode"] == "none"
        assert state.preferences["dietary_restrictions"] == ["none"]
        assert state.get_confidence("dining") == "complete"

    def test_assistant_messages_ignored(self):
        """Only the user's own words feed inference."""
        state = SessionState()
        state.messages.append(new_message("assistant", "Is this a solo trip?"))

        assert "party" not in run_inference_pass(state)
