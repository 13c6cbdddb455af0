"""
Tests for missing-field ordering and the split-before-hotel-preferences rule.
"""

import logging

from quickplan.orchestrator.missing_fields import enforce_split_first, get_missing_fields
from quickplan.orchestrator.schemas import SessionState
from quickplan.orchestrator.splits import create_minimal_area
from quickplan.tests.factories import quiet_advisories


def _make_two_area_state() -> SessionState:
    """Enriching session with two areas picked and no split yet."""
    state = SessionState(phase="enriching")
    state.preferences["selected_areas"] = [
        create_minimal_area("bali-old-town", "Bali Old Town"),
        create_minimal_area("bali-beachfront", "Bali Beachfront"),
    ]
    state.set_confidence("areas", "complete")
    return state


class TestEnforceSplitFirst:
    """Tests for enforce_split_first."""

    def test_drops_hotel_preferences_and_logs_error(self, caplog):
        """hotel_preferences is removed when the split is still missing."""
        with caplog.at_level(logging.ERROR, logger="quickplan.orchestrator.missing_fields"):
            result = enforce_split_first(["areas", "split", "hotel_preferences", "dining"])

        assert result == ["areas", "split", "dining"]
        assert any(
            record.levelno == logging.ERROR and "dropping hotel_preferences" in record.getMessage()
            for record in caplog.records
        )

    def test_leaves_other_lists_alone(self, caplog):
        """Without a missing split nothing changes and nothing is logged."""
        with caplog.at_level(logging.ERROR, logger="quickplan.orchestrator.missing_fields"):
            result = enforce_split_first(["hotel_preferences", "hotels"])

        assert result == ["hotel_preferences", "hotels"]
        assert caplog.records == []


class TestGetMissingFields:
    """Tests for get_missing_fields around the split."""

    def test_split_asked_before_hotel_preferences(self):
        """Two areas without a split ask for the split, never hotel preferences."""
        missing = get_missing_fields(_make_two_area_state(), quiet_advisories())

        assert "split" in missing
        assert "hotel_preferences" not in missing

    def test_hotel_preferences_follow_valid_split(self):
        """Once a split is chosen hotel preferences are asked."""
        state = _make_two_area_state()
        state.preferences["selected_split"] = {
            "id": "split-even",
            "name": "Even split",
            "stops": [
                {"area_id": "bali-old-town", "nights": 4, "order": 1},
                {"area_id": "bali-beachfront", "nights": 3, "order": 2},
            ],
        }
        state.set_confidence("split", "complete")

        missing = get_missing_fields(state, quiet_advisories())

        assert "split" not in missing
        assert "hotel_preferences" in missing
