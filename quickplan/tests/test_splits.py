"""
Tests for itinerary split generation and split advice.
"""

import pytest

from quickplan.orchestrator.splits import (
    create_minimal_area,
    create_single_area_split,
    generate_split_options,
    get_split_advice,
    is_valid_split,
)


# ============================================================================
# Test Fixtures
# ============================================================================


def _make_areas(count: int):
    """Create count area records with best_for tags."""
    names = ["Ubud", "Canggu", "Uluwatu", "Sidemen", "Amed"]
    areas = []
    for name in names[:count]:
        area = create_minimal_area(name.lower(), name)
        area["best_for"] = ["culture"]
        areas.append(area)
    return areas


# ============================================================================
# TestGenerateSplitOptions
# ============================================================================


class TestGenerateSplitOptions:
    """Tests for generate_split_options."""

    def test_no_areas_returns_empty(self):
        """No selected areas should produce no options."""
        assert generate_split_options([], 7) == []

    def test_single_area_gets_all_nights(self):
        """One area should produce a single all-in-one split."""
        options = generate_split_options(_make_areas(1), 6)

        assert len(options) == 1
        assert options[0].id == "all-in-one"
        assert options[0].total_nights == 6

    def test_two_areas_short_trip_only_even_split(self):
        """Trips under five nights only get the even split."""
        options = generate_split_options(_make_areas(2), 4)

        assert [o.id for o in options] == ["even-split"]
        assert [s.nights for s in options[0].stops] == [2, 2]

    def test_two_areas_longer_trip_offers_weighted_splits(self):
        """Five nights or more adds longer-first and longer-second."""
        options = generate_split_options(_make_areas(2), 7)

        assert [o.id for o in options] == ["even-split", "longer-first", "longer-second"]
        assert [s.nights for s in options[0].stops] == [3, 4]
        assert [s.nights for s in options[1].stops] == [5, 2]
        assert [s.nights for s in options[2].stops] == [2, 5]

    def test_three_areas_remainder_goes_to_last_stop(self):
        """Leftover nights from an even division go to the final stop."""
        options = generate_split_options(_make_areas(3), 10)

        assert [s.nights for s in options[0].stops] == [3, 3, 4]

    def test_three_areas_focus_first_when_long_enough(self):
        """A focus-first split is offered once there are 3 nights per area."""
        options = generate_split_options(_make_areas(3), 10)

        ids = [o.id for o in options]
        assert "focus-first" in ids
        focus = options[ids.index("focus-first")]
        assert focus.stops[0].nights == 3
        assert focus.total_nights == 10

    def test_more_areas_than_nights_truncates_stops(self):
        """A stop never gets zero nights; extra areas are dropped."""
        options = generate_split_options(_make_areas(5), 3)

        assert len(options[0].stops) == 3
        assert all(s.nights >= 1 for s in options[0].stops)
        assert options[0].total_nights == 3

    def test_two_areas_one_night_uses_single_stop(self):
        """A one-night trip with two areas keeps only the first area."""
        options = generate_split_options(_make_areas(2), 1)

        assert len(options) == 1
        assert len(options[0].stops) == 1
        assert options[0].stops[0].nights == 1

    @pytest.mark.parametrize("count,nights", [(1, 1), (2, 5), (2, 9), (3, 3), (4, 14), (5, 21)])
    def test_nights_always_sum_to_trip_length(self, count, nights):
        """Every option allocates exactly the trip's nights."""
        for option in generate_split_options(_make_areas(count), nights):
            assert option.total_nights == nights
            assert all(stop.nights >= 1 for stop in option.stops)

    def test_stop_days_are_contiguous(self):
        """Each stop's departure day is the next stop's arrival day."""
        option = generate_split_options(_make_areas(3), 9)[0]

        assert option.stops[0].arrival_day == 1
        for current, following in zip(option.stops, option.stops[1:]):
            assert current.departure_day == following.arrival_day
            assert following.travel_day_before is True
        assert option.stops[0].is_arrival_city is True
        assert option.stops[-1].is_departure_city is True


# ============================================================================
# TestSplitHelpers
# ============================================================================


class TestSplitHelpers:
    """Tests for single-area splits, advice and validity checks."""

    def test_single_area_split_shape(self):
        """The derived split should use the single-area id and all nights."""
        area = create_minimal_area("ubud", "Ubud")
        split = create_single_area_split(area, 5)

        assert split.id == "single-area"
        assert split.total_nights == 5
        assert split.stops[0].area_id == "ubud"

    def test_advice_for_short_trip(self):
        """Four nights or fewer recommends one base."""
        advice = get_split_advice(4)
        assert (advice.min_bases, advice.max_bases) == (1, 1)

    def test_advice_for_long_trip(self):
        """More than two weeks recommends three to four bases."""
        advice = get_split_advice(20)
        assert (advice.min_bases, advice.max_bases) == (3, 4)

    def test_is_valid_split(self):
        """Placeholder and empty splits are not valid."""
        split = create_single_area_split(create_minimal_area("a", "A"), 3).model_dump()

        assert is_valid_split(split) is True
        assert is_valid_split(None) is False
        assert is_valid_split({"id": "auto-split", "stops": split["stops"]}) is False
        assert is_valid_split({"id": "x", "stops": []}) is False
