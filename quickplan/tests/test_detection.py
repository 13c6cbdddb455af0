"""
Tests for destination detection, child-age filtering, trip modes and
the nightly budget band.
"""

from quickplan.orchestrator.budget import budget_band, budget_ceiling, round_half_up
from quickplan.orchestrator.config import get_config
from quickplan.orchestrator.detection import detect_multi_country, filter_activities_for_child_ages
from quickplan.orchestrator.modes import MODE_PREFERENCE_KEYS, apply_mode, mode_for_occasion


# ============================================================================
# TestDetectMultiCountry
# ============================================================================


class TestDetectMultiCountry:
    """Tests for detect_multi_country."""

    def test_known_combo_returns_curated_tips(self):
        """Curated pairings should return their own tips."""
        info = detect_multi_country("Spain and Portugal")

        assert info.is_multi_country is True
        assert info.countries == ["Portugal", "Spain"]
        assert "Both in Schengen zone - no visa issues" in info.logistics_tips

    def test_two_country_pattern(self):
        """'X to Y' with two known countries is multi-country."""
        info = detect_multi_country("Peru to Chile")

        assert info.is_multi_country is True
        assert info.countries == ["Peru", "Chile"]

    def test_city_country_is_not_multi_country(self):
        """'City, Country' must not be mistaken for two countries."""
        info = detect_multi_country("Lisbon, Portugal")

        assert info.is_multi_country is False
        assert info.countries == ["Lisbon, Portugal"]

    def test_three_countries_in_a_list(self):
        """A list of three known countries is multi-country."""
        info = detect_multi_country("Peru, Chile and Argentina")

        assert info.is_multi_country is True
        assert info.countries == ["Peru", "Chile", "Argentina"]

    def test_same_country_twice_is_not_multi_country(self):
        """Repeating one country should not count as two."""
        assert detect_multi_country("Japan and Japan").is_multi_country is False


# ============================================================================
# TestChildAgeFilter
# ============================================================================


class TestChildAgeFilter:
    """Tests for filter_activities_for_child_ages."""

    def test_no_children_allows_everything(self):
        """Without child ages every activity is allowed."""
        result = filter_activities_for_child_ages(["dive", "nightlife"], [])

        assert result.allowed == ["dive", "nightlife"]
        assert result.restricted == []

    def test_youngest_child_restricts_activities(self):
        """Activities above the youngest child's age are restricted."""
        result = filter_activities_for_child_ages(["dive", "beach", "surf"], [12, 5])

        assert result.allowed == ["beach"]
        assert result.restricted == ["dive", "surf"]
        assert result.warnings[0] == "dive typically requires age 10+ (your youngest is 5)"

    def test_unknown_activity_has_no_minimum(self):
        """Activity types without a minimum age are always allowed."""
        result = filter_activities_for_child_ages(["volcano_trek"], [1])
        assert result.allowed == ["volcano_trek"]


# ============================================================================
# TestModes
# ============================================================================


class TestModes:
    """Tests for trip-mode installation."""

    def test_occasion_maps_to_mode(self):
        """Occasions resolve through the lookup table."""
        assert mode_for_occasion("honeymoon") == "romantic"
        assert mode_for_occasion("solo_adventure") == "solo"
        assert mode_for_occasion("birthday_cake") is None

    def test_apply_mode_installs_profile(self):
        """Installing a mode writes every mode key."""
        prefs = {}
        mode = apply_mode(prefs, "family_vacation")

        assert mode == "family"
        assert prefs["special_mode"] == "family"
        assert "adults_only" in prefs["vibe_filters"]
        assert prefs["mode_flags"] == {"require_family_friendly": True}

    def test_reapplying_replaces_previous_mode(self):
        """A new occasion must not leave the old mode's tags behind."""
        prefs = {}
        apply_mode(prefs, "honeymoon")
        apply_mode(prefs, "backpacking")

        assert prefs["special_mode"] == "backpacker"
        assert "romantic" not in prefs["vibe_boosts"]
        assert prefs["vibe_filters"] == []

    def test_occasion_without_mode_clears_keys(self):
        """An unmapped occasion removes any installed mode."""
        prefs = {}
        apply_mode(prefs, "party")
        assert apply_mode(prefs, "just_because") is None
        assert not any(key in prefs for key in MODE_PREFERENCE_KEYS)


# ============================================================================
# TestBudget
# ============================================================================


class TestBudget:
    """Tests for the nightly budget band."""

    def test_round_half_up(self):
        """Halves round up rather than to even."""
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(2.49) == 2

    def test_band_around_value(self):
        """The band spans a quarter below and above the value."""
        assert budget_band(200) == {"min": 150, "max": 250, "unlimited": False}

    def test_slider_maximum_is_unlimited(self):
        """A pinned slider stores the unlimited sentinel."""
        band = budget_band(1000)

        assert band["unlimited"] is True
        assert band["max"] == 999999

    def test_band_uses_config(self):
        """Band factors come from configuration."""
        config = get_config(budget_band_above=0.5)
        assert budget_band(100, config)["max"] == 150

    def test_ceiling_defaults_to_200(self):
        """Without a band the ceiling falls back to 200."""
        assert budget_ceiling({}) == 200
        assert budget_ceiling({"budget_per_night": {"max": 90}}) == 90
