"""
Trip modes installed by the trip-occasion answer.

A mode is a declarative bundle of boosted and suppressed vibe/activity tags
plus flags that downstream discovery scoring reads. Occasions map onto a
closed set of modes; installing a mode replaces whatever was there before.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional, Literal


logger = logging.getLogger(__name__)


TripMode = Literal[
    "romantic",
    "backpacker",
    "adventure",
    "wellness",
    "family",
    "workation",
    "solo",
    "social_trip",
    "foodie",
    "party",
    "cultural",
    "luxury",
    "nature",
    "photography",
    "active",
]

MODE_PREFERENCE_KEYS = (
    "special_mode",
    "vibe_boosts",
    "vibe_filters",
    "activity_boosts",
    "mode_flags",
)


@dataclass(frozen=True)
class ModeProfile:
    """Tags and flags one mode contributes to preferences."""

    vibe_boosts: List[str]
    activity_boosts: List[str]
    vibe_filters: List[str] = field(default_factory=list)
    flags: Dict[str, Any] = field(default_factory=dict)


MODE_PROFILES: Dict[str, ModeProfile] = {
    "romantic": ModeProfile(
        vibe_boosts=["romantic", "intimate", "luxury", "secluded", "sunset_views"],
        vibe_filters=["party", "backpacker", "hostel", "loud"],
        activity_boosts=["spa_wellness", "sunset_cruise", "private_dinner", "beach"],
        flags={"suggest_upgrade": True},
    ),
    "backpacker": ModeProfile(
        vibe_boosts=["backpacker", "social", "authentic", "local", "adventure"],
        activity_boosts=["hiking", "beach", "cultural", "food_tour", "adventure"],
        flags={
            "accommodation_types": ["hostel", "guesthouse", "budget_hotel"],
            "optimize_for_budget": True,
        },
    ),
    "adventure": ModeProfile(
        vibe_boosts=["adventure", "adrenaline", "nature", "outdoors"],
        activity_boosts=["surf", "diving", "hiking", "adventure", "water_sports"],
    ),
    "wellness": ModeProfile(
        vibe_boosts=["peaceful", "wellness", "nature", "quiet", "relaxed"],
        vibe_filters=["party", "nightlife", "busy"],
        activity_boosts=["spa_wellness", "yoga", "meditation", "hiking", "nature"],
    ),
    "family": ModeProfile(
        vibe_boosts=["family_friendly", "safe", "spacious", "convenient"],
        vibe_filters=["adults_only", "party", "nightlife"],
        activity_boosts=["beach", "wildlife", "cultural", "swimming", "theme_park"],
        flags={"require_family_friendly": True},
    ),
    "workation": ModeProfile(
        vibe_boosts=["wifi", "coworking", "quiet", "cafes", "productive"],
        activity_boosts=["cultural", "food_tour", "hiking", "beach"],
        flags={
            "accommodation_requirements": ["wifi", "workspace", "quiet"],
            "require_workspace": True,
        },
    ),
    "solo": ModeProfile(
        vibe_boosts=["social", "safe", "walkable", "friendly", "backpacker"],
        activity_boosts=["food_tour", "cultural", "hiking", "beach", "nightlife"],
        flags={"prioritize_safety": True},
    ),
    "social_trip": ModeProfile(
        vibe_boosts=["social", "lively", "nightlife", "trendy", "fun"],
        activity_boosts=["nightlife", "beach", "spa_wellness", "food_tour", "adventure"],
        flags={"prioritize_group_activities": True},
    ),
    "foodie": ModeProfile(
        vibe_boosts=["foodie", "authentic", "local", "markets", "dining"],
        activity_boosts=["food_tour", "cooking_class", "wine_tasting", "cultural"],
        flags={"prioritize_dining": True, "include_michelin_options": True},
    ),
    "party": ModeProfile(
        vibe_boosts=["party", "nightlife", "lively", "social", "fun"],
        vibe_filters=["quiet", "peaceful", "family_friendly"],
        activity_boosts=["nightlife", "beach", "full_moon_party", "adventure"],
    ),
    "cultural": ModeProfile(
        vibe_boosts=["authentic", "cultural", "historic", "local", "traditional"],
        activity_boosts=["cultural", "temple_visit", "food_tour", "cooking_class", "photography"],
        flags={"prioritize_authenticity": True},
    ),
    "luxury": ModeProfile(
        vibe_boosts=["luxury", "exclusive", "upscale", "sophisticated", "private"],
        activity_boosts=["spa_wellness", "wine_tasting", "golf", "sailing", "private_tour"],
        flags={"suggest_upgrade": True, "include_michelin_options": True},
    ),
    "nature": ModeProfile(
        vibe_boosts=["nature", "eco", "wildlife", "scenic", "outdoors"],
        activity_boosts=["hiking", "wildlife", "snorkel", "kayaking", "photography"],
        flags={"prioritize_eco_friendly": True},
    ),
    "photography": ModeProfile(
        vibe_boosts=["scenic", "photogenic", "unique", "authentic", "diverse"],
        activity_boosts=["photography", "cultural", "wildlife", "hiking", "sunrise_sunset"],
        flags={"prioritize_golden_hour": True},
    ),
    "active": ModeProfile(
        vibe_boosts=["active", "outdoors", "adventure", "fitness"],
        activity_boosts=["hiking", "surf", "cycling", "rock_climbing", "water_sports"],
    ),
}

OCCASION_TO_MODE: Dict[str, str] = {
    "honeymoon": "romantic",
    "anniversary": "romantic",
    "backpacking": "backpacker",
    "gap_year": "backpacker",
    "budget_adventure": "backpacker",
    "adventure": "adventure",
    "extreme_sports": "adventure",
    "wellness": "wellness",
    "retreat": "wellness",
    "family": "family",
    "family_vacation": "family",
    "workation": "workation",
    "remote_work": "workation",
    "digital_nomad": "workation",
    "solo": "solo",
    "solo_travel": "solo",
    "solo_adventure": "solo",
    "girls_trip": "social_trip",
    "guys_trip": "social_trip",
    "friends_trip": "social_trip",
    "foodie": "foodie",
    "culinary": "foodie",
    "food_exploration": "foodie",
    "party": "party",
    "bachelor": "party",
    "bachelorette": "party",
    "celebration": "party",
    "cultural": "cultural",
    "immersion": "cultural",
    "educational": "cultural",
    "luxury": "luxury",
    "splurge": "luxury",
    "special_occasion": "luxury",
    "nature": "nature",
    "eco": "nature",
    "wildlife": "nature",
    "photography": "photography",
    "photo_trip": "photography",
    "sports": "active",
    "active": "active",
    "fitness": "active",
}


def mode_for_occasion(occasion_id: str) -> Optional[str]:
    return OCCASION_TO_MODE.get(occasion_id)


def clear_mode(preferences: Dict[str, Any]) -> None:
    for key in MODE_PREFERENCE_KEYS:
        preferences.pop(key, None)


def apply_mode(preferences: Dict[str, Any], occasion_id: str) -> Optional[str]:
    """
    Install the mode for a trip occasion into preferences.

    Any previously installed mode is removed first, so re-answering the
    occasion never leaves tags from an earlier choice behind.

    Returns:
        The installed mode, or None when the occasion has no mode
    """
    clear_mode(preferences)
    mode = mode_for_occasion(occasion_id)
    if mode is None:
        return None

    profile = MODE_PROFILES[mode]
    preferences["special_mode"] = mode
    preferences["vibe_boosts"] = list(profile.vibe_boosts)
    preferences["vibe_filters"] = list(profile.vibe_filters)
    preferences["activity_boosts"] = list(profile.activity_boosts)
    preferences["mode_flags"] = dict(profile.flags)

    logger.info(f"[orchestrator] Mode installed | occasion={occasion_id} | mode={mode}")
    return mode
