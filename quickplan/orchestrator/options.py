"""
Option generators for the question registry.

Each generator takes the session state and a PlanningContext and returns
the input_config for one field's question. Generators only read state.
"""

import logging
from datetime import date, timedelta
from typing import Dict, Any, List, Optional

from quickplan.orchestrator.context import PlanningContext
from quickplan.orchestrator.detection import ACTIVITY_MIN_AGES, detect_multi_country
from quickplan.orchestrator.budget import budget_ceiling
from quickplan.orchestrator.prompts import destination_name
from quickplan.orchestrator.schemas import SessionState
from quickplan.orchestrator.splits import generate_split_options, get_split_advice
from quickplan.orchestrator.suggestions import UNIVERSAL_ACTIVITIES


logger = logging.getLogger(__name__)


# =============================================================================
# Labels
# =============================================================================

SKILL_ACTIVITY_LABELS: Dict[str, str] = {
    "surf": "Surfing",
    "dive": "Scuba Diving",
    "golf": "Golf",
}

CUISINE_LABELS: Dict[str, str] = {
    "italian": "Italian",
    "steakhouse": "Steakhouse",
    "sushi": "Sushi/Japanese",
    "fine_dining": "Fine Dining",
    "seafood": "Seafood",
    "local": "Local",
    "mexican": "Mexican",
    "asian": "Asian",
    "mediterranean": "Mediterranean",
    "casual": "Casual",
}

ACTIVITY_LABELS: Dict[str, str] = {
    "surf": "Surfing",
    "snorkel": "Snorkeling",
    "dive": "Scuba Diving",
    "swimming": "Swimming",
    "water_sports": "Water Sports",
    "wildlife": "Wildlife",
    "nature": "Nature",
    "hiking": "Hiking",
    "adventure": "Adventure",
    "cultural": "Cultural",
    "food_tour": "Food Tours",
    "cooking_class": "Cooking Classes",
    "nightlife": "Nightlife",
    "beach": "Beach",
    "beach_relaxation": "Beach Relaxation",
    "spa_wellness": "Spa & Wellness",
    "yoga": "Yoga",
    "meditation": "Meditation",
    "golf": "Golf",
    "shopping": "Shopping",
    "photography": "Photography",
    "wine_tasting": "Wine Tasting",
    "music_festival": "Music Festivals",
    "temple_visit": "Temple Visits",
    "full_moon_party": "Full Moon Party",
    "rock_climbing": "Rock Climbing",
    "kayaking": "Kayaking",
    "paddleboarding": "Paddleboarding",
    "fishing": "Fishing",
    "sailing": "Sailing",
    "cycling": "Cycling",
    "skiing": "Skiing",
    "snowboarding": "Snowboarding",
    "horseback": "Horseback Riding",
    "boat": "Boat Tours",
    "kids_activities": "Kids Activities",
    "water_park": "Water Parks",
}


def activity_label(activity_type: str) -> str:
    """Display label for an activity type; unknown types become Title Case."""
    if activity_type in ACTIVITY_LABELS:
        return ACTIVITY_LABELS[activity_type]
    return " ".join(word.capitalize() for word in activity_type.split("_"))


def cuisine_label(cuisine: str) -> str:
    return CUISINE_LABELS.get(cuisine, cuisine)


# =============================================================================
# Shared Lookups
# =============================================================================


def destination_raw(preferences: Dict[str, Any]) -> str:
    context = preferences.get("destination_context") or {}
    return context.get("raw_input") or context.get("canonical_name") or ""


def activity_types(preferences: Dict[str, Any]) -> List[str]:
    return [activity["type"] for activity in preferences.get("selected_activities") or []]


def skill_activities(preferences: Dict[str, Any]) -> List[str]:
    return [t for t in activity_types(preferences) if t in SKILL_ACTIVITY_LABELS]


def trip_length(state: SessionState, ctx: PlanningContext) -> int:
    return state.trip_nights or ctx.config.default_trip_length


def travel_month(preferences: Dict[str, Any]) -> int:
    start = preferences.get("start_date")
    if start:
        return date.fromisoformat(str(start)[:10]).month
    return date.today().month


def hotel_candidates(state: SessionState, area_id: str) -> List[Dict[str, Any]]:
    return state.discovered.hotels.get(area_id) or []


def next_hotel_area(state: SessionState) -> Optional[Dict[str, Any]]:
    """First selected area with candidates and no pick (or skip) recorded."""
    selected = state.preferences.get("selected_hotels") or {}
    for area in state.selected_areas:
        if area.get("id") in selected:
            continue
        if hotel_candidates(state, area.get("id")):
            return area
    return None


def next_restaurant_cuisine(state: SessionState) -> Optional[str]:
    selected = state.preferences.get("selected_restaurants") or {}
    for cuisine in state.preferences.get("cuisine_preferences") or []:
        if cuisine in selected:
            continue
        if state.discovered.restaurants.get(cuisine):
            return cuisine
    return None


def next_experience_activity(state: SessionState) -> Optional[str]:
    selected = state.preferences.get("selected_experiences") or {}
    for activity in activity_types(state.preferences):
        if activity in selected:
            continue
        if state.discovered.experiences.get(activity):
            return activity
    return None


def _area_refs(state: SessionState) -> List[Dict[str, Any]]:
    return [{"id": area.get("id"), "name": area.get("name")} for area in state.selected_areas]


def _yes_no(yes_icon: str) -> Dict[str, Any]:
    return {
        "options": [
            {"id": "no", "label": "No", "icon": "✗"},
            {"id": "yes", "label": "Yes", "icon": yes_icon},
        ]
    }


# =============================================================================
# Trip Basics
# =============================================================================


def destination_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    return {}


def dates_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    today = date.today()
    return {
        "min_date": today.isoformat(),
        "max_date": (today + timedelta(days=365)).isoformat(),
        "min_nights": ctx.config.min_nights,
        "max_nights": ctx.config.max_nights,
    }


def party_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    return {}


def trip_occasion_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    prefs = state.preferences
    adults = prefs.get("adults") or 2
    children = prefs.get("children") or 0
    is_solo = adults == 1 and children == 0
    is_couple = adults == 2 and children == 0
    has_kids = children > 0
    is_group = adults >= 4

    options = [
        {"id": "vacation", "label": "Regular Vacation", "icon": "🏖️", "description": "Just getting away!"},
    ]
    if is_couple:
        options.append({"id": "honeymoon", "label": "Honeymoon", "icon": "💕", "description": "Romantic getaway for newlyweds"})
        options.append({"id": "anniversary", "label": "Anniversary", "icon": "🎉", "description": "Celebrating your relationship"})
    if is_solo:
        options.append({"id": "solo_adventure", "label": "Solo Adventure", "icon": "🎒", "description": "Exploring on your own"})
    if is_group and not has_kids:
        options.append({"id": "bachelor", "label": "Bachelor/Bachelorette", "icon": "🎊", "description": "Pre-wedding celebration"})
        options.append({"id": "girls_trip", "label": "Girls' Trip", "icon": "👯", "description": "Fun with the ladies"})
        options.append({"id": "guys_trip", "label": "Guys' Trip", "icon": "🍻", "description": "Fun with the boys"})
    if has_kids or is_group:
        options.append({"id": "family_reunion", "label": "Family Reunion", "icon": "👨‍👩‍👧‍👦", "description": "Getting the family together"})
    options.extend(
        [
            {"id": "wedding", "label": "Attending Wedding", "icon": "💒", "description": "Guest at a destination wedding"},
            {"id": "workation", "label": "Work + Travel", "icon": "💻", "description": "Remote work while traveling"},
            {"id": "wellness", "label": "Wellness Retreat", "icon": "🧘", "description": "Focus on health and relaxation"},
        ]
    )
    return {
        "options": options[:8],
        "allow_custom_text": True,
        "custom_text_placeholder": "Other occasion...",
    }


def traveling_with_pets_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    return _yes_no("🐾")


def pet_type_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    return {
        "options": [
            {"id": "small_dog", "label": "Small dog", "icon": "🐕", "description": "Under 25 lbs"},
            {"id": "medium_dog", "label": "Medium dog", "icon": "🐕", "description": "25-50 lbs"},
            {"id": "large_dog", "label": "Large dog", "icon": "🐕", "description": "Over 50 lbs"},
            {"id": "cat", "label": "Cat", "icon": "🐱"},
            {"id": "other_pet", "label": "Other", "icon": "🐾"},
        ]
    }


def accessibility_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    return _yes_no("♿")


def accessibility_type_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    return {
        "options": [
            {"id": "wheelchair", "label": "Wheelchair accessible", "icon": "♿"},
            {"id": "ground_floor", "label": "Ground floor room", "icon": "1️⃣"},
            {"id": "elevator", "label": "Elevator required", "icon": "🛗"},
            {"id": "no_stairs", "label": "No stairs", "icon": "🚫"},
            {"id": "grab_bars", "label": "Grab bars in bathroom", "icon": "🚿"},
            {"id": "roll_in_shower", "label": "Roll-in shower", "icon": "🚿"},
            {"id": "wide_doorways", "label": "Wide doorways", "icon": "🚪"},
        ],
        "allow_custom_text": True,
        "custom_text_placeholder": "Other accessibility needs...",
    }


# =============================================================================
# Budget and Accommodation
# =============================================================================


def budget_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    config = ctx.config
    return {
        "min": config.budget_min,
        "max": config.budget_max,
        "step": config.budget_step,
        "default_value": config.budget_default,
        "show_min_max": True,
        "max_means_unlimited": True,
    }


def accommodation_type_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    prefs = state.preferences
    budget = budget_ceiling(prefs)
    occasion = prefs.get("trip_occasion")
    is_group = (prefs.get("adults") or 2) >= 4
    has_kids = state.has_kids()

    options = []
    if budget <= 100:
        options.append({"id": "hostel", "label": "Hostel", "icon": "🛏️", "description": "Social, budget-friendly"})
    options.append({"id": "hotel", "label": "Hotel", "icon": "🏨", "description": "Standard hotel stay"})
    if is_group or has_kids:
        options.append({"id": "vacation_rental", "label": "Vacation Rental", "icon": "🏠", "description": "Airbnb, VRBO, whole homes"})
    if is_group and budget >= 200:
        options.append({"id": "villa", "label": "Private Villa", "icon": "🏡", "description": "Private villa for the group"})
    if occasion in ("honeymoon", "anniversary", "wellness") or budget >= 300:
        options.append({"id": "resort", "label": "Resort", "icon": "🌴", "description": "Full-service resort experience"})
    if occasion in ("honeymoon", "anniversary") or budget >= 200:
        options.append({"id": "boutique", "label": "Boutique Hotel", "icon": "✨", "description": "Unique, design-focused"})
    options.append({"id": "eco_lodge", "label": "Eco Lodge", "icon": "🌿", "description": "Sustainable, nature-focused"})

    return {"options": options[:6]}


def sustainability_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    return {
        "options": [
            {"id": "standard", "label": "Not a priority", "icon": "✓", "description": "I'll take the best option"},
            {"id": "eco_conscious", "label": "Eco-conscious", "icon": "🌱", "description": "Prefer eco-friendly when available"},
            {"id": "eco_focused", "label": "Eco-focused", "icon": "🌍", "description": "Sustainability is a top priority"},
        ]
    }


# =============================================================================
# Activities and Style
# =============================================================================


def activities_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    prefs = state.preferences
    child_ages = prefs.get("child_ages") or []
    youngest = state.youngest_child_age() or 0

    cached = None
    if ctx.suggestions is not None:
        cached = ctx.suggestions.cached_activities(destination_name(prefs))
    options = cached or [dict(option) for option in UNIVERSAL_ACTIVITIES]

    # Not filtered out: parents may do these while the kids do something else
    if state.has_kids() and 0 < youngest < 12:
        for option in options:
            min_age = ACTIVITY_MIN_AGES.get(option["id"], 0)
            if youngest < min_age:
                option["description"] = f"Usually {min_age}+ (great for parent time!)"

    has_nightlife = any(option["id"] == "nightlife" for option in options)
    if state.has_kids():
        kids_options = [
            {"id": "kids_activities", "label": "Kids Activities", "icon": "🎠", "description": "Kid-friendly attractions"},
        ]
        if any(age >= 8 for age in child_ages):
            kids_options.append({"id": "water_park", "label": "Water Parks", "icon": "🎢", "description": "Fun for the whole family"})
        options = kids_options + options
        if not has_nightlife:
            options.append({"id": "nightlife", "label": "Nightlife", "icon": "🎉", "description": "Date night while kids at club"})
    elif not has_nightlife:
        options.append({"id": "nightlife", "label": "Nightlife", "icon": "🎉"})

    return {
        "options": options,
        "allow_custom_text": True,
        "custom_text_placeholder": "Add another activity...",
        "field": "activities",
        "allow_notes": True,
    }


def pace_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    return {
        "options": [
            {"id": "chill", "label": "Chill", "icon": "🧘", "description": "Lots of downtime, few planned activities"},
            {"id": "balanced", "label": "Balanced", "icon": "⚖️", "description": "Mix of activities and relaxation"},
            {"id": "packed", "label": "Action-packed", "icon": "🚀", "description": "Something every day, make the most of it"},
        ]
    }


def vibe_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    return {
        "custom_text_placeholder": 'e.g., "Must see a waterfall" or "No early mornings"',
        "allow_custom_text": True,
    }


def activity_skill_level_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    skills = skill_activities(state.preferences)
    if not skills:
        return {"options": []}

    names = [SKILL_ACTIVITY_LABELS[t] for t in skills]
    subject = names[0].lower() if len(names) == 1 else "these activities"
    return {
        "options": [
            {"id": "beginner", "label": "Beginner", "icon": "🌱", "description": f"New to {subject}"},
            {"id": "intermediate", "label": "Intermediate", "icon": "🌿", "description": "Comfortable with the basics"},
            {"id": "advanced", "label": "Advanced", "icon": "🌲", "description": "Looking for a challenge"},
        ],
        "activity_names": ", ".join(names),
    }


def communities_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    prefs = state.preferences
    budget = budget_ceiling(prefs)
    has_kids = state.has_kids()
    is_solo = prefs.get("adults") == 1 and not has_kids

    options: List[Dict[str, Any]] = []
    if ctx.suggestions is not None:
        options.extend(ctx.suggestions.cached_communities(destination_name(prefs)) or [])

    def add(option_id: str, label: str, icon: str, description: str) -> None:
        if not any(option["id"] == option_id for option in options):
            options.append({"id": option_id, "label": label, "icon": icon, "description": description})

    if has_kids:
        add("familytravel", "r/familytravel", "👨‍👩‍👧", "Family trip tips")
        add("travelwithkids", "r/travelwithkids", "🧒", "Traveling with children")
    if is_solo:
        add("solotravel", "r/solotravel", "🎒", "Solo traveler tips")

    if budget >= 1000 and not has_kids:
        add("fattravel", "r/fattravel", "👑", "Ultra-luxury travel")
        add("luxurytravel", "r/luxurytravel", "💎", "High-end experiences")
    elif budget >= 400 and not has_kids:
        add("luxurytravel", "r/luxurytravel", "💎", "High-end experiences")
    elif budget <= 150:
        add("budgettravel", "r/budgettravel", "💰", "Money-saving tips")

    add("travel", "r/travel", "✈️", "General travel advice")
    add("TravelHacks", "r/TravelHacks", "💡", "Travel tips & tricks")

    return {"options": options[:8]}


# =============================================================================
# Areas, Split and Hotels
# =============================================================================


def areas_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    advice = get_split_advice(trip_length(state, ctx))
    return {
        "area_candidates": list(state.discovered.areas),
        "max_selection": advice.max_bases,
    }


def split_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    areas = state.selected_areas
    nights = trip_length(state, ctx)
    return {
        "split_options": [split.model_dump() for split in generate_split_options(areas, nights)],
        "areas": areas,
        "trip_length": nights,
    }


def hotel_preferences_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    options = [
        {"id": "pool", "label": "Pool", "icon": "🏊"},
        {"id": "beach_access", "label": "Beach Access", "icon": "🏖️"},
        {"id": "spa", "label": "Spa", "icon": "💆"},
        {"id": "gym", "label": "Gym", "icon": "🏋️"},
        {"id": "restaurant", "label": "On-site Restaurant", "icon": "🍽️"},
        {"id": "all_inclusive", "label": "All-Inclusive", "icon": "🎫"},
        {"id": "boutique", "label": "Boutique/Unique", "icon": "✨"},
        {"id": "quiet", "label": "Quiet/Peaceful", "icon": "🧘"},
    ]
    if state.has_kids():
        options.extend(
            [
                {"id": "family", "label": "Family-Friendly", "icon": "👨‍👩‍👧"},
                {"id": "kids_club", "label": "Kids Club", "icon": "🎠"},
                {"id": "kids_pool", "label": "Kids Pool", "icon": "🏊"},
            ]
        )
    else:
        options.append({"id": "adults_only", "label": "Adults Only", "icon": "🍷"})

    return {
        "options": options,
        "allow_custom_text": True,
        "custom_text_placeholder": "Anything else important?",
        "field": "hotels",
        "allow_notes": True,
    }


def hotels_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    area = next_hotel_area(state)
    if area is None:
        areas = state.selected_areas
        return {
            "candidates": [],
            "area_name": areas[0].get("name") if areas else "your destination",
            "area_id": None,
        }
    return {
        "candidates": hotel_candidates(state, area.get("id")),
        "area_name": area.get("name"),
        "area_id": area.get("id"),
    }


# =============================================================================
# Dining and Experiences
# =============================================================================


def dining_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    return {
        "options": [
            {"id": "plan", "label": "Help me find restaurants", "description": "I'll show you the best spots near your hotels"},
            {"id": "none", "label": "Skip dining", "description": "We'll figure it out ourselves"},
        ]
    }


def dietary_restrictions_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    return {
        "options": [
            {"id": "none", "label": "No restrictions", "icon": "✓"},
            {"id": "vegetarian", "label": "Vegetarian", "icon": "🥬"},
            {"id": "vegan", "label": "Vegan", "icon": "🌱"},
            {"id": "halal", "label": "Halal", "icon": "☪️"},
            {"id": "kosher", "label": "Kosher", "icon": "✡️"},
            {"id": "gluten_free", "label": "Gluten-free", "icon": "🌾"},
            {"id": "nut_allergy", "label": "Nut allergy", "icon": "🥜"},
            {"id": "seafood_allergy", "label": "Seafood allergy", "icon": "🦐"},
            {"id": "dairy_free", "label": "Dairy-free", "icon": "🥛"},
        ],
        "allow_custom_text": True,
        "custom_text_placeholder": "Other dietary needs...",
        "field": "dining",
        "allow_notes": True,
    }


def cuisine_preferences_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    return {
        "options": [
            {"id": "italian", "label": "Italian", "icon": "🍝"},
            {"id": "steakhouse", "label": "Steakhouse", "icon": "🥩"},
            {"id": "sushi", "label": "Sushi/Japanese", "icon": "🍣"},
            {"id": "fine_dining", "label": "Fine Dining", "icon": "🍽️"},
            {"id": "seafood", "label": "Seafood", "icon": "🦞"},
            {"id": "local", "label": "Local Cuisine", "icon": "🍲"},
            {"id": "mexican", "label": "Mexican", "icon": "🌮"},
            {"id": "asian", "label": "Asian Fusion", "icon": "🥢"},
            {"id": "mediterranean", "label": "Mediterranean", "icon": "🫒"},
            {"id": "casual", "label": "Casual/Pub", "icon": "🍔"},
        ],
        "allow_custom_text": True,
        "custom_text_placeholder": "Other cuisine type...",
        "field": "dining",
        "allow_notes": True,
    }


def restaurants_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    cuisine = next_restaurant_cuisine(state)
    if cuisine is None:
        return {"candidates": [], "cuisine_type": None, "cuisine_label": "", "areas": []}
    return {
        "candidates": state.discovered.restaurants.get(cuisine) or [],
        "cuisine_type": cuisine,
        "cuisine_label": cuisine_label(cuisine),
        "areas": _area_refs(state),
    }


def experiences_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    activity = next_experience_activity(state)
    if activity is None:
        return {"candidates": [], "activity_type": None, "activity_label": "", "areas": []}
    return {
        "candidates": state.discovered.experiences.get(activity) or [],
        "activity_type": activity,
        "activity_label": activity_label(activity),
        "areas": _area_refs(state),
    }


# =============================================================================
# Smart Follow-ups
# =============================================================================


def surfing_details_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    prefs = state.preferences
    season_note = ""
    surf_id = ctx.advisories.detect_surf_destination(destination_raw(prefs))
    if surf_id:
        season_note = ctx.advisories.surf_season_advice(surf_id, travel_month(prefs)) or ""

    return {
        "options": [
            {"id": "never", "label": "Never surfed - want lessons", "icon": "🎓", "description": "I'll find beginner-friendly spots and schools"},
            {"id": "beginner", "label": "Beginner - can catch waves", "icon": "🌊", "description": "Comfortable on small waves, want to improve"},
            {"id": "intermediate", "label": "Intermediate", "icon": "🏄", "description": "Can handle 4-6ft waves, looking for good breaks"},
            {"id": "advanced", "label": "Advanced", "icon": "🔥", "description": "Experienced surfer, want challenging waves"},
        ],
        "season_note": season_note,
        "allow_custom_text": True,
        "custom_text_placeholder": "Tell me more (e.g., 'want uncrowded spots', 'need board rental')",
    }


def child_needs_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    youngest = state.youngest_child_age()
    if youngest is None:
        youngest = 5

    options = [
        {"id": "none", "label": "Nothing special!", "icon": "✓", "description": "They're easy travelers"},
        {"id": "animal_lover", "label": "Loves animals!", "icon": "🐾", "description": "Would love to pet/see animals"},
    ]
    if youngest < 6:
        options.append({"id": "needs_naps", "label": "Still needs naps", "icon": "😴", "description": "Need midday breaks"})
        options.append({"id": "picky_eater", "label": "Picky eater", "icon": "🍽️", "description": "Limited food preferences"})
    if youngest < 10:
        options.append({"id": "scared_heights", "label": "Afraid of heights", "icon": "😰", "description": "Skip high platforms/views"})
        options.append({"id": "scared_water", "label": "Nervous in water", "icon": "🌊", "description": "Keep water activities gentle"})
    if ctx.advisories.detect_theme_park(destination_raw(state.preferences)):
        options.append({"id": "scared_dark_rides", "label": "Scared of dark rides", "icon": "🌑", "description": "Avoid indoor dark attractions"})
        options.append({"id": "scared_loud", "label": "Sensitive to loud noises", "icon": "🔊", "description": "Skip fireworks/loud shows"})

    return {
        "options": options,
        "allow_custom_text": True,
        "custom_text_placeholder": "Anything else? (e.g., 'loves dinosaurs', 'needs wheelchair-accessible stroller paths')",
        "field": "party",
        "allow_notes": True,
    }


def workation_needs_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    return {
        "options": [
            {"id": "basic", "label": "Basic WiFi", "icon": "📶", "description": "Email and browsing (10+ mbps)"},
            {"id": "fast", "label": "Fast WiFi", "icon": "📡", "description": "Video calls and streaming (50+ mbps)"},
            {"id": "excellent", "label": "Excellent WiFi", "icon": "🚀", "description": "Dev work, large uploads (100+ mbps)"},
        ],
        "allow_custom_text": True,
        "custom_text_placeholder": "Other needs? (e.g., 'need co-working space', 'quiet workspace essential')",
    }


def multi_country_logistics_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    info = detect_multi_country(destination_raw(state.preferences))
    tips_text = "\n".join(f"{idx}. {tip}" for idx, tip in enumerate(info.logistics_tips, start=1))
    return {
        "options": [
            {"id": "got_it", "label": "Got it, thanks!", "icon": "✓", "description": "I'll keep this in mind"},
            {"id": "help_transport", "label": "Help with transport", "icon": "✈️", "description": "Show me options between countries"},
            {"id": "visa_check", "label": "Need visa info", "icon": "🛂", "description": "I'm not sure about visa requirements"},
        ],
        "info_text": tips_text,
        "countries": info.countries,
        "allow_custom_text": True,
        "custom_text_placeholder": "Any questions about traveling between countries?",
    }


def theme_park_preferences_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    park_id = ctx.advisories.detect_theme_park(destination_raw(state.preferences))
    options = [
        {"id": "character_dining", "label": "Character dining", "icon": "🍽️", "description": "Meet characters during meals"},
        {"id": "thrill_seeker", "label": "Thrill rides focus", "icon": "🎢", "description": "Prioritize roller coasters"},
        {"id": "relaxed_pace", "label": "Relaxed pace", "icon": "🐢", "description": "No rushing, enjoy the atmosphere"},
    ]
    if state.preferences.get("child_ages"):
        options.append({"id": "meet_characters", "label": "Meet characters", "icon": "🤝", "description": "Photos with favorite characters"})
        options.append({"id": "avoid_scary", "label": "Avoid scary rides", "icon": "👻", "description": "Skip frightening attractions"})

    config: Dict[str, Any] = {
        "options": options,
        "allow_custom_text": True,
        "custom_text_placeholder": "Any specific must-dos? (e.g., 'must ride Space Mountain', 'kids want to meet Elsa')",
    }
    reminders = ctx.advisories.theme_park_booking_reminders(park_id) if park_id else []
    if reminders:
        config["info_text"] = ". ".join(reminders)
    return config


def user_notes_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    return {
        "placeholder": (
            "Any special requests, preferences, or context? (e.g., 'celebrating 50th birthday', "
            "'need restaurants with high chairs', 'allergic to shellfish')"
        ),
        "multiline": True,
    }


SATISFACTION_REASONS: List[Dict[str, str]] = [
    {"id": "wrong_areas", "label": "Wrong areas"},
    {"id": "wrong_vibe", "label": "Not my vibe"},
    {"id": "too_packed", "label": "Too packed"},
    {"id": "too_chill", "label": "Too chill"},
    {"id": "hotel_wrong", "label": "Hotels aren't right"},
    {"id": "dining_wrong", "label": "Dining isn't right"},
    {"id": "too_touristy", "label": "Too touristy"},
    {"id": "missing_activity", "label": "Missing something"},
    {"id": "surf_days_wrong", "label": "Surf days are off"},
    {"id": "budget_exceeded", "label": "Over budget"},
    {"id": "other", "label": "Something else"},
]


def satisfaction_options(state: SessionState, ctx: PlanningContext) -> Dict[str, Any]:
    return {
        "reasons": [dict(reason) for reason in SATISFACTION_REASONS],
        "allow_custom_text": True,
    }
