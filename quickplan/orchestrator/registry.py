"""
Question registry.

One declarative FieldQuestion per field: prompt, input modality, option
generator, required/inferable flags and an optional visibility predicate.
Prompts are either static text or a callable evaluated at
materialization time against the state and the freshly built options.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Any, Optional, Union

from quickplan.orchestrator import options as opts
from quickplan.orchestrator.errors import UnknownFieldError
from quickplan.orchestrator.inference import INFERENCE_RULES
from quickplan.orchestrator.context import PlanningContext
from quickplan.orchestrator.prompts import pick_template
from quickplan.orchestrator.schemas import SessionState
from quickplan.orchestrator.splits import get_split_advice


logger = logging.getLogger(__name__)

OptionBuilder = Callable[[SessionState, PlanningContext], Dict[str, Any]]
MessageBuilder = Callable[[SessionState, Dict[str, Any], PlanningContext], str]


@dataclass(frozen=True)
class FieldQuestion:
    """Static configuration for one field's question."""

    field: str
    message: Union[str, MessageBuilder]
    input_type: str
    options: OptionBuilder
    required: bool = False
    condition: Optional[Callable[[SessionState], bool]] = None

    @property
    def can_infer(self) -> bool:
        return self.field in INFERENCE_RULES

    def render_message(
        self, state: SessionState, input_config: Dict[str, Any], ctx: PlanningContext
    ) -> str:
        if callable(self.message):
            return self.message(state, input_config, ctx)
        return self.message

    def is_visible(self, state: SessionState) -> bool:
        return self.condition is None or self.condition(state)


# =============================================================================
# Dynamic Prompts
# =============================================================================


def _greeting(state: SessionState, config: Dict[str, Any], ctx: PlanningContext) -> str:
    return pick_template("greeting")


def _celebrating(state: SessionState, config: Dict[str, Any], ctx: PlanningContext) -> str:
    return pick_template("celebrating")


def _areas_message(state: SessionState, config: Dict[str, Any], ctx: PlanningContext) -> str:
    message = pick_template("found_areas")
    nights = opts.trip_length(state, ctx)
    if nights > 4:
        message = f"{message}\n\n💡 **Trip tip**: {get_split_advice(nights).advice}"
    return message


def _skill_level_message(state: SessionState, config: Dict[str, Any], ctx: PlanningContext) -> str:
    names = [opts.SKILL_ACTIVITY_LABELS[t] for t in opts.skill_activities(state.preferences)]
    if len(names) == 1:
        return f"What's your {names[0]} experience level? This helps me find the right spots for you."
    if names:
        return f"For {' and '.join(names)} - what's your overall experience level?"
    return "What's your experience level?"


def _hotels_message(state: SessionState, config: Dict[str, Any], ctx: PlanningContext) -> str:
    area_name = config.get("area_name") or "your selected area"
    selected_count = len(state.preferences.get("selected_hotels") or {})
    total = sum(1 for area in state.selected_areas if opts.hotel_candidates(state, area.get("id")))
    if total > 1:
        return f"Now for {area_name} ({selected_count + 1} of {total}). Which hotel catches your eye?"
    return f"I found some great hotels in {area_name}. Which one catches your eye?"


def _restaurants_message(state: SessionState, config: Dict[str, Any], ctx: PlanningContext) -> str:
    label = config.get("cuisine_label") or "your cuisine"
    selected_count = len(state.preferences.get("selected_restaurants") or {})
    total = len(state.preferences.get("cuisine_preferences") or [])
    if total > 1:
        return (
            f"Here are the best {label} restaurants near your hotels "
            f"({selected_count + 1} of {total} cuisine types). Pick your favorites!"
        )
    return f"Here are the best {label} restaurants near your hotels. Pick the ones you'd like to try!"


def _experiences_message(state: SessionState, config: Dict[str, Any], ctx: PlanningContext) -> str:
    label = config.get("activity_label") or "activity"
    return f"Here are some top-rated {label} experiences. Pick any that look fun!"


# =============================================================================
# Registry
# =============================================================================


FIELD_QUESTIONS: Dict[str, FieldQuestion] = {
    q.field: q
    for q in [
        FieldQuestion("destination", _greeting, "destination", opts.destination_options, required=True),
        FieldQuestion(
            "dates",
            "When are you thinking of going? Pick your dates or tell me roughly how long you want to be there.",
            "date-range",
            opts.dates_options,
            required=True,
        ),
        FieldQuestion("party", "Who's coming along on this adventure?", "party", opts.party_options, required=True),
        FieldQuestion(
            "trip_occasion",
            "What's the occasion for this trip? This helps me tailor my recommendations!",
            "chips",
            opts.trip_occasion_options,
        ),
        FieldQuestion("traveling_with_pets", "Traveling with any pets? 🐕", "chips", opts.traveling_with_pets_options),
        FieldQuestion(
            "pet_type",
            "What kind of pet? 🐾",
            "chips",
            opts.pet_type_options,
            condition=lambda state: state.preferences.get("has_pets") is True,
        ),
        FieldQuestion("accessibility", "Any accessibility needs?", "chips", opts.accessibility_options),
        FieldQuestion(
            "accessibility_type",
            "What accessibility features do you need?",
            "chips-multi",
            opts.accessibility_type_options,
            condition=lambda state: state.preferences.get("has_accessibility_needs") is True,
        ),
        FieldQuestion("budget", "What's your hotel budget **per night**?", "slider", opts.budget_options, required=True),
        FieldQuestion(
            "accommodation_type",
            "What type of accommodation are you looking for?",
            "chips",
            opts.accommodation_type_options,
        ),
        FieldQuestion(
            "sustainability_preference",
            "How important is eco-friendly/sustainable travel to you?",
            "chips",
            opts.sustainability_options,
        ),
        FieldQuestion(
            "communities",
            "Which Reddit communities should I search? I've picked some based on your destination and trip style.",
            "chips-multi",
            opts.communities_options,
            required=True,
        ),
        FieldQuestion(
            "pace",
            "How do you like to travel? Action-packed or more relaxed?",
            "chips",
            opts.pace_options,
            required=True,
        ),
        FieldQuestion(
            "activities",
            "What kind of activities are you excited about? Pick all that sound fun!",
            "chips-multi",
            opts.activities_options,
            required=True,
        ),
        FieldQuestion(
            "vibe",
            "Any must-dos or hard passes for this trip? Things you absolutely want or definitely don't want.",
            "text",
            opts.vibe_options,
        ),
        FieldQuestion(
            "activity_skill_level",
            _skill_level_message,
            "chips",
            opts.activity_skill_level_options,
            condition=lambda state: bool(opts.skill_activities(state.preferences)),
        ),
        FieldQuestion("areas", _areas_message, "areas", opts.areas_options, required=True),
        FieldQuestion(
            "split",
            "How do you want to split your time between these areas?",
            "split",
            opts.split_options,
            required=True,
        ),
        FieldQuestion(
            "hotel_preferences",
            "What's important to you in a hotel? Pick all that apply.",
            "chips-multi",
            opts.hotel_preferences_options,
            required=True,
        ),
        FieldQuestion("hotels", _hotels_message, "hotels", opts.hotels_options, required=True),
        FieldQuestion(
            "dining",
            "How do you want to handle dining? I can help you find great restaurants, or you can wing it.",
            "chips",
            opts.dining_options,
            required=True,
        ),
        FieldQuestion(
            "dietary_restrictions",
            "Any dietary restrictions I should know about when finding restaurants?",
            "chips-multi",
            opts.dietary_restrictions_options,
        ),
        FieldQuestion(
            "cuisine_preferences",
            "What kind of food are you in the mood for? Pick all that sound good!",
            "chips-multi",
            opts.cuisine_preferences_options,
        ),
        FieldQuestion("restaurants", _restaurants_message, "restaurants", opts.restaurants_options),
        FieldQuestion("experiences", _experiences_message, "activities", opts.experiences_options),
        FieldQuestion(
            "surfing_details",
            "What's your surfing experience? This helps me find the right spots and schools.",
            "chips",
            opts.surfing_details_options,
        ),
        FieldQuestion(
            "child_needs",
            "Traveling with little ones! Anything I should know to plan kid-friendly activities?",
            "chips-multi",
            opts.child_needs_options,
        ),
        FieldQuestion(
            "workation_needs",
            "Working while traveling! Let me find places with great connectivity.",
            "chips",
            opts.workation_needs_options,
        ),
        FieldQuestion(
            "multi_country_logistics",
            "I see you're visiting multiple countries! Here are some things to keep in mind:",
            "chips",
            opts.multi_country_logistics_options,
        ),
        FieldQuestion(
            "theme_park_preferences",
            "Theme parks! I can help with ride recommendations and booking tips.",
            "chips-multi",
            opts.theme_park_preferences_options,
        ),
        FieldQuestion(
            "user_notes",
            "Anything else I should know to make this trip perfect?",
            "text",
            opts.user_notes_options,
        ),
        FieldQuestion("satisfaction", _celebrating, "satisfaction", opts.satisfaction_options, required=True),
    ]
}


def get_field_question(field: str) -> FieldQuestion:
    """
    Look up a field's question configuration.

    Raises:
        UnknownFieldError: If the field is not registered
    """
    question = FIELD_QUESTIONS.get(field)
    if question is None:
        raise UnknownFieldError(f"Unknown field: {field}")
    return question


def is_required(field: str) -> bool:
    question = FIELD_QUESTIONS.get(field)
    return question is not None and question.required
