"""
Response processor.

Every answerable field has a handler object with a uniform
apply(state, answer) -> state contract, registered in a dispatch table.
The processor runs the handler on a working copy of the session and
commits it only when the handler succeeds, so a rejected answer never
leaves a partial write behind.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Any, List, Optional

from pydantic import ValidationError

from quickplan.orchestrator import options as opts
from quickplan.orchestrator.advisories import format_seasonal_warnings
from quickplan.orchestrator.budget import budget_band
from quickplan.orchestrator.context import PlanningContext
from quickplan.orchestrator.detection import detect_multi_country, filter_activities_for_child_ages
from quickplan.orchestrator.dissatisfaction import handle_dissatisfaction
from quickplan.orchestrator.errors import InvalidAnswerError
from quickplan.orchestrator.modes import apply_mode
from quickplan.orchestrator.prompts import destination_name
from quickplan.orchestrator.schemas import ItinerarySplit, SessionState, utc_now_iso
from quickplan.orchestrator.selector import change_phase
from quickplan.orchestrator.tradeoffs import (
    TRADEOFF_FIELD_PREFIX,
    detect_tradeoffs,
    is_tradeoff_field,
    resolve_tradeoff,
)


logger = logging.getLogger(__name__)

SKIP_TOKEN = "SKIP"
HTML_TAG = re.compile(r"<[^>]*>")

# Answers to these are not navigation steps
NO_HISTORY_FIELDS = ("satisfaction",)

THRILL_RIDE_WARNING = "Note: Some thrill rides have height/age restrictions for younger kids"
EMPTY_ACTIVITIES_MESSAGE = "Please select at least one activity so I can plan a great trip for you!"


# =============================================================================
# Answer Normalization
# =============================================================================


def is_skip(answer: Any) -> bool:
    """None, blank text or the SKIP token."""
    if answer is None:
        return True
    return isinstance(answer, str) and answer.strip() in ("", SKIP_TOKEN)


def is_blank(answer: Any) -> bool:
    if is_skip(answer):
        return True
    return isinstance(answer, (list, dict)) and len(answer) == 0


def chip(answer: Any, field: str) -> Dict[str, Any]:
    """
    Normalize a single-choice answer.

    Accepts a bare option id or a dict with id, label and is_custom.

    Raises:
        InvalidAnswerError: If no option id can be read
    """
    if isinstance(answer, str) and answer.strip():
        value = answer.strip()
        return {"id": value, "label": value, "is_custom": False}
    if isinstance(answer, dict) and answer.get("id"):
        option_id = str(answer["id"])
        return {
            "id": option_id,
            "label": answer.get("label") or option_id,
            "is_custom": bool(answer.get("is_custom")),
        }
    raise InvalidAnswerError(f"{field}: expected an option id or option dict, got {answer!r}")


def chip_list(answer: Any, field: str) -> List[Dict[str, Any]]:
    """Normalize a multi-choice answer; a single option is wrapped in a list."""
    if isinstance(answer, (str, dict)):
        answer = [answer]
    if not isinstance(answer, list):
        raise InvalidAnswerError(f"{field}: expected a list of options, got {type(answer).__name__}")
    return [chip(item, field) for item in answer]


def custom_label(chips: List[Dict[str, Any]]) -> Optional[str]:
    return next((c["label"] for c in chips if c["is_custom"]), None)


def pick_list(answer: Any, field: str) -> List[Dict[str, Any]]:
    """Normalize a candidate pick (hotel, restaurant, experience) list."""
    if isinstance(answer, dict):
        answer = [answer]
    if not isinstance(answer, list) or not all(isinstance(item, dict) and item.get("id") for item in answer):
        raise InvalidAnswerError(f"{field}: expected candidate dicts with an id")
    return [dict(item) for item in answer]


def parse_date(value: Any, field: str) -> Optional[date]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError as e:
        raise InvalidAnswerError(f"{field}: invalid date {value!r}") from e


def _current_unit(state: SessionState, key: str) -> Optional[str]:
    question = state.current_question
    if question is None:
        return None
    return question.input_config.get(key)


# =============================================================================
# Handler Base Classes
# =============================================================================


class FieldHandler:
    """Applies one field's answer to the session state."""

    field = ""

    def __init__(self, ctx: PlanningContext):
        self.ctx = ctx

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        raise NotImplementedError


class ChoiceHandler(FieldHandler):
    """Stores a single option id under a preference key."""

    def __init__(self, ctx: PlanningContext, field: str, key: Optional[str] = None, level: str = "complete"):
        super().__init__(ctx)
        self.field = field
        self.key = key or field
        self.level = level

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        state.preferences[self.key] = chip(answer, self.field)["id"]
        state.set_confidence(self.field, self.level)
        return state


# =============================================================================
# Trip Basics
# =============================================================================


class DestinationHandler(FieldHandler):
    field = "destination"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        if isinstance(answer, str):
            raw = HTML_TAG.sub("", answer).strip()
            context = {"raw_input": raw, "canonical_name": raw}
        elif isinstance(answer, dict):
            context = dict(answer)
            context["raw_input"] = (answer.get("raw_input") or answer.get("canonical_name") or "").strip()
            context["canonical_name"] = (answer.get("canonical_name") or context["raw_input"]).strip()
        else:
            raise InvalidAnswerError(f"destination: expected text or a destination dict, got {type(answer).__name__}")
        if not context["raw_input"]:
            raise InvalidAnswerError("destination: a destination name is required")

        state.preferences["destination_context"] = context
        state.set_confidence("destination", "complete")

        # Suggestions are usually ready by the time activities are asked
        if self.ctx.suggestions is not None:
            self.ctx.suggestions.prefetch(destination_name(state.preferences))
        return state


class DatesHandler(FieldHandler):
    field = "dates"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        if not isinstance(answer, dict):
            raise InvalidAnswerError("dates: expected a dict with dates and/or nights")
        start = parse_date(answer.get("start_date"), "dates")
        end = parse_date(answer.get("end_date"), "dates")
        if start and end and end < start:
            raise InvalidAnswerError("dates: end date is before start date")

        nights = answer.get("nights", answer.get("trip_length"))
        if nights is None and start and end:
            nights = (end - start).days
        if nights is None:
            raise InvalidAnswerError("dates: need a number of nights or both dates")
        try:
            nights = int(nights)
        except (TypeError, ValueError) as e:
            raise InvalidAnswerError(f"dates: nights must be a whole number, got {nights!r}") from e
        config = self.ctx.config
        clamped = max(config.min_nights, min(config.max_nights, nights))
        if clamped != nights:
            logger.warning(f"[orchestrator] [step=respond] Trip length clamped | requested={nights} | stored={clamped}")

        prefs = state.preferences
        prefs["start_date"] = start.isoformat() if start else None
        prefs["end_date"] = end.isoformat() if end else None
        prefs["trip_length"] = clamped
        prefs["is_flexible_dates"] = bool(answer.get("is_flexible", answer.get("is_flexible_dates", False)))
        state.set_confidence("dates", "complete")

        self._queue_advisories(state, start, end)
        return state

    def _queue_advisories(self, state: SessionState, start: Optional[date], end: Optional[date]) -> None:
        destination = destination_name(state.preferences)
        if not destination or start is None:
            return
        advisories = self.ctx.advisories

        warnings = advisories.seasonal_warnings(destination, start)
        if warnings:
            state.alerts.seasonal_warning = format_seasonal_warnings(warnings)

        if end is None:
            return
        report = advisories.events_for_dates(destination, start, end)
        if report.events:
            state.preferences["local_events"] = list(report.events)
        if report.high_impact_count > 0 and report.warnings:
            alert = {"warning": report.warnings[0]}
            if report.tips:
                alert["tip"] = report.tips[0]
            state.alerts.event_alert = alert


class PartyHandler(FieldHandler):
    field = "party"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        if not isinstance(answer, dict):
            raise InvalidAnswerError("party: expected a dict with adults, children and child_ages")
        try:
            adults = int(answer.get("adults", 0))
            child_ages = [int(age) for age in answer.get("child_ages") or []]
            children = int(answer.get("children", len(child_ages)))
            rooms = int(answer["estimated_rooms"]) if answer.get("estimated_rooms") else None
        except (TypeError, ValueError) as e:
            raise InvalidAnswerError("party: counts and ages must be whole numbers") from e
        if adults < 1:
            raise InvalidAnswerError("party: at least one adult is required")
        if children < 0 or any(age < 0 for age in child_ages):
            raise InvalidAnswerError("party: children and ages cannot be negative")

        prefs = state.preferences
        prefs["adults"] = adults
        prefs["children"] = children
        prefs["child_ages"] = child_ages
        if rooms:
            prefs["estimated_rooms_needed"] = rooms
        state.set_confidence("party", "confirmed")

        # Only a suggestion; accommodation is still asked
        if adults + children >= 8:
            prefs["suggested_accommodation_type"] = "vacation_rental"
        else:
            prefs.pop("suggested_accommodation_type", None)
        return state


class TripOccasionHandler(FieldHandler):
    field = "trip_occasion"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        occasion = chip(answer, self.field)["id"]
        state.preferences["trip_occasion"] = occasion
        apply_mode(state.preferences, occasion)
        state.set_confidence("trip_occasion", "confirmed")
        return state


class TravelingWithPetsHandler(FieldHandler):
    field = "traveling_with_pets"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        has_pets = chip(answer, self.field)["id"] == "yes"
        state.preferences["has_pets"] = has_pets
        if not has_pets:
            state.preferences["traveling_with_pets"] = {"has_pet": False}
        state.set_confidence("traveling_with_pets", "complete")
        return state


class PetTypeHandler(FieldHandler):
    field = "pet_type"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        pet_id = chip(answer, self.field)["id"]
        size = next((s for s in ("small", "medium", "large") if s in pet_id), None)
        kind = "dog" if "dog" in pet_id else "cat" if "cat" in pet_id else "other"
        state.preferences["traveling_with_pets"] = {"has_pet": True, "pet_type": kind, "pet_size": size}
        state.set_confidence("pet_type", "complete")
        return state


class AccessibilityHandler(FieldHandler):
    field = "accessibility"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        needs = chip(answer, self.field)["id"] == "yes"
        state.preferences["has_accessibility_needs"] = needs
        if not needs:
            state.preferences.pop("accessibility_needs", None)
        state.set_confidence("accessibility", "complete")
        return state


class AccessibilityTypeHandler(FieldHandler):
    field = "accessibility_type"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        chips = chip_list(answer, self.field)
        ids = [c["id"] for c in chips]
        state.preferences["accessibility_needs"] = {
            "wheelchair_accessible": "wheelchair" in ids,
            "ground_floor_required": "ground_floor" in ids,
            "elevator_required": "elevator" in ids,
            "no_stairs": "no_stairs" in ids,
            "features": ids,
            "custom_notes": custom_label(chips),
        }
        state.set_confidence("accessibility_type", "complete")
        return state


# =============================================================================
# Budget and Accommodation
# =============================================================================


class BudgetHandler(FieldHandler):
    field = "budget"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        value = answer.get("value") if isinstance(answer, dict) else answer
        if isinstance(value, bool):
            raise InvalidAnswerError("budget: expected a number")
        try:
            value = float(value)
        except (TypeError, ValueError) as e:
            raise InvalidAnswerError(f"budget: expected a number, got {value!r}") from e
        if value <= 0:
            raise InvalidAnswerError("budget: must be greater than zero")
        if value.is_integer():
            value = int(value)

        band = budget_band(value, self.ctx.config)
        prefs = state.preferences
        prefs["budget_per_night"] = {"min": band["min"], "max": band["max"]}
        prefs["budget_unlimited"] = band["unlimited"]
        prefs["budget_value"] = value
        state.set_confidence("budget", "complete")
        return state


# =============================================================================
# Activities and Style
# =============================================================================


class ActivitiesHandler(FieldHandler):
    field = "activities"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        chips = chip_list(answer, self.field)
        if not chips:
            raise InvalidAnswerError(EMPTY_ACTIVITIES_MESSAGE)
        prefs = state.preferences

        child_ages = prefs.get("child_ages") or []
        if child_ages:
            filtered = filter_activities_for_child_ages([c["id"] for c in chips], child_ages)
            if filtered.restricted:
                state.alerts.activity_warnings = list(filtered.warnings)

        activities = []
        for idx, selected in enumerate(chips):
            activity = {"type": selected["id"], "priority": "must-do" if idx < 3 else "nice-to-have"}
            if selected["is_custom"]:
                activity["is_custom"] = True
                activity["custom_label"] = selected["label"]
            activities.append(activity)
        prefs["selected_activities"] = activities
        state.set_confidence("activities", "complete")

        detect_tradeoffs(state, self.ctx.detector)
        return state


class VibeHandler(FieldHandler):
    field = "vibe"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        if not isinstance(answer, str):
            raise InvalidAnswerError("vibe: expected free text")
        vibe = HTML_TAG.sub("", answer).strip()
        prefs = state.preferences
        prefs["vibe"] = vibe
        prefs["must_dos"] = [vibe] if vibe else []
        prefs["hard_nos"] = []
        state.set_confidence("vibe", "complete")
        return state


class SurfingDetailsHandler(FieldHandler):
    field = "surfing_details"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        selected = chip(answer, self.field)
        level = selected["id"]
        prefs = state.preferences
        prefs["surfing_details"] = {
            "level": level,
            "wants_lessons": level in ("never", "beginner"),
            "custom_notes": selected["label"] if selected["is_custom"] else None,
        }
        if level in ("never", "beginner"):
            prefs["surf_school_required"] = True
            prefs["surf_break_type"] = "beginner"
        elif level == "intermediate":
            prefs["surf_break_type"] = "intermediate"
        elif level in ("advanced", "expert"):
            prefs["allow_advanced_spots"] = True
            prefs["surf_break_type"] = "advanced"
        state.set_confidence("surfing_details", "complete")
        return state


class CommunitiesHandler(FieldHandler):
    field = "communities"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        state.preferences["selected_communities"] = [c["id"] for c in chip_list(answer, self.field)]
        state.set_confidence("communities", "complete")
        return state


class UserNotesHandler(FieldHandler):
    field = "user_notes"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        if not isinstance(answer, str):
            raise InvalidAnswerError("user_notes: expected free text")
        note = answer.strip()
        if note:
            state.preferences.setdefault("user_notes", []).append(
                {"field": "general", "note": note, "timestamp": utc_now_iso()}
            )
        state.set_confidence("user_notes", "complete")
        return state


# =============================================================================
# Areas, Split and Hotels
# =============================================================================


class AreasHandler(FieldHandler):
    field = "areas"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        if isinstance(answer, (str, dict)):
            answer = [answer]
        if not isinstance(answer, list):
            raise InvalidAnswerError("areas: expected a list of areas")

        discovered = {area.get("id"): area for area in state.discovered.areas}
        areas = []
        for item in answer:
            if isinstance(item, str):
                if item not in discovered:
                    raise InvalidAnswerError(f"areas: unknown area id {item!r}")
                item = discovered[item]
            elif not isinstance(item, dict) or not item.get("id"):
                raise InvalidAnswerError("areas: each area needs an id")
            areas.append(dict(item))

        state.preferences["selected_areas"] = areas
        state.set_confidence("areas", "complete")
        return state


class SplitHandler(FieldHandler):
    field = "split"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        if not isinstance(answer, dict):
            raise InvalidAnswerError("split: expected a split dict")
        try:
            split = ItinerarySplit.model_validate(answer)
        except ValidationError as e:
            raise InvalidAnswerError(f"split: {e.errors()[0]['msg']}") from e

        nights = state.trip_nights
        if nights and split.total_nights != nights:
            raise InvalidAnswerError(f"split: stops cover {split.total_nights} nights but the trip is {nights}")

        state.preferences["selected_split"] = split.model_dump()
        state.set_confidence("split", "complete")
        return state


class HotelPreferencesHandler(FieldHandler):
    field = "hotel_preferences"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        ids = [c["id"] for c in chip_list(answer, self.field)]
        prefs = state.preferences
        prefs["hotel_preferences"] = ids
        prefs["adults_only_preferred"] = "adults_only" in ids
        prefs["all_inclusive_preferred"] = "all_inclusive" in ids
        prefs["hotel_vibe_preferences"] = [i for i in ids if i in ("boutique", "quiet", "family")]
        state.set_confidence("hotel_preferences", "complete")
        return state


class HotelsHandler(FieldHandler):
    """One hotel pick per selected area; {"skip": true} records no hotel."""

    field = "hotels"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        area_id = _current_unit(state, "area_id")
        if not area_id:
            area = opts.next_hotel_area(state)
            if area is None:
                raise InvalidAnswerError("hotels: no area is waiting for a hotel pick")
            area_id = area.get("id")
            logger.error(
                f"[orchestrator] [step=respond] Hotel question had no area_id, using first unpicked area | "
                f"area={area_id}"
            )

        if isinstance(answer, dict) and answer.get("skip"):
            hotel = None
        elif isinstance(answer, dict) and answer.get("id"):
            hotel = dict(answer)
        else:
            raise InvalidAnswerError("hotels: expected a hotel dict with an id or {\"skip\": true}")

        selected = dict(state.preferences.get("selected_hotels") or {})
        selected[area_id] = hotel
        state.preferences["selected_hotels"] = selected
        state.set_confidence("hotels", "partial" if opts.next_hotel_area(state) else "complete")
        return state


# =============================================================================
# Dining and Experiences
# =============================================================================


class DiningHandler(FieldHandler):
    field = "dining"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        mode = chip(answer, self.field)["id"]
        state.preferences["dining_mode"] = mode
        if mode == "none":
            state.preferences["dietary_restrictions"] = ["none"]
            state.set_confidence("dining", "complete")
        else:
            # Dietary and cuisine questions still follow
            state.set_confidence("dining", "confirmed")
        return state


class DietaryRestrictionsHandler(FieldHandler):
    field = "dietary_restrictions"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        restrictions = [c["id"] for c in chip_list(answer, self.field) if c["id"] != "none"]
        state.preferences["dietary_restrictions"] = restrictions or ["none"]
        state.set_confidence("dietary_restrictions", "complete")
        return state


class CuisinePreferencesHandler(FieldHandler):
    field = "cuisine_preferences"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        state.preferences["cuisine_preferences"] = [c["id"] for c in chip_list(answer, self.field)]
        state.set_confidence("cuisine_preferences", "complete")
        state.set_confidence("dining", "complete")
        return state


class RestaurantsHandler(FieldHandler):
    """Restaurant picks for one cuisine at a time."""

    field = "restaurants"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        picks = pick_list(answer, self.field)
        cuisine = _current_unit(state, "cuisine_type") or opts.next_restaurant_cuisine(state) or "general"

        selected = dict(state.preferences.get("selected_restaurants") or {})
        selected[cuisine] = picks
        state.preferences["selected_restaurants"] = selected
        state.set_confidence("restaurants", "partial" if opts.next_restaurant_cuisine(state) else "complete")
        return state


class ExperiencesHandler(FieldHandler):
    """Experience picks for one activity type; an empty pick is recorded as []."""

    field = "experiences"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        picks = pick_list(answer, self.field)
        activity = _current_unit(state, "activity_type") or opts.next_experience_activity(state) or "general"

        selected = dict(state.preferences.get("selected_experiences") or {})
        selected[activity] = picks
        state.preferences["selected_experiences"] = selected
        state.set_confidence("experiences", "partial" if opts.next_experience_activity(state) else "complete")
        return state


# =============================================================================
# Smart Follow-ups
# =============================================================================


class ChildNeedsHandler(FieldHandler):
    field = "child_needs"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        chips = chip_list(answer, self.field)
        ids = [c["id"] for c in chips]
        if not ids or "none" in ids:
            needs = {"none": True}
        else:
            needs = {
                "scared_of_heights": "scared_heights" in ids,
                "scared_of_water": "scared_water" in ids,
                "scared_of_dark": "scared_dark_rides" in ids,
                "scared_of_loud_noises": "scared_loud" in ids,
                "picky_eater": "picky_eater" in ids,
                "needs_naps": "needs_naps" in ids,
                "animal_lover": "animal_lover" in ids,
                "custom_notes": custom_label(chips),
            }
        state.preferences["child_needs"] = needs
        state.set_confidence("child_needs", "complete")
        return state


class WorkationNeedsHandler(FieldHandler):
    field = "workation_needs"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        selected = chip(answer, self.field)
        state.preferences["workation_needs"] = {
            "requires_workspace": True,
            "wifi_speed": selected["id"],
            "custom_notes": selected["label"] if selected["is_custom"] else None,
        }
        state.set_confidence("workation_needs", "complete")
        return state


class MultiCountryLogisticsHandler(FieldHandler):
    field = "multi_country_logistics"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        selected = chip(answer, self.field)
        info = detect_multi_country(opts.destination_raw(state.preferences))
        state.preferences["multi_country_logistics"] = {
            "acknowledged": True,
            "user_choice": selected["id"],
            "countries": info.countries,
            "needs_transport_help": selected["id"] == "help_transport",
            "needs_visa_info": selected["id"] == "visa_check",
            "custom_notes": selected["label"] if selected["is_custom"] else None,
        }
        state.set_confidence("multi_country_logistics", "complete")
        return state


class ThemeParkPreferencesHandler(FieldHandler):
    field = "theme_park_preferences"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        chips = chip_list(answer, self.field)
        ids = [c["id"] for c in chips]
        prefs = state.preferences
        prefs["theme_park_preferences"] = {
            "wants_character_dining": "character_dining" in ids,
            "thrill_seeker": "thrill_seeker" in ids,
            "relaxed_pace": "relaxed_pace" in ids,
            "wants_meet_characters": "meet_characters" in ids,
            "avoid_scary": "avoid_scary" in ids,
            "custom_notes": custom_label(chips),
        }
        if "avoid_crowds" in ids:
            prefs["prefer_low_crowd_times"] = True
        if "thrill_seeker" in ids and any(age < 10 for age in prefs.get("child_ages") or []):
            state.alerts.theme_park_warning = THRILL_RIDE_WARNING
        if "relaxed_pace" in ids:
            prefs["parks_per_day"] = 1
        state.set_confidence("theme_park_preferences", "complete")
        return state


# =============================================================================
# Satisfaction
# =============================================================================


class SatisfactionHandler(FieldHandler):
    field = "satisfaction"

    def apply(self, state: SessionState, answer: Any) -> SessionState:
        if isinstance(answer, bool):
            answer = {"satisfied": answer}
        if not isinstance(answer, dict) or "satisfied" not in answer:
            raise InvalidAnswerError("satisfaction: expected {satisfied, reasons?, custom_feedback?}")

        if answer["satisfied"]:
            change_phase(state, "satisfied", "user satisfied")
            return state

        reasons = answer.get("reasons") or []
        if not isinstance(reasons, list):
            raise InvalidAnswerError("satisfaction: reasons must be a list")
        handle_dissatisfaction(state, [str(r) for r in reasons], answer.get("custom_feedback"), self.ctx.config)
        return state


# =============================================================================
# Registry and Processor
# =============================================================================


def build_handlers(ctx: PlanningContext) -> Dict[str, FieldHandler]:
    """Create the field -> handler dispatch table."""
    handlers: List[FieldHandler] = [
        DestinationHandler(ctx),
        DatesHandler(ctx),
        PartyHandler(ctx),
        TripOccasionHandler(ctx),
        TravelingWithPetsHandler(ctx),
        PetTypeHandler(ctx),
        AccessibilityHandler(ctx),
        AccessibilityTypeHandler(ctx),
        BudgetHandler(ctx),
        ChoiceHandler(ctx, "accommodation_type"),
        ChoiceHandler(ctx, "sustainability_preference"),
        ActivitiesHandler(ctx),
        ChoiceHandler(ctx, "pace"),
        SurfingDetailsHandler(ctx),
        ChoiceHandler(ctx, "activity_skill_level"),
        VibeHandler(ctx),
        UserNotesHandler(ctx),
        CommunitiesHandler(ctx),
        AreasHandler(ctx),
        SplitHandler(ctx),
        HotelPreferencesHandler(ctx),
        HotelsHandler(ctx),
        DiningHandler(ctx),
        DietaryRestrictionsHandler(ctx),
        CuisinePreferencesHandler(ctx),
        RestaurantsHandler(ctx),
        ExperiencesHandler(ctx),
        ChildNeedsHandler(ctx),
        WorkationNeedsHandler(ctx),
        MultiCountryLogisticsHandler(ctx),
        ThemeParkPreferencesHandler(ctx),
        SatisfactionHandler(ctx),
    ]
    return {handler.field: handler for handler in handlers}


@dataclass
class ProcessResult:
    """Outcome of processing one answer."""

    accepted: bool
    field: Optional[str] = None
    reason: Optional[str] = None
    skipped: bool = False


def _commit(state: SessionState, working: SessionState) -> None:
    for name in SessionState.model_fields:
        setattr(state, name, getattr(working, name))


class ResponseProcessor:
    """
    Applies answers to the current question.

    Order: reject invalid or empty required answers, record the field in
    history, handle optional skips, route tradeoff resolutions, then run
    the field's handler.
    """

    def __init__(self, ctx: PlanningContext):
        self.ctx = ctx
        self.handlers = build_handlers(ctx)

    def process(self, state: SessionState, answer: Any, question_id: Optional[str] = None) -> ProcessResult:
        question = state.current_question
        if question is None:
            logger.warning("[orchestrator] [step=respond] Answer received with no current question")
            return ProcessResult(accepted=False, reason="No question is waiting for an answer")
        field = question.field
        if question_id and question_id != question.id:
            return ProcessResult(
                accepted=False, field=field, reason=f"Question {question_id} is not the current question"
            )

        tradeoff = is_tradeoff_field(field)
        handler = self.handlers.get(field)
        if not tradeoff and handler is None:
            logger.error(f"[orchestrator] [step=respond] No handler registered | field={field}")
            return ProcessResult(accepted=False, field=field, reason=f"No handler for field {field}")

        if question.required and is_blank(answer):
            logger.warning(f"[orchestrator] [step=respond] Rejected empty answer for required field | field={field}")
            message = EMPTY_ACTIVITIES_MESSAGE if field == "activities" else f"{field} needs an answer"
            return ProcessResult(accepted=False, field=field, reason=message)

        working = state.model_copy(deep=True)
        history = working.question_history
        if not tradeoff and field not in NO_HISTORY_FIELDS and (not history or history[-1] != field):
            history.append(field)

        skipped = False
        try:
            if not question.required and is_skip(answer):
                working.set_confidence(field, "inferred")
                working.preferences[f"{field}_skipped"] = True
                skipped = True
            elif tradeoff:
                resolve_tradeoff(working, field[len(TRADEOFF_FIELD_PREFIX):], answer)
            else:
                working = handler.apply(working, answer)
        except InvalidAnswerError as e:
            logger.warning(f"[orchestrator] [step=respond] Rejected answer | field={field} | reason={e}")
            return ProcessResult(accepted=False, field=field, reason=str(e))

        working.current_question = None
        _commit(state, working)
        logger.info(f"[orchestrator] [step=respond] Applied answer | field={field} | skipped={skipped}")
        return ProcessResult(accepted=True, field=field, skipped=skipped)
