"""
Next-question selector.

The core decision procedure, run whenever the caller needs the next thing
to show: tradeoff preemption, inference pass, reconciliation of
unavailable data, missing-field computation, phase transitions and
finally question materialization.
"""

import logging
import re
import time
from dataclasses import dataclass
from typing import List, Literal, Optional

from quickplan.orchestrator.inference import run_inference_pass
from quickplan.orchestrator.missing_fields import HANDLED, get_missing_fields, hotels_awaiting_pick
from quickplan.orchestrator.context import PlanningContext
from quickplan.orchestrator.prompts import destination_name
from quickplan.orchestrator.registry import get_field_question
from quickplan.orchestrator.schemas import QuestionConfig, SessionState
from quickplan.orchestrator.splits import create_minimal_area, create_single_area_split, is_valid_split
from quickplan.orchestrator.tradeoffs import build_tradeoff_question
from quickplan.shared.logging import log_state_transition


logger = logging.getLogger(__name__)

SelectionStatus = Literal["question", "wait", "complete"]

# Fields whose options come from the suggestion cache
SUGGESTION_FIELDS = {"activities": "activities", "communities": "communities"}


@dataclass
class Selection:
    """Outcome of one selector run."""

    status: SelectionStatus
    question: Optional[QuestionConfig] = None
    missing: Optional[List[str]] = None


# =============================================================================
# Phase Changes
# =============================================================================


def change_phase(state: SessionState, phase: str, reason: str) -> None:
    """Move to a new phase, logging the transition."""
    if state.phase == phase:
        return
    previous = state.phase
    state.phase = phase
    logger.info(f"[orchestrator] [step=phase] {previous} -> {phase} | reason={reason}")
    log_state_transition(
        "phase_change",
        state.model_dump(include={"phase", "question_history", "confidence", "active_tradeoffs"}),
        extra={"from": previous, "to": phase, "reason": reason},
        logger=logger,
    )


def ready_for_generation(state: SessionState) -> bool:
    status = state.enrichment_status
    return (
        status.get("areas") in ("done", "error")
        and status.get("hotels") in ("done", "error")
        and state.get_confidence("dining") in ("confirmed", "complete")
        and is_valid_split(state.preferences.get("selected_split"))
        and state.get_confidence("hotels") in HANDLED
    )


def enrichment_in_flight(state: SessionState) -> bool:
    status = state.enrichment_status
    return status.get("areas") in ("pending", "loading") or status.get("hotels") in ("pending", "loading")


# =============================================================================
# Reconciliation
# =============================================================================


def _slugify(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-") or "destination"


def ensure_single_area_split(state: SessionState, default_nights: int) -> bool:
    """
    Derive the all-nights split when exactly one area is selected.

    Returns:
        True if a split was derived
    """
    areas = state.selected_areas
    if len(areas) != 1 or is_valid_split(state.preferences.get("selected_split")):
        return False
    nights = state.trip_nights or default_nights
    state.preferences["selected_split"] = create_single_area_split(areas[0], nights).model_dump()
    state.set_confidence("split", "complete")
    logger.info(
        f"[orchestrator] [step=reconcile] Auto-derived single-area split | "
        f"area={areas[0].get('id')} | nights={nights}"
    )
    return True


def reconcile_unavailable_data(state: SessionState, ctx: PlanningContext) -> None:
    """Self-heal states where discovery produced nothing to choose from."""
    prefs = state.preferences

    # A failed discovery and one that found nothing both leave no candidates
    area_status = state.enrichment_status.get("areas")
    if (
        state.phase != "gathering"
        and area_status in ("done", "error")
        and not state.discovered.areas
        and not state.is_known("areas")
    ):
        name = destination_name(prefs) or "Your destination"
        prefs["selected_areas"] = [create_minimal_area(_slugify(name), name)]
        state.set_confidence("areas", "partial")
        logger.warning(
            f"[orchestrator] [step=reconcile] No area candidates, using destination as single area | "
            f"destination={name} | discovery={area_status}"
        )

    if state.get_confidence("areas") in HANDLED:
        ensure_single_area_split(state, ctx.config.default_trip_length)

    if (
        state.is_known("hotel_preferences")
        and state.enrichment_status.get("hotels") in ("done", "error")
        and not hotels_awaiting_pick(state)
        and not state.is_known("hotels")
    ):
        state.set_confidence("hotels", "partial")
        logger.warning("[orchestrator] [step=reconcile] No hotel candidates to pick from, marking hotels partial")


# =============================================================================
# Materialization
# =============================================================================


def _append_alerts(state: SessionState, message: str) -> str:
    alerts = state.alerts
    if alerts.event_alert:
        message = f"{message}\n\n📅 **Event alert**: {alerts.event_alert['warning']}"
        if alerts.event_alert.get("tip"):
            message = f"{message}\n💡 {alerts.event_alert['tip']}"
    if alerts.activity_warnings:
        message = f"{message}\n\n⚠️ **Note for families**: {'; '.join(alerts.activity_warnings[:2])}"
    if alerts.theme_park_warning:
        message = f"{message}\n\n🎢 {alerts.theme_park_warning}"
    if alerts.seasonal_warning:
        message = f"{message}\n\n{alerts.seasonal_warning}"

    alerts.event_alert = None
    alerts.activity_warnings = []
    alerts.theme_park_warning = None
    alerts.seasonal_warning = None
    return message


async def materialize_question(state: SessionState, field: str, ctx: PlanningContext) -> QuestionConfig:
    """
    Build the QuestionConfig for a field.

    Awaits an in-flight suggestion fetch for suggestion-backed fields, but
    never starts one.

    Raises:
        UnknownFieldError: If the field is not registered
    """
    question = get_field_question(field)

    kind = SUGGESTION_FIELDS.get(field)
    if kind and ctx.suggestions is not None:
        await ctx.suggestions.wait_pending(kind, destination_name(state.preferences))

    input_config = question.options(state, ctx)
    message = _append_alerts(state, question.render_message(state, input_config, ctx))

    return QuestionConfig(
        id=f"q-{field}-{int(time.time() * 1000)}",
        field=field,
        message=message,
        input_type=question.input_type,
        input_config=input_config,
        required=question.required,
        can_infer=question.can_infer,
    )


# =============================================================================
# Selection
# =============================================================================


async def select_next_question(state: SessionState, ctx: PlanningContext) -> Selection:
    """
    Decide what to show next and record it as the current question.

    Returns:
        Selection with status "question", "wait" (enrichment running or a
        phase change with nothing to ask yet) or "complete"
    """
    if state.active_tradeoffs:
        question = build_tradeoff_question(state.active_tradeoffs[0])
        state.current_question = question
        return Selection(status="question", question=question)

    if state.phase == "satisfied":
        state.current_question = None
        return Selection(status="complete")

    run_inference_pass(state)
    reconcile_unavailable_data(state, ctx)
    missing = get_missing_fields(state, ctx.advisories)
    logger.debug(f"[orchestrator] [step=select] phase={state.phase} | missing={missing}")

    if missing:
        question = await materialize_question(state, missing[0], ctx)
        state.current_question = question
        return Selection(status="question", question=question, missing=missing)

    if state.phase == "gathering":
        change_phase(state, "enriching", "no fields missing")
        state.current_question = None
        return Selection(status="wait", missing=missing)

    if state.phase == "enriching":
        if not enrichment_in_flight(state) and ready_for_generation(state):
            change_phase(state, "generating", "enrichment complete")
        state.current_question = None
        return Selection(status="wait", missing=missing)

    if state.phase == "generating":
        if state.itinerary is None and not state.itinerary_failed:
            state.current_question = None
            return Selection(status="wait", missing=missing)
        change_phase(state, "reviewing", "itinerary generated" if state.itinerary else "itinerary generation failed")

    question = await materialize_question(state, "satisfaction", ctx)
    state.current_question = question
    return Selection(status="question", question=question, missing=missing)


