"""
Tradeoff bookkeeping.

Detection itself is an external rule engine consumed as a plain callable
over preferences. This module filters its output against resolutions
already recorded, records new resolutions, and builds the tradeoff
question the selector shows while any tradeoff is active.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, Any, List

from quickplan.orchestrator.errors import InvalidAnswerError
from quickplan.orchestrator.prompts import pick_template
from quickplan.orchestrator.schemas import (
    QuestionConfig,
    SessionState,
    Tradeoff,
    TradeoffResolution,
)


logger = logging.getLogger(__name__)

TradeoffDetector = Callable[[Dict[str, Any]], List[Tradeoff]]

TRADEOFF_FIELD_PREFIX = "tradeoff:"


def no_tradeoffs(preferences: Dict[str, Any]) -> List[Tradeoff]:
    """Default detector: never reports a conflict."""
    return []


def is_tradeoff_field(field: str) -> bool:
    return field.startswith(TRADEOFF_FIELD_PREFIX)


def detect_tradeoffs(state: SessionState, detector: TradeoffDetector) -> List[Tradeoff]:
    """
    Run the detector and replace the active list with unresolved conflicts.

    Returns:
        The new active tradeoffs
    """
    resolved_ids = {resolution.tradeoff_id for resolution in state.resolved_tradeoffs}
    state.active_tradeoffs = [
        tradeoff for tradeoff in detector(state.preferences) if tradeoff.id not in resolved_ids
    ]
    logger.info(
        f"[orchestrator] [step=tradeoffs] Detected tradeoffs | count={len(state.active_tradeoffs)}"
    )
    return state.active_tradeoffs


def resolve_tradeoff(state: SessionState, tradeoff_id: str, answer: Any) -> TradeoffResolution:
    """
    Record a resolution and drop the tradeoff from the active list.

    Args:
        state: Session state to update
        tradeoff_id: Id of the tradeoff being resolved
        answer: Option id string, or dict with selected_option_id and/or
            custom_input

    Raises:
        InvalidAnswerError: If the answer names neither an option nor text
    """
    if isinstance(answer, str):
        answer = {"selected_option_id": answer}
    if not isinstance(answer, dict):
        raise InvalidAnswerError(f"Tradeoff answer must be a string or dict, got {type(answer).__name__}")

    option_id = answer.get("selected_option_id")
    custom_input = (answer.get("custom_input") or "").strip() or None
    if not option_id and not custom_input:
        raise InvalidAnswerError("Tradeoff answer needs a selected option or custom text")

    resolution = TradeoffResolution(
        tradeoff_id=tradeoff_id,
        selected_option_id=option_id,
        custom_input=custom_input,
        resolved_at=datetime.now(timezone.utc).isoformat(),
    )
    state.resolved_tradeoffs.append(resolution)
    state.active_tradeoffs = [t for t in state.active_tradeoffs if t.id != tradeoff_id]
    logger.info(f"[orchestrator] [step=tradeoffs] Resolved tradeoff | id={tradeoff_id}")
    return resolution


def build_tradeoff_question(tradeoff: Tradeoff) -> QuestionConfig:
    return QuestionConfig(
        id=f"q-tradeoff-{tradeoff.id}",
        field=f"{TRADEOFF_FIELD_PREFIX}{tradeoff.id}",
        message=pick_template("tradeoff_detected", description=tradeoff.description),
        input_type="tradeoff",
        input_config={"tradeoff": tradeoff.model_dump(), "allow_custom_text": True},
        required=True,
        can_infer=False,
    )
