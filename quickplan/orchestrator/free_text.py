"""
Free-text interpretation.

Text typed outside the structured inputs is classified as a navigation
command, a preference note to remember, or a question for the assistant.
"""

import logging
import re
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Literal, Optional

from quickplan.orchestrator.go_back import GO_BACK_FAILED_MESSAGE, GO_BACK_MESSAGE, go_back
from quickplan.orchestrator.prompts import build_free_text_messages
from quickplan.orchestrator.schemas import SessionState, utc_now_iso


logger = logging.getLogger(__name__)

FreeTextChat = Callable[[List[Dict[str, str]]], Awaitable[str]]

NOTE_PATTERNS = [
    re.compile(r"actually.*(want|need|prefer)", re.IGNORECASE),
    re.compile(r"can we (add|include|change)", re.IGNORECASE),
    re.compile(r"i forgot.*(mention|say|tell)", re.IGNORECASE),
    re.compile(r"also|btw|by the way", re.IGNORECASE),
]

NOTED_MESSAGE = "Got it! I've noted that down. Let me factor that into your recommendations."
GENERAL_NOTE_MESSAGE = "Thanks for letting me know! I'll keep that in mind."
QUESTION_FALLBACK_MESSAGE = (
    "That's a great question! Let me get back to the planning and I can help answer that "
    "once I know more about your trip."
)


@dataclass
class FreeTextResult:
    type: Literal["question", "preference", "command"]
    response: Optional[str] = None
    action_taken: Optional[str] = None


def add_user_note(state: SessionState, field: str, note: str) -> bool:
    """
    Remember a note against a field.

    Returns:
        False when the note is blank and nothing was stored
    """
    note = (note or "").strip()
    if not note:
        return False
    state.preferences.setdefault("user_notes", []).append(
        {"field": field, "note": note, "timestamp": utc_now_iso()}
    )
    logger.info(f"[orchestrator] [step=free_text] Added user note | field={field}")
    return True


def detect_command(text: str) -> Optional[str]:
    """Map text to restart, go_back or skip, or None."""
    lowered = text.lower().strip()
    if "start over" in lowered or "restart" in lowered or lowered == "reset":
        return "restart"
    if "go back" in lowered or "previous" in lowered or lowered == "back":
        return "go_back"
    if lowered in ("skip", "not sure", "next"):
        return "skip"
    return None


async def interpret_free_text(state: SessionState, text: str, chat: FreeTextChat) -> FreeTextResult:
    """
    Classify and act on free text.

    Go-back is applied here; restart and skip are reported back for the
    caller to carry out.

    Args:
        state: Session state (notes and go-back mutate it)
        text: What the user typed
        chat: Chat-completion callable used to answer questions

    Returns:
        FreeTextResult describing the interpretation
    """
    command = detect_command(text)
    if command == "go_back":
        target = go_back(state)
        return FreeTextResult(
            type="command",
            action_taken="go_back" if target else "go_back_failed",
            response=GO_BACK_MESSAGE if target else GO_BACK_FAILED_MESSAGE,
        )
    if command is not None:
        return FreeTextResult(type="command", action_taken=command)

    if any(pattern.search(text) for pattern in NOTE_PATTERNS):
        field = state.current_question.field if state.current_question else "general"
        add_user_note(state, field, text)
        return FreeTextResult(type="preference", response=NOTED_MESSAGE, action_taken=f"added_note:{field}")

    if "?" in text:
        try:
            response = await chat(build_free_text_messages(text))
        except Exception as e:
            logger.exception(f"[orchestrator] [step=free_text] Question answering failed: {e}")
            response = QUESTION_FALLBACK_MESSAGE
        return FreeTextResult(type="question", response=response)

    add_user_note(state, "general", text)
    return FreeTextResult(type="preference", response=GENERAL_NOTE_MESSAGE)
