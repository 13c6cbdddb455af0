"""
Planning orchestrator.

PlanningOrchestrator owns one session record and is the single entry
point for everything that reads or changes it: the next question, answer
processing, go-back, free text, assistant messages, enrichment results
and export/import.
"""

import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from quickplan.orchestrator.advisories import AdvisoryService, StaticAdvisoryService
from quickplan.orchestrator.config import OrchestratorConfig, DEFAULT_CONFIG
from quickplan.orchestrator.context import PlanningContext
from quickplan.orchestrator.free_text import FreeTextResult, add_user_note, interpret_free_text
from quickplan.orchestrator.go_back import go_back
from quickplan.orchestrator.handlers import ProcessResult, ResponseProcessor
from quickplan.orchestrator.prompts import MESSAGE_FALLBACK, build_persona_messages, pick_template
from quickplan.orchestrator.schemas import (
    ENRICHMENT_CATEGORIES,
    ChatMessage,
    SessionState,
    new_message,
)
from quickplan.orchestrator.selector import Selection, change_phase, select_next_question
from quickplan.orchestrator.suggestions import ChatFn, SuggestionCache
from quickplan.orchestrator.tradeoffs import TradeoffDetector, no_tradeoffs
from quickplan.shared.contracts import SessionSnapshot
from quickplan.shared.llm import FALLBACK_CHAT_RESPONSE, call_llm
from quickplan.shared.logging import DebugLogger


logger = logging.getLogger(__name__)

TEMPLATE_MESSAGES = {"greeting": "greeting", "celebration": "celebrating"}


class PlanningOrchestrator:
    """
    Adaptive question-flow orchestrator for one planning session.

    Collaborators are injected so tests can run without network access:
    the suggestion cache, advisory lookups, tradeoff detector and the
    chat-completion callable.

    Example:
        orchestrator = PlanningOrchestrator()
        selection = await orchestrator.get_next_question()
        await orchestrator.process_response("Bali")
    """

    def __init__(
        self,
        session_id: Optional[str] = None,
        config: OrchestratorConfig = DEFAULT_CONFIG,
        suggestions: Optional[SuggestionCache] = None,
        advisories: Optional[AdvisoryService] = None,
        tradeoff_detector: Optional[TradeoffDetector] = None,
        chat: Optional[ChatFn] = None,
        debug_logger: Optional[DebugLogger] = None,
        state: Optional[SessionState] = None,
    ):
        self.session_id = session_id or str(uuid.uuid4())
        self.config = config
        self.ctx = PlanningContext(
            config=config,
            suggestions=suggestions,
            advisories=advisories or StaticAdvisoryService(),
            detector=tradeoff_detector or no_tradeoffs,
        )
        self.state = state or SessionState()
        self.processor = ResponseProcessor(self.ctx)
        self.debug_logger = debug_logger
        self.debug_entries: List[Dict[str, Any]] = []
        self._chat = chat or self._default_chat
        self._log = f"[session={self.session_id}] [orchestrator] "

    # =========================================================================
    # Internals
    # =========================================================================

    async def _default_chat(self, messages: List[Dict[str, str]], temperature: float) -> str:
        return await call_llm(
            messages,
            temperature=temperature,
            model=self.config.model,
            max_attempts=self.config.chat_max_attempts,
            backoff_multiplier=self.config.backoff_multiplier,
            backoff_cap=self.config.backoff_cap,
        )

    async def _timed_chat(self, purpose: str, messages: List[Dict[str, str]]) -> str:
        start = time.perf_counter()
        success = False
        try:
            response = await self._chat(messages, self.config.chat_temperature)
            success = response != FALLBACK_CHAT_RESPONSE
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            if self.debug_logger is not None:
                self.debug_logger.log_chat_call(purpose, duration_ms, success=success)
            self._debug("llm", f"Chat call: {purpose}", {"success": success}, duration_ms)

    def _debug(
        self,
        entry_type: str,
        action: str,
        details: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
    ) -> None:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "type": entry_type,
            "action": action,
            "details": details or {},
        }
        if duration_ms is not None:
            entry["duration_ms"] = round(duration_ms, 2)
        self.debug_entries.append(entry)
        if self.debug_logger is not None:
            self.debug_logger.log_event(entry_type, action, details, duration_ms)

    # =========================================================================
    # Question Flow
    # =========================================================================

    @property
    def phase(self) -> str:
        return self.state.phase

    async def get_next_question(self) -> Selection:
        """
        Decide what to show next.

        Returns:
            Selection with status question, wait or complete
        """
        selection = await select_next_question(self.state, self.ctx)
        field = selection.question.field if selection.question else None
        logger.info(f"{self._log}[step=select] status={selection.status} | field={field} | phase={self.state.phase}")
        self._debug("orchestrator", "Selected next question", {"status": selection.status, "field": field})
        return selection

    async def process_response(self, answer: Any, question_id: Optional[str] = None) -> ProcessResult:
        """
        Apply an answer to the current question.

        A rejected answer leaves the session unchanged; the reason is on
        the returned result.
        """
        result = self.processor.process(self.state, answer, question_id=question_id)
        self._debug(
            "orchestrator",
            "Processed response" if result.accepted else "Rejected response",
            {"field": result.field, "skipped": result.skipped, "reason": result.reason},
        )
        if not result.accepted:
            logger.warning(f"{self._log}[step=respond] Answer rejected | field={result.field} | reason={result.reason}")
        return result

    def go_back(self) -> Optional[str]:
        """Rewind to the last answered field; returns it, or None at the start."""
        target = go_back(self.state)
        self._debug("orchestrator", "Went back" if target else "Go back failed", {"target": target})
        return target

    async def process_free_text(self, text: str) -> FreeTextResult:
        """
        Interpret text typed outside the structured inputs.

        The text joins the transcript so later inference passes can use
        it. Restart and skip commands are carried out here.
        """
        self.add_message("user", text)

        async def chat(messages: List[Dict[str, str]]) -> str:
            return await self._timed_chat("free_text_answer", messages)

        result = await interpret_free_text(self.state, text, chat)

        if result.action_taken == "restart":
            self.reset()
        elif result.action_taken == "skip":
            question = self.state.current_question
            if question is not None and not question.required:
                self.processor.process(self.state, None)
            else:
                result.action_taken = "skip_failed"

        if result.response:
            self.add_message("assistant", result.response)
        logger.info(f"{self._log}[step=free_text] type={result.type} | action={result.action_taken}")
        self._debug("orchestrator", "Processed free text", {"type": result.type, "action": result.action_taken})
        return result

    def add_user_note(self, field: str, note: str) -> bool:
        return add_user_note(self.state, field, note)

    # =========================================================================
    # Messages
    # =========================================================================

    def add_message(self, role: str, content: str, mood: Optional[str] = None) -> ChatMessage:
        message = new_message(role, content, mood=mood)
        self.state.messages.append(message)
        return message

    async def generate_message(self, message_type: str, data: Optional[List[Dict[str, Any]]] = None) -> str:
        """
        Produce an assistant message.

        Greetings and celebrations come from templates; everything else
        is written by the chat model with the travel-buddy persona.
        """
        if message_type in TEMPLATE_MESSAGES:
            return pick_template(TEMPLATE_MESSAGES[message_type])

        try:
            messages = build_persona_messages(message_type, self.state.preferences, data)
            response = await self._timed_chat(message_type, messages)
            return response.strip()
        except Exception as e:
            logger.exception(f"{self._log}[step=message] Message generation failed | type={message_type}: {e}")
            return MESSAGE_FALLBACK

    # =========================================================================
    # Enrichment Results
    # =========================================================================

    def set_enrichment_status(self, category: str, status: str) -> None:
        if category not in ENRICHMENT_CATEGORIES:
            raise ValueError(f"Unknown enrichment category: {category}")
        if status not in ("pending", "loading", "done", "error"):
            raise ValueError(f"Unknown enrichment status: {status}")
        self.state.enrichment_status[category] = status
        logger.debug(f"{self._log}[step=enrichment] {category}={status}")

    def set_discovered_areas(self, areas: List[Dict[str, Any]]) -> None:
        self.state.discovered.areas = list(areas)
        self.set_enrichment_status("areas", "done")

    def set_discovered_hotels(self, hotels_by_area: Dict[str, List[Dict[str, Any]]]) -> None:
        self.state.discovered.hotels.update({k: list(v) for k, v in hotels_by_area.items()})
        self.set_enrichment_status("hotels", "done")

    def set_discovered_activities(self, activities: List[Dict[str, Any]]) -> None:
        self.state.discovered.activities = list(activities)
        self.set_enrichment_status("activities", "done")

    def set_discovered_restaurants(self, restaurants_by_cuisine: Dict[str, List[Dict[str, Any]]]) -> None:
        self.state.discovered.restaurants.update({k: list(v) for k, v in restaurants_by_cuisine.items()})
        self.set_enrichment_status("restaurants", "done")

    def set_discovered_experiences(self, experiences_by_activity: Dict[str, List[Dict[str, Any]]]) -> None:
        self.state.discovered.experiences.update({k: list(v) for k, v in experiences_by_activity.items()})
        self.set_enrichment_status("experiences", "done")

    def set_itinerary(self, itinerary: Dict[str, Any]) -> None:
        self.state.itinerary = itinerary
        self.state.itinerary_failed = False
        if self.state.phase == "generating":
            change_phase(self.state, "reviewing", "itinerary generated")
        self._debug("orchestrator", "Itinerary set", {"days": len(itinerary.get("days") or [])})

    def set_itinerary_failed(self) -> None:
        """Record a failed generation attempt; review proceeds without an itinerary."""
        self.state.itinerary_failed = True
        logger.warning(f"{self._log}[step=enrichment] Itinerary generation failed")

    # =========================================================================
    # Persistence
    # =========================================================================

    def export_state(self) -> SessionSnapshot:
        """Serialize the full session record."""
        return SessionSnapshot.from_data(self.state.model_dump(mode="json"), session_id=self.session_id)

    @classmethod
    def from_snapshot(
        cls,
        snapshot: Union[SessionSnapshot, Dict[str, Any]],
        **kwargs: Any,
    ) -> "PlanningOrchestrator":
        """
        Restore an orchestrator from an exported snapshot.

        Args:
            snapshot: SessionSnapshot or its dict form
            **kwargs: Collaborators passed through to the constructor

        Returns:
            PlanningOrchestrator resuming the exported session
        """
        if not isinstance(snapshot, SessionSnapshot):
            snapshot = SessionSnapshot.model_validate(snapshot)
        state = SessionState.model_validate(snapshot.state_data())
        kwargs.setdefault("session_id", snapshot.session_id)
        orchestrator = cls(state=state, **kwargs)
        logger.info(
            f"{orchestrator._log}[step=import] Restored session | phase={state.phase} | "
            f"history={len(state.question_history)}"
        )
        return orchestrator

    # =========================================================================
    # Housekeeping
    # =========================================================================

    def get_debug_entries(self) -> List[Dict[str, Any]]:
        return list(self.debug_entries)

    def reset(self) -> None:
        """Start the session over with a fresh record."""
        self.state = SessionState()
        self.debug_entries = []
        logger.info(f"{self._log}[step=reset] Session reset")
