"""
FastAPI endpoints for the quick-plan orchestrator.

Provides a REST API for starting planning sessions, fetching the next
question, submitting answers, going back, free text, and exporting or
importing session snapshots.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Any, Optional

from fastapi import APIRouter, HTTPException, status

from quickplan.orchestrator.orchestrator import PlanningOrchestrator
from quickplan.orchestrator.schemas import (
    FreeTextRequest,
    FreeTextResponse,
    GoBackRequest,
    QuestionResponse,
    RespondRequest,
    SessionStatusResponse,
    StartSessionRequest,
)
from quickplan.orchestrator.selector import Selection
from quickplan.orchestrator.suggestions import ChatFn, SuggestionCache
from quickplan.pipeline import DiscoveryService, MockDiscoveryService, advance_session
from quickplan.shared.contracts import SessionSnapshot
from quickplan.shared.logging import DebugLogger, get_or_create_logger, remove_logger


logger = logging.getLogger(__name__)

# Create router for quick-plan route
router = APIRouter(prefix="/api/quick-plan", tags=["quick-plan"])


@dataclass
class PlanningDependencies:
    """Collaborators shared by every session the router creates."""

    services: DiscoveryService = field(default_factory=MockDiscoveryService)
    suggestions: Optional[SuggestionCache] = field(default_factory=SuggestionCache)
    chat: Optional[ChatFn] = None


# In-memory session storage (replace with Redis/DB in production)
_sessions: Dict[str, Dict[str, Any]] = {}

_dependencies = PlanningDependencies()


def configure_dependencies(dependencies: PlanningDependencies) -> None:
    """Swap the collaborators used for sessions created from now on."""
    global _dependencies
    _dependencies = dependencies


def _new_orchestrator(session_id: Optional[str] = None, debug_logger: Optional[DebugLogger] = None):
    return PlanningOrchestrator(
        session_id=session_id,
        suggestions=_dependencies.suggestions,
        chat=_dependencies.chat,
        debug_logger=debug_logger,
    )


def _get_orchestrator(session_id: str) -> PlanningOrchestrator:
    if session_id not in _sessions:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session {session_id} not found",
        )
    return _sessions[session_id]["orchestrator"]


def _log_timing(
    debug_logger: DebugLogger,
    endpoint: str,
    started: float,
    phase: Optional[str] = None,
    success: bool = True,
    error: Optional[str] = None,
) -> None:
    debug_logger.log_api_timing(
        endpoint=endpoint,
        duration_ms=(time.perf_counter() - started) * 1000,
        phase=phase,
        success=success,
        error=error,
    )


def _question_response(orchestrator: PlanningOrchestrator, selection: Selection) -> QuestionResponse:
    return QuestionResponse(
        session_id=orchestrator.session_id,
        phase=orchestrator.phase,
        status=selection.status,
        question=selection.question,
        messages=list(orchestrator.state.messages),
    )


def _finish_if_satisfied(orchestrator: PlanningOrchestrator, debug_logger: DebugLogger) -> None:
    if orchestrator.phase == "satisfied":
        debug_logger.log_session_summary(
            final_phase=orchestrator.phase,
            answered_fields=len(orchestrator.state.question_history),
        )
        remove_logger(orchestrator.session_id)


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/start", response_model=QuestionResponse)
async def start_session(request: StartSessionRequest) -> QuestionResponse:
    """
    Start a new planning session.

    Greets the user and returns the first question. A destination in the
    request answers the destination question up front.

    Args:
        request: Optional pre-filled destination

    Returns:
        Session ID and first question
    """
    api_start_time = time.perf_counter()
    orchestrator = _new_orchestrator()
    session_id = orchestrator.session_id
    debug_logger = get_or_create_logger(session_id)
    orchestrator.debug_logger = debug_logger

    try:
        greeting = await orchestrator.generate_message("greeting")
        orchestrator.add_message("assistant", greeting, mood="excited")

        if request.destination:
            await orchestrator.get_next_question()
            result = await orchestrator.process_response(request.destination)
            if not result.accepted:
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail=result.reason,
                )

        selection = await advance_session(orchestrator, _dependencies.services)
        _sessions[session_id] = {
            "orchestrator": orchestrator,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        logger.info(f"[session={session_id}] [api] Session started | destination={request.destination}")

        _log_timing(debug_logger, "/api/quick-plan/start", api_start_time, phase=orchestrator.phase)
        return _question_response(orchestrator, selection)

    except HTTPException as e:
        _log_timing(debug_logger, "/api/quick-plan/start", api_start_time, success=False, error=str(e.detail))
        raise
    except Exception as e:
        logger.exception(f"[session={session_id}] [api] Failed to start session: {e}")
        _log_timing(debug_logger, "/api/quick-plan/start", api_start_time, success=False, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to start session: {str(e)}",
        )


@router.get("/next-question/{session_id}", response_model=QuestionResponse)
async def next_question(session_id: str) -> QuestionResponse:
    """
    Run any ready enrichment and return what to show next.

    Args:
        session_id: Session identifier

    Returns:
        Next question, a wait status, or completion
    """
    api_start_time = time.perf_counter()
    orchestrator = _get_orchestrator(session_id)
    debug_logger = get_or_create_logger(session_id)

    try:
        selection = await advance_session(orchestrator, _dependencies.services)
        _log_timing(debug_logger, "/api/quick-plan/next-question", api_start_time, phase=orchestrator.phase)
        return _question_response(orchestrator, selection)
    except Exception as e:
        logger.exception(f"[session={session_id}] [api] Failed to select next question: {e}")
        _log_timing(debug_logger, "/api/quick-plan/next-question", api_start_time, success=False, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to select next question: {str(e)}",
        )


@router.post("/respond", response_model=QuestionResponse)
async def respond(request: RespondRequest) -> QuestionResponse:
    """
    Answer the current question.

    A rejected answer returns 422 with the reason and leaves the session
    unchanged.

    Args:
        request: Session ID, question ID and raw answer

    Returns:
        The next question after the answer is applied
    """
    api_start_time = time.perf_counter()
    session_id = request.session_id
    orchestrator = _get_orchestrator(session_id)
    debug_logger = get_or_create_logger(session_id)

    try:
        result = await orchestrator.process_response(request.answer, question_id=request.question_id)
        if not result.accepted:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=result.reason,
            )

        selection = await advance_session(orchestrator, _dependencies.services)
        _log_timing(debug_logger, "/api/quick-plan/respond", api_start_time, phase=orchestrator.phase)
        _finish_if_satisfied(orchestrator, debug_logger)
        return _question_response(orchestrator, selection)

    except HTTPException as e:
        _log_timing(debug_logger, "/api/quick-plan/respond", api_start_time, success=False, error=str(e.detail))
        raise
    except Exception as e:
        logger.exception(f"[session={session_id}] [api] Failed to process response: {e}")
        _log_timing(debug_logger, "/api/quick-plan/respond", api_start_time, success=False, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to process response: {str(e)}",
        )


@router.post("/go-back", response_model=QuestionResponse)
async def go_back(request: GoBackRequest) -> QuestionResponse:
    """
    Rewind to the previously answered question.

    Returns:
        The re-asked question, or the current one when there is nothing
        to go back to
    """
    session_id = request.session_id
    orchestrator = _get_orchestrator(session_id)

    target = orchestrator.go_back()
    logger.info(f"[session={session_id}] [api] Go back | target={target}")
    selection = await advance_session(orchestrator, _dependencies.services)
    return _question_response(orchestrator, selection)


@router.post("/free-text", response_model=FreeTextResponse)
async def free_text(request: FreeTextRequest) -> FreeTextResponse:
    """
    Interpret text typed outside the structured inputs.

    Args:
        request: Session ID and text

    Returns:
        How the text was interpreted and any assistant reply
    """
    orchestrator = _get_orchestrator(request.session_id)
    result = await orchestrator.process_free_text(request.text)
    return FreeTextResponse(
        session_id=request.session_id,
        type=result.type,
        response=result.response,
        action_taken=result.action_taken,
    )


@router.get("/export/{session_id}", response_model=SessionSnapshot)
async def export_session(session_id: str) -> SessionSnapshot:
    """Export the full session record as a snapshot."""
    return _get_orchestrator(session_id).export_state()


@router.post("/import", response_model=SessionStatusResponse)
async def import_session(snapshot: SessionSnapshot) -> SessionStatusResponse:
    """
    Restore a session from a snapshot.

    An existing session with the same ID is replaced.
    """
    orchestrator = PlanningOrchestrator.from_snapshot(
        snapshot,
        suggestions=_dependencies.suggestions,
        chat=_dependencies.chat,
        debug_logger=get_or_create_logger(snapshot.session_id),
    )
    _sessions[orchestrator.session_id] = {
        "orchestrator": orchestrator,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    return await get_session_status(orchestrator.session_id)


@router.get("/session/{session_id}", response_model=SessionStatusResponse)
async def get_session_status(session_id: str) -> SessionStatusResponse:
    """
    Get the status of a planning session.

    Args:
        session_id: Session identifier

    Returns:
        Session status information
    """
    if session_id not in _sessions:
        return SessionStatusResponse(
            session_id=session_id,
            exists=False,
        )

    state = _sessions[session_id]["orchestrator"].state
    return SessionStatusResponse(
        session_id=session_id,
        exists=True,
        phase=state.phase,
        confidence=dict(state.confidence),
        question_history=list(state.question_history),
    )


@router.delete("/session/{session_id}")
async def delete_session(session_id: str) -> Dict[str, str]:
    """
    Delete a planning session.

    Args:
        session_id: Session identifier

    Returns:
        Confirmation message
    """
    if session_id not in _sessions:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session {session_id} not found",
        )

    del _sessions[session_id]
    remove_logger(session_id)

    return {"message": f"Session {session_id} deleted"}


@router.get("/health")
async def health_check() -> Dict[str, str]:
    """
    Health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": "quick-plan-orchestrator",
    }
