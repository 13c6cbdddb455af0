"""
Shared builders for orchestrator and pipeline tests.

Provides a fake chat callable, a quiet advisory service, canned answers
for every field, and a driver that walks a session through the flow
with the mock discovery service.
"""

from typing import Any, Dict, List, Optional

from quickplan.orchestrator.advisories import StaticAdvisoryService
from quickplan.orchestrator.orchestrator import PlanningOrchestrator
from quickplan.orchestrator.schemas import QuestionConfig
from quickplan.pipeline.build import advance_session
from quickplan.pipeline.mock_data import MockDiscoveryService


class FakeChat:
    """Chat callable that records prompts and returns a fixed reply."""

    def __init__(self, reply: str = "Sounds great!", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.prompts: List[List[Dict[str, str]]] = []

    async def __call__(self, messages, temperature):
        self.prompts.append(messages)
        if self.error is not None:
            raise self.error
        return self.reply


def quiet_advisories() -> StaticAdvisoryService:
    """Advisory service with no seasonal warnings and no local events."""
    return StaticAdvisoryService(seasonal_warnings=[], events={})


def make_orchestrator(**kwargs) -> PlanningOrchestrator:
    """Create an orchestrator with offline collaborators."""
    kwargs.setdefault("session_id", "test-session-001")
    kwargs.setdefault("chat", FakeChat())
    kwargs.setdefault("advisories", quiet_advisories())
    return PlanningOrchestrator(**kwargs)


# Answers used when walking a session through the whole flow
STANDARD_ANSWERS: Dict[str, Any] = {
    "destination": "Bali",
    "dates": {"start_date": "2026-06-10", "end_date": "2026-06-17"},
    "party": {"adults": 2, "children": 0},
    "trip_occasion": "anniversary",
    "traveling_with_pets": "no",
    "accessibility": "no",
    "budget": 200,
    "accommodation_type": "hotel",
    "sustainability_preference": "nice_to_have",
    "activities": ["beach", "food_tour", "cultural"],
    "pace": "balanced",
    "vibe": "Sunsets by the water",
    "communities": ["travel"],
    "hotel_preferences": ["pool"],
    "dining": "plan",
    "dietary_restrictions": ["none"],
    "cuisine_preferences": ["seafood"],
}


def answer_for(question: QuestionConfig, answers: Optional[Dict[str, Any]] = None) -> Any:
    """Pick an answer for a question, choosing the first candidate where needed."""
    answers = {**STANDARD_ANSWERS, **(answers or {})}
    field = question.field
    if field in answers:
        return answers[field]
    if field == "areas":
        return [question.input_config["area_candidates"][0]["id"]]
    if field in ("hotels", "restaurants", "experiences"):
        return question.input_config["candidates"][0]
    if field == "split":
        return question.input_config["split_options"][0]
    raise AssertionError(f"No canned answer for field {field}")


async def drive(
    orchestrator: PlanningOrchestrator,
    services: Optional[MockDiscoveryService] = None,
    stop_at: Optional[str] = None,
    answers: Optional[Dict[str, Any]] = None,
    max_steps: int = 60,
):
    """
    Answer questions until stop_at is asked, the satisfaction question
    appears, or the session stops asking.

    Returns:
        The last Selection
    """
    services = services or MockDiscoveryService()
    selection = None
    for _ in range(max_steps):
        selection = await advance_session(orchestrator, services)
        if selection.status != "question":
            return selection
        field = selection.question.field
        if field == stop_at or field == "satisfaction":
            return selection
        result = await orchestrator.process_response(answer_for(selection.question, answers))
        assert result.accepted, f"{field} rejected: {result.reason}"
    raise AssertionError("Session did not settle within max_steps")
