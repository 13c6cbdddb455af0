"""
Schemas for the planning orchestrator.

Defines the session state record, question/tradeoff/split models, and the
API request/response models for the quick-plan endpoints.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any, Literal
from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


# =============================================================================
# Enumerations
# =============================================================================

Phase = Literal["gathering", "enriching", "generating", "reviewing", "satisfied"]
ConfidenceLevel = Literal["unknown", "inferred", "confirmed", "partial", "complete"]
EnrichmentStatus = Literal["pending", "loading", "done", "error"]

PHASE_ORDER = ("gathering", "enriching", "generating", "reviewing", "satisfied")

# partial and confirmed share a rank: both mean "answered, downstream pending"
CONFIDENCE_RANK: Dict[str, int] = {
    "unknown": 0,
    "inferred": 1,
    "confirmed": 2,
    "partial": 2,
    "complete": 3,
}

ENRICHMENT_CATEGORIES = (
    "reddit",
    "areas",
    "hotels",
    "activities",
    "pricing",
    "restaurants",
    "experiences",
)

# Every field the orchestrator tracks confidence for
TRACKED_FIELDS = (
    "destination",
    "dates",
    "party",
    "trip_occasion",
    "traveling_with_pets",
    "pet_type",
    "accessibility",
    "accessibility_type",
    "budget",
    "accommodation_type",
    "sustainability_preference",
    "activities",
    "pace",
    "surfing_details",
    "activity_skill_level",
    "vibe",
    "user_notes",
    "communities",
    "areas",
    "split",
    "hotel_preferences",
    "hotels",
    "dining",
    "dietary_restrictions",
    "cuisine_preferences",
    "restaurants",
    "experiences",
    "child_needs",
    "workation_needs",
    "multi_country_logistics",
    "theme_park_preferences",
)


def phase_index(phase: str) -> int:
    """Position of a phase in the state machine order."""
    return PHASE_ORDER.index(phase)


# =============================================================================
# Question Models
# =============================================================================


class QuestionConfig(BaseModel):
    """A materialized question ready to be rendered."""

    id: str = Field(description="Unique question id, q-<field>-<timestamp>")
    field: str = Field(description="Field this question populates, or tradeoff:<id>")
    message: str = Field(description="Prompt text, possibly augmented with alerts")
    input_type: str = Field(description="Input modality (chips, slider, areas, ...)")
    input_config: Dict[str, Any] = Field(
        default_factory=dict, description="Options and modality-specific data"
    )
    required: bool = False
    can_infer: bool = False


# =============================================================================
# Tradeoff Models
# =============================================================================


class TradeoffOption(BaseModel):
    """One way of resolving a tradeoff."""

    id: str
    label: str
    description: str = ""
    impact: Optional[str] = None


class Tradeoff(BaseModel):
    """A detected conflict between preferences."""

    id: str
    type: str
    title: str
    description: str
    conflicting_preferences: List[str] = Field(default_factory=list)
    resolution_options: List[TradeoffOption] = Field(default_factory=list)


class TradeoffResolution(BaseModel):
    """The user's chosen resolution for a tradeoff."""

    tradeoff_id: str
    selected_option_id: Optional[str] = None
    custom_input: Optional[str] = None
    resolved_at: str


# =============================================================================
# Itinerary Split Models
# =============================================================================


class ItineraryStop(BaseModel):
    """One base in an itinerary split."""

    area_id: str
    area: Dict[str, Any] = Field(default_factory=dict)
    nights: int = Field(ge=1)
    order: int = 1
    arrival_day: int = 0
    departure_day: int = 0
    is_arrival_city: bool = False
    is_departure_city: bool = False
    travel_day_before: bool = False


class ItinerarySplit(BaseModel):
    """
    An ordered allocation of trip nights across areas.

    Night counts across stops always sum to the trip length.
    """

    id: str
    name: str
    stops: List[ItineraryStop] = Field(min_length=1)
    fit_score: float = 0.8
    friction_score: float = 0.0
    feasibility_score: float = 0.9
    why_this_works: str = ""
    tradeoffs: List[str] = Field(default_factory=list)

    @property
    def total_nights(self) -> int:
        return sum(stop.nights for stop in self.stops)


class SplitAdvice(BaseModel):
    """How many bases suit a trip length."""

    min_bases: int
    max_bases: int
    advice: str
    tip: str


# =============================================================================
# Session State
# =============================================================================


class DiscoveredData(BaseModel):
    """Candidate caches filled by the enrichment services."""

    areas: List[Dict[str, Any]] = Field(default_factory=list)
    hotels: Dict[str, List[Dict[str, Any]]] = Field(default_factory=dict)
    activities: List[Dict[str, Any]] = Field(default_factory=list)
    restaurants: Dict[str, List[Dict[str, Any]]] = Field(default_factory=dict)
    experiences: Dict[str, List[Dict[str, Any]]] = Field(default_factory=dict)


class ChatMessage(BaseModel):
    """One transcript entry."""

    id: str
    role: Literal["assistant", "user", "system"]
    content: str
    timestamp: str
    mood: Optional[str] = None


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_message(role: str, content: str, mood: Optional[str] = None) -> ChatMessage:
    """Create a transcript entry with a fresh id and timestamp."""
    return ChatMessage(
        id=f"msg-{uuid.uuid4().hex[:12]}",
        role=role,
        content=content,
        timestamp=utc_now_iso(),
        mood=mood,
    )


class AlertQueue(BaseModel):
    """Contextual alerts waiting to be appended to the next question."""

    event_alert: Optional[Dict[str, str]] = None
    activity_warnings: List[str] = Field(default_factory=list)
    theme_park_warning: Optional[str] = None
    seasonal_warning: Optional[str] = None

    def is_empty(self) -> bool:
        return (
            self.event_alert is None
            and not self.activity_warnings
            and self.theme_park_warning is None
            and self.seasonal_warning is None
        )


def _initial_confidence() -> Dict[str, str]:
    return {field: "unknown" for field in TRACKED_FIELDS}


def _initial_enrichment_status() -> Dict[str, str]:
    return {category: "pending" for category in ENRICHMENT_CATEGORIES}


def _initial_preferences() -> Dict[str, Any]:
    return {
        "selected_activities": [],
        "hard_nos": [],
        "must_dos": [],
        "hotel_vibe_preferences": [],
        "child_ages": [],
        "children": 0,
        "adults": 0,
        "selected_areas": [],
        "selected_split": None,
    }


class SessionState(BaseModel):
    """
    The single mutable session record owned by one orchestrator.

    Handlers mutate this model in place; export/import goes through
    SessionSnapshot.
    """

    phase: Phase = "gathering"
    preferences: Dict[str, Any] = Field(default_factory=_initial_preferences)
    confidence: Dict[str, ConfidenceLevel] = Field(default_factory=_initial_confidence)
    active_tradeoffs: List[Tradeoff] = Field(default_factory=list)
    resolved_tradeoffs: List[TradeoffResolution] = Field(default_factory=list)
    enrichment_status: Dict[str, EnrichmentStatus] = Field(
        default_factory=_initial_enrichment_status
    )
    discovered: DiscoveredData = Field(default_factory=DiscoveredData)
    messages: List[ChatMessage] = Field(default_factory=list)
    current_question: Optional[QuestionConfig] = None
    question_history: List[str] = Field(default_factory=list)
    itinerary: Optional[Dict[str, Any]] = None
    itinerary_failed: bool = False
    alerts: AlertQueue = Field(default_factory=AlertQueue)

    # -------------------------------------------------------------------------
    # Confidence helpers
    # -------------------------------------------------------------------------

    def get_confidence(self, field: str) -> str:
        return self.confidence.get(field, "unknown")

    def is_known(self, field: str) -> bool:
        return self.get_confidence(field) != "unknown"

    def set_confidence(self, field: str, level: str, force: bool = False) -> bool:
        """
        Set a field's confidence level.

        Lower-ranked writes are ignored unless force is set; only go-back and
        dissatisfaction pass force.

        Returns:
            True if the level was written
        """
        current = self.get_confidence(field)
        if not force and CONFIDENCE_RANK[level] < CONFIDENCE_RANK[current]:
            logger.warning(
                f"[orchestrator] Ignoring confidence regression | "
                f"field={field} | current={current} | requested={level}"
            )
            return False
        self.confidence[field] = level
        return True

    # -------------------------------------------------------------------------
    # Preference helpers
    # -------------------------------------------------------------------------

    @property
    def trip_nights(self) -> Optional[int]:
        return self.preferences.get("trip_length")

    @property
    def selected_areas(self) -> List[Dict[str, Any]]:
        return self.preferences.get("selected_areas") or []

    def has_kids(self) -> bool:
        return (self.preferences.get("children") or 0) > 0

    def youngest_child_age(self) -> Optional[int]:
        ages = self.preferences.get("child_ages") or []
        return min(ages) if ages else None


# =============================================================================
# API Request/Response Models
# =============================================================================


class StartSessionRequest(BaseModel):
    """Request to start a new planning session."""

    destination: Optional[str] = Field(
        default=None, description="Optional destination to pre-answer"
    )


class RespondRequest(BaseModel):
    """Request to answer the current question."""

    session_id: str = Field(description="Session identifier")
    question_id: Optional[str] = Field(
        default=None, description="Id of the question being answered"
    )
    answer: Any = Field(default=None, description="Raw answer for the current field")


class FreeTextRequest(BaseModel):
    """Request carrying free text typed at any point in the flow."""

    session_id: str
    text: str


class GoBackRequest(BaseModel):
    """Request to rewind to the previously answered question."""

    session_id: str


class QuestionResponse(BaseModel):
    """Response carrying the next question (or none) and session summary."""

    session_id: str
    phase: Phase
    status: Literal["question", "wait", "complete"] = Field(
        description="question: ask; wait: enrichment running; complete: satisfied"
    )
    question: Optional[QuestionConfig] = None
    messages: List[ChatMessage] = Field(default_factory=list)


class FreeTextResponse(BaseModel):
    """Result of interpreting free text."""

    session_id: str
    type: Literal["question", "preference", "command"]
    response: Optional[str] = None
    action_taken: Optional[str] = None


class SessionStatusResponse(BaseModel):
    """Response for session status query."""

    session_id: str
    exists: bool
    phase: Optional[Phase] = None
    confidence: Optional[Dict[str, str]] = None
    question_history: Optional[List[str]] = None
