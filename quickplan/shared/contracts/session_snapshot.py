"""
Session snapshot contract.

Defines the serializable form of a planning session. Exporting and
importing a snapshot is the only way session state crosses a process or
storage boundary; everything in it is plain JSON data.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


SNAPSHOT_VERSION = 1


class DiscoveredSnapshot(BaseModel):
    """Discovery results keyed the same way the session keys them."""

    areas: List[Dict[str, Any]] = Field(default_factory=list)
    hotels: Dict[str, List[Dict[str, Any]]] = Field(
        default_factory=dict, description="Hotel candidates by area id"
    )
    activities: List[Dict[str, Any]] = Field(default_factory=list)
    restaurants: Dict[str, List[Dict[str, Any]]] = Field(
        default_factory=dict, description="Restaurant candidates by cuisine"
    )
    experiences: Dict[str, List[Dict[str, Any]]] = Field(
        default_factory=dict, description="Experience candidates by activity type"
    )


class SessionSnapshot(BaseModel):
    """
    Contract for an exported planning session (v1).

    Carries every part of the session record needed to resume planning
    exactly where it stopped: the next question asked after import is the
    one that would have been asked before export.
    """

    version: int = Field(default=SNAPSHOT_VERSION, description="Snapshot format version")
    session_id: Optional[str] = Field(default=None, description="Session the snapshot was taken from")
    exported_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="ISO timestamp of the export",
    )

    phase: str = "gathering"
    preferences: Dict[str, Any] = Field(default_factory=dict)
    confidence: Dict[str, str] = Field(default_factory=dict)
    active_tradeoffs: List[Dict[str, Any]] = Field(default_factory=list)
    resolved_tradeoffs: List[Dict[str, Any]] = Field(default_factory=list)
    enrichment_status: Dict[str, str] = Field(default_factory=dict)
    discovered: DiscoveredSnapshot = Field(default_factory=DiscoveredSnapshot)
    messages: List[Dict[str, Any]] = Field(default_factory=list)
    current_question: Optional[Dict[str, Any]] = None
    itinerary: Optional[Dict[str, Any]] = None
    itinerary_failed: bool = Field(default=False, description="Last itinerary generation attempt failed")
    question_history: List[str] = Field(default_factory=list)
    alerts: Dict[str, Any] = Field(
        default_factory=dict, description="Queued alerts not yet shown with a question"
    )

    @classmethod
    def from_data(cls, data: Dict[str, Any], session_id: Optional[str] = None) -> "SessionSnapshot":
        """
        Factory method to create a snapshot from a dumped session record.

        Args:
            data: JSON-mode dump of the session state
            session_id: Session the state belongs to

        Returns:
            SessionSnapshot instance
        """
        return cls(session_id=session_id, **data)

    def state_data(self) -> Dict[str, Any]:
        """The session record fields, without snapshot metadata."""
        return self.model_dump(exclude={"version", "session_id", "exported_at"})
