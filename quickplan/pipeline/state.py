"""
Enrichment graph state schema.

Carries a read-only projection of the planning session into the graph
plus one result slot per discovery step. Results are applied back to the
session by run_enrichment once the graph finishes.
"""

from typing import Any, Dict, List, Optional, TypedDict, Annotated
import operator


class EnrichmentState(TypedDict):
    """
    State schema for the enrichment graph.

    The session projection is never written by nodes; each node fills its
    own result slot and its category in enrichment_status.
    """

    # Session projection
    session_id: Optional[str]
    phase: str
    preferences: Dict[str, Any]
    confidence: Dict[str, str]
    discovered: Dict[str, Any]

    # Enrichment progress (category -> pending | loading | done | error)
    enrichment_status: Dict[str, str]

    # Result slots (populated as steps complete)
    areas: Optional[List[Dict[str, Any]]]
    hotels: Optional[Dict[str, List[Dict[str, Any]]]]
    restaurants: Optional[Dict[str, List[Dict[str, Any]]]]
    experiences: Optional[Dict[str, List[Dict[str, Any]]]]
    itinerary: Optional[Dict[str, Any]]
    itinerary_failed: bool

    # Graph tracking
    current_step: str
    errors: Annotated[List[str], operator.add]
    messages: Annotated[List[dict], operator.add]
