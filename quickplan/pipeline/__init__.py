"""
Enrichment pipeline.

Sequences discovery steps for a planning session as a LangGraph graph:
    areas -> hotels -> restaurants -> experiences -> itinerary -> done

Discovery itself is injected through the DiscoveryService protocol;
MockDiscoveryService provides template data for local runs and tests.
"""

from quickplan.pipeline.build import (
    advance_session,
    build_enrichment_state,
    create_enrichment_graph,
    run_enrichment,
)
from quickplan.pipeline.mock_data import MockDiscoveryService
from quickplan.pipeline.router import route_next_step
from quickplan.pipeline.services import DiscoveryService

__all__ = [
    "advance_session",
    "build_enrichment_state",
    "create_enrichment_graph",
    "run_enrichment",
    "route_next_step",
    "DiscoveryService",
    "MockDiscoveryService",
]
