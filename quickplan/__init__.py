"""
Quick-plan package for conversational trip planning.

This package contains:
- shared/: Common infrastructure (LLM client, logging, snapshot contract)
- orchestrator/: Adaptive question flow and the quick-plan API
- pipeline/: Enrichment graph (areas -> hotels -> dining -> experiences -> itinerary)
"""

from quickplan.orchestrator.orchestrator import PlanningOrchestrator
from quickplan.pipeline.build import advance_session, create_enrichment_graph

__all__ = ["PlanningOrchestrator", "advance_session", "create_enrichment_graph"]
