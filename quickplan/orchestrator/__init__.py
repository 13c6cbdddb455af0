"""
Adaptive planning orchestrator.

Runs the question flow for one trip-planning session: picks the next
question, applies answers, infers what it can, surfaces tradeoffs, and
handles go-back, free text and dissatisfaction rewinds.
"""

from quickplan.orchestrator.orchestrator import PlanningOrchestrator
from quickplan.orchestrator.schemas import SessionState
from quickplan.orchestrator.selector import Selection
from quickplan.orchestrator.suggestions import SuggestionCache

__all__ = ["PlanningOrchestrator", "SessionState", "Selection", "SuggestionCache"]
