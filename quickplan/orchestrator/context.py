"""
Collaborators shared by the option generators, selector and handlers.
"""

from dataclasses import dataclass, field
from typing import Optional

from quickplan.orchestrator.advisories import AdvisoryService, StaticAdvisoryService
from quickplan.orchestrator.config import OrchestratorConfig, DEFAULT_CONFIG
from quickplan.orchestrator.suggestions import SuggestionCache
from quickplan.orchestrator.tradeoffs import TradeoffDetector, no_tradeoffs


@dataclass
class PlanningContext:
    """
    Injected services for one orchestrator.

    Attributes:
        config: Tunable constants
        suggestions: Destination suggestion cache, None to use static lists
        advisories: Seasonal, event, theme-park and surf lookups
        detector: Tradeoff rule engine over preferences
    """

    config: OrchestratorConfig = field(default_factory=lambda: DEFAULT_CONFIG)
    suggestions: Optional[SuggestionCache] = None
    advisories: AdvisoryService = field(default_factory=StaticAdvisoryService)
    detector: TradeoffDetector = no_tradeoffs
