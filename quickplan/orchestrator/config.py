"""
Configuration for the planning orchestrator.

Centralizes tunable constants (chat retry policy, suggestion fetches,
budget slider and band, trip length bounds, pipeline limits) so behavior
can be adjusted without touching the selector or handlers.
"""

from dataclasses import dataclass, replace


@dataclass
class OrchestratorConfig:
    """
    Configuration for the orchestrator and its collaborators.

    Attributes:
        model: Chat-completion model identifier
        chat_temperature: Temperature for conversational replies
        chat_max_attempts: Total chat attempts before the canned fallback
        backoff_multiplier: Base backoff wait in seconds
        backoff_cap: Maximum wait between chat attempts in seconds
        suggestion_temperature: Temperature for suggestion fetches
        suggestion_timeout: Seconds before a suggestion fetch is abandoned
        budget_min / budget_max / budget_step / budget_default: Slider bounds
        budget_band_floor: Lower band never drops below this share of the value
        budget_band_below: Share of the value subtracted for the lower bound
        budget_band_above: Share of the value added for the upper bound
        budget_unlimited_max: Upper bound stored when the slider is pinned
        dissatisfaction_budget_factor: Upper bound multiplier on "over budget"
        min_nights / max_nights: Clamp for the trip length
        default_trip_length: Nights assumed for splits before dates are known
        recursion_limit: Maximum enrichment graph steps
    """

    # Chat completion
    model: str = "gpt-4.1-mini"
    chat_temperature: float = 0.7
    chat_max_attempts: int = 3
    backoff_multiplier: float = 0.5
    backoff_cap: float = 4.0

    # Suggestion fetches
    suggestion_temperature: float = 0.3
    suggestion_timeout: float = 10.0

    # Budget slider (per night)
    budget_min: int = 50
    budget_max: int = 1000
    budget_step: int = 25
    budget_default: int = 175
    budget_band_floor: float = 0.5
    budget_band_below: float = 0.25
    budget_band_above: float = 0.25
    budget_unlimited_max: int = 999999
    dissatisfaction_budget_factor: float = 0.75

    # Trip length
    min_nights: int = 1
    max_nights: int = 60
    default_trip_length: int = 7

    # Enrichment graph execution limit
    recursion_limit: int = 25


# Default configuration instance
DEFAULT_CONFIG = OrchestratorConfig()


def get_config(**overrides) -> OrchestratorConfig:
    """
    Create a configuration with optional overrides.

    Args:
        **overrides: Any OrchestratorConfig attribute to replace

    Returns:
        OrchestratorConfig with specified overrides applied
    """
    return replace(DEFAULT_CONFIG, **overrides)
