"""
Nightly budget helpers.

The slider answer is widened into a band around the chosen value; the
band's upper bound is what accommodation inference, community picks and
hotel discovery read back.
"""

import math
from typing import Dict, Any

from quickplan.orchestrator.config import OrchestratorConfig, DEFAULT_CONFIG


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def budget_ceiling(preferences: Dict[str, Any]) -> int:
    return (preferences.get("budget_per_night") or {}).get("max") or 200


def budget_band(value: float, config: OrchestratorConfig = DEFAULT_CONFIG) -> Dict[str, Any]:
    """
    Widen a per-night slider value into a min/max band.

    A value at or above the slider maximum means "no upper limit" and
    stores the unlimited sentinel as the max.

    Returns:
        Dict with min, max and unlimited
    """
    below = round_half_up(value * config.budget_band_below)
    above = round_half_up(value * config.budget_band_above)
    unlimited = value >= config.budget_max
    return {
        "min": max(round_half_up(value * config.budget_band_floor), round_half_up(value - below)),
        "max": config.budget_unlimited_max if unlimited else round_half_up(value + above),
        "unlimited": unlimited,
    }
