"""
Advisory collaborators: seasonal warnings, local events, theme parks, surf.

The orchestrator only talks to the AdvisoryService protocol. The static
implementation below ships a small curated dataset and accepts injected
datasets so callers can plug in their own sources.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Any, List, Optional, Protocol


logger = logging.getLogger(__name__)

MONTH_NAMES = [
    "", "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


@dataclass
class EventsReport:
    """Events overlapping a trip, with crowd warnings and booking tips."""

    events: List[Dict[str, Any]] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    tips: List[str] = field(default_factory=list)

    @property
    def high_impact_count(self) -> int:
        return sum(1 for event in self.events if event.get("impact") == "high")


class AdvisoryService(Protocol):
    """Static knowledge lookups consumed by the orchestrator."""

    def seasonal_warnings(self, destination: str, start: date) -> List[Dict[str, Any]]:
        ...

    def events_for_dates(self, destination: str, start: date, end: date) -> EventsReport:
        ...

    def detect_theme_park(self, destination: str) -> Optional[str]:
        ...

    def theme_park_booking_reminders(self, park_id: str) -> List[str]:
        ...

    def detect_surf_destination(self, destination: str) -> Optional[str]:
        ...

    def surf_season_advice(self, surf_destination_id: str, month: int) -> Optional[str]:
        ...


# =============================================================================
# Default Datasets
# =============================================================================


DEFAULT_SEASONAL_WARNINGS: List[Dict[str, Any]] = [
    {
        "region": "Thailand",
        "months": [6, 7, 8, 9, 10],
        "type": "monsoon",
        "title": "Monsoon Season",
        "description": "Heavy rainfall expected, especially on islands and southern beaches. Some ferry services may be limited.",
        "severity": "warning",
        "price_impact": "lower",
    },
    {
        "region": "Thailand",
        "months": [12, 1, 2],
        "type": "peak",
        "title": "Peak Tourist Season",
        "description": "Best weather but highest prices and crowds. Book accommodations 2-3 months ahead for popular areas.",
        "severity": "info",
        "price_impact": "higher",
    },
    {
        "region": "Bali",
        "months": [12, 1, 2, 3],
        "type": "monsoon",
        "title": "Wet Season",
        "description": "Daily afternoon showers common. Mornings usually clear. Lower prices and fewer crowds.",
        "severity": "info",
        "price_impact": "lower",
    },
    {
        "region": "Bali",
        "months": [7, 8],
        "type": "peak",
        "title": "Peak Season",
        "description": "Dry season with perfect weather. Expect premium prices and book well in advance.",
        "severity": "info",
        "price_impact": "much_higher",
    },
    {
        "region": "Caribbean",
        "months": [8, 9, 10],
        "type": "extreme_weather",
        "title": "Hurricane Season Peak",
        "description": "Highest hurricane risk. Consider travel insurance and flexible bookings.",
        "severity": "caution",
        "price_impact": "lower",
    },
]

DEFAULT_EVENTS: Dict[str, List[Dict[str, Any]]] = {
    "spain": [
        {"name": "La Tomatina", "date": "08-28", "impact": "high", "booking_advice": "Valencia area hotels fill quickly"},
        {"name": "Running of the Bulls", "date": "07-06", "end_date": "07-14", "impact": "high"},
        {"name": "Las Fallas", "date": "03-15", "end_date": "03-19", "impact": "high"},
    ],
    "thailand": [
        {"name": "Songkran", "date": "04-13", "end_date": "04-15", "impact": "high", "booking_advice": "Extremely busy - book well in advance"},
        {"name": "Loi Krathong", "date": "11-15", "impact": "medium"},
    ],
    "japan": [
        {"name": "Cherry Blossom Season", "date": "03-25", "end_date": "04-15", "impact": "high", "booking_advice": "Hotels in Kyoto/Tokyo book 6+ months ahead"},
        {"name": "Golden Week", "date": "04-29", "end_date": "05-05", "impact": "high"},
    ],
    "germany": [
        {"name": "Oktoberfest", "date": "09-16", "end_date": "10-03", "impact": "high", "booking_advice": "Munich hotels book out months ahead"},
    ],
    "bali": [
        {"name": "Nyepi (Day of Silence)", "date": "03-11", "impact": "high", "booking_advice": "Plan activities around this day"},
    ],
}

UNIVERSAL_HOLIDAYS: List[Dict[str, Any]] = [
    {"name": "Christmas", "date": "12-25", "impact": "high"},
    {"name": "New Year's Eve", "date": "12-31", "impact": "high", "booking_advice": "Book restaurants and events well ahead"},
    {"name": "New Year's Day", "date": "01-01", "impact": "medium"},
]

THEME_PARK_BOOKING_WINDOWS: Dict[str, Dict[str, int]] = {
    "walt-disney-world": {
        "dining reservations": 60,
        "lightning lane": 7,
        "park reservations": 60,
        "hotel booking": 180,
    },
    "disneyland": {
        "dining reservations": 60,
        "lightning lane": 7,
    },
}

SURF_DESTINATIONS: Dict[str, Dict[str, Any]] = {
    "bali": {"name": "Bali", "best_months": [4, 5, 6, 7, 8, 9]},
    "costa-rica": {"name": "Costa Rica", "best_months": [3, 4, 5, 6, 7, 8, 9]},
    "hawaii": {"name": "Hawaii", "best_months": [11, 12, 1, 2, 3]},
    "portugal": {"name": "Portugal", "best_months": [9, 10, 11, 3, 4, 5]},
}


# =============================================================================
# Formatting
# =============================================================================


_SEVERITY_ICONS = {"caution": "🚨", "warning": "⚠️", "info": "ℹ️"}
_PRICE_NOTES = {
    "much_higher": " (prices significantly higher)",
    "higher": " (prices higher than usual)",
    "lower": " (good deals available)",
    "much_lower": " (great deals available)",
}


def format_seasonal_warnings(warnings: List[Dict[str, Any]]) -> str:
    """Render seasonal warnings as markdown paragraphs."""
    return "\n\n".join(
        f"{_SEVERITY_ICONS.get(w.get('severity'), '')} **{w.get('title')}**"
        f"{_PRICE_NOTES.get(w.get('price_impact'), '')}: {w.get('description')}"
        for w in warnings
    )


def _season_note(surf_destination_id: str, month: int) -> str:
    if surf_destination_id == "bali" and month in (11, 12, 1, 2, 3):
        return "wet season with smaller, inconsistent swells but fewer crowds"
    if surf_destination_id == "hawaii" and month in (6, 7, 8):
        return "flat on the North Shore, but South Shore has waves"
    if surf_destination_id == "portugal" and month in (6, 7, 8):
        return "smaller waves but warmer water and good for beginners"
    return "variable conditions"


# =============================================================================
# Static Implementation
# =============================================================================


class StaticAdvisoryService:
    """AdvisoryService backed by in-memory datasets."""

    def __init__(
        self,
        seasonal_warnings: Optional[List[Dict[str, Any]]] = None,
        events: Optional[Dict[str, List[Dict[str, Any]]]] = None,
    ):
        self._seasonal = DEFAULT_SEASONAL_WARNINGS if seasonal_warnings is None else seasonal_warnings
        self._events = DEFAULT_EVENTS if events is None else events

    def seasonal_warnings(self, destination: str, start: date) -> List[Dict[str, Any]]:
        dest_lower = destination.lower()
        return [
            warning
            for warning in self._seasonal
            if (warning["region"].lower() in dest_lower or dest_lower in warning["region"].lower())
            and start.month in warning["months"]
        ]

    def events_for_dates(self, destination: str, start: date, end: date) -> EventsReport:
        dest_lower = destination.lower()
        dest_head = dest_lower.split(",")[0].strip()
        dest_key = next(
            (key for key in self._events if key in dest_lower or dest_head in key),
            None,
        )
        candidates = (self._events.get(dest_key, []) if dest_key else []) + UNIVERSAL_HOLIDAYS

        report = EventsReport()
        for event in candidates:
            month, day = (int(part) for part in event["date"].split("-"))
            event_start = date(start.year, month, day)
            event_end = event_start
            if event.get("end_date"):
                end_month, end_day = (int(part) for part in event["end_date"].split("-"))
                event_end = date(start.year, end_month, end_day)

            if event_start <= end and event_end >= start:
                report.events.append(event)
                if event.get("impact") == "high":
                    report.warnings.append(
                        f"{event['name']} occurs during your trip - expect crowds and higher prices"
                    )
                    if event.get("booking_advice"):
                        report.tips.append(event["booking_advice"])

        if start.month in (12, 1):
            report.tips.append("Winter holiday season - book flights and hotels early")
        if 6 <= start.month <= 8:
            report.tips.append("Summer high season in Northern Hemisphere - expect peak prices")
        return report

    def detect_theme_park(self, destination: str) -> Optional[str]:
        lower = destination.lower()
        if "orlando" in lower or "disney world" in lower or "universal orlando" in lower:
            return "walt-disney-world"
        if "anaheim" in lower or "disneyland" in lower or "california adventure" in lower:
            return "disneyland"
        return None

    def theme_park_booking_reminders(self, park_id: str) -> List[str]:
        windows = THEME_PARK_BOOKING_WINDOWS.get(park_id, {})
        return [f"{label}: Book {days} days before your trip" for label, days in windows.items()]

    def detect_surf_destination(self, destination: str) -> Optional[str]:
        lower = destination.lower()
        if "bali" in lower or "indonesia" in lower:
            return "bali"
        if "costa rica" in lower:
            return "costa-rica"
        if "hawaii" in lower or "oahu" in lower or "maui" in lower:
            return "hawaii"
        if "portugal" in lower or "peniche" in lower or "ericeira" in lower:
            return "portugal"
        return None

    def surf_season_advice(self, surf_destination_id: str, month: int) -> Optional[str]:
        dest = SURF_DESTINATIONS.get(surf_destination_id)
        if not dest:
            return None
        if month in dest["best_months"]:
            return f"{MONTH_NAMES[month]} is a great time for surfing in {dest['name']}!"
        return (
            f"{MONTH_NAMES[month]} is not peak season, but you can still find waves. "
            f"Expect {_season_note(surf_destination_id, month)}."
        )
