"""
Destination and party detection rules.

Pure functions that recognize multi-country destinations and flag
activities unsuitable for the youngest traveller.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List


# =============================================================================
# Multi-country Detection
# =============================================================================


KNOWN_COUNTRIES = frozenset(
    [
        "thailand", "vietnam", "cambodia", "laos", "myanmar", "malaysia", "singapore",
        "indonesia", "philippines", "japan", "korea", "china", "taiwan", "india", "nepal",
        "sri lanka", "maldives", "france", "italy", "spain", "portugal", "germany",
        "netherlands", "belgium", "switzerland", "austria", "greece", "croatia",
        "montenegro", "slovenia", "czech", "poland", "hungary", "uk", "england",
        "scotland", "ireland", "iceland", "norway", "sweden", "denmark", "finland",
        "morocco", "egypt", "south africa", "kenya", "tanzania", "namibia", "usa",
        "canada", "mexico", "costa rica", "panama", "colombia", "peru", "chile",
        "argentina", "brazil", "australia", "new zealand", "fiji", "uae", "dubai",
        "qatar", "jordan", "turkey", "israel", "puerto rico", "dominican republic",
        "czech republic", "united kingdom", "south korea", "north korea",
    ]
)

# Curated pairings, matched when every keyword appears in the destination
KNOWN_COMBOS: Dict[str, Dict[str, List[str]]] = {
    "portugal spain": {
        "countries": ["Portugal", "Spain"],
        "tips": [
            "Both in Schengen zone - no visa issues",
            "Train from Lisbon to Madrid ~10hrs, or quick flight",
            "Consider Renfe train tickets in advance for best prices",
        ],
    },
    "thailand vietnam": {
        "countries": ["Thailand", "Vietnam"],
        "tips": [
            "Check visa requirements for Vietnam",
            "Budget airlines like AirAsia connect major cities",
            "Consider overnight buses for budget travel",
        ],
    },
    "italy france": {
        "countries": ["Italy", "France"],
        "tips": [
            "Both in Schengen zone",
            "High-speed trains connect major cities",
            "Consider open-jaw flights to save backtracking",
        ],
    },
    "japan korea": {
        "countries": ["Japan", "South Korea"],
        "tips": [
            "Check visa requirements",
            "Quick flights between Tokyo/Seoul (~2hrs)",
            "Consider JR Pass for Japan portion",
        ],
    },
    "croatia montenegro": {
        "countries": ["Croatia", "Montenegro"],
        "tips": [
            "Montenegro not in EU - check visa",
            "Easy day trips between countries",
            "Stunning coastal drive along Adriatic",
        ],
    },
    "maldives dubai": {
        "countries": ["Maldives", "UAE"],
        "tips": [
            "Dubai is common stopover",
            "Good flight connections",
            "Very different vibes - beach vs city",
        ],
    },
}

_COUNTRY = r"(\w+(?:\s+\w+)?)"

# Comma-separated forms are left out so "City, Country" is not a match
TWO_COUNTRY_PATTERNS = [
    re.compile(rf"^{_COUNTRY}\s+(?:and|&)\s+{_COUNTRY}$", re.IGNORECASE),
    re.compile(rf"^{_COUNTRY}\s+to\s+{_COUNTRY}$", re.IGNORECASE),
    re.compile(rf"^{_COUNTRY}\s+then\s+{_COUNTRY}$", re.IGNORECASE),
    re.compile(rf"^{_COUNTRY}\s*\+\s*{_COUNTRY}$", re.IGNORECASE),
]

LIST_SEPARATOR = re.compile(r"[,&]\s*|\s+and\s+|\s+then\s+")


@dataclass
class MultiCountryInfo:
    """Result of multi-country detection."""

    countries: List[str]
    is_multi_country: bool
    logistics_tips: List[str] = field(default_factory=list)


def _title_case(name: str) -> str:
    return " ".join(word[:1].upper() + word[1:].lower() for word in name.split(" "))


def detect_multi_country(destination: str) -> MultiCountryInfo:
    """
    Detect whether a destination spans several countries.

    Args:
        destination: Raw destination text as typed by the user

    Returns:
        MultiCountryInfo with title-cased country names and logistics tips
    """
    lower = destination.lower()

    for combo, info in KNOWN_COMBOS.items():
        if all(word in lower for word in combo.split(" ")):
            return MultiCountryInfo(
                countries=list(info["countries"]),
                is_multi_country=True,
                logistics_tips=list(info["tips"]),
            )

    stripped = destination.strip()
    for pattern in TWO_COUNTRY_PATTERNS:
        match = pattern.match(stripped)
        if not match:
            continue
        first, second = (group.strip().lower() for group in match.groups())
        if first != second and first in KNOWN_COUNTRIES and second in KNOWN_COUNTRIES:
            countries = [_title_case(first), _title_case(second)]
            return MultiCountryInfo(
                countries=countries,
                is_multi_country=True,
                logistics_tips=[
                    f"Check visa requirements for both {' and '.join(countries)}",
                    "Consider flight vs train options between countries",
                    "Book transport in advance for best prices",
                ],
            )

    parts = [part.strip() for part in LIST_SEPARATOR.split(lower) if part.strip()]
    if len(parts) >= 3:
        valid = [part for part in parts if part in KNOWN_COUNTRIES]
        if len(valid) >= 3:
            countries = [_title_case(country) for country in valid]
            return MultiCountryInfo(
                countries=countries,
                is_multi_country=True,
                logistics_tips=[
                    f"Check visa requirements for all {len(countries)} countries",
                    f"Consider flight or train routes between {', '.join(countries)}",
                    "Book transport in advance for best prices",
                    "Consider an open-jaw flight to avoid backtracking",
                ],
            )

    return MultiCountryInfo(countries=[destination], is_multi_country=False)


# =============================================================================
# Child-age Filtering
# =============================================================================


ACTIVITY_MIN_AGES: Dict[str, int] = {
    "dive": 10,
    "surf": 6,
    "snorkel": 5,
    "adventure": 8,
    "hiking": 4,
    "nightlife": 18,
    "golf": 8,
    "wildlife": 3,
    "cultural": 0,
    "food_tour": 4,
    "beach": 0,
    "swimming": 0,
    "spa_wellness": 16,
    "photography": 0,
    "water_sports": 6,
}


@dataclass
class ChildAgeFilterResult:
    """Activities split by whether the youngest child meets the minimum age."""

    allowed: List[str] = field(default_factory=list)
    restricted: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def filter_activities_for_child_ages(
    activity_types: List[str], child_ages: List[int]
) -> ChildAgeFilterResult:
    """
    Check activity types against the youngest child's age.

    Unknown activity types have no minimum age.
    """
    if not child_ages:
        return ChildAgeFilterResult(allowed=list(activity_types))

    youngest = min(child_ages)
    result = ChildAgeFilterResult()
    for activity in activity_types:
        min_age = ACTIVITY_MIN_AGES.get(activity, 0)
        if youngest >= min_age:
            result.allowed.append(activity)
        else:
            result.restricted.append(activity)
            result.warnings.append(
                f"{activity} typically requires age {min_age}+ (your youngest is {youngest})"
            )
    return result
