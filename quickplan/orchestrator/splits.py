"""
Itinerary split generation.

Builds the split options offered for a set of selected areas and a trip
length, plus the single-area split derived automatically when only one
area is chosen. Every split produced here allocates exactly the trip's
nights, with at least one night per stop.
"""

import math
from typing import Dict, Any, List, Optional

from quickplan.orchestrator.schemas import ItinerarySplit, ItineraryStop, SplitAdvice


# =============================================================================
# Areas
# =============================================================================


def create_minimal_area(area_id: str, area_name: str) -> Dict[str, Any]:
    """Placeholder area record used when no discovered candidate exists."""
    return {
        "id": area_id,
        "name": area_name,
        "type": "region",
        "description": area_name,
        "center_lat": 0,
        "center_lng": 0,
        "activity_fit_score": 0.5,
        "vibe_fit_score": 0.5,
        "budget_fit_score": 0.5,
        "overall_score": 0.5,
        "best_for": [],
        "not_ideal_for": [],
        "why_it_fits": [],
        "caveats": [],
        "evidence": [],
        "confidence_score": 0.5,
        "suggested_nights": 1,
    }


def _find_area(
    area_id: str, area_name: str, areas: List[Dict[str, Any]]
) -> Dict[str, Any]:
    for area in areas:
        if area.get("id") == area_id:
            return area
    return create_minimal_area(area_id, area_name)


# =============================================================================
# Split Advice
# =============================================================================


def get_split_advice(nights: int) -> SplitAdvice:
    """Recommend a number of bases for a trip length."""
    if nights <= 4:
        return SplitAdvice(
            min_bases=1,
            max_bases=1,
            advice="For a short trip, one base is best to avoid wasting time moving.",
            tip="Pick a central location with good access to attractions.",
        )
    if nights <= 7:
        return SplitAdvice(
            min_bases=1,
            max_bases=2,
            advice="A week is perfect for 1-2 bases. More than 2 would feel rushed.",
            tip="Consider splitting if you want to experience two distinct areas.",
        )
    if nights <= 10:
        return SplitAdvice(
            min_bases=2,
            max_bases=3,
            advice="10 days gives you time for 2-3 different areas without rushing.",
            tip="3-4 nights per area lets you really get to know each place.",
        )
    if nights <= 14:
        return SplitAdvice(
            min_bases=2,
            max_bases=3,
            advice="Two weeks is ideal for 2-3 bases with enough time to really explore each.",
            tip="Consider one main base with day trips, or explore multiple regions.",
        )
    return SplitAdvice(
        min_bases=3,
        max_bases=4,
        advice="With this much time, you could do 3-4 areas, or go deeper in fewer places.",
        tip="Balance variety with immersion - sometimes less is more!",
    )


# =============================================================================
# Split Construction
# =============================================================================


def _split_reasoning(stops: List[Dict[str, Any]], full_stops: List[ItineraryStop]) -> str:
    if len(stops) == 1:
        area = full_stops[0].area
        best_for = area.get("best_for") or []
        if best_for:
            return f"Focus on {area.get('name')} - great for {' and '.join(best_for[:2])}"
        return f"All nights in {stops[0]['area_name']} - no travel days needed!"

    nights_list = [s["nights"] for s in stops]
    max_nights = max(nights_list)
    if max_nights == min(nights_list):
        return "Equal time in each area for a well-rounded experience"

    longest_idx = nights_list.index(max_nights)
    longest_area = full_stops[longest_idx].area
    best_for = longest_area.get("best_for") or []
    if best_for:
        return f"More time in {longest_area.get('name')} for {best_for[0]}"
    return f"{max_nights} nights in {stops[longest_idx]['area_name']} to fully explore"


def create_itinerary_split(
    split_id: str,
    name: str,
    stops: List[Dict[str, Any]],
    fit_score: float,
    areas: List[Dict[str, Any]],
) -> ItinerarySplit:
    """
    Build an ItinerarySplit from (area_id, area_name, nights, area) stops.

    Arrival/departure days are laid end to end starting on day 1.
    """
    current_day = 1
    full_stops: List[ItineraryStop] = []
    for idx, stop in enumerate(stops):
        area = stop.get("area") or _find_area(stop["area_id"], stop["area_name"], areas)
        arrival_day = current_day
        departure_day = current_day + stop["nights"]
        current_day = departure_day
        full_stops.append(
            ItineraryStop(
                area_id=stop["area_id"],
                area=area,
                nights=stop["nights"],
                order=idx,
                arrival_day=arrival_day,
                departure_day=departure_day,
                is_arrival_city=idx == 0,
                is_departure_city=idx == len(stops) - 1,
                travel_day_before=idx > 0,
            )
        )

    return ItinerarySplit(
        id=split_id,
        name=name,
        stops=full_stops,
        fit_score=fit_score,
        friction_score=0.3 * (len(stops) - 1) if len(stops) > 1 else 0.0,
        feasibility_score=0.9,
        why_this_works=_split_reasoning(stops, full_stops),
        tradeoffs=["More time in transit between locations"] if len(stops) > 2 else [],
    )


def create_single_area_split(area: Dict[str, Any], nights: int) -> ItinerarySplit:
    """The split derived when exactly one area is selected."""
    name = area.get("name", "")
    return ItinerarySplit(
        id="single-area",
        name=f"All nights in {name}",
        stops=[
            ItineraryStop(
                area_id=area.get("id", ""),
                area=area,
                nights=nights,
                order=0,
                arrival_day=0,
                departure_day=nights,
                is_arrival_city=True,
                is_departure_city=True,
                travel_day_before=False,
            )
        ],
        fit_score=1.0,
        friction_score=0.0,
        feasibility_score=1.0,
        why_this_works=f"Single base in {name} for all {nights} nights",
        tradeoffs=[],
    )


def _stop(area: Dict[str, Any], nights: int) -> Dict[str, Any]:
    return {
        "area_id": area.get("id"),
        "area_name": area.get("name"),
        "nights": nights,
        "area": area,
    }


def _chain_name(stops: List[Dict[str, Any]]) -> str:
    return " → ".join(f"{s['nights']}n {s['area_name']}" for s in stops)


def _focus_first_stops(
    areas: List[Dict[str, Any]], trip_length: int
) -> Optional[List[Dict[str, Any]]]:
    # One base night each, two bonus nights up front, the rest shared out
    count = len(areas)
    remaining = trip_length - count - 2
    share = remaining // (count - 1)
    stops = [_stop(areas[0], 3)] + [_stop(area, 1 + share) for area in areas[1:]]

    leftover = trip_length - sum(s["nights"] for s in stops)
    if leftover > 0:
        stops[-1]["nights"] += leftover

    if all(s["nights"] >= 1 for s in stops) and sum(s["nights"] for s in stops) == trip_length:
        return stops
    return None


def generate_split_options(
    areas: List[Dict[str, Any]], trip_length: int
) -> List[ItinerarySplit]:
    """
    Generate split options for the selected areas.

    Args:
        areas: Selected area records, in the user's order
        trip_length: Total nights of the trip

    Returns:
        Ordered split options; empty only when no areas are given
    """
    options: List[ItinerarySplit] = []
    if not areas:
        return options

    # Never more stops than nights
    effective = areas[: max(1, min(len(areas), trip_length))]

    if len(effective) == 1:
        area = effective[0]
        options.append(
            create_itinerary_split(
                "all-in-one",
                f"{trip_length} nights in {area.get('name')}",
                [_stop(area, trip_length)],
                1.0,
                effective,
            )
        )
    elif len(effective) == 2:
        first, second = effective
        half = trip_length // 2
        remainder = trip_length - half
        options.append(
            create_itinerary_split(
                "even-split",
                f"{half} nights {first.get('name')} → {remainder} nights {second.get('name')}",
                [_stop(first, half), _stop(second, remainder)],
                0.9,
                areas,
            )
        )
        if trip_length >= 5:
            longer = math.ceil(trip_length * 0.6)
            shorter = trip_length - longer
            options.append(
                create_itinerary_split(
                    "longer-first",
                    f"{longer} nights {first.get('name')} → {shorter} nights {second.get('name')}",
                    [_stop(first, longer), _stop(second, shorter)],
                    0.85,
                    areas,
                )
            )
            options.append(
                create_itinerary_split(
                    "longer-second",
                    f"{shorter} nights {first.get('name')} → {longer} nights {second.get('name')}",
                    [_stop(first, shorter), _stop(second, longer)],
                    0.85,
                    areas,
                )
            )
    else:
        base = trip_length // len(effective)
        extra = trip_length % len(effective)
        even_stops = [
            _stop(area, max(1, base + (extra if idx == len(effective) - 1 else 0)))
            for idx, area in enumerate(effective)
        ]
        options.append(
            create_itinerary_split("even-split", _chain_name(even_stops), even_stops, 0.9, effective)
        )

        if trip_length >= len(effective) * 3:
            focus_stops = _focus_first_stops(effective, trip_length)
            if focus_stops:
                options.append(
                    create_itinerary_split(
                        "focus-first", _chain_name(focus_stops), focus_stops, 0.85, effective
                    )
                )

    if not options:
        limited = areas[: min(len(areas), trip_length)]
        per_area = max(1, trip_length // len(limited))
        remainder = trip_length - per_area * len(limited)
        default_stops = [
            _stop(area, max(1, per_area + (remainder if idx == len(limited) - 1 else 0)))
            for idx, area in enumerate(limited)
        ]
        options.append(
            create_itinerary_split(
                "default-split", _chain_name(default_stops), default_stops, 0.8, limited
            )
        )

    return options


def is_valid_split(split: Optional[Dict[str, Any]]) -> bool:
    """A chosen split counts once it has stops and is not the placeholder id."""
    if not split:
        return False
    return split.get("id") != "auto-split" and len(split.get("stops") or []) >= 1
