"""
Discovery service interface used by the enrichment graph.

Implementations look up candidate areas, hotels, restaurants and
experiences for a session and write the itinerary. Any exception a
method raises is caught by the graph and recorded as that category's
error.
"""

from typing import Dict, Any, List, Protocol


class DiscoveryService(Protocol):
    """Candidate lookups and itinerary generation for one destination."""

    def discover_areas(self, preferences: Dict[str, Any]) -> List[Dict[str, Any]]:
        ...

    def discover_hotels(
        self, areas: List[Dict[str, Any]], preferences: Dict[str, Any]
    ) -> Dict[str, List[Dict[str, Any]]]:
        """Hotel candidates keyed by area id."""
        ...

    def discover_restaurants(
        self, cuisines: List[str], areas: List[Dict[str, Any]], preferences: Dict[str, Any]
    ) -> Dict[str, List[Dict[str, Any]]]:
        """Restaurant candidates keyed by cuisine."""
        ...

    def discover_experiences(
        self, activity_types: List[str], areas: List[Dict[str, Any]], preferences: Dict[str, Any]
    ) -> Dict[str, List[Dict[str, Any]]]:
        """Experience candidates keyed by activity type."""
        ...

    def generate_itinerary(
        self, preferences: Dict[str, Any], discovered: Dict[str, Any]
    ) -> Dict[str, Any]:
        ...
