"""
Output records of an optimization.

A result carries the ordered stops (start first), the aggregate metrics and
the tier that produced them. Records are frozen; to_dict() renders the
camelCase contract consumed by the persistence and narration collaborators.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .clock import format_hhmm


@dataclass(frozen=True)
class Stop:
    """
    One stop of a route.

    Attributes:
        order: 0-based position; order 0 is the start location
        place_id: Catalog id of the place ("start" for the start)
        name: Display name
        category: Category label
        latitude: Latitude of the stop
        longitude: Longitude of the stop
        arrival: Arrival clock in minutes from midnight
        departure: Departure clock in minutes from midnight
        visit_duration: Minutes spent visiting (0 when skipped)
        wait_time: Minutes waited for opening
        travel_time_to_next: Travel minutes to the next stop
        travel_distance_to_next: Km to the next stop
        visited: Whether the place was visited
        skip_reason: Why the place was skipped, if it was
        is_start: Whether this is the start location
    """

    order: int
    place_id: str
    name: str
    category: str
    latitude: float
    longitude: float
    arrival: float
    departure: float
    visit_duration: float
    wait_time: float
    travel_time_to_next: float
    travel_distance_to_next: float
    visited: bool
    skip_reason: Optional[str] = None
    is_start: bool = False

    @property
    def skipped(self) -> bool:
        return not self.visited and not self.is_start

    @property
    def arrival_time(self) -> str:
        return format_hhmm(self.arrival)

    @property
    def departure_time(self) -> str:
        return format_hhmm(self.departure)

    def to_dict(self) -> dict:
        return {
            "order": self.order,
            "placeId": self.place_id,
            "name": self.name,
            "category": self.category,
            "location": {"latitude": self.latitude, "longitude": self.longitude},
            "arrivalTime": self.arrival_time,
            "departureTime": self.departure_time,
            "visitDuration": self.visit_duration,
            "waitTime": self.wait_time,
            "travelTimeToNext": self.travel_time_to_next,
            "travelDistanceToNext": self.travel_distance_to_next,
            "visited": self.visited,
            "skipped": self.skipped,
            "skipReason": self.skip_reason,
            "isStart": self.is_start,
        }


@dataclass(frozen=True)
class Metrics:
    """
    Aggregate metrics of a route.

    total_time is travel plus visit minutes; waiting is reported separately.
    """

    total_distance: float
    total_travel_time: float
    total_visit_time: float
    total_time: float
    total_wait_time: float
    efficiency: float
    estimated_end_time: str
    places_visited: int
    places_skipped: int
    feasible: bool
    total_cost: float = 0.0
    average_rating: float = 0.0
    category_distribution: Dict[str, int] = field(default_factory=dict)
    fitness: float = 0.0

    def to_dict(self) -> dict:
        return {
            "totalDistance": self.total_distance,
            "totalTravelTime": self.total_travel_time,
            "totalVisitTime": self.total_visit_time,
            "totalTime": self.total_time,
            "totalWaitTime": self.total_wait_time,
            "efficiency": self.efficiency,
            "estimatedEndTime": self.estimated_end_time,
            "placesVisited": self.places_visited,
            "placesSkipped": self.places_skipped,
            "feasible": self.feasible,
            "totalCost": self.total_cost,
            "averageRating": self.average_rating,
            "categoryDistribution": dict(self.category_distribution),
            "fitness": self.fitness,
        }


@dataclass(frozen=True)
class RouteWarning:
    """Advisory note attached to a route, e.g. a late finish."""

    type: str
    message: str

    def to_dict(self) -> dict:
        return {"type": self.type, "message": self.message}


@dataclass(frozen=True)
class OptimizationResult:
    """
    Result of one optimize() call.

    On validation failure success is False, message explains why and the
    route is empty.

    Attributes:
        success: Whether a route was produced
        algorithm: Tier actually used
        requested_algorithm: Tier the caller asked for
        downgraded: Whether the requested tier was clamped by place count
        fallback_used: Whether a strategy failure forced the fast tier
        route: Stops in order, start first
        metrics: Aggregate metrics
        warnings: Advisory notes
        proven_optimal: Whether the exact tier finished its search
        evaluations: Distinct orderings simulated
        message: Error message when success is False
    """

    success: bool
    algorithm: Optional[str] = None
    requested_algorithm: Optional[str] = None
    downgraded: bool = False
    fallback_used: bool = False
    route: Tuple[Stop, ...] = ()
    metrics: Optional[Metrics] = None
    warnings: Tuple[RouteWarning, ...] = ()
    proven_optimal: bool = False
    evaluations: int = 0
    message: Optional[str] = None

    @classmethod
    def failure(cls, message: str) -> "OptimizationResult":
        return cls(success=False, message=message)

    @property
    def feasible(self) -> bool:
        return self.metrics is not None and self.metrics.feasible

    @property
    def itinerary(self) -> List[Stop]:
        """Visited places in order, without the start and skipped stops."""
        return [s for s in self.route if s.visited and not s.is_start]

    @property
    def ordering(self) -> List[str]:
        """Place ids in route order, skipped places included."""
        return [s.place_id for s in self.route if not s.is_start]

    def to_dict(self) -> dict:
        if not self.success:
            return {"success": False, "message": self.message}
        return {
            "success": True,
            "algorithm": self.algorithm,
            "requestedAlgorithm": self.requested_algorithm,
            "downgraded": self.downgraded,
            "fallbackUsed": self.fallback_used,
            "provenOptimal": self.proven_optimal,
            "route": [s.to_dict() for s in self.route],
            "metrics": self.metrics.to_dict() if self.metrics else None,
            "itinerary": [s.to_dict() for s in self.itinerary],
            "warnings": [w.to_dict() for w in self.warnings],
        }
