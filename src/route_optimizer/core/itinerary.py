"""
Itinerary assembly.

Converts the winning ordering and its simulation trace into the Stop list,
Metrics and warnings of an OptimizationResult.
"""

from collections import Counter
from typing import List, Tuple

from .clock import format_hhmm
from .evaluator import ScoreFunction
from .simulator import SimulationTrace
from .solution import Metrics, OptimizationResult, RouteWarning, Stop

# Warn when travel exceeds this share of the total time.
HIGH_TRAVEL_SHARE = 0.6
# Warn when the route ends after this clock time (20:00).
LATE_FINISH_MINUTES = 20 * 60


class ItineraryBuilder:
    """Builds result records from a simulated ordering."""

    def __init__(self, evaluator: ScoreFunction):
        self.evaluator = evaluator
        self.problem = evaluator.problem

    def build_stops(self, trace: SimulationTrace) -> Tuple[Stop, ...]:
        problem = self.problem
        start = problem.start
        records = trace.records

        def leg_after(i: int) -> Tuple[float, float]:
            # Travel charged to reach the stop after record i (-1 = start).
            if i + 1 < len(records):
                nxt = records[i + 1]
                return nxt.travel_time, round(nxt.travel_distance, 2)
            return 0.0, 0.0

        travel, dist = leg_after(-1)
        stops: List[Stop] = [
            Stop(
                order=0,
                place_id=start.id,
                name=start.name,
                category="Start",
                latitude=start.latitude,
                longitude=start.longitude,
                arrival=trace.start_time,
                departure=trace.start_time,
                visit_duration=0.0,
                wait_time=0.0,
                travel_time_to_next=travel,
                travel_distance_to_next=dist,
                visited=True,
                is_start=True,
            )
        ]
        for i, record in enumerate(records):
            place = problem.place(record.node)
            travel, dist = leg_after(i)
            stops.append(
                Stop(
                    order=i + 1,
                    place_id=place.id,
                    name=place.name,
                    category=place.category,
                    latitude=place.latitude,
                    longitude=place.longitude,
                    arrival=record.arrival,
                    departure=record.departure,
                    visit_duration=float(place.visit_duration) if record.visited else 0.0,
                    wait_time=record.wait,
                    travel_time_to_next=travel,
                    travel_distance_to_next=dist,
                    visited=record.visited,
                    skip_reason=record.skip_reason,
                )
            )
        return tuple(stops)

    def build_metrics(self, trace: SimulationTrace) -> Metrics:
        problem = self.problem
        state = trace.state
        visited = [problem.place(n) for n in trace.visited_nodes]
        travel = float(state.travel_time)
        visit = float(state.visit_time)
        categories = Counter(p.category or "Other" for p in visited)
        avg_rating = state.rating_sum / state.visited if state.visited else 0.0
        return Metrics(
            total_distance=round(state.distance, 2),
            total_travel_time=travel,
            total_visit_time=visit,
            total_time=travel + visit,
            total_wait_time=float(state.wait_time),
            efficiency=trace.efficiency,
            estimated_end_time=format_hhmm(state.clock),
            places_visited=state.visited,
            places_skipped=state.skipped,
            feasible=trace.feasible,
            total_cost=round(state.cost, 2),
            average_rating=round(avg_rating, 2),
            category_distribution=dict(categories),
            fitness=round(self.evaluator.score_trace(trace), 6),
        )

    def build_warnings(self, trace: SimulationTrace) -> Tuple[RouteWarning, ...]:
        state = trace.state
        warnings = []
        if state.skipped:
            warnings.append(
                RouteWarning(
                    "INCOMPLETE_ROUTE",
                    f"{state.skipped} places were skipped due to time or visit constraints",
                )
            )
        if state.total_time > 0 and state.travel_time > state.total_time * HIGH_TRAVEL_SHARE:
            warnings.append(
                RouteWarning(
                    "HIGH_TRAVEL_TIME",
                    "This route involves significant travel time. "
                    "Consider grouping places by area.",
                )
            )
        if state.clock > LATE_FINISH_MINUTES:
            warnings.append(
                RouteWarning(
                    "LATE_FINISH",
                    "This route finishes quite late. Some places might be closed.",
                )
            )
        return tuple(warnings)

    def build(
        self,
        trace: SimulationTrace,
        *,
        algorithm: str,
        requested_algorithm: str,
        downgraded: bool = False,
        fallback_used: bool = False,
        proven_optimal: bool = False,
    ) -> OptimizationResult:
        """
        Assemble the result for a simulated ordering.

        Args:
            trace: Simulation of the winning ordering
            algorithm: Tier actually used
            requested_algorithm: Tier the caller asked for
            downgraded: Whether the tier was clamped by place count
            fallback_used: Whether the fast tier replaced a failed strategy
            proven_optimal: Whether the exact search completed

        Returns:
            Successful OptimizationResult
        """
        return OptimizationResult(
            success=True,
            algorithm=algorithm,
            requested_algorithm=requested_algorithm,
            downgraded=downgraded,
            fallback_used=fallback_used,
            route=self.build_stops(trace),
            metrics=self.build_metrics(trace),
            warnings=self.build_warnings(trace),
            proven_optimal=proven_optimal,
            evaluations=self.evaluator.evaluations,
        )
