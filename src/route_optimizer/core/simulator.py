"""
Forward simulation of a visiting order.

Walks an ordering from the start location, producing arrival and departure
times, skip decisions and running totals. Skipping a place never aborts the
route; the remaining places are still attempted in order.

Skip policy: with EngineConfig.charge_skipped_travel (default) the traveller
still goes to a place that ends up skipped. The travel there is charged and
the clock advances to the arrival time, never past it. With the flag off a
skipped place costs nothing and the traveller stays where it was.
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple, TYPE_CHECKING

from .places import Place
from .problem import RouteProblem

if TYPE_CHECKING:
    from ..distance.matrix import GeoDistanceMatrix

SKIP_ACCESSIBILITY = "accessibility"
SKIP_BUDGET = "budget"
SKIP_CLOSED = "closed"
SKIP_OPENING_HOURS = "opening_hours"
SKIP_TIME_BUDGET = "time_budget"


@dataclass(frozen=True)
class VisitRecord:
    """
    Outcome of processing one place.

    Attributes:
        node: Matrix node of the place
        arrival: Arrival clock (minutes from midnight)
        visit_start: Start of the visit after any wait
        departure: Departure clock; equals arrival when skipped
        wait: Minutes waited for the place to open
        travel_time: Travel minutes charged to reach the place
        travel_distance: Km charged to reach the place
        origin: Node the traveller came from
        skip_reason: None when visited, otherwise why the place was skipped
    """

    node: int
    arrival: float
    visit_start: float
    departure: float
    wait: float
    travel_time: float
    travel_distance: float
    origin: int
    skip_reason: Optional[str] = None

    @property
    def visited(self) -> bool:
        return self.skip_reason is None


@dataclass(frozen=True)
class SimulationState:
    """Running totals after a prefix of an ordering."""

    position: int
    clock: float
    travel_time: float = 0.0
    distance: float = 0.0
    visit_time: float = 0.0
    wait_time: float = 0.0
    cost: float = 0.0
    rating_sum: float = 0.0
    accessibility_sum: float = 0.0
    visited: int = 0
    skipped: int = 0

    @property
    def total_time(self) -> float:
        """Travel plus visit minutes (waiting excluded)."""
        return self.travel_time + self.visit_time


@dataclass(frozen=True)
class SimulationTrace:
    """Full simulation of one ordering."""

    ordering: Tuple[int, ...]
    records: Tuple[VisitRecord, ...]
    state: SimulationState
    start_time: float
    total_time_available: float
    efficiency: float

    @property
    def elapsed(self) -> float:
        """Minutes from departure at the start to the end of the route."""
        return self.state.clock - self.start_time

    @property
    def overflow(self) -> float:
        """Minutes by which the route exceeds the time budget."""
        return max(0.0, self.elapsed - self.total_time_available)

    @property
    def feasible(self) -> bool:
        return (
            self.state.skipped == 0
            and self.overflow == 0.0
            and self.state.total_time <= self.total_time_available
        )

    @property
    def visited_nodes(self) -> List[int]:
        return [r.node for r in self.records if r.visited]

    @property
    def skipped_nodes(self) -> List[int]:
        return [r.node for r in self.records if not r.visited]


class FeasibilitySimulator:
    """
    Simulates orderings of a problem against its settings.

    The simulator is stateless between calls; step() is pure and returns a
    new state, which lets tree searches branch on shared prefixes.
    """

    def __init__(self, problem: RouteProblem, matrix: "GeoDistanceMatrix"):
        self.problem = problem
        self.matrix = matrix
        settings = problem.settings
        self._start_time = float(settings.start_time)
        self._budget_minutes = float(settings.total_time_available)
        self._constraints = settings.constraints
        self._weekday = settings.start_day
        self._visitor = settings.visitor_type
        self._charge_skips = problem.config.charge_skipped_travel

    @property
    def start_time(self) -> float:
        return self._start_time

    @property
    def total_time_available(self) -> float:
        return self._budget_minutes

    def initial_state(self) -> SimulationState:
        return SimulationState(position=0, clock=self._start_time)

    def accessibility_match(self, place: Place) -> float:
        """
        Accessibility match of a place in [0, 1].

        With requirements, a place either meets all of them (1.0) or is
        skipped. Without requirements the share of flags the place offers.
        """
        flags = place.accessibility
        if self._constraints.has_accessibility_requirements:
            return 1.0 if self._meets_requirements(place) else 0.0
        return (float(flags.wheelchair) + float(flags.kid_friendly)) / 2.0

    def _meets_requirements(self, place: Place) -> bool:
        c = self._constraints
        if c.require_wheelchair and not place.accessibility.wheelchair:
            return False
        if c.require_kid_friendly and not place.accessibility.kid_friendly:
            return False
        return True

    def _static_skip_reason(self, place: Place, state: SimulationState) -> Optional[str]:
        """Skip reasons that do not depend on the arrival time."""
        if not self._meets_requirements(place):
            return SKIP_ACCESSIBILITY
        budget = self._constraints.budget
        if budget is not None and state.cost + place.fee(self._visitor) > budget + 1e-9:
            return SKIP_BUDGET
        if place.is_closed_on(self._weekday):
            return SKIP_CLOSED
        return None

    def step(
        self, state: SimulationState, node: int
    ) -> Tuple[SimulationState, VisitRecord]:
        """
        Process the next place of an ordering.

        Args:
            state: State after the previous places
            node: Matrix node of the next place

        Returns:
            Tuple of (new state, record for this place)
        """
        place = self.problem.place(node)
        origin = state.position
        travel = self.matrix.travel_time(origin, node)
        dist = self.matrix.distance(origin, node)
        arrival = state.clock + travel

        reason = self._static_skip_reason(place, state)
        visit_start = arrival
        if reason is None:
            window = place.window_for(self._weekday)
            if window is not None:
                visit_start = max(arrival, float(window.open))
                if not window.contains(visit_start, visit_start + place.visit_duration):
                    reason = SKIP_OPENING_HOURS
        if reason is None:
            visit_end = visit_start + place.visit_duration
            if visit_end - self._start_time > self._budget_minutes + 1e-9:
                reason = SKIP_TIME_BUDGET

        if reason is not None:
            return self._skip(state, node, origin, travel, dist, arrival, reason)

        departure = visit_start + place.visit_duration
        wait = visit_start - arrival
        record = VisitRecord(
            node=node,
            arrival=arrival,
            visit_start=visit_start,
            departure=departure,
            wait=wait,
            travel_time=travel,
            travel_distance=dist,
            origin=origin,
        )
        new_state = SimulationState(
            position=node,
            clock=departure,
            travel_time=state.travel_time + travel,
            distance=state.distance + dist,
            visit_time=state.visit_time + place.visit_duration,
            wait_time=state.wait_time + wait,
            cost=state.cost + place.fee(self._visitor),
            rating_sum=state.rating_sum + place.rating,
            accessibility_sum=state.accessibility_sum + self.accessibility_match(place),
            visited=state.visited + 1,
            skipped=state.skipped,
        )
        return new_state, record

    def _skip(
        self,
        state: SimulationState,
        node: int,
        origin: int,
        travel: float,
        dist: float,
        arrival: float,
        reason: str,
    ) -> Tuple[SimulationState, VisitRecord]:
        if self._charge_skips:
            record = VisitRecord(
                node=node,
                arrival=arrival,
                visit_start=arrival,
                departure=arrival,
                wait=0.0,
                travel_time=travel,
                travel_distance=dist,
                origin=origin,
                skip_reason=reason,
            )
            new_state = replace(
                state,
                position=node,
                clock=arrival,
                travel_time=state.travel_time + travel,
                distance=state.distance + dist,
                skipped=state.skipped + 1,
            )
            return new_state, record

        record = VisitRecord(
            node=node,
            arrival=state.clock,
            visit_start=state.clock,
            departure=state.clock,
            wait=0.0,
            travel_time=0.0,
            travel_distance=0.0,
            origin=origin,
            skip_reason=reason,
        )
        return replace(state, skipped=state.skipped + 1), record

    def simulate(self, ordering: Sequence[int]) -> SimulationTrace:
        """
        Simulate a full ordering of place nodes.

        Args:
            ordering: Matrix nodes of the places, in visiting order

        Returns:
            SimulationTrace with every record and the final totals
        """
        state = self.initial_state()
        records: List[VisitRecord] = []
        for node in ordering:
            state, record = self.step(state, node)
            records.append(record)
        return SimulationTrace(
            ordering=tuple(ordering),
            records=tuple(records),
            state=state,
            start_time=self._start_time,
            total_time_available=self._budget_minutes,
            efficiency=self.efficiency(state),
        )

    def efficiency(self, state: SimulationState) -> float:
        """
        Efficiency percentage of a final state.

        round((w_v * visited / N + w_t * visit_time / time_budget) * 100),
        clamped to [0, 100]; weights come from the engine configuration.
        """
        config = self.problem.config
        total = self.problem.num_places
        visit_share = state.visited / total if total else 0.0
        time_share = state.visit_time / self._budget_minutes
        value = (
            config.efficiency_visit_weight * visit_share
            + config.efficiency_time_weight * time_share
        ) * 100.0
        return float(min(100, max(0, round(value))))
