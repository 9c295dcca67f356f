"""
Multi-objective route scoring.

Turns a simulated route into a single fitness value (higher is better) that
every strategy uses to compare candidates, plus the single-place score used
by greedy construction and the optimistic bound used by branch-and-bound.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Sequence, Tuple

import numpy as np

from .problem import RouteProblem
from .simulator import FeasibilitySimulator, SimulationState, SimulationTrace


@dataclass(frozen=True)
class ScoreBreakdown:
    """
    Normalized objectives of a route, each in [0, 1] (higher is better).

    Attributes:
        rating: Average rating of visited places within the pool's range
        distance: 1 - distance / distance upper bound
        time: 1 - total time / time budget
        cost: 1 - cost / total fees of the pool
        accessibility: Average accessibility match of visited places
        quality: Weighted mean of the five objectives
        penalty: Skip and overflow penalty subtracted from quality
    """

    rating: float
    distance: float
    time: float
    cost: float
    accessibility: float
    quality: float
    penalty: float

    @property
    def fitness(self) -> float:
        return self.quality - self.penalty


def _unit(value: float) -> float:
    return float(min(1.0, max(0.0, value)))


class ScoreFunction:
    """
    Scores orderings of a problem.

    Normalization bounds come from the candidate pool of the instance, so
    fitness values are absolute and comparable across strategies.

    Attributes:
        problem: The problem instance
        simulator: Feasibility simulator
        evaluations: Number of distinct orderings simulated so far
    """

    def __init__(self, problem: RouteProblem, simulator: FeasibilitySimulator):
        self.problem = problem
        self.simulator = simulator
        self.matrix = simulator.matrix
        self.evaluations = 0

        settings = problem.settings
        config = problem.config
        weights = settings.preferences
        total = weights.total
        if total > 0:
            self._weights = tuple(w / total for w in weights.as_tuple())
        else:
            self._weights = (0.0, 0.0, 0.0, 0.0, 0.0)
        self._skip_penalty = config.skip_penalty
        self._overflow_penalty = config.overflow_penalty
        self._time_budget = float(settings.total_time_available)

        places = problem.places
        visitor = settings.visitor_type
        # Per-node arrays, index 0 is the start.
        self._ratings = np.array([0.0] + [p.rating for p in places])
        self._fees = np.array([0.0] + [p.fee(visitor) for p in places])
        self._visits = np.array([0.0] + [float(p.visit_duration) for p in places])
        self._access = np.array(
            [0.0] + [simulator.accessibility_match(p) for p in places]
        )

        self._rating_min = float(self._ratings[1:].min())
        self._rating_max = float(self._ratings[1:].max())
        self._distance_bound = float(self.matrix.max_incoming_distance[1:].sum())
        self._cost_bound = float(self._fees[1:].sum())
        self._max_leg = float(self.matrix.distances.max())
        self._max_fee = float(self._fees.max())

        self._cache: Dict[Tuple[int, ...], Tuple[float, SimulationTrace]] = {}

    def _rating_score(self, rating_sum: float, visited: int) -> float:
        if visited == 0:
            return 0.0
        avg = rating_sum / visited
        if self._rating_max - self._rating_min < 1e-9:
            return 1.0
        return _unit((avg - self._rating_min) / (self._rating_max - self._rating_min))

    def _objectives(
        self,
        rating_sum: float,
        visited: int,
        distance: float,
        total_time: float,
        cost: float,
        accessibility_sum: float,
    ) -> Tuple[float, float, float, float, float]:
        rating = self._rating_score(rating_sum, visited)
        dist = 1.0 if self._distance_bound <= 0 else _unit(1.0 - distance / self._distance_bound)
        time = _unit(1.0 - total_time / self._time_budget)
        cost_score = 1.0 if self._cost_bound <= 0 else _unit(1.0 - cost / self._cost_bound)
        access = accessibility_sum / visited if visited else 0.0
        return rating, dist, time, cost_score, access

    def _quality(self, objectives: Sequence[float]) -> float:
        return float(sum(w * o for w, o in zip(self._weights, objectives)))

    def breakdown(self, state: SimulationState, overflow: float = 0.0) -> ScoreBreakdown:
        """Score a final simulation state."""
        objectives = self._objectives(
            state.rating_sum,
            state.visited,
            state.distance,
            state.total_time,
            state.cost,
            state.accessibility_sum,
        )
        penalty = (
            self._skip_penalty * state.skipped
            + self._overflow_penalty * overflow / self._time_budget
        )
        return ScoreBreakdown(*objectives, quality=self._quality(objectives), penalty=penalty)

    def score_trace(self, trace: SimulationTrace) -> float:
        return self.breakdown(trace.state, trace.overflow).fitness

    def evaluate(self, ordering: Sequence[int]) -> Tuple[float, SimulationTrace]:
        """
        Simulate and score an ordering, memoised per ordering.

        Args:
            ordering: Matrix nodes of the places, in visiting order

        Returns:
            Tuple of (fitness, simulation trace)
        """
        key = tuple(ordering)
        hit = self._cache.get(key)
        if hit is not None:
            return hit
        trace = self.simulator.simulate(key)
        result = (self.score_trace(trace), trace)
        self._cache[key] = result
        self.evaluations += 1
        return result

    def fitness(self, ordering: Sequence[int]) -> float:
        return self.evaluate(ordering)[0]

    def place_score(self, origin: int, node: int) -> float:
        """
        Score of moving from origin to node, for greedy construction.

        Weighted rating and accessibility minus the normalized leg distance,
        leg plus visit time and entry fee.
        """
        w_rating, w_dist, w_time, w_cost, w_access = self._weights
        rating = (
            1.0
            if self._rating_max - self._rating_min < 1e-9
            else (self._ratings[node] - self._rating_min) / (self._rating_max - self._rating_min)
        )
        leg = self.matrix.distances[origin, node]
        dist = leg / self._max_leg if self._max_leg > 0 else 0.0
        time = (self.matrix.times[origin, node] + self._visits[node]) / self._time_budget
        cost = self._fees[node] / self._max_fee if self._max_fee > 0 else 0.0
        return float(
            w_rating * rating
            + w_access * self._access[node]
            - w_dist * dist
            - w_time * time
            - w_cost * cost
        )

    def upper_bound(self, state: SimulationState, remaining: Iterable[int]) -> float:
        """
        Optimistic fitness of any completion of a partial route.

        Either every remaining place is visited, with each one reached over
        its cheapest incoming edge, or at least one more place is skipped,
        which costs a full skip penalty while quality stays at most 1.
        """
        rest = list(remaining)
        base_penalty = self._skip_penalty * state.skipped
        if not rest:
            objectives = self._objectives(
                state.rating_sum,
                state.visited,
                state.distance,
                state.total_time,
                state.cost,
                state.accessibility_sum,
            )
            return self._quality(objectives) - base_penalty

        idx = np.asarray(rest, dtype=int)
        visited = state.visited + len(rest)
        objectives = self._objectives(
            state.rating_sum + float(self._ratings[idx].sum()),
            visited,
            state.distance + float(self.matrix.min_incoming_distance[idx].sum()),
            state.total_time
            + float(self._visits[idx].sum())
            + float(self.matrix.min_incoming_time[idx].sum()),
            state.cost + float(self._fees[idx].sum()),
            state.accessibility_sum + float(self._access[idx].sum()),
        )
        all_visited = self._quality(objectives) - base_penalty
        one_more_skip = 1.0 - base_penalty - self._skip_penalty
        return max(all_visited, one_more_skip)

    def __repr__(self) -> str:
        return f"ScoreFunction(problem={self.problem}, evaluations={self.evaluations})"
