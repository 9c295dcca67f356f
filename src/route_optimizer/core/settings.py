"""
Request settings and engine configuration.

Everything tunable lives in plain dataclasses with documented defaults, so a
caller can override a single knob without touching the rest.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .errors import InputError


class OptimizationLevel(Enum):
    """
    Search tier, trading runtime for solution quality.

    FAST: Greedy construction heuristic
    BALANCED: Metaheuristic improvement (genetic or ant colony)
    OPTIMAL: Branch-and-bound for small inputs
    """

    FAST = "fast"
    BALANCED = "balanced"
    OPTIMAL = "optimal"

    @classmethod
    def parse(cls, value) -> "OptimizationLevel":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InputError(
                f"optimization level must be one of fast, balanced, optimal; got {value!r}"
            ) from None


# Downgrade chain, most expensive first.
TIER_CHAIN = (
    OptimizationLevel.OPTIMAL,
    OptimizationLevel.BALANCED,
    OptimizationLevel.FAST,
)


@dataclass(frozen=True)
class PreferenceWeights:
    """
    Relative weights of the five objectives.

    Weights are non-negative and need not sum to 1; the score divides by
    their total.
    """

    rating: float = 0.3
    distance: float = 0.25
    time: float = 0.2
    cost: float = 0.15
    accessibility: float = 0.1

    @property
    def total(self) -> float:
        return self.rating + self.distance + self.time + self.cost + self.accessibility

    def as_tuple(self):
        return (self.rating, self.distance, self.time, self.cost, self.accessibility)

    @classmethod
    def for_goal(cls, goal: str) -> "PreferenceWeights":
        """Preset weights for an "optimize for" goal."""
        presets = {
            "balanced": cls(),
            "rating": cls(rating=0.6, distance=0.15, time=0.1, cost=0.1, accessibility=0.05),
            "distance": cls(rating=0.15, distance=0.6, time=0.15, cost=0.05, accessibility=0.05),
            "time": cls(rating=0.15, distance=0.15, time=0.6, cost=0.05, accessibility=0.05),
            "cost": cls(rating=0.15, distance=0.1, time=0.1, cost=0.6, accessibility=0.05),
        }
        key = (goal or "balanced").strip().lower()
        if key not in presets:
            raise InputError(
                f"optimizeFor must be one of {', '.join(sorted(presets))}; got {goal!r}"
            )
        return presets[key]


@dataclass(frozen=True)
class RouteConstraints:
    """
    Hard constraints checked while simulating a route.

    Attributes:
        budget: Ceiling on total entry fees (None = unlimited)
        require_wheelchair: Skip places without wheelchair access
        require_kid_friendly: Skip places that are not kid friendly
    """

    budget: Optional[float] = None
    require_wheelchair: bool = False
    require_kid_friendly: bool = False

    @property
    def has_accessibility_requirements(self) -> bool:
        return self.require_wheelchair or self.require_kid_friendly


@dataclass(frozen=True)
class RouteSettings:
    """
    Per-request settings.

    Attributes:
        start_time: Departure time in minutes from midnight
        total_time_available: Time budget in minutes (> 0)
        optimization_level: Requested search tier
        preferences: Objective weights
        constraints: Budget and accessibility constraints
        start_day: Weekday of the trip, 0 = Sunday
        visitor_type: Fee column to charge ("indian" or "foreign")
        rng_seed: Seed for the randomized tiers
        time_limit_s: Wall-clock deadline for the search
    """

    start_time: int = 9 * 60
    total_time_available: float = 480.0
    optimization_level: OptimizationLevel = OptimizationLevel.FAST
    preferences: PreferenceWeights = field(default_factory=PreferenceWeights)
    constraints: RouteConstraints = field(default_factory=RouteConstraints)
    start_day: int = 0
    visitor_type: str = "indian"
    rng_seed: Optional[int] = None
    time_limit_s: float = 5.0


@dataclass(frozen=True)
class GeneticParams:
    """
    Parameters of the genetic metaheuristic.

    Attributes:
        population_size: Individuals per generation
        max_generations: Generation cap
        stall_generations: Stop after this many generations without improvement
        tournament_size: Individuals per tournament
        crossover_prob: Probability of order crossover
        swap_prob: Probability of swap mutation
        inversion_prob: Probability of segment-reverse mutation
        polish_evals: Hill-climbing evaluations on the final best (0 disables)
    """

    population_size: int = 40
    max_generations: int = 150
    stall_generations: int = 30
    tournament_size: int = 3
    crossover_prob: float = 0.8
    swap_prob: float = 0.2
    inversion_prob: float = 0.3
    polish_evals: int = 300


@dataclass(frozen=True)
class AntColonyParams:
    """
    Parameters of the ant colony metaheuristic.

    Attributes:
        num_ants: Ants per iteration
        max_iterations: Iteration cap
        stall_iterations: Stop after this many iterations without improvement
        alpha: Pheromone importance
        beta: Heuristic importance
        evaporation: Fraction of pheromone lost per iteration
        deposit: Pheromone deposited by the iteration-best ant
    """

    num_ants: int = 20
    max_iterations: int = 100
    stall_iterations: int = 25
    alpha: float = 1.0
    beta: float = 2.0
    evaporation: float = 0.5
    deposit: float = 1.0


@dataclass(frozen=True)
class AnnealingParams:
    """
    Parameters of simulated annealing.

    Temperatures are in fitness units; a worse move of delta is accepted
    with probability exp(delta / T).

    Attributes:
        initial_temperature: Starting temperature
        cooling_rate: Geometric cooling factor per temperature step
        min_temperature: Stop once the temperature falls below this
        iterations_per_temperature: Moves tried at each temperature
    """

    initial_temperature: float = 0.1
    cooling_rate: float = 0.95
    min_temperature: float = 1e-4
    iterations_per_temperature: int = 40


@dataclass(frozen=True)
class BranchBoundParams:
    """
    Safeguards of the branch-and-bound search.

    Attributes:
        node_limit: Maximum expanded nodes before returning the incumbent
    """

    node_limit: int = 2_000_000


@dataclass(frozen=True)
class EngineConfig:
    """
    Engine-wide configuration.

    Attributes:
        average_speed_kmh: Speed turning great-circle km into travel minutes.
            Travel time is an estimate, not traffic-aware routing.
        charge_skipped_travel: When True the traveller still goes to a
            skipped place: its travel is charged and the clock advances to
            the arrival time. When False a skipped place costs nothing.
        efficiency_visit_weight: Weight of visited/total in efficiency %
        efficiency_time_weight: Weight of visit time/time budget in efficiency %
        skip_penalty: Fitness penalty per skipped place
        overflow_penalty: Fitness penalty per time budget of overflow
        min_places: Fewest candidate places accepted
        max_places: Most candidate places accepted
        fast_limit: Advisory place limit of the fast tier
        balanced_limit: Place limit of the balanced tier
        optimal_limit: Place limit of the optimal tier
        metaheuristic: "genetic", "ant_colony" or "simulated_annealing" for
            the balanced tier
    """

    average_speed_kmh: float = 25.0
    charge_skipped_travel: bool = True
    efficiency_visit_weight: float = 0.5
    efficiency_time_weight: float = 0.5
    skip_penalty: float = 10.0
    overflow_penalty: float = 10.0
    min_places: int = 2
    max_places: int = 20
    fast_limit: int = 15
    balanced_limit: int = 20
    optimal_limit: int = 12
    metaheuristic: str = "genetic"
    genetic: GeneticParams = field(default_factory=GeneticParams)
    ant_colony: AntColonyParams = field(default_factory=AntColonyParams)
    annealing: AnnealingParams = field(default_factory=AnnealingParams)
    branch_bound: BranchBoundParams = field(default_factory=BranchBoundParams)

    def tier_limit(self, level: OptimizationLevel) -> int:
        return {
            OptimizationLevel.FAST: self.fast_limit,
            OptimizationLevel.BALANCED: self.balanced_limit,
            OptimizationLevel.OPTIMAL: self.optimal_limit,
        }[level]
