"""
Adaptive solver for sightseeing routes.

Selects the search tier from the requested optimization level and the number
of candidate places, and orchestrates the solution pipeline: validation,
distance matrix, search, re-simulation and itinerary assembly.
"""

import logging
import random
import time
from typing import List, Optional, Sequence, Tuple

from ..core.errors import AlgorithmError, InputError
from ..core.evaluator import ScoreFunction
from ..core.itinerary import ItineraryBuilder
from ..core.places import Place, StartLocation
from ..core.problem import RouteProblem
from ..core.settings import TIER_CHAIN, EngineConfig, OptimizationLevel, RouteSettings
from ..core.simulator import FeasibilitySimulator
from ..core.solution import OptimizationResult
from ..distance.matrix import GeoDistanceMatrix
from .colony.ant_colony import optimize_ant_colony
from .exact.branch_bound import optimize_branch_bound
from .genetic.tour_solver import optimize_genetic
from .heuristics.annealing import optimize_simulated_annealing
from .heuristics.constructive import construct_greedy_route

logger = logging.getLogger(__name__)

METAHEURISTICS = ("genetic", "ant_colony", "simulated_annealing")


def _choose_tier(
    requested: OptimizationLevel, num_places: int, config: EngineConfig
) -> OptimizationLevel:
    """
    Clamp the requested tier along optimal -> balanced -> fast.

    A tier is used only if the place count is within its limit. The fast
    tier is always accepted since it is the guaranteed fallback; its limit
    is advisory.
    """
    chain = TIER_CHAIN[TIER_CHAIN.index(requested):]
    for level in chain:
        if level is OptimizationLevel.FAST or num_places <= config.tier_limit(level):
            return level
    return OptimizationLevel.FAST


def _check_ordering(ordering: Sequence[int], problem: RouteProblem) -> List[int]:
    """Reject anything that is not a permutation of the place nodes."""
    ordering = [int(v) for v in ordering]
    if sorted(ordering) != list(problem.place_nodes):
        raise AlgorithmError(
            "ordering", f"not a permutation of places 1..{problem.num_places}: {ordering}"
        )
    return ordering


def _run_tier(
    level: OptimizationLevel,
    evaluator: ScoreFunction,
    greedy: List[int],
    rng: random.Random,
    deadline: float,
) -> Tuple[List[int], bool]:
    """
    Run one search tier.

    Returns:
        Tuple of (ordering, proven optimal)
    """
    config = evaluator.problem.config
    if level is OptimizationLevel.FAST:
        return greedy, False

    if level is OptimizationLevel.BALANCED:
        if config.metaheuristic == "ant_colony":
            ordering, _ = optimize_ant_colony(
                evaluator, config.ant_colony, rng=rng, deadline=deadline, initial=greedy
            )
        elif config.metaheuristic == "genetic":
            ordering, _ = optimize_genetic(
                evaluator, config.genetic, rng=rng, deadline=deadline, initial=greedy
            )
        elif config.metaheuristic == "simulated_annealing":
            ordering, _ = optimize_simulated_annealing(
                evaluator, config.annealing, rng=rng, deadline=deadline, initial=greedy
            )
        else:
            raise AlgorithmError(
                config.metaheuristic,
                f"unknown metaheuristic; expected one of {', '.join(METAHEURISTICS)}",
            )
        return ordering, False

    ordering, _, proven = optimize_branch_bound(
        evaluator, config.branch_bound, deadline=deadline, initial=greedy
    )
    return ordering, proven


def optimize(
    places: Sequence[Place],
    start_location: StartLocation,
    settings: Optional[RouteSettings] = None,
    config: Optional[EngineConfig] = None,
) -> OptimizationResult:
    """
    Optimize a sightseeing route.

    Invalid input never raises: it yields a result with success=False and a
    message. A failing balanced or optimal strategy is logged and replaced by
    the greedy ordering (fallback_used=True).

    Args:
        places: Candidate places
        start_location: Where the traveller departs from
        settings: Per-request settings (defaults to RouteSettings())
        config: Engine configuration (defaults to EngineConfig())

    Returns:
        OptimizationResult
    """
    settings = settings if settings is not None else RouteSettings()
    config = config if config is not None else EngineConfig()
    try:
        problem = RouteProblem(places, start_location, settings, config)
    except InputError as exc:
        logger.info("Rejected route request: %s", exc)
        return OptimizationResult.failure(str(exc))

    return solve(problem)


def solve(problem: RouteProblem) -> OptimizationResult:
    """
    Solve a validated problem.

    Args:
        problem: The problem instance

    Returns:
        Successful OptimizationResult
    """
    settings = problem.settings
    config = problem.config
    deadline = time.perf_counter() + settings.time_limit_s
    rng = random.Random(settings.rng_seed)

    matrix = GeoDistanceMatrix.for_problem(problem)
    simulator = FeasibilitySimulator(problem, matrix)
    evaluator = ScoreFunction(problem, simulator)

    requested = settings.optimization_level
    level = _choose_tier(requested, problem.num_places, config)
    downgraded = level is not requested
    if downgraded:
        logger.warning(
            "Downgrading %s to %s for %d places (limit %d)",
            requested.value,
            level.value,
            problem.num_places,
            config.tier_limit(requested),
        )
    elif problem.num_places > config.fast_limit and level is OptimizationLevel.FAST:
        logger.info(
            "Fast tier on %d places exceeds its advisory limit of %d",
            problem.num_places,
            config.fast_limit,
        )

    greedy = construct_greedy_route(evaluator)
    fallback_used = False
    proven_optimal = False
    try:
        ordering, proven_optimal = _run_tier(level, evaluator, greedy, rng, deadline)
        ordering = _check_ordering(ordering, problem)
    except Exception:
        logger.exception("%s tier failed; falling back to fast", level.value)
        ordering = greedy
        level = OptimizationLevel.FAST
        fallback_used = True
        proven_optimal = False

    _, trace = evaluator.evaluate(ordering)
    logger.info(
        "Route via %s: %d visited, %d skipped, feasible=%s",
        level.value,
        trace.state.visited,
        trace.state.skipped,
        trace.feasible,
    )
    return ItineraryBuilder(evaluator).build(
        trace,
        algorithm=level.value,
        requested_algorithm=requested.value,
        downgraded=downgraded,
        fallback_used=fallback_used,
        proven_optimal=proven_optimal,
    )
