"""
Simulated annealing over visiting orders.

Starts from the greedy ordering and walks the neighbourhood of
propose_neighbor, accepting a worse ordering with probability exp(delta / T)
under geometric cooling. The best ordering seen is returned, so the result
is never worse than the start.
"""

import logging
import math
import random
import time
from typing import List, Optional, Sequence, Tuple

from ...core.errors import AlgorithmError
from ...core.evaluator import ScoreFunction
from ...core.settings import AnnealingParams
from .constructive import construct_greedy_route
from .local_search import propose_neighbor

logger = logging.getLogger(__name__)


def _check_schedule(params: AnnealingParams) -> None:
    if not 0.0 < params.cooling_rate < 1.0:
        raise AlgorithmError("simulated_annealing", "cooling rate must be in (0, 1)")
    if not 0.0 < params.min_temperature < params.initial_temperature:
        raise AlgorithmError(
            "simulated_annealing",
            "temperatures must satisfy 0 < min_temperature < initial_temperature",
        )
    if params.iterations_per_temperature < 1:
        raise AlgorithmError("simulated_annealing", "need at least one move per temperature")


def anneal_ordering(
    evaluator: ScoreFunction,
    ordering: Sequence[int],
    params: Optional[AnnealingParams] = None,
    *,
    rng: Optional[random.Random] = None,
    deadline: Optional[float] = None,
) -> Tuple[List[int], float]:
    """
    Improve an ordering by simulated annealing.

    Args:
        evaluator: Score function of the problem
        ordering: Starting ordering
        params: Cooling schedule
        rng: Random number generator
        deadline: time.perf_counter() value after which to stop

    Returns:
        Tuple of (best ordering, its fitness)
    """
    params = params if params is not None else AnnealingParams()
    _check_schedule(params)
    if rng is None:
        rng = random.Random()

    current = list(ordering)
    current_fit = evaluator.fitness(current)
    best, best_fit = list(current), current_fit
    if len(current) < 2:
        return best, best_fit

    temperature = params.initial_temperature
    accepted = 0
    while temperature > params.min_temperature:
        if deadline is not None and time.perf_counter() >= deadline:
            logger.debug("Annealing hit the deadline at T=%.2e", temperature)
            break
        for _ in range(params.iterations_per_temperature):
            candidate = propose_neighbor(current, rng)
            fit = evaluator.fitness(candidate)
            delta = fit - current_fit
            if delta >= 0 or rng.random() < math.exp(delta / temperature):
                current, current_fit = candidate, fit
                accepted += 1
                if current_fit > best_fit:
                    best, best_fit = list(current), current_fit
        temperature *= params.cooling_rate

    logger.debug("Annealing accepted %d moves, best fitness %.4f", accepted, best_fit)
    return best, best_fit


def optimize_simulated_annealing(
    evaluator: ScoreFunction,
    params: Optional[AnnealingParams] = None,
    *,
    rng: Optional[random.Random] = None,
    deadline: Optional[float] = None,
    initial: Optional[Sequence[int]] = None,
) -> Tuple[List[int], float]:
    """
    Find a good ordering by simulated annealing from the greedy ordering.

    Args:
        evaluator: Score function of the problem
        params: Cooling schedule
        rng: Random number generator
        deadline: time.perf_counter() value after which to stop
        initial: Starting ordering (greedy by default)

    Returns:
        Tuple of (best ordering, its fitness)
    """
    start = list(initial) if initial is not None else construct_greedy_route(evaluator)
    return anneal_ordering(evaluator, start, params, rng=rng, deadline=deadline)
