"""
Genetic algorithm based route solver (the "balanced" tier).

Evolves visiting orders scored by the shared score function. The initial
population is seeded with the greedy and nearest-neighbour orderings, and
replacement is elitist, so the result is never worse than greedy.
"""

import logging
import random
from typing import List, Optional, Sequence, Tuple

from ...core.evaluator import ScoreFunction
from ...core.settings import GeneticParams
from ..heuristics.constructive import construct_greedy_route, nearest_neighbor_route
from ..heuristics.local_search import RefineParams, refine_ordering
from .operators import run_genetic_algorithm

logger = logging.getLogger(__name__)


def _initial_population(
    evaluator: ScoreFunction,
    size: int,
    rng: random.Random,
    seeds: Sequence[Sequence[int]] = (),
) -> List[List[int]]:
    """Seed orderings first, then distinct random shuffles up to size."""
    nodes = list(evaluator.problem.place_nodes)
    pop: List[List[int]] = []
    seen = set()
    for seed in seeds:
        key = tuple(seed)
        if key not in seen:
            seen.add(key)
            pop.append(list(seed))

    attempts = 0
    while len(pop) < size and attempts < size * 10:
        attempts += 1
        perm = list(nodes)
        rng.shuffle(perm)
        key = tuple(perm)
        if key in seen:
            continue
        seen.add(key)
        pop.append(perm)

    # Tiny instances have fewer distinct orderings than individuals.
    while len(pop) < size:
        pop.append(list(pop[len(pop) % max(1, len(seen))]))
    return pop


def optimize_genetic(
    evaluator: ScoreFunction,
    params: Optional[GeneticParams] = None,
    *,
    rng: Optional[random.Random] = None,
    deadline: Optional[float] = None,
    initial: Optional[Sequence[int]] = None,
) -> Tuple[List[int], float]:
    """
    Search for the best visiting order with a genetic algorithm.

    Args:
        evaluator: Score function of the problem
        params: GA parameters (defaults to GeneticParams())
        rng: Random number generator; seed it for reproducible runs
        deadline: time.perf_counter() value at which to stop
        initial: Ordering to seed the population with (greedy by default)

    Returns:
        Tuple of (best ordering, fitness)
    """
    params = params if params is not None else GeneticParams()
    if rng is None:
        rng = random.Random()

    greedy = list(initial) if initial is not None else construct_greedy_route(evaluator)
    if len(greedy) < 2:
        return greedy, evaluator.fitness(greedy)

    pop = _initial_population(
        evaluator,
        max(2, params.population_size),
        rng,
        seeds=[greedy, nearest_neighbor_route(evaluator)],
    )

    result = run_genetic_algorithm(
        evaluator.fitness,
        pop,
        rng,
        max_generations=params.max_generations,
        stall_generations=params.stall_generations,
        tournament_size=params.tournament_size,
        crossover_prob=params.crossover_prob,
        swap_prob=params.swap_prob,
        inversion_prob=params.inversion_prob,
        deadline=deadline,
    )
    logger.debug(
        "GA stopped after %d generations (%s), best fitness %.4f",
        result.generations,
        result.stop_reason,
        result.fitness,
    )

    best, best_fitness = result.best, result.fitness
    if params.polish_evals > 0:
        best, best_fitness = refine_ordering(
            evaluator,
            best,
            RefineParams(max_evals=params.polish_evals),
            deadline=deadline,
            rng=rng,
        )

    return best, best_fitness
