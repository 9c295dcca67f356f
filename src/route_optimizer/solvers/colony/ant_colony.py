"""
Ant colony optimization over visiting orders.

Alternative "balanced" tier metaheuristic. Ants build full orderings from the
start location, choosing the next place with probability proportional to
pheromone^alpha * desirability^beta. Desirability comes from the greedy
single-place score, so ants favour the same moves greedy does while the
pheromone trail learns from whole-route fitness.
"""

import logging
import math
import random
import time
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ...core.evaluator import ScoreFunction
from ...core.settings import AntColonyParams
from ..heuristics.constructive import construct_greedy_route

logger = logging.getLogger(__name__)


def build_desirability(evaluator: ScoreFunction) -> np.ndarray:
    """
    (n, n) matrix of move desirability, strictly positive off the diagonal.

    Row i, column j is exp(place_score(i, j)); column 0 (the start) and the
    diagonal are zero since those moves never happen.
    """
    n = evaluator.matrix.size
    eta = np.zeros((n, n))
    for i in range(n):
        for j in range(1, n):
            if i != j:
                eta[i, j] = math.exp(evaluator.place_score(i, j))
    return eta


def _roulette(weights: np.ndarray, candidates: List[int], rng: random.Random) -> int:
    """Pick a candidate with probability proportional to its weight."""
    total = float(weights.sum())
    if total <= 0.0 or not math.isfinite(total):
        return candidates[rng.randrange(len(candidates))]
    r = rng.random() * total
    acc = 0.0
    for node, w in zip(candidates, weights):
        acc += float(w)
        if r < acc:
            return node
    return candidates[-1]


def construct_ant_route(
    pheromone: np.ndarray,
    desirability: np.ndarray,
    nodes: Sequence[int],
    alpha: float,
    beta: float,
    rng: random.Random,
) -> List[int]:
    """Build one full ordering of nodes, starting from node 0."""
    unvisited = list(nodes)
    route: List[int] = []
    current = 0
    while unvisited:
        idx = np.asarray(unvisited, dtype=int)
        weights = (pheromone[current, idx] ** alpha) * (desirability[current, idx] ** beta)
        nxt = _roulette(weights, unvisited, rng)
        route.append(nxt)
        unvisited.remove(nxt)
        current = nxt
    return route


def update_pheromone(
    pheromone: np.ndarray,
    routes: Sequence[Tuple[List[int], float]],
    evaporation: float,
    deposit: float,
    best_fitness: float,
    bounds: Tuple[float, float],
) -> None:
    """
    Evaporate, then let each ant deposit along its path.

    An ant deposits deposit / (1 + gap), where gap is how far its fitness
    trails the best known fitness. Trails are clamped to bounds so no move
    becomes impossible or certain.
    """
    pheromone *= 1.0 - evaporation
    for route, fitness in routes:
        amount = deposit / (1.0 + max(0.0, best_fitness - fitness))
        prev = 0
        for node in route:
            pheromone[prev, node] += amount
            prev = node
    np.clip(pheromone, bounds[0], bounds[1], out=pheromone)


def optimize_ant_colony(
    evaluator: ScoreFunction,
    params: Optional[AntColonyParams] = None,
    *,
    rng: Optional[random.Random] = None,
    deadline: Optional[float] = None,
    initial: Optional[Sequence[int]] = None,
) -> Tuple[List[int], float]:
    """
    Search for the best visiting order with ant colony optimization.

    The greedy ordering is the initial best and is reinforced on the trail
    before the first iteration, so the result is never worse than greedy.

    Args:
        evaluator: Score function of the problem
        params: ACO parameters (defaults to AntColonyParams())
        rng: Random number generator; seed it for reproducible runs
        deadline: time.perf_counter() value at which to stop
        initial: Ordering to start from (greedy by default)

    Returns:
        Tuple of (best ordering, fitness)
    """
    params = params if params is not None else AntColonyParams()
    if rng is None:
        rng = random.Random()

    best = list(initial) if initial is not None else construct_greedy_route(evaluator)
    best_fitness = evaluator.fitness(best)
    if len(best) < 2:
        return best, best_fitness

    n = evaluator.matrix.size
    nodes = list(evaluator.problem.place_nodes)
    desirability = build_desirability(evaluator)
    pheromone = np.ones((n, n))
    bounds = (0.01, 10.0 * max(1.0, params.deposit))
    update_pheromone(pheromone, [(best, best_fitness)], 0.0, params.deposit, best_fitness, bounds)

    stall = 0
    iteration = 0
    stop_reason = "iterations"
    while iteration < params.max_iterations:
        if deadline is not None and time.perf_counter() >= deadline:
            stop_reason = "deadline"
            break

        routes = []
        for _ in range(max(1, params.num_ants)):
            route = construct_ant_route(
                pheromone, desirability, nodes, params.alpha, params.beta, rng
            )
            routes.append((route, evaluator.fitness(route)))

        iteration += 1
        it_best, it_fitness = max(routes, key=lambda rf: rf[1])
        if it_fitness > best_fitness:
            best, best_fitness = list(it_best), it_fitness
            stall = 0
        else:
            stall += 1

        # The global best keeps reinforcing its own trail.
        update_pheromone(
            pheromone,
            routes + [(best, best_fitness)],
            params.evaporation,
            params.deposit,
            best_fitness,
            bounds,
        )
        if stall >= params.stall_iterations:
            stop_reason = "converged"
            break

    logger.debug(
        "ACO stopped after %d iterations (%s), best fitness %.4f",
        iteration,
        stop_reason,
        best_fitness,
    )
    return best, best_fitness
