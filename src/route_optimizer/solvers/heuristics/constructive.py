"""
Greedy construction heuristic (the "fast" tier).

Builds an ordering one place at a time, always moving to the best-scoring
place that can still be visited without being skipped. Deterministic: no
randomness, ties broken by travel time and then by input order.
"""

from typing import List, Tuple

from ...core.evaluator import ScoreFunction
from ...core.simulator import SimulationState


def _best_next(
    evaluator: ScoreFunction, state: SimulationState, candidates: List[int]
) -> Tuple[int, SimulationState]:
    """Best visitable candidate from state, or (-1, state) if none fits."""
    simulator = evaluator.simulator
    best_node = -1
    best_state = state
    best_key = None
    for node in candidates:
        nxt, record = simulator.step(state, node)
        if not record.visited:
            continue
        key = (-evaluator.place_score(state.position, node), record.travel_time, node)
        if best_key is None or key < best_key:
            best_key = key
            best_node = node
            best_state = nxt
    return best_node, best_state


def construct_greedy_route(evaluator: ScoreFunction) -> List[int]:
    """
    Construct a full ordering of all places greedily.

    At each step, among unvisited places that fit the remaining time and
    their opening hours, pick the one with the highest single-place score.
    Places that never fit are appended at the end by descending score, so
    the result is always a permutation of every place.

    Args:
        evaluator: Score function (carries problem, simulator and matrix)

    Returns:
        Ordering of place nodes
    """
    problem = evaluator.problem
    state = evaluator.simulator.initial_state()
    unvisited = list(problem.place_nodes)
    route: List[int] = []

    while unvisited:
        node, next_state = _best_next(evaluator, state, unvisited)
        if node < 0:
            break
        route.append(node)
        unvisited.remove(node)
        state = next_state

    origin = state.position
    leftovers = sorted(unvisited, key=lambda v: (-evaluator.place_score(origin, v), v))
    return route + leftovers


def nearest_neighbor_route(evaluator: ScoreFunction) -> List[int]:
    """
    Ordering by repeatedly moving to the closest unvisited place.

    Ignores preferences and opening hours; used to diversify the initial
    population of the metaheuristics.
    """
    times = evaluator.matrix.times
    unvisited = set(evaluator.problem.place_nodes)
    route: List[int] = []
    current = 0
    while unvisited:
        nxt = min(unvisited, key=lambda v: (times[current, v], v))
        route.append(nxt)
        unvisited.discard(nxt)
        current = nxt
    return route
