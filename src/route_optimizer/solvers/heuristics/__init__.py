"""Heuristic algorithms: greedy construction, hill climbing and simulated annealing."""

from .constructive import construct_greedy_route, nearest_neighbor_route
from .local_search import refine_ordering, propose_neighbor, RefineParams
from .annealing import anneal_ordering, optimize_simulated_annealing

__all__ = [
    "construct_greedy_route",
    "nearest_neighbor_route",
    "refine_ordering",
    "propose_neighbor",
    "RefineParams",
    "anneal_ordering",
    "optimize_simulated_annealing",
]
