"""Genetic algorithm over visiting orders."""

from .operators import (
    tournament_selection,
    order_crossover,
    swap_mutation,
    inversion_mutation,
    mutate,
    run_genetic_algorithm,
    EvolutionResult,
)
from .tour_solver import optimize_genetic

__all__ = [
    "tournament_selection",
    "order_crossover",
    "swap_mutation",
    "inversion_mutation",
    "mutate",
    "run_genetic_algorithm",
    "EvolutionResult",
    "optimize_genetic",
]
