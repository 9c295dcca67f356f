"""
Sightseeing Route Optimizer

Plans a one-day visiting order over candidate places from a start location,
honouring opening hours, a time budget, an entry-fee budget and accessibility
requirements, and maximising a weighted multi-objective score.

Three search tiers trade runtime for quality: greedy construction (fast),
a genetic, ant colony or simulated annealing metaheuristic (balanced) and
branch-and-bound (optimal).
"""

from .core.errors import InputError, AlgorithmError
from .core.places import Place, StartLocation, TimeWindow, EntryFee, Accessibility
from .core.settings import (
    OptimizationLevel,
    PreferenceWeights,
    RouteConstraints,
    RouteSettings,
    EngineConfig,
)
from .core.solution import Stop, Metrics, OptimizationResult
from .distance.matrix import GeoDistanceMatrix
from .solvers.adaptive_solver import optimize
from .schemas import normalize_place
from .api import optimize_request
from .batch import optimize_many

__version__ = "1.0.0"

__all__ = [
    "InputError",
    "AlgorithmError",
    "Place",
    "StartLocation",
    "TimeWindow",
    "EntryFee",
    "Accessibility",
    "OptimizationLevel",
    "PreferenceWeights",
    "RouteConstraints",
    "RouteSettings",
    "EngineConfig",
    "Stop",
    "Metrics",
    "OptimizationResult",
    "GeoDistanceMatrix",
    "optimize",
    "normalize_place",
    "optimize_request",
    "optimize_many",
]
