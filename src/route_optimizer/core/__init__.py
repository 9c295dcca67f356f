"""Core components: places, settings, problem, simulator, scoring, results."""

from .errors import InputError, AlgorithmError
from .places import Place, StartLocation, TimeWindow, EntryFee, Accessibility
from .settings import (
    OptimizationLevel,
    PreferenceWeights,
    RouteConstraints,
    RouteSettings,
    EngineConfig,
    GeneticParams,
    AntColonyParams,
    AnnealingParams,
    BranchBoundParams,
)
from .problem import RouteProblem
from .simulator import FeasibilitySimulator, SimulationState, SimulationTrace, VisitRecord
from .evaluator import ScoreFunction, ScoreBreakdown
from .solution import Stop, Metrics, RouteWarning, OptimizationResult
from .itinerary import ItineraryBuilder

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
    "GeneticParams",
    "AntColonyParams",
    "AnnealingParams",
    "BranchBoundParams",
    "RouteProblem",
    "FeasibilitySimulator",
    "SimulationState",
    "SimulationTrace",
    "VisitRecord",
    "ScoreFunction",
    "ScoreBreakdown",
    "Stop",
    "Metrics",
    "RouteWarning",
    "OptimizationResult",
    "ItineraryBuilder",
]
