"""Search tiers for route optimization."""

from .adaptive_solver import optimize, solve, OptimizationLevel

__all__ = ["optimize", "solve", "OptimizationLevel"]
