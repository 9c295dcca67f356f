"""Exact branch-and-bound search for small instances."""

from .branch_bound import BranchAndBound, SearchStats, optimize_branch_bound

__all__ = ["BranchAndBound", "SearchStats", "optimize_branch_bound"]
