"""Ant colony optimization over visiting orders."""

from .ant_colony import optimize_ant_colony, construct_ant_route, build_desirability

__all__ = ["optimize_ant_colony", "construct_ant_route", "build_desirability"]
