"""Shared fixtures for the route optimizer tests."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import pytest

from route_optimizer.core import (
    FeasibilitySimulator,
    Place,
    RouteProblem,
    RouteSettings,
    ScoreFunction,
    StartLocation,
)
from route_optimizer.distance import GeoDistanceMatrix

# Coimbatore hotel used by the reference scenarios.
HOTEL = StartLocation(11.0638, 77.0596, name="Hotel")


def _make_place(i, lat, lng, duration=60, **kwargs):
    kwargs.setdefault("rating", 4.0)
    return Place(
        id=f"p{i}",
        name=f"Place {i}",
        latitude=lat,
        longitude=lng,
        visit_duration=duration,
        **kwargs,
    )


def _build_evaluator(places, settings=None, config=None, start=HOTEL):
    problem = RouteProblem(places, start, settings or RouteSettings(), config)
    matrix = GeoDistanceMatrix.for_problem(problem)
    return ScoreFunction(problem, FeasibilitySimulator(problem, matrix))


@pytest.fixture
def hotel():
    return HOTEL


@pytest.fixture
def make_place():
    """Factory: make_place(i, lat, lng, duration=60, **fields) -> Place with id 'p{i}'."""
    return _make_place


@pytest.fixture
def build_evaluator():
    """Factory: build_evaluator(places, settings=None, config=None) -> ScoreFunction."""
    return _build_evaluator


@pytest.fixture
def city_places():
    """Eight places scattered within a few km of the hotel."""
    offsets = [
        (0.010, 0.004, 60, 4.5),
        (-0.012, 0.009, 45, 3.8),
        (0.021, -0.015, 90, 4.8),
        (-0.004, -0.022, 30, 3.2),
        (0.015, 0.019, 60, 4.1),
        (-0.019, -0.006, 120, 4.6),
        (0.002, 0.027, 45, 3.9),
        (0.027, 0.008, 60, 4.3),
    ]
    return [
        _make_place(i, HOTEL.latitude + dlat, HOTEL.longitude + dlng, duration, rating=rating)
        for i, (dlat, dlng, duration, rating) in enumerate(offsets, start=1)
    ]


@pytest.fixture
def star_places():
    """Four places at equal distance from the hotel in the four compass directions."""
    lat, lng = HOTEL.latitude, HOTEL.longitude
    offsets = [(0.02, 0.0), (0.0, 0.02), (-0.02, 0.0), (0.0, -0.02)]
    return [
        _make_place(i, lat + dlat, lng + dlng, 45, rating=3.0 + 0.5 * i)
        for i, (dlat, dlng) in enumerate(offsets, start=1)
    ]
