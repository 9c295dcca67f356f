"""Tests for greedy construction and hill-climbing refinement."""

import random

import pytest

from route_optimizer.core import RouteSettings
from route_optimizer.solvers.heuristics import (
    RefineParams,
    construct_greedy_route,
    nearest_neighbor_route,
    propose_neighbor,
    refine_ordering,
)


def test_greedy_is_a_permutation(city_places, build_evaluator):
    """Greedy orders every place once."""
    ev = build_evaluator(city_places)
    route = construct_greedy_route(ev)
    assert sorted(route) == list(range(1, 9))


def test_greedy_is_deterministic(city_places, build_evaluator):
    """Greedy returns the same ordering every time."""
    a = construct_greedy_route(build_evaluator(city_places))
    b = construct_greedy_route(build_evaluator(city_places))
    assert a == b


def test_greedy_picks_best_rated_among_equidistant(make_place, hotel, build_evaluator):
    """Among equidistant places the best rated comes first."""
    lat, lng = hotel.latitude, hotel.longitude
    places = [
        make_place(1, lat + 0.01, lng, rating=2.0),
        make_place(2, lat - 0.01, lng, rating=5.0),
    ]
    assert construct_greedy_route(build_evaluator(places))[0] == 2


def test_greedy_ties_break_by_input_order(make_place, hotel, build_evaluator):
    """Identical places keep their input order."""
    lat, lng = hotel.latitude, hotel.longitude
    places = [make_place(1, lat + 0.01, lng), make_place(2, lat - 0.01, lng)]
    assert construct_greedy_route(build_evaluator(places)) == [1, 2]


def test_unvisitable_places_go_last(make_place, hotel, build_evaluator):
    """Places that cannot be visited are pushed to the end."""
    lat, lng = hotel.latitude, hotel.longitude
    places = [
        make_place(1, lat + 0.001, lng, rating=5.0, weekly_hours={0: None}),
        make_place(2, lat + 0.02, lng, rating=3.0),
        make_place(3, lat + 0.03, lng, rating=3.0),
    ]
    route = construct_greedy_route(build_evaluator(places, RouteSettings(start_day=0)))
    assert route[-1] == 1
    assert sorted(route) == [1, 2, 3]


def test_greedy_visits_everything_with_large_budget(city_places, build_evaluator):
    """A generous budget lets greedy visit all places."""
    ev = build_evaluator(city_places, RouteSettings(total_time_available=900))
    _, trace = ev.evaluate(construct_greedy_route(ev))
    assert trace.state.skipped == 0
    assert trace.feasible


def test_nearest_neighbor_starts_closest(city_places, build_evaluator):
    """Nearest neighbour begins at the closest place."""
    ev = build_evaluator(city_places)
    route = nearest_neighbor_route(ev)
    times = ev.matrix.times
    assert sorted(route) == list(range(1, 9))
    assert times[0, route[0]] == min(times[0, v] for v in range(1, 9))


def test_propose_neighbor_keeps_permutation():
    """Random moves keep the ordering a permutation."""
    rng = random.Random(3)
    perm = list(range(1, 9))
    for _ in range(50):
        perm = propose_neighbor(perm, rng)
        assert sorted(perm) == list(range(1, 9))


def test_refine_never_worsens(city_places, build_evaluator):
    """Hill climbing never lowers fitness."""
    ev = build_evaluator(city_places, RouteSettings(total_time_available=300))
    start = list(reversed(range(1, 9)))
    before = ev.fitness(start)
    best, fitness = refine_ordering(
        ev, start, RefineParams(max_evals=200), rng=random.Random(1)
    )
    assert fitness >= before
    assert fitness == pytest.approx(ev.fitness(best))
    assert sorted(best) == list(range(1, 9))


def test_refine_respects_past_deadline(city_places, build_evaluator):
    """An expired deadline leaves the ordering unchanged."""
    ev = build_evaluator(city_places)
    start = list(range(1, 9))
    best, _ = refine_ordering(ev, start, deadline=0.0, rng=random.Random(1))
    assert best == start


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
