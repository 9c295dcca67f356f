"""Tests for the branch-and-bound exact tier."""

import itertools
import time

import pytest

from route_optimizer.core import BranchBoundParams, EntryFee, RouteConstraints, RouteSettings, TimeWindow
from route_optimizer.solvers.exact import BranchAndBound, optimize_branch_bound
from route_optimizer.solvers.heuristics import construct_greedy_route


def _brute_force(ev):
    nodes = list(ev.problem.place_nodes)
    return max(ev.fitness(p) for p in itertools.permutations(nodes))


def test_matches_brute_force(city_places, build_evaluator):
    """Branch-and-bound finds the brute-force optimum."""
    ev = build_evaluator(city_places[:6], RouteSettings(total_time_available=300))
    route, fitness, proven = optimize_branch_bound(ev)
    assert proven
    assert sorted(route) == list(range(1, 7))
    assert fitness == pytest.approx(_brute_force(ev))
    assert fitness == pytest.approx(ev.fitness(route))


def test_matches_brute_force_with_constraints(make_place, hotel, build_evaluator):
    """The optimum holds with opening hours and budgets."""
    lat, lng = hotel.latitude, hotel.longitude
    places = [
        make_place(1, lat + 0.01, lng, 90, rating=4.8, entry_fee=EntryFee(indian=50)),
        make_place(2, lat + 0.02, lng + 0.01, 60, rating=3.1, opening_window=TimeWindow(600, 700)),
        make_place(3, lat - 0.01, lng + 0.02, 120, rating=4.2, entry_fee=EntryFee(indian=80)),
        make_place(4, lat, lng - 0.03, 45, rating=2.5),
        make_place(5, lat - 0.02, lng - 0.01, 30, rating=4.0, weekly_hours={2: None}),
    ]
    settings = RouteSettings(
        total_time_available=240,
        start_day=2,
        constraints=RouteConstraints(budget=100),
    )
    ev = build_evaluator(places, settings)
    route, fitness, proven = optimize_branch_bound(ev)
    assert proven
    assert fitness == pytest.approx(_brute_force(ev))


def test_never_worse_than_greedy(city_places, build_evaluator):
    """The exact search never returns less than greedy."""
    ev = build_evaluator(city_places[:7])
    greedy_fit = ev.fitness(construct_greedy_route(ev))
    _, fitness, _ = optimize_branch_bound(ev)
    assert fitness >= greedy_fit


def test_node_limit_returns_incumbent(star_places, build_evaluator):
    """Hitting the node limit returns greedy, unproven."""
    ev = build_evaluator(star_places)
    greedy = construct_greedy_route(ev)
    route, fitness, proven = optimize_branch_bound(ev, BranchBoundParams(node_limit=1))
    assert not proven
    assert route == greedy
    assert fitness == pytest.approx(ev.fitness(greedy))


def test_expired_deadline_returns_incumbent(star_places, build_evaluator):
    """An expired deadline returns greedy, unproven."""
    ev = build_evaluator(star_places)
    route, _, proven = optimize_branch_bound(ev, deadline=time.perf_counter() - 1)
    assert not proven
    assert sorted(route) == [1, 2, 3, 4]


def test_pruning_happens(city_places, build_evaluator):
    """Bounds and dominance cut branches on a real instance."""
    ev = build_evaluator(city_places[:7])
    search = BranchAndBound(ev)
    search.run()
    stats = search.stats
    assert not stats.aborted
    assert stats.pruned_bound + stats.pruned_dominance > 0
    # Far fewer leaves than the 5040 orderings.
    assert stats.leaves < 5040


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
