"""End-to-end tests for tier selection, fallback and result invariants."""

from dataclasses import replace

import pytest

from route_optimizer import (
    EngineConfig,
    OptimizationLevel,
    RouteSettings,
    optimize,
)
from route_optimizer.core import GeneticParams
from route_optimizer.solvers import adaptive_solver

QUICK = EngineConfig(
    genetic=GeneticParams(population_size=12, max_generations=15, stall_generations=5, polish_evals=30)
)


def _scattered(make_place, hotel, n, duration=60):
    places = []
    for i in range(1, n + 1):
        dlat = ((i * 37) % 23 - 11) * 0.002
        dlng = ((i * 53) % 19 - 9) * 0.002
        places.append(
            make_place(i, hotel.latitude + dlat, hotel.longitude + dlng, duration,
                       rating=3.0 + (i % 5) * 0.4)
        )
    return places


def test_three_place_scenario_is_feasible(make_place, hotel):
    """Three 90-minute places fit a full day from the hotel."""
    places = [
        make_place(1, 11.0700, 77.0650, 90),
        make_place(2, 11.0580, 77.0700, 90),
        make_place(3, 11.0650, 77.0500, 90),
    ]
    settings = RouteSettings(start_time=9 * 60, total_time_available=480)
    result = optimize(places, hotel, settings)

    assert result.success
    assert result.algorithm == "fast"
    assert result.feasible
    assert result.metrics.places_skipped == 0
    assert result.metrics.places_visited == 3

    start, first = result.route[0], result.route[1]
    assert start.is_start and start.order == 0
    assert first.arrival >= 540 + start.travel_time_to_next
    assert first.arrival_time >= "09:00"


def test_tight_budget_scenario_skips(make_place, hotel):
    """A one-hour budget cannot hold five 90-minute visits."""
    places = _scattered(make_place, hotel, 5, duration=90)
    result = optimize(places, hotel, RouteSettings(total_time_available=60))
    assert result.success
    assert not result.feasible
    assert result.metrics.places_skipped >= 4
    assert any(w.type == "INCOMPLETE_ROUTE" for w in result.warnings)


@pytest.mark.parametrize("level", ["fast", "balanced", "optimal"])
def test_large_budget_visits_every_place_once(make_place, hotel, level):
    """With time to spare every tier visits each place exactly once."""
    places = _scattered(make_place, hotel, 6, duration=30)
    settings = RouteSettings(
        total_time_available=900,
        optimization_level=OptimizationLevel.parse(level),
        rng_seed=1,
    )
    result = optimize(places, hotel, settings, QUICK)
    assert result.success
    assert sorted(result.ordering) == sorted(p.id for p in places)
    assert len(result.itinerary) == 6
    assert result.feasible


def test_result_invariants(make_place, hotel):
    """Stops are sequential and total time is travel plus visit."""
    places = _scattered(make_place, hotel, 8, duration=75)
    result = optimize(places, hotel, RouteSettings(total_time_available=420))
    route = result.route
    assert [s.order for s in route] == list(range(len(route)))
    for prev, nxt in zip(route, route[1:]):
        assert nxt.arrival >= prev.departure + prev.travel_time_to_next - 1e-9
    m = result.metrics
    assert m.total_time == m.total_travel_time + m.total_visit_time
    assert m.places_visited + m.places_skipped == 8
    if m.feasible:
        assert m.total_time <= 420


def test_fast_tier_is_deterministic(make_place, hotel):
    """Two fast runs on the same input agree exactly."""
    places = _scattered(make_place, hotel, 10)
    a = optimize(places, hotel, RouteSettings())
    b = optimize(places, hotel, RouteSettings())
    assert a.to_dict() == b.to_dict()


def test_balanced_reproducible_with_seed(make_place, hotel):
    """The balanced tier repeats itself under a fixed seed."""
    places = _scattered(make_place, hotel, 10)
    settings = RouteSettings(
        optimization_level=OptimizationLevel.BALANCED, rng_seed=99, total_time_available=360
    )
    a = optimize(places, hotel, settings, QUICK)
    b = optimize(places, hotel, settings, QUICK)
    assert a.ordering == b.ordering


def test_higher_tiers_dominate_fast(make_place, hotel):
    """Balanced and optimal never score below fast."""
    places = _scattered(make_place, hotel, 7, duration=60)
    fitness = {}
    for level in OptimizationLevel:
        settings = RouteSettings(
            optimization_level=level, total_time_available=300, rng_seed=4
        )
        result = optimize(places, hotel, settings, QUICK)
        assert result.algorithm == level.value
        fitness[level] = result.metrics.fitness
    assert fitness[OptimizationLevel.OPTIMAL] >= fitness[OptimizationLevel.FAST]
    assert fitness[OptimizationLevel.BALANCED] >= fitness[OptimizationLevel.FAST]
    assert fitness[OptimizationLevel.OPTIMAL] >= fitness[OptimizationLevel.BALANCED] - 1e-9


def test_optimal_is_downgraded_for_many_places(make_place, hotel):
    """Optimal on 18 places runs as balanced instead."""
    places = _scattered(make_place, hotel, 18, duration=30)
    settings = RouteSettings(
        optimization_level=OptimizationLevel.OPTIMAL, rng_seed=0, time_limit_s=2.0
    )
    result = optimize(places, hotel, settings, QUICK)
    assert result.success
    assert result.downgraded
    assert result.requested_algorithm == "optimal"
    assert result.algorithm == "balanced"


def test_balanced_is_downgraded_past_its_limit(make_place, hotel):
    """Balanced past its place limit runs as fast."""
    places = _scattered(make_place, hotel, 12, duration=30)
    config = EngineConfig(balanced_limit=10)
    settings = RouteSettings(optimization_level=OptimizationLevel.BALANCED)
    result = optimize(places, hotel, settings, config)
    assert result.algorithm == "fast"
    assert result.downgraded


def test_fast_runs_beyond_advisory_limit(make_place, hotel):
    """Fast still runs above its advisory limit."""
    places = _scattered(make_place, hotel, 20, duration=20)
    result = optimize(places, hotel, RouteSettings())
    assert result.success
    assert result.algorithm == "fast"
    assert not result.downgraded


@pytest.mark.parametrize(
    "settings",
    [
        RouteSettings(start_time="09:00"),
        RouteSettings(optimization_level="ludicrous"),
        RouteSettings(total_time_available="480"),
        RouteSettings(start_day=None),
    ],
)
def test_mistyped_settings_fail_cleanly(make_place, hotel, settings):
    """Wrongly typed settings yield a failure result instead of raising."""
    places = _scattered(make_place, hotel, 4)
    result = optimize(places, hotel, settings)
    assert result.success is False
    assert result.message


def test_level_name_is_accepted(make_place, hotel):
    """A tier given as a string is resolved rather than rejected."""
    places = _scattered(make_place, hotel, 4)
    result = optimize(places, hotel, RouteSettings(optimization_level="optimal"))
    assert result.success
    assert result.algorithm == "optimal"


@pytest.mark.parametrize("fields", [{"visit_duration": None}, {"rating": "high"}])
def test_mistyped_place_fails_cleanly(make_place, hotel, fields):
    """A place with a non-numeric field yields a failure result."""
    places = _scattered(make_place, hotel, 3)
    places[1] = replace(places[1], **fields)
    result = optimize(places, hotel, RouteSettings())
    assert result.success is False
    assert "place" in result.message


@pytest.mark.parametrize("n", [0, 1, 21])
def test_place_count_outside_range_fails_cleanly(make_place, hotel, n):
    """Too few or too many places give a failure result."""
    places = _scattered(make_place, hotel, n)
    result = optimize(places, hotel, RouteSettings())
    assert not result.success
    assert result.message
    assert result.to_dict() == {"success": False, "message": result.message}


def test_strategy_failure_falls_back_to_fast(make_place, hotel, monkeypatch):
    """A crashing metaheuristic is replaced by the greedy route."""
    def boom(*args, **kwargs):
        raise RuntimeError("strategy crashed")

    monkeypatch.setattr(adaptive_solver, "optimize_genetic", boom)
    places = _scattered(make_place, hotel, 6)
    settings = RouteSettings(optimization_level=OptimizationLevel.BALANCED)
    result = optimize(places, hotel, settings)
    fast = optimize(places, hotel, RouteSettings())
    assert result.success
    assert result.fallback_used
    assert result.algorithm == "fast"
    assert result.ordering == fast.ordering


def test_malformed_ordering_falls_back(make_place, hotel, monkeypatch):
    """A non-permutation from a strategy triggers the fallback."""
    monkeypatch.setattr(
        adaptive_solver, "optimize_genetic", lambda *a, **k: ([1, 1, 2], 0.0)
    )
    places = _scattered(make_place, hotel, 4)
    settings = RouteSettings(optimization_level=OptimizationLevel.BALANCED)
    result = optimize(places, hotel, settings)
    assert result.fallback_used
    assert sorted(result.ordering) == sorted(p.id for p in places)


def test_unknown_metaheuristic_falls_back(make_place, hotel):
    """An unknown metaheuristic name triggers the fallback."""
    places = _scattered(make_place, hotel, 5)
    settings = RouteSettings(optimization_level=OptimizationLevel.BALANCED)
    result = optimize(places, hotel, settings, EngineConfig(metaheuristic="tabu"))
    assert result.success
    assert result.fallback_used


def test_ant_colony_balanced_tier(make_place, hotel):
    """The ant colony runs as the balanced metaheuristic."""
    places = _scattered(make_place, hotel, 8)
    settings = RouteSettings(optimization_level=OptimizationLevel.BALANCED, rng_seed=3)
    result = optimize(places, hotel, settings, EngineConfig(metaheuristic="ant_colony"))
    fast = optimize(places, hotel, RouteSettings())
    assert result.algorithm == "balanced"
    assert not result.fallback_used
    assert result.metrics.fitness >= fast.metrics.fitness


def test_optimal_reports_proof(make_place, hotel):
    """A small optimal search reports a proven result."""
    places = _scattered(make_place, hotel, 6)
    settings = RouteSettings(optimization_level=OptimizationLevel.OPTIMAL)
    result = optimize(places, hotel, settings)
    assert result.algorithm == "optimal"
    assert result.proven_optimal


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
