"""Tests for the genetic operators and the GA route solver."""

import random
import time

import pytest

from route_optimizer.core import GeneticParams, RouteSettings
from route_optimizer.solvers.genetic import (
    inversion_mutation,
    mutate,
    optimize_genetic,
    order_crossover,
    run_genetic_algorithm,
    swap_mutation,
    tournament_selection,
)
from route_optimizer.solvers.heuristics import construct_greedy_route

SMALL_GA = GeneticParams(population_size=16, max_generations=30, stall_generations=10, polish_evals=50)


def test_order_crossover_yields_permutation():
    """OX children are permutations."""
    rng = random.Random(0)
    p1 = list(range(1, 11))
    p2 = list(reversed(p1))
    for _ in range(20):
        child = order_crossover(p1, p2, rng)
        assert sorted(child) == p1


def test_mutations_keep_permutation():
    """Mutations keep the genome a permutation."""
    rng = random.Random(0)
    g = list(range(1, 9))
    for _ in range(20):
        g = mutate(g, 0.5, 0.5, rng)
        assert sorted(g) == list(range(1, 9))


def test_zero_probability_mutation_is_identity():
    """Zero mutation probability leaves the genome alone."""
    rng = random.Random(0)
    g = [3, 1, 2, 5, 4]
    assert swap_mutation(g, 0.0, rng) == g
    assert inversion_mutation(g, 0.0, rng) == g


def test_tournament_selection_returns_copies():
    """Selected individuals are copies."""
    rng = random.Random(0)
    pop = [[1, 2], [2, 1]]
    parents = tournament_selection(pop, [0.0, 1.0], 2, 5, rng)
    assert parents == [[2, 1]] * 5
    parents[0].append(9)
    assert pop[1] == [2, 1]


def test_generic_ga_improves_toy_fitness():
    """Fitness counts elements already in place; the identity is optimal."""
    rng = random.Random(7)
    n = 8
    fitness = lambda g: float(sum(1 for i, v in enumerate(g) if i == v))
    pop = []
    for _ in range(20):
        g = list(range(n))
        rng.shuffle(g)
        pop.append(g)
    initial_best = max(fitness(g) for g in pop)
    result = run_genetic_algorithm(fitness, pop, rng, max_generations=100, stall_generations=100)
    assert result.fitness >= initial_best
    assert result.fitness == fitness(result.best)
    assert result.generations > 0


def test_generic_ga_stops_on_stall():
    """The GA stops after the stall limit."""
    rng = random.Random(1)
    pop = [[0, 1, 2], [2, 1, 0]]
    result = run_genetic_algorithm(lambda g: 1.0, pop, rng, max_generations=500, stall_generations=5)
    assert result.stop_reason == "converged"
    assert result.generations == 5


def test_generic_ga_honours_deadline():
    """The GA stops at an expired deadline."""
    rng = random.Random(1)
    pop = [[0, 1, 2], [2, 1, 0]]
    result = run_genetic_algorithm(lambda g: 0.0, pop, rng, deadline=time.perf_counter() - 1)
    assert result.stop_reason == "deadline"
    assert result.generations == 0


def test_ga_is_never_worse_than_greedy(city_places, build_evaluator):
    """The GA result scores at least greedy."""
    ev = build_evaluator(city_places, RouteSettings(total_time_available=300))
    greedy_fit = ev.fitness(construct_greedy_route(ev))
    route, fitness = optimize_genetic(ev, SMALL_GA, rng=random.Random(5))
    assert sorted(route) == list(range(1, 9))
    assert fitness >= greedy_fit
    assert fitness == pytest.approx(ev.fitness(route))


def test_ga_reproducible_with_seed(city_places, build_evaluator):
    """The GA repeats itself under a fixed seed."""
    settings = RouteSettings(total_time_available=300)
    a = optimize_genetic(build_evaluator(city_places, settings), SMALL_GA, rng=random.Random(42))
    b = optimize_genetic(build_evaluator(city_places, settings), SMALL_GA, rng=random.Random(42))
    assert a == b


def test_ga_expired_deadline_returns_valid_route(city_places, build_evaluator):
    """An expired deadline still yields a permutation."""
    ev = build_evaluator(city_places)
    greedy = construct_greedy_route(ev)
    route, fitness = optimize_genetic(
        ev, GeneticParams(), rng=random.Random(0), deadline=time.perf_counter() - 1
    )
    assert sorted(route) == list(range(1, 9))
    assert fitness >= ev.fitness(greedy)


def test_ga_on_two_places(make_place, hotel, build_evaluator):
    """The GA handles the smallest instance."""
    places = [make_place(1, hotel.latitude + 0.01, hotel.longitude),
              make_place(2, hotel.latitude, hotel.longitude + 0.01)]
    route, _ = optimize_genetic(build_evaluator(places), SMALL_GA, rng=random.Random(0))
    assert sorted(route) == [1, 2]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
