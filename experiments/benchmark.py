"""
Benchmarking framework for the search tiers.

Runs every tier on generated instances and collects fitness, route metrics
and runtimes, plus a minimum-spanning-tree diagnostic: the MST over the start
and the visited places is a lower bound on any path through them, so
route distance / MST distance measures how far a route is from that bound.
"""

import sys
import time
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

import numpy as np

sys.path.insert(0, str(__file__).rsplit("/", 2)[0] + "/src")

from route_optimizer import GeoDistanceMatrix, OptimizationLevel, optimize
from route_optimizer.core.problem import RouteProblem
from .instance_generator import build_instance
from .configs import InstanceConfig

LEVELS = (OptimizationLevel.FAST, OptimizationLevel.BALANCED, OptimizationLevel.OPTIMAL)


@dataclass
class TierOutcome:
    """
    Outcome of one tier on one instance.

    Attributes:
        algorithm: Tier actually used (differs from the request on downgrade)
        fitness: Score of the route (higher is better)
        places_visited: Visited places
        places_skipped: Skipped places
        total_distance: Route distance in km
        mst_ratio: Route distance over the MST lower bound (1.0 is ideal)
        elapsed: Wall-clock seconds
        proven_optimal: Whether branch-and-bound finished
    """

    algorithm: str
    fitness: float
    places_visited: int
    places_skipped: int
    total_distance: float
    mst_ratio: float
    elapsed: float
    proven_optimal: bool = False


@dataclass
class BenchmarkResult:
    """
    Result of a single benchmark instance.

    Attributes:
        config: Instance configuration
        seed: Random seed used
        tiers: Outcome per requested tier
    """

    config: Tuple[int, float, float, float]
    seed: int
    tiers: Dict[str, TierOutcome] = field(default_factory=dict)

    def gain_over_fast(self, level: str) -> float:
        """Fitness gained by a tier over the greedy tier."""
        return self.tiers[level].fitness - self.tiers["fast"].fitness


@dataclass
class AggregatedResult:
    """
    Aggregated results for a configuration across multiple seeds.

    Attributes:
        config: Instance configuration
        n_seeds: Number of seeds tested
        fitness_mean: Mean fitness per tier
        time_mean: Mean runtime per tier
        visited_mean: Mean visited places per tier
        mst_ratio_mean: Mean MST ratio per tier
    """

    config: Tuple[int, float, float, float]
    n_seeds: int
    fitness_mean: Dict[str, float]
    time_mean: Dict[str, float]
    visited_mean: Dict[str, float]
    mst_ratio_mean: Dict[str, float]


def _mst_ratio(matrix: GeoDistanceMatrix, visited_nodes: List[int], distance: float) -> float:
    nodes = [0] + list(visited_nodes)
    if len(nodes) < 2:
        return 1.0
    bound = matrix.spanning_tree_distance(nodes)
    if bound <= 0:
        return 1.0
    return distance / bound


def run_single_instance(
    num_places: int,
    spread_km: float,
    time_budget: float,
    window_share: float,
    seed: int,
    time_limit_s: float = 5.0,
) -> BenchmarkResult:
    """
    Run every tier on a single instance.

    Args:
        num_places: Number of candidate places
        spread_km: Radius of the instance around the centre
        time_budget: Minutes available
        window_share: Share of places with opening windows
        seed: Random seed
        time_limit_s: Search deadline per tier

    Returns:
        BenchmarkResult with one TierOutcome per tier
    """
    places, start, settings = build_instance(
        num_places, spread_km, time_budget, window_share, seed
    )
    matrix = GeoDistanceMatrix.for_problem(RouteProblem(places, start, settings))
    node_of = {p.id: i for i, p in enumerate(places, start=1)}

    result = BenchmarkResult(config=(num_places, spread_km, time_budget, window_share), seed=seed)
    for level in LEVELS:
        tier_settings = replace(settings, optimization_level=level, time_limit_s=time_limit_s)
        t0 = time.perf_counter()
        out = optimize(places, start, tier_settings)
        elapsed = time.perf_counter() - t0
        if not out.success:
            raise RuntimeError(f"benchmark instance rejected: {out.message}")

        m = out.metrics
        visited = [node_of[s.place_id] for s in out.itinerary]
        result.tiers[level.value] = TierOutcome(
            algorithm=out.algorithm,
            fitness=m.fitness,
            places_visited=m.places_visited,
            places_skipped=m.places_skipped,
            total_distance=m.total_distance,
            mst_ratio=_mst_ratio(matrix, visited, m.total_distance),
            elapsed=elapsed,
            proven_optimal=out.proven_optimal,
        )
    return result


def run_configuration(
    config: InstanceConfig,
    n_seeds: int = 5,
    time_limit_s: float = 5.0,
) -> AggregatedResult:
    """
    Run benchmark on a configuration across multiple seeds.

    Args:
        config: Instance configuration
        n_seeds: Number of random seeds
        time_limit_s: Search deadline per tier

    Returns:
        AggregatedResult with statistics
    """
    num_places, spread_km, time_budget, window_share = config
    results: List[BenchmarkResult] = [
        run_single_instance(
            num_places, spread_km, time_budget, window_share, seed,
            time_limit_s=time_limit_s,
        )
        for seed in range(n_seeds)
    ]

    def mean(attr: str) -> Dict[str, float]:
        return {
            level.value: float(np.mean([getattr(r.tiers[level.value], attr) for r in results]))
            for level in LEVELS
        }

    return AggregatedResult(
        config=(num_places, spread_km, time_budget, window_share),
        n_seeds=n_seeds,
        fitness_mean=mean("fitness"),
        time_mean=mean("elapsed"),
        visited_mean=mean("places_visited"),
        mst_ratio_mean=mean("mst_ratio"),
    )


def run_full_benchmark(
    n_seeds: int = 5,
    include_hard: bool = False,
    time_limit_s: float = 5.0,
    configs: Optional[List[InstanceConfig]] = None,
) -> List[AggregatedResult]:
    """
    Run full benchmark across all configurations.

    Args:
        n_seeds: Number of seeds per configuration
        include_hard: Include tight-budget configurations
        time_limit_s: Search deadline per tier
        configs: Explicit configurations (overrides the standard sets)

    Returns:
        List of AggregatedResult for each configuration
    """
    from .configs import BASE_CONFIGS, HARD_CONFIGS

    if configs is None:
        configs = list(BASE_CONFIGS) + (list(HARD_CONFIGS) if include_hard else [])
    return [
        run_configuration(config, n_seeds=n_seeds, time_limit_s=time_limit_s)
        for config in configs
    ]


def print_results(results: List[AggregatedResult]) -> None:
    """
    Print benchmark results in a formatted table.

    Args:
        results: List of aggregated results
    """
    print("\n" + "=" * 100)
    print("BENCHMARK RESULTS")
    print("=" * 100)

    for r in results:
        n, spread, budget, share = r.config
        line = f"n={n:2d} r={spread:4.1f}km T={budget:4.0f}min w={share:.1f}:"
        for level in LEVELS:
            key = level.value
            line += (
                f"  {key} fit={r.fitness_mean[key]:7.4f}"
                f" vis={r.visited_mean[key]:4.1f}"
                f" mst={r.mst_ratio_mean[key]:4.2f}"
                f" t={r.time_mean[key]:5.2f}s"
            )
        print(line)

    print("=" * 100)
