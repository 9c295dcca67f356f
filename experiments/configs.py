"""
Instance configurations for experiments.

Defines standard configurations for benchmarking the search tiers.
"""

from dataclasses import dataclass
from typing import Iterator, List, Tuple


@dataclass(frozen=True)
class InstanceConfig:
    """
    Configuration for a generated sightseeing instance.

    Attributes:
        num_places: Number of candidate places
        spread_km: Radius around the city centre places are drawn from
        time_budget: Minutes available for the day
        window_share: Fraction of places with a restricted opening window
    """

    num_places: int
    spread_km: float
    time_budget: float
    window_share: float

    def __iter__(self):
        """Allow unpacking as tuple."""
        return iter((self.num_places, self.spread_km, self.time_budget, self.window_share))


# Small instances every tier accepts, then sizes that force downgrades.
BASE_CONFIGS: List[InstanceConfig] = [
    InstanceConfig(5, 5.0, 480.0, 0.0),
    InstanceConfig(5, 10.0, 300.0, 0.5),
    InstanceConfig(8, 5.0, 480.0, 0.3),
    InstanceConfig(8, 15.0, 480.0, 0.3),
    InstanceConfig(10, 10.0, 600.0, 0.5),
    InstanceConfig(12, 10.0, 480.0, 0.3),
    InstanceConfig(15, 10.0, 600.0, 0.3),
    InstanceConfig(20, 15.0, 720.0, 0.3),
]

# Tight budgets where most places must be skipped.
HARD_CONFIGS: List[InstanceConfig] = [
    InstanceConfig(12, 25.0, 180.0, 0.8),
    InstanceConfig(20, 25.0, 240.0, 0.8),
]


def get_instance_configs(
    n_seeds: int = 5, include_hard: bool = False
) -> Iterator[Tuple[int, float, float, float, int]]:
    """
    Generate instance configurations with seeds.

    Args:
        n_seeds: Number of random seeds per configuration
        include_hard: Include tight-budget configurations

    Yields:
        Tuples of (num_places, spread_km, time_budget, window_share, seed)
    """
    configs = list(BASE_CONFIGS) + (list(HARD_CONFIGS) if include_hard else [])

    for config in configs:
        for seed in range(n_seeds):
            yield (*config, seed)
