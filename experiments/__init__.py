"""Experiment framework for comparing the route search tiers."""

from .configs import (
    BASE_CONFIGS,
    HARD_CONFIGS,
    get_instance_configs,
    InstanceConfig,
)
from .instance_generator import build_instance, build_places
from .benchmark import (
    run_single_instance,
    run_configuration,
    run_full_benchmark,
    BenchmarkResult,
    TierOutcome,
)

__all__ = [
    "BASE_CONFIGS",
    "HARD_CONFIGS",
    "get_instance_configs",
    "InstanceConfig",
    "build_instance",
    "build_places",
    "run_single_instance",
    "run_configuration",
    "run_full_benchmark",
    "BenchmarkResult",
    "TierOutcome",
]
