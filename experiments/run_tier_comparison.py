#!/usr/bin/env python3
"""
Compare the search tiers on generated instances.

Usage:
    python -m experiments.run_tier_comparison
    python -m experiments.run_tier_comparison --seeds 3 --hard --time 2
    python -m experiments.run_tier_comparison -n 10 --spread 8 --budget 480
"""

import argparse
import logging

from .benchmark import print_results, run_full_benchmark
from .configs import InstanceConfig


def main():
    parser = argparse.ArgumentParser(description="Compare fast, balanced and optimal tiers")
    parser.add_argument("--seeds", type=int, default=5, help="Seeds per configuration (default: 5)")
    parser.add_argument("--hard", action="store_true", help="Include tight-budget configurations")
    parser.add_argument("--time", "-t", type=float, default=5.0, help="Deadline per tier in seconds")
    parser.add_argument("--places", "-n", type=int, default=None, help="Run one custom configuration")
    parser.add_argument("--spread", type=float, default=10.0, help="Radius in km (custom configuration)")
    parser.add_argument("--budget", type=float, default=480.0, help="Minutes (custom configuration)")
    parser.add_argument("--windows", type=float, default=0.3, help="Opening-window share (custom)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log search progress")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    configs = None
    if args.places is not None:
        configs = [InstanceConfig(args.places, args.spread, args.budget, args.windows)]

    results = run_full_benchmark(
        n_seeds=args.seeds,
        include_hard=args.hard,
        time_limit_s=args.time,
        configs=configs,
    )
    print_results(results)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
