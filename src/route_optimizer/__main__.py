"""
Command line interface.

Usage:
    python -m route_optimizer request.json
    python -m route_optimizer request.json --level optimal --seed 7 --pretty
    python -m route_optimizer requests.json --workers 4   # JSON list of requests
    cat request.json | python -m route_optimizer -
"""

import argparse
import json
import logging
import sys
from dataclasses import replace

from .api import optimize_request
from .batch import optimize_many
from .core.settings import EngineConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="route_optimizer",
        description="Optimize a sightseeing route from a JSON request",
    )
    parser.add_argument(
        "request",
        help="Path to a JSON request (or a list of requests); '-' reads stdin",
    )
    parser.add_argument(
        "--level", "-l",
        choices=("fast", "balanced", "optimal"),
        default=None,
        help="Override the request's optimizationLevel",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Override the request's seed",
    )
    parser.add_argument(
        "--time-limit", "-t",
        type=float,
        default=None,
        help="Search deadline in seconds",
    )
    parser.add_argument(
        "--metaheuristic",
        choices=("genetic", "ant_colony", "simulated_annealing"),
        default="genetic",
        help="Strategy of the balanced tier (default: genetic)",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=EngineConfig.average_speed_kmh,
        help="Average travel speed in km/h (default: %(default)s)",
    )
    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=None,
        help="Worker processes for a list of requests",
    )
    parser.add_argument("--output", "-o", default=None, help="Write the result here")
    parser.add_argument("--pretty", action="store_true", help="Indent the JSON output")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging level (default: WARNING)",
    )
    return parser


def _apply_overrides(payload, args: argparse.Namespace):
    if not isinstance(payload, dict):
        return payload
    payload = dict(payload)
    if args.level is not None:
        payload["optimizationLevel"] = args.level
    if args.seed is not None:
        payload["seed"] = args.seed
    if args.time_limit is not None:
        payload["timeLimit"] = args.time_limit
    return payload


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    log = logging.getLogger("route_optimizer")

    try:
        if args.request == "-":
            payload = json.load(sys.stdin)
        else:
            with open(args.request, encoding="utf-8") as fh:
                payload = json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        log.error("Cannot read request: %s", exc)
        return 2

    config = replace(
        EngineConfig(),
        metaheuristic=args.metaheuristic,
        average_speed_kmh=args.speed,
    )
    if isinstance(payload, list):
        requests = [_apply_overrides(p, args) for p in payload]
        result = optimize_many(requests, max_workers=args.workers, config=config)
        ok = all(r.get("success") for r in result)
    else:
        result = optimize_request(_apply_overrides(payload, args), config)
        ok = bool(result.get("success"))

    text = json.dumps(result, indent=2 if args.pretty else None)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as fh:
            fh.write(text + "\n")
    else:
        print(text)
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
