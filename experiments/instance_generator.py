"""
Instance generation for experiments.

Draws random places around a city centre with numpy's Generator, so every
instance is reproducible from its seed.
"""

import math
import sys
from typing import List, Tuple

import numpy as np

sys.path.insert(0, str(__file__).rsplit("/", 2)[0] + "/src")

from route_optimizer import (
    Accessibility,
    EntryFee,
    OptimizationLevel,
    Place,
    RouteSettings,
    StartLocation,
    TimeWindow,
)

# Coimbatore city centre.
DEFAULT_CENTRE = (11.0168, 76.9558)

CATEGORIES = ("temple", "palace", "nature", "museum", "hill-station", "beach", "fort", "wildlife")
VISIT_DURATIONS = (30, 45, 60, 90, 120)
FEES = (0, 20, 50, 100, 250)
OPENS = (360, 480, 540, 600)
CLOSES = (1020, 1080, 1140, 1260)


def _offset(centre: Tuple[float, float], dx_km: float, dy_km: float) -> Tuple[float, float]:
    lat0, lng0 = centre
    lat = lat0 + dy_km / 111.32
    lng = lng0 + dx_km / (111.32 * math.cos(math.radians(lat0)))
    return round(lat, 6), round(lng, 6)


def build_places(
    num_places: int,
    spread_km: float,
    window_share: float,
    seed: int,
    centre: Tuple[float, float] = DEFAULT_CENTRE,
) -> List[Place]:
    """
    Build random candidate places.

    Args:
        num_places: Number of places
        spread_km: Maximum distance from the centre
        window_share: Probability that a place has an opening window
        seed: Random seed
        centre: (lat, lng) of the city centre

    Returns:
        List of places with ids "p1".."pN"
    """
    rng = np.random.default_rng(seed)
    places = []
    for i in range(1, num_places + 1):
        r = spread_km * math.sqrt(rng.random())
        theta = 2 * math.pi * rng.random()
        lat, lng = _offset(centre, r * math.cos(theta), r * math.sin(theta))

        window = None
        if rng.random() < window_share:
            window = TimeWindow(int(rng.choice(OPENS)), int(rng.choice(CLOSES)))
        fee = float(rng.choice(FEES))
        places.append(
            Place(
                id=f"p{i}",
                name=f"Place {i}",
                category=str(rng.choice(CATEGORIES)),
                latitude=lat,
                longitude=lng,
                visit_duration=float(rng.choice(VISIT_DURATIONS)),
                rating=round(float(rng.uniform(3.0, 5.0)), 1),
                entry_fee=EntryFee(indian=fee, foreign=fee * 5),
                opening_window=window,
                accessibility=Accessibility(
                    wheelchair=bool(rng.random() < 0.5),
                    kid_friendly=bool(rng.random() < 0.8),
                ),
            )
        )
    return places


def build_instance(
    num_places: int,
    spread_km: float,
    time_budget: float,
    window_share: float,
    seed: int,
    level: OptimizationLevel = OptimizationLevel.FAST,
) -> Tuple[List[Place], StartLocation, RouteSettings]:
    """
    Build a full instance from parameters.

    Returns:
        Tuple of (places, start location at the centre, settings)
    """
    places = build_places(num_places, spread_km, window_share, seed)
    start = StartLocation(*DEFAULT_CENTRE, name="City centre")
    settings = RouteSettings(
        start_time=9 * 60,
        total_time_available=time_budget,
        optimization_level=level,
        rng_seed=seed,
    )
    return places, start, settings


def build_small_test_instance(seed: int = 42) -> Tuple[List[Place], StartLocation, RouteSettings]:
    """Small instance (6 places) for quick validation."""
    return build_instance(6, 8.0, 480.0, 0.3, seed)
