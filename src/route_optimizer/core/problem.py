"""
Problem definition for the sightseeing route optimizer.

A problem instance bundles the start location, the candidate places, the
per-request settings and the engine configuration. Node 0 is the start
location; nodes 1..N are the candidate places in input order.
"""

from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from .clock import weekday_index
from .errors import InputError
from .places import EntryFee, Place, StartLocation, require_number, validate_coordinates
from .settings import (
    EngineConfig,
    OptimizationLevel,
    PreferenceWeights,
    RouteConstraints,
    RouteSettings,
)


class RouteProblem:
    """
    Represents a validated optimization request.

    Construction validates the whole request and raises InputError on the
    first problem found, so any instance that exists is safe to search.

    Attributes:
        start: Start location (node 0)
        places: Candidate places (nodes 1..N)
        settings: Per-request settings
        config: Engine configuration
    """

    def __init__(
        self,
        places: Sequence[Place],
        start: StartLocation,
        settings: RouteSettings,
        config: Optional[EngineConfig] = None,
    ):
        config = config if config is not None else EngineConfig()
        try:
            places = tuple(places)
        except TypeError:
            raise InputError("places must be a sequence of Place records") from None
        settings = self._normalize_settings(settings)
        self._validate_parameters(places, start, settings, config)

        self._places: Tuple[Place, ...] = places
        self._start = start
        self._settings = settings
        self._config = config

    @staticmethod
    def _normalize_settings(settings: RouteSettings) -> RouteSettings:
        """Resolve the tier and weekday, accepting their names as well."""
        if not isinstance(settings, RouteSettings):
            raise InputError(f"settings must be RouteSettings, got {type(settings).__name__}")
        level = OptimizationLevel.parse(settings.optimization_level)
        day = weekday_index(settings.start_day)
        if level is settings.optimization_level and day == settings.start_day:
            return settings
        return replace(settings, optimization_level=level, start_day=day)

    @staticmethod
    def _validate_parameters(
        places: Sequence[Place],
        start: StartLocation,
        settings: RouteSettings,
        config: EngineConfig,
    ) -> None:
        """Validate input parameters."""
        n = len(places)
        if n < config.min_places:
            raise InputError(
                f"at least {config.min_places} places are required, got {n}"
            )
        if n > config.max_places:
            raise InputError(f"at most {config.max_places} places are supported, got {n}")

        if not isinstance(start, StartLocation):
            raise InputError("startLocation must be a StartLocation")
        validate_coordinates(start.latitude, start.longitude, "startLocation")

        seen = set()
        for place in places:
            if not isinstance(place, Place):
                raise InputError(f"places must be Place records, got {type(place).__name__}")
            label = f"place {place.id!r}"
            validate_coordinates(place.latitude, place.longitude, label)
            if place.id in seen:
                raise InputError(f"{label} appears more than once")
            seen.add(place.id)
            if not require_number(place.visit_duration, f"{label}: visit duration") > 0:
                raise InputError(f"{label}: visit duration must be positive")
            if not 0.0 <= require_number(place.rating, f"{label}: rating") <= 5.0:
                raise InputError(f"{label}: rating must be in [0, 5]")
            if not isinstance(place.entry_fee, EntryFee):
                raise InputError(f"{label}: entry fee must be an EntryFee")
            fees = (place.entry_fee.indian, place.entry_fee.foreign)
            if any(require_number(fee, f"{label}: entry fee") < 0 for fee in fees):
                raise InputError(f"{label}: entry fee must be non-negative")

        if not require_number(settings.total_time_available, "totalTimeAvailable") > 0:
            raise InputError("totalTimeAvailable must be positive")
        if not 0 <= require_number(settings.start_time, "startTime") < 24 * 60:
            raise InputError("startTime must be within the day")
        if settings.visitor_type not in ("indian", "foreign"):
            raise InputError("visitor type must be 'indian' or 'foreign'")
        if not isinstance(settings.preferences, PreferenceWeights):
            raise InputError("preferences must be PreferenceWeights")
        weights = settings.preferences.as_tuple()
        if any(require_number(w, "preference weight") < 0 for w in weights):
            raise InputError("preference weights must be non-negative")
        if not isinstance(settings.constraints, RouteConstraints):
            raise InputError("constraints must be RouteConstraints")
        budget = settings.constraints.budget
        if budget is not None and require_number(budget, "budget") < 0:
            raise InputError("budget must be non-negative")
        if require_number(settings.time_limit_s, "time limit") <= 0:
            raise InputError("time limit must be positive")
        if require_number(config.average_speed_kmh, "average speed") <= 0:
            raise InputError("average speed must be positive")

    @property
    def places(self) -> Tuple[Place, ...]:
        return self._places

    @property
    def start(self) -> StartLocation:
        return self._start

    @property
    def settings(self) -> RouteSettings:
        return self._settings

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def num_places(self) -> int:
        """Number of candidate places (excluding the start)."""
        return len(self._places)

    @property
    def num_nodes(self) -> int:
        """Number of matrix nodes including the start."""
        return len(self._places) + 1

    @property
    def place_nodes(self) -> List[int]:
        """Node indices of the candidate places."""
        return list(range(1, self.num_nodes))

    def place(self, node: int) -> Place:
        """Candidate place at matrix node (1..N)."""
        if node < 1 or node > len(self._places):
            raise IndexError(f"node {node} is not a candidate place")
        return self._places[node - 1]

    def coordinates(self) -> List[Tuple[float, float]]:
        """(lat, lng) of every node, start first."""
        return [self._start.coordinates] + [p.coordinates for p in self._places]

    def __repr__(self) -> str:
        return (
            f"RouteProblem(n={self.num_places}, "
            f"level={self._settings.optimization_level.value}, "
            f"budget={self._settings.total_time_available}min)"
        )
