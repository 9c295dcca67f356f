"""
Place records consumed by the optimizer.

Places and the start location are immutable values supplied by an external
catalog. The optimizer indexes them the same way everywhere:

- index 0 is the start location
- index i (1..N) is the i-th candidate place
"""

import numbers
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from .errors import InputError


@dataclass(frozen=True)
class TimeWindow:
    """
    Opening window of a place on a given day.

    Attributes:
        open: Opening time in minutes from midnight
        close: Closing time in minutes from midnight
    """

    open: int
    close: int

    def __post_init__(self) -> None:
        if not 0 <= self.open < self.close <= 24 * 60:
            raise InputError(
                f"opening window must satisfy 0 <= open < close <= 1440, "
                f"got ({self.open}, {self.close})"
            )

    def contains(self, start: float, end: float) -> bool:
        """Whether a visit over [start, end] fits inside the window."""
        return start >= self.open and end <= self.close


@dataclass(frozen=True)
class EntryFee:
    """Entry fee per visitor type."""

    indian: float = 0.0
    foreign: float = 0.0

    def for_visitor(self, visitor_type: str) -> float:
        return self.foreign if visitor_type == "foreign" else self.indian


@dataclass(frozen=True)
class Accessibility:
    """Accessibility flags of a place."""

    wheelchair: bool = False
    kid_friendly: bool = True


@dataclass(frozen=True)
class Place:
    """
    A candidate place to visit.

    Attributes:
        id: Catalog identifier (unique within a request)
        name: Display name
        category: Free-form category label
        latitude: WGS84 latitude in [-90, 90]
        longitude: WGS84 longitude in [-180, 180]
        visit_duration: Average visit duration in minutes (> 0)
        rating: Rating in [0, 5]
        entry_fee: Entry fee per visitor type
        opening_window: Daily opening window, None means always open
        weekly_hours: Per-weekday override (0 = Sunday); a None value
            means the place is closed on that day
        accessibility: Accessibility flags
    """

    id: str
    name: str
    latitude: float
    longitude: float
    visit_duration: float
    rating: float = 0.0
    category: str = "Other"
    entry_fee: EntryFee = field(default_factory=EntryFee)
    opening_window: Optional[TimeWindow] = None
    weekly_hours: Optional[Mapping[int, Optional[TimeWindow]]] = None
    accessibility: Accessibility = field(default_factory=Accessibility)

    @property
    def coordinates(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)

    def is_closed_on(self, weekday: int) -> bool:
        """True if the weekly schedule marks the place closed on weekday."""
        if self.weekly_hours is None or weekday not in self.weekly_hours:
            return False
        return self.weekly_hours[weekday] is None

    def window_for(self, weekday: int) -> Optional[TimeWindow]:
        """
        Opening window that applies on weekday.

        Returns None when the place is always open that day. Callers must
        check is_closed_on() first; a closed day also yields None.
        """
        if self.weekly_hours is not None and weekday in self.weekly_hours:
            return self.weekly_hours[weekday]
        return self.opening_window

    def fee(self, visitor_type: str) -> float:
        return self.entry_fee.for_visitor(visitor_type)


@dataclass(frozen=True)
class StartLocation:
    """Fixed first stop of every route. No visit time, no fee."""

    latitude: float
    longitude: float
    name: str = "Start"
    id: str = "start"

    @property
    def coordinates(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)


def require_number(value, label: str) -> float:
    """Return value if it is a real, non-NaN number; raise InputError otherwise."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InputError(f"{label} must be a number, got {value!r}")
    if value != value:
        raise InputError(f"{label} must not be NaN")
    return value


def validate_coordinates(latitude: float, longitude: float, label: str) -> None:
    """Raise InputError unless (latitude, longitude) is a valid WGS84 point."""
    require_number(latitude, f"{label}: latitude")
    require_number(longitude, f"{label}: longitude")
    if not -90.0 <= latitude <= 90.0:
        raise InputError(f"{label}: latitude {latitude} outside [-90, 90]")
    if not -180.0 <= longitude <= 180.0:
        raise InputError(f"{label}: longitude {longitude} outside [-180, 180]")
