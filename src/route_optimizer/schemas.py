"""
Request models for the dict (JSON) interface.

Pydantic models for the camelCase request contract, and the conversion into
the engine's frozen domain records. Place records are accepted in the shapes
catalogs commonly store them:

- coordinates as ``location.latitude/longitude``, ``coordinates.lat/lng`` or
  top-level ``latitude/longitude``
- entry fee as a number or as ``{indian, foreign}``
- opening hours as a single ``{open, close}`` window or per weekday
  ``{monday: {open, close, closed}, ...}``
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from .core.clock import WEEKDAYS, parse_hhmm, weekday_index
from .core.errors import InputError
from .core.places import Accessibility, EntryFee, Place, StartLocation, TimeWindow
from .core.settings import (
    OptimizationLevel,
    PreferenceWeights,
    RouteConstraints,
    RouteSettings,
)


class _Model(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class LocationModel(_Model):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class CoordinatesModel(_Model):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class EntryFeeModel(_Model):
    indian: float = Field(0.0, ge=0)
    foreign: float = Field(0.0, ge=0)


class DayHoursModel(_Model):
    """Opening hours of one weekday; closed days may omit open/close."""

    open: Optional[str] = None
    close: Optional[str] = None
    closed: bool = False

    def to_window(self) -> Optional[TimeWindow]:
        if self.closed:
            return None
        if self.open is None or self.close is None:
            raise InputError("opening hours need both open and close unless closed")
        return TimeWindow(parse_hhmm(self.open), parse_hhmm(self.close))


class AccessibilityModel(_Model):
    wheelchair: bool = False
    kid_friendly: bool = True


class PlaceRecord(_Model):
    """One catalog place in any of the accepted shapes."""

    id: str = Field(..., min_length=1)
    name: str = ""
    category: str = "Other"
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location: Optional[LocationModel] = None
    coordinates: Optional[CoordinatesModel] = None
    average_visit_duration: Optional[float] = None
    visit_duration: Optional[float] = None
    rating: float = Field(0.0, ge=0, le=5)
    entry_fee: Union[float, EntryFeeModel] = 0.0
    opening_hours: Optional[Dict[str, Any]] = None
    kid_friendly: Optional[bool] = None
    wheelchair_accessible: Optional[bool] = None
    accessibility: Optional[AccessibilityModel] = None

    @model_validator(mode="after")
    def _check_required_shape(self) -> "PlaceRecord":
        if self.location is None and self.coordinates is None and (
            self.latitude is None or self.longitude is None
        ):
            raise ValueError(f"place {self.id!r} has no coordinates")
        if self.average_visit_duration is None and self.visit_duration is None:
            raise ValueError(f"place {self.id!r} has no visit duration")
        return self

    def _coordinates(self) -> Tuple[float, float]:
        if self.location is not None:
            return self.location.latitude, self.location.longitude
        if self.coordinates is not None:
            return self.coordinates.lat, self.coordinates.lng
        return float(self.latitude), float(self.longitude)

    def _entry_fee(self) -> EntryFee:
        if isinstance(self.entry_fee, EntryFeeModel):
            return EntryFee(self.entry_fee.indian, self.entry_fee.foreign)
        if self.entry_fee < 0:
            raise InputError(f"place {self.id!r}: entry fee must be non-negative")
        return EntryFee(float(self.entry_fee), float(self.entry_fee))

    def _hours(self) -> Tuple[Optional[TimeWindow], Optional[Dict[int, Optional[TimeWindow]]]]:
        hours = self.opening_hours
        if not hours:
            return None, None
        if "open" in hours or "close" in hours or "closed" in hours:
            day = DayHoursModel.model_validate(hours)
            if day.closed:
                # Closed every day.
                return None, {i: None for i in range(len(WEEKDAYS))}
            return day.to_window(), None

        weekly: Dict[int, Optional[TimeWindow]] = {}
        for name, value in hours.items():
            if value is None:
                continue
            index = weekday_index(name)
            weekly[index] = DayHoursModel.model_validate(value).to_window()
        return None, weekly or None

    def _accessibility(self) -> Accessibility:
        base = self.accessibility or AccessibilityModel()
        wheelchair = base.wheelchair
        kid_friendly = base.kid_friendly
        if self.wheelchair_accessible is not None:
            wheelchair = self.wheelchair_accessible
        if self.kid_friendly is not None:
            kid_friendly = self.kid_friendly
        return Accessibility(wheelchair=wheelchair, kid_friendly=kid_friendly)

    def to_place(self) -> Place:
        lat, lng = self._coordinates()
        duration = (
            self.average_visit_duration
            if self.average_visit_duration is not None
            else self.visit_duration
        )
        window, weekly = self._hours()
        return Place(
            id=self.id,
            name=self.name or self.id,
            category=self.category,
            latitude=lat,
            longitude=lng,
            visit_duration=float(duration),
            rating=self.rating,
            entry_fee=self._entry_fee(),
            opening_window=window,
            weekly_hours=weekly,
            accessibility=self._accessibility(),
        )


def _describe(exc: ValidationError) -> str:
    """Single-line summary of a pydantic validation error."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)


def normalize_place(record: Mapping[str, Any]) -> Place:
    """
    Convert one catalog record into a Place.

    Pure: the record is not modified. Malformed records, including bad
    coordinates, raise InputError; nothing is repaired.

    Args:
        record: Catalog record in one of the accepted shapes

    Returns:
        A new Place
    """
    try:
        return PlaceRecord.model_validate(record).to_place()
    except ValidationError as exc:
        label = record.get("id", "?") if isinstance(record, Mapping) else "?"
        raise InputError(f"invalid place {label!r}: {_describe(exc)}") from None


class StartLocationModel(_Model):
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location: Optional[LocationModel] = None
    coordinates: Optional[CoordinatesModel] = None
    name: str = "Start"
    id: str = "start"

    def to_start(self) -> StartLocation:
        if self.location is not None:
            lat, lng = self.location.latitude, self.location.longitude
        elif self.coordinates is not None:
            lat, lng = self.coordinates.lat, self.coordinates.lng
        elif self.latitude is not None and self.longitude is not None:
            lat, lng = self.latitude, self.longitude
        else:
            raise InputError("startLocation has no coordinates")
        return StartLocation(latitude=lat, longitude=lng, name=self.name, id=self.id)


class AccessibilityRequirementModel(_Model):
    wheelchair: bool = False
    kid_friendly: bool = False


class ConstraintsModel(_Model):
    start_time: str = "09:00"
    total_time_available: float = 480.0
    start_day: Union[int, str] = 0
    budget: Optional[float] = None
    accessibility: AccessibilityRequirementModel = Field(
        default_factory=AccessibilityRequirementModel
    )
    visitor_type: str = "indian"


class PreferencesModel(_Model):
    optimize_for: str = "balanced"
    rating_weight: Optional[float] = None
    distance_weight: Optional[float] = None
    time_weight: Optional[float] = None
    cost_weight: Optional[float] = None
    accessibility_weight: Optional[float] = None

    def to_weights(self) -> PreferenceWeights:
        """Preset for optimize_for, with any explicit weight taking precedence."""
        base = PreferenceWeights.for_goal(self.optimize_for)
        return PreferenceWeights(
            rating=base.rating if self.rating_weight is None else self.rating_weight,
            distance=base.distance if self.distance_weight is None else self.distance_weight,
            time=base.time if self.time_weight is None else self.time_weight,
            cost=base.cost if self.cost_weight is None else self.cost_weight,
            accessibility=(
                base.accessibility
                if self.accessibility_weight is None
                else self.accessibility_weight
            ),
        )


class RouteRequest(_Model):
    """A full optimization request."""

    places: List[Dict[str, Any]]
    start_location: StartLocationModel
    constraints: ConstraintsModel = Field(default_factory=ConstraintsModel)
    preferences: PreferencesModel = Field(default_factory=PreferencesModel)
    optimization_level: str = "fast"
    seed: Optional[int] = None
    time_limit: Optional[float] = Field(None, gt=0)

    def to_domain(self) -> Tuple[List[Place], StartLocation, RouteSettings]:
        """
        Convert into engine inputs.

        Raises:
            InputError: If any record or setting is invalid
        """
        places = [normalize_place(record) for record in self.places]
        start = self.start_location.to_start()
        c = self.constraints
        settings_kwargs = {}
        if self.time_limit is not None:
            settings_kwargs["time_limit_s"] = self.time_limit
        settings = RouteSettings(
            start_time=parse_hhmm(c.start_time),
            total_time_available=c.total_time_available,
            optimization_level=OptimizationLevel.parse(self.optimization_level),
            preferences=self.preferences.to_weights(),
            constraints=RouteConstraints(
                budget=c.budget,
                require_wheelchair=c.accessibility.wheelchair,
                require_kid_friendly=c.accessibility.kid_friendly,
            ),
            start_day=weekday_index(c.start_day),
            visitor_type=c.visitor_type.strip().lower(),
            rng_seed=self.seed,
            **settings_kwargs,
        )
        return places, start, settings


def parse_request(payload: Mapping[str, Any]) -> Tuple[List[Place], StartLocation, RouteSettings]:
    """
    Validate a request payload and convert it into engine inputs.

    Raises:
        InputError: With a readable message for any malformed field
    """
    try:
        request = RouteRequest.model_validate(payload)
    except ValidationError as exc:
        raise InputError(_describe(exc)) from None
    return request.to_domain()
