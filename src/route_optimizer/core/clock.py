"""Time-of-day helpers. All engine times are minutes from midnight."""

import re

from .errors import InputError

_HHMM = re.compile(r"^(\d{1,2}):(\d{2})$")

MINUTES_PER_DAY = 24 * 60

WEEKDAYS = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)


def parse_hhmm(value: str) -> int:
    """
    Parse an "HH:MM" string into minutes from midnight.

    Raises:
        InputError: If the string is not a valid 24-hour clock time
    """
    match = _HHMM.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise InputError(f"invalid time {value!r}, expected HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InputError(f"invalid time {value!r}, expected HH:MM")
    return hours * 60 + minutes


def format_hhmm(minutes: float) -> str:
    """Format minutes from midnight as "HH:MM", wrapping past midnight."""
    total = int(round(minutes)) % MINUTES_PER_DAY
    return f"{total // 60:02d}:{total % 60:02d}"


def weekday_index(day) -> int:
    """Resolve a weekday given as 0-6 (Sunday first) or as a day name."""
    if isinstance(day, str):
        name = day.strip().lower()
        if name not in WEEKDAYS:
            raise InputError(f"unknown weekday {day!r}")
        return WEEKDAYS.index(name)
    if isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6:
        raise InputError(f"weekday must be in 0..6, got {day!r}")
    return day
