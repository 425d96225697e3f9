"""Helpers for "HH:MM" strings and ISO dates."""

import re
from datetime import date, datetime
from typing import Union

import pytz

from salon.scheduling.errors import InvalidInputError

HHMM_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

MINUTES_PER_DAY = 24 * 60


def parse_hhmm(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight."""
    if not isinstance(value, str):
        raise InvalidInputError(f"Time must be a string in HH:MM format, got {value!r}")
    match = HHMM_PATTERN.match(value)
    if not match:
        raise InvalidInputError(f"Invalid time {value!r}, expected HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_hhmm(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM"."""
    if minutes < 0 or minutes >= MINUTES_PER_DAY:
        raise InvalidInputError(f"Minute offset {minutes} is outside a single day")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def is_hhmm(value: str) -> bool:
    return isinstance(value, str) and bool(HHMM_PATTERN.match(value))


def parse_date(value: Union[date, str]) -> date:
    """Accept a date, a datetime (its calendar date) or a "YYYY-MM-DD" string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def date_key(value: Union[date, str]) -> str:
    """Key used for per-date maps such as blocked slots."""
    return parse_date(value).isoformat()


WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


def weekday_name(value: date) -> str:
    """Lower-case English weekday name, e.g. "monday"."""
    return WEEKDAYS[value.weekday()]


def validate_duration(minutes: int) -> int:
    if isinstance(minutes, bool) or not isinstance(minutes, int):
        raise InvalidInputError(f"Duration must be an integer number of minutes, got {minutes!r}")
    if minutes <= 0:
        raise InvalidInputError(f"Duration must be positive, got {minutes}")
    return minutes


def salon_now(timezone_name: str) -> datetime:
    """Current wall-clock time in the salon's timezone, as a naive datetime."""
    tz = pytz.timezone(timezone_name)
    return datetime.now(tz).replace(tzinfo=None)
