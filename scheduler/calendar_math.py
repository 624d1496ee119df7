"""
Date/time arithmetic primitives.

Everything in the agenda works on (date, wall-clock time) pairs, never on
instants, so DST shifts cannot move a slot or change a day count.
"""

from datetime import date as date_type, time as time_type
from typing import Optional, Union

from models import Weekday
from models.schedule import format_time_of_day, to_time_of_day

MINUTES_PER_DAY = 24 * 60

# date.weekday() is Monday=0; Weekday is Sunday-first.
_WEEKDAYS_FROM_MONDAY = [
    Weekday.MONDAY,
    Weekday.TUESDAY,
    Weekday.WEDNESDAY,
    Weekday.THURSDAY,
    Weekday.FRIDAY,
    Weekday.SATURDAY,
    Weekday.SUNDAY,
]


def parse_time(value: Union[str, time_type]) -> time_type:
    """Accepts 'HH:MM' (or a time) and returns a minute-resolution time."""
    parsed = to_time_of_day(value)
    if not isinstance(parsed, time_type):
        raise ValueError(f"Not a time of day: {value!r}")
    return parsed


def format_time(t: time_type) -> str:
    return format_time_of_day(t)


def to_minutes(t: time_type) -> int:
    return t.hour * 60 + t.minute


def from_minutes(total: int) -> time_type:
    total %= MINUTES_PER_DAY
    return time_type(total // 60, total % 60)


def add_minutes(t: Union[str, time_type], minutes: int) -> time_type:
    """
    Shift a wall-clock time, wrapping within the day.
    Negative offsets wrap backwards (23:30 - 60 -> 22:30, 00:15 - 30 -> 23:45).
    """
    return from_minutes(to_minutes(parse_time(t)) + minutes)


def days_between(a: date_type, b: Optional[date_type] = None) -> int:
    """Absolute number of calendar days between two dates (b defaults to today)."""
    if b is None:
        b = date_type.today()
    return abs((b - a).days)


def weekday_of(day: date_type) -> Weekday:
    return _WEEKDAYS_FROM_MONDAY[day.weekday()]
