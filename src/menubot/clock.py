"""Clock helpers and the weekday numbering used for site selectors."""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable

Clock = Callable[[], datetime]

DAYS_PER_WEEK = 7
WEEKDAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


def local_now() -> datetime:
    """Return the current local time as an aware datetime."""

    return datetime.now().astimezone()


def weekday_index(day: date) -> int:
    """Map a date onto the selector index (0 = Sunday ... 6 = Saturday)."""

    return day.isoweekday() % DAYS_PER_WEEK


__all__ = ["Clock", "DAYS_PER_WEEK", "WEEKDAY_NAMES", "local_now", "weekday_index"]
