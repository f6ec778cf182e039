# backend/agenda/services/slots/working_hours.py
"""
Working-hours resolver.

Maps a calendar date to the business's operating window for that weekday.
Dates are business-local civil dates; no timezone conversion happens here.

Weekday numbering follows date.weekday(): 0 = Monday, 6 = Sunday.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from .config import minutes_to_time_str, time_str_to_minutes
from .intervals import Interval

logger = logging.getLogger(__name__)

# Default week seeded for new businesses: Mon-Fri 09:00-17:00
DEFAULT_WEEK = [
    {
        "day_of_week": day,
        "is_open": day < 5,
        "start_time": "09:00",
        "end_time": "17:00",
    }
    for day in range(7)
]


@dataclass(frozen=True)
class WorkingWindow:
    """Resolved state of one day. start/end are set only when open."""
    is_open: bool
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @classmethod
    def closed(cls) -> "WorkingWindow":
        return cls(is_open=False)

    @property
    def interval(self) -> Interval:
        if not self.is_open:
            raise ValueError("Closed day has no working interval")
        return Interval(self.start, self.end)

    def to_cache_value(self) -> Optional[str]:
        """Cache form: "HH:MM-HH:MM" for open days, None for closed ones."""
        if not self.is_open:
            return None
        return f"{self.start:%H:%M}-{self.end:%H:%M}"

    @classmethod
    def from_cache_value(cls, target_date: date, value: Optional[str]) -> "WorkingWindow":
        if not value:
            return cls.closed()
        start_str, end_str = value.split("-")
        return _window_for(target_date, start_str, end_str) or cls.closed()


def resolve_working_window(working_days: Iterable, target_date: date) -> WorkingWindow:
    """
    Pick the row for target_date's weekday and build the absolute window.

    working_days: rows with day_of_week / is_open / start_time / end_time.
    Closed when no row matches, the row is closed, or its times are unusable.
    """
    weekday = target_date.weekday()
    row = next((d for d in working_days if d.day_of_week == weekday), None)

    if row is None or not row.is_open:
        return WorkingWindow.closed()

    window = _window_for(target_date, row.start_time, row.end_time)
    if window is None:
        logger.warning(
            f"Ignoring malformed working hours {row.start_time!r}-{row.end_time!r} "
            f"for weekday {weekday}"
        )
        return WorkingWindow.closed()
    return window


def _window_for(target_date: date, start_str: str, end_str: str) -> Optional[WorkingWindow]:
    try:
        start_min = time_str_to_minutes(start_str)
        end_min = time_str_to_minutes(end_str)
    except ValueError:
        return None

    if start_min >= end_min:
        return None

    midnight = datetime.combine(target_date, datetime.min.time())
    return WorkingWindow(
        is_open=True,
        start=midnight + timedelta(minutes=start_min),
        end=midnight + timedelta(minutes=end_min),
    )


class InvalidWeek(ValueError):
    """Rejected weekly schedule. field is the camelCase key at fault."""

    def __init__(self, message: str, field: str):
        super().__init__(message)
        self.field = field


def validate_week(days: list[dict]) -> None:
    """
    Check a full weekly schedule before it replaces the stored one.

    Raises InvalidWeek naming the offending entry and field.
    """
    if len(days) != 7:
        raise InvalidWeek(f"Schedule must contain exactly 7 days, got {len(days)}", "dayOfWeek")

    seen = set()
    for day in days:
        dow = day["day_of_week"]
        if dow in seen:
            raise InvalidWeek(f"Duplicate dayOfWeek {dow}", "dayOfWeek")
        seen.add(dow)

        try:
            start_min = time_str_to_minutes(day["start_time"])
        except ValueError as e:
            raise InvalidWeek(str(e), "startTime") from None
        try:
            end_min = time_str_to_minutes(day["end_time"])
        except ValueError as e:
            raise InvalidWeek(str(e), "endTime") from None

        if day["is_open"] and start_min >= end_min:
            raise InvalidWeek(
                f"startTime must be before endTime on dayOfWeek {dow} "
                f"({minutes_to_time_str(start_min)} >= {minutes_to_time_str(end_min)})",
                "endTime",
            )
