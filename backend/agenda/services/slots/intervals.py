# backend/agenda/services/slots/intervals.py
"""
Half-open time intervals [start, end).

Two intervals overlap iff a.start < b.end and b.start < a.end.
Touching intervals (one ends exactly when the other starts) do not overlap.
Every conflict check in the booking engine goes through this predicate,
including the SQL filters in the committer.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional


@dataclass(frozen=True, order=True)
class Interval:
    start: datetime
    end: datetime

    def __post_init__(self):
        if not self.start < self.end:
            raise ValueError(f"Interval start must be before end: {self.start} >= {self.end}")

    @classmethod
    def of_duration(cls, start: datetime, minutes: int) -> "Interval":
        return cls(start, start + timedelta(minutes=minutes))

    @classmethod
    def open_ended(cls, start: datetime) -> "Interval":
        """Interval with no known end: blocks everything from start onward."""
        return cls(start, datetime.max)

    @property
    def is_open_ended(self) -> bool:
        return self.end == datetime.max

    def overlaps(self, other: "Interval") -> bool:
        return overlaps(self, other)

    def contains(self, other: "Interval") -> bool:
        return self.start <= other.start and other.end <= self.end


def overlaps(a: Interval, b: Interval) -> bool:
    return a.start < b.end and b.start < a.end


def first_overlap(target: Interval, intervals: Iterable[Interval]) -> Optional[Interval]:
    """Return the first interval overlapping target, or None."""
    for interval in intervals:
        if overlaps(target, interval):
            return interval
    return None
