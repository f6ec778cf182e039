# backend/agenda/services/slots/generator.py
"""
Candidate slot generation.

Starting at window.start, emit t and advance by the fixed step while
t + duration <= window.end. Every candidate fits inside the window.
Start times sit on step boundaries relative to window.start and do not
depend on the duration, so a 60 min service on a 30 min step produces
overlapping candidates; the conflict filter sorts those out per request.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterator

from .intervals import Interval


@dataclass(frozen=True)
class CandidateSlots:
    """
    Finite, restartable sequence of slot start times.

    Each iteration starts over from window.start; nothing is materialised
    until iterated.
    """
    window: Interval
    duration: timedelta
    step: timedelta

    def __post_init__(self):
        if self.duration <= timedelta(0):
            raise ValueError(f"duration must be positive, got {self.duration}")
        if self.step <= timedelta(0):
            raise ValueError(f"step must be positive, got {self.step}")

    def __iter__(self) -> Iterator[datetime]:
        t = self.window.start
        while t + self.duration <= self.window.end:
            yield t
            t += self.step

    def intervals(self) -> Iterator[Interval]:
        """Candidates as [t, t + duration) intervals."""
        for t in self:
            yield Interval(t, t + self.duration)


def generate_slots(window: Interval, duration_minutes: int, step_minutes: int) -> CandidateSlots:
    return CandidateSlots(
        window=window,
        duration=timedelta(minutes=duration_minutes),
        step=timedelta(minutes=step_minutes),
    )
