# backend/agenda/services/slots/conflicts.py
"""
Conflict filter.

Removes candidates overlapping a declared absence or a CONFIRMED
appointment. Read-only and advisory: the committer re-checks on write.
"""

from typing import Iterable

from .generator import CandidateSlots
from .intervals import Interval, first_overlap

BLOCKING_STATUS = "CONFIRMED"


def absence_intervals(absences: Iterable, open_ended_blocks: bool) -> list[Interval]:
    """
    Blocking intervals for absence rows (start_date / end_date).

    An absence without end_date blocks from start_date onward when
    open_ended_blocks is set, and is skipped otherwise.
    """
    intervals = []
    for absence in absences:
        if absence.end_date is None:
            if open_ended_blocks:
                intervals.append(Interval.open_ended(absence.start_date))
            continue
        if absence.end_date <= absence.start_date:
            continue
        intervals.append(Interval(absence.start_date, absence.end_date))
    return intervals


def appointment_intervals(appointments: Iterable) -> list[Interval]:
    """Blocking intervals for appointment rows. Only CONFIRMED ones block."""
    return [
        Interval(appt.start_at, appt.end_at)
        for appt in appointments
        if appt.status == BLOCKING_STATUS and appt.start_at < appt.end_at
    ]


def filter_available(candidates: CandidateSlots, blockers: Iterable[Interval]) -> list[str]:
    """
    Start times ("HH:MM", 24h) of candidates that overlap no blocker.

    Order follows generation order, i.e. ascending.
    """
    blockers = sorted(blockers)
    available = []
    for slot in candidates.intervals():
        if first_overlap(slot, blockers) is None:
            available.append(f"{slot.start:%H:%M}")
    return available
