# backend/agenda/services/slots/__init__.py
"""
Availability engine.

Working hours → candidate slots → conflict filter.
Only resolved working windows are cached (Redis); bookings and absences
are always read fresh.
"""

from .config import BookingConfig, get_booking_config
from .intervals import Interval, overlaps
from .working_hours import WorkingWindow, resolve_working_window
from .generator import CandidateSlots, generate_slots
from .conflicts import filter_available
from .redis_store import WindowRedisStore
from .invalidator import invalidate_business_cache
from .availability import calculate_available_slots

__all__ = [
    "BookingConfig",
    "get_booking_config",
    "Interval",
    "overlaps",
    "WorkingWindow",
    "resolve_working_window",
    "CandidateSlots",
    "generate_slots",
    "filter_available",
    "WindowRedisStore",
    "invalidate_business_cache",
    "calculate_available_slots",
]
