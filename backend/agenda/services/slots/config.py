# backend/agenda/services/slots/config.py
"""
Booking configuration for slots calculation.
"""

from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache

from ...config import settings


@dataclass(frozen=True)
class BookingConfig:
    """
    Configuration for booking/slots system.

    Attributes:
        slot_step_minutes: Distance between candidate start times (15/30/60).
            Independent of service duration, so long services yield
            overlapping candidates.
        cache_ttl_seconds: Redis TTL for resolved working windows
        open_ended_absence_blocks: Whether an absence without end date
            blocks everything after its start (True) or nothing (False)
    """
    slot_step_minutes: int = 30  # 15 / 30 / 60
    cache_ttl_seconds: int = 86400  # 24 hours
    open_ended_absence_blocks: bool = True

    def __post_init__(self):
        """Validate configuration."""
        if self.slot_step_minutes not in (15, 30, 60):
            raise ValueError(f"slot_step_minutes must be 15, 30, or 60, got {self.slot_step_minutes}")

    @property
    def step(self) -> timedelta:
        return timedelta(minutes=self.slot_step_minutes)


@lru_cache
def get_booking_config() -> BookingConfig:
    """Get booking configuration (singleton, built from settings)."""
    return BookingConfig(
        slot_step_minutes=settings.slot_step_minutes,
        cache_ttl_seconds=settings.slot_cache_ttl_seconds,
        open_ended_absence_blocks=settings.open_ended_absence_blocks,
    )


def time_str_to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight. Raises ValueError if malformed."""
    parts = value.split(":")
    if len(parts) != 2 or not all(p.isdigit() and len(p) == 2 for p in parts):
        raise ValueError(f"Time must be in HH:MM format, got {value!r}")
    hour, minute = int(parts[0]), int(parts[1])
    if hour > 23 or minute > 59:
        raise ValueError(f"Time out of range: {value!r}")
    return hour * 60 + minute


def minutes_to_time_str(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
