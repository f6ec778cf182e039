# backend/agenda/services/slots/redis_store.py
"""
Redis storage for resolved working windows.

Key format: slots:window:{business_id}:{date}
Value: "HH:MM-HH:MM" for an open day, "__closed__" for a closed one.

Only the weekly schedule is cached. Appointments and absences are read
from the database on every query, so bookings never need invalidation.
"""

import logging
from datetime import date

from redis import Redis
from redis.exceptions import RedisError

from .config import BookingConfig, get_booking_config
from .working_hours import WorkingWindow

logger = logging.getLogger(__name__)

CLOSED_SENTINEL = "__closed__"


class WindowRedisStore:
    """Redis wrapper for per-day working windows."""

    KEY_PREFIX = "slots:window"

    def __init__(self, redis: Redis, config: BookingConfig | None = None):
        self.redis = redis
        self.config = config or get_booking_config()

    def _key(self, business_id: int, dt: date) -> str:
        return f"{self.KEY_PREFIX}:{business_id}:{dt.isoformat()}"

    # ── Read ─────────────────────────────────────────────────────────────

    def get_window(self, business_id: int, dt: date) -> WorkingWindow | None:
        """
        Cached window for a day.

        Returns:
            WorkingWindow, or None on cache miss or Redis failure.
        """
        try:
            raw = self.redis.get(self._key(business_id, dt))
        except RedisError as e:
            logger.warning(f"Window cache read failed for business {business_id}: {e}")
            return None

        if raw is None:
            return None

        value = raw.decode() if isinstance(raw, bytes) else raw
        if value == CLOSED_SENTINEL:
            return WorkingWindow.closed()
        return WorkingWindow.from_cache_value(dt, value)

    # ── Write ────────────────────────────────────────────────────────────

    def store_window(self, business_id: int, dt: date, window: WorkingWindow) -> None:
        value = window.to_cache_value() or CLOSED_SENTINEL
        try:
            self.redis.set(
                self._key(business_id, dt),
                value,
                ex=self.config.cache_ttl_seconds,
            )
        except RedisError as e:
            logger.warning(f"Window cache write failed for business {business_id}: {e}")

    # ── Delete ───────────────────────────────────────────────────────────

    def delete_windows(
        self,
        business_id: int,
        dates: list[date] | None = None,
    ) -> int:
        """
        Delete cached windows.

        Args:
            business_id: Business ID
            dates: Specific dates, or None to delete all for the business.

        Returns:
            Number of deleted keys.
        """
        if dates:
            keys = [self._key(business_id, dt) for dt in dates]
        else:
            pattern = f"{self.KEY_PREFIX}:{business_id}:*"
            keys = list(self.redis.scan_iter(match=pattern))

        if not keys:
            return 0

        return self.redis.delete(*keys)
