# backend/agenda/services/slots/invalidator.py
"""
Cache invalidation for working windows.

Triggers:
✓ Weekly schedule replaced → invalidate all dates of the business

Does NOT trigger:
✗ Appointment created / status changed (read on every query)
✗ Absence created (read on every query)
"""

import logging
from datetime import date

from redis import Redis
from redis.exceptions import RedisError

from .redis_store import WindowRedisStore

logger = logging.getLogger(__name__)


def invalidate_business_cache(
    redis: Redis | None,
    business_id: int,
    dates: list[date] | None = None,
) -> int:
    """
    Invalidate cached windows for a business.

    Args:
        redis: Redis client, or None when caching is disabled
        business_id: Business ID
        dates: Specific dates to invalidate, or None for all cached dates

    Returns:
        Number of deleted cache keys
    """
    if redis is None:
        return 0

    store = WindowRedisStore(redis)
    try:
        return store.delete_windows(business_id, dates)
    except RedisError as e:
        logger.error(f"Window cache invalidation failed for business {business_id}: {e}")
        return 0
