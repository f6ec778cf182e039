# backend/agenda/redis_client.py
"""
Shared Redis client.

REDIS_URL unset → redis_client is None and the slots engine computes
working windows straight from the database.
"""

from redis import Redis

from .config import settings

redis_client: Redis | None = (
    Redis.from_url(settings.redis_url, decode_responses=True, socket_timeout=2.0)
    if settings.redis_url
    else None
)


def get_redis() -> Redis | None:
    """Dependency for FastAPI (overridable in tests)."""
    return redis_client
