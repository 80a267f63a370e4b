# app/config/redis.py
"""Redis connection setup

The client is built once by the application lifespan and kept on
``app.state.redis``; routes receive it through ``get_redis``.
"""
from typing import Optional

import redis
from fastapi import Request

from app.config.settings import Settings


def create_redis_client(settings: Settings) -> redis.Redis:
    """Create a Redis client backed by its own connection pool"""
    pool = redis.ConnectionPool.from_url(
        settings.REDIS_URL,
        max_connections=settings.REDIS_MAX_CONNECTIONS,
        retry_on_timeout=True,
    )
    return redis.Redis(connection_pool=pool)


def close_redis_client(client: Optional[redis.Redis]) -> None:
    """Release the pool owned by a client created with create_redis_client"""
    if client is None:
        return
    client.close()
    client.connection_pool.disconnect()


def get_redis(request: Request) -> Optional[redis.Redis]:
    """Redis dependency for FastAPI (None when the app runs without Redis)"""
    return getattr(request.app.state, "redis", None)


# Redis key patterns for different data types
class RedisKeys:
    """Redis key patterns for consistent naming"""

    # Per business/day booking lock
    BOOKING_LOCK = "booking-lock:{business_id}:{booking_date}"
