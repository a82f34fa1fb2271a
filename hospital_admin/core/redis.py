# hospital_admin/core/redis.py
"""
Optional Redis cache for dashboard counters.

The API must keep working when Redis is missing or down: every helper
here degrades to "cache miss" / no-op and logs a warning instead of raising.
"""

import json
import logging
from functools import lru_cache
from typing import Any, Optional

import redis

from hospital_admin.core.config import get_settings

logger = logging.getLogger(__name__)

DASHBOARD_CACHE_PREFIX = "hospital_admin:dashboard:"


@lru_cache
def get_redis_client() -> Optional[redis.Redis]:
    """
    Get Redis client instance.
    Returns None if Redis is not configured or unreachable at first use.
    """
    settings = get_settings()

    if not settings.redis_url:
        logger.info("REDIS_URL not set. Dashboard caching disabled.")
        return None

    try:
        client = redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        client.ping()
    except redis.RedisError as e:
        logger.warning("Failed to connect to Redis: %s. Running without cache.", e)
        return None

    logger.info("Redis connection established.")
    return client


def cache_get_json(key: str) -> Optional[Any]:
    """Return the decoded value, or None on miss / Redis unavailable."""
    client = get_redis_client()
    if not client:
        return None
    try:
        raw = client.get(key)
    except redis.RedisError as e:
        logger.warning("Redis GET error for key '%s': %s", key, e)
        return None
    return json.loads(raw) if raw else None


def cache_set_json(key: str, value: Any, ttl: int) -> bool:
    client = get_redis_client()
    if not client:
        return False
    try:
        client.setex(key, ttl, json.dumps(value, default=str))
        return True
    except redis.RedisError as e:
        logger.warning("Redis SET error for key '%s': %s", key, e)
        return False


def invalidate_dashboard_cache() -> None:
    """Drop cached dashboard figures after a write that changes them."""
    client = get_redis_client()
    if not client:
        return
    try:
        keys = list(client.scan_iter(match=f"{DASHBOARD_CACHE_PREFIX}*"))
        if keys:
            client.delete(*keys)
    except redis.RedisError as e:
        logger.warning("Redis invalidation failed: %s", e)
