from functools import lru_cache

import redis

from hobby_planner.core.config import get_settings


def get_redis_url() -> str:
    return get_settings().REDIS_URL


@lru_cache
def get_redis_client() -> redis.Redis:
    """Get the process-wide Redis client used for per-session locking."""
    return redis.from_url(get_redis_url(), decode_responses=True)
