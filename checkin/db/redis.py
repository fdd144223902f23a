# checkin/db/redis.py
import redis.asyncio as redis
from checkin.core.config import settings


def get_redis_client() -> redis.Redis:
    """
    Creates a new asyncio Redis client for the configured URL.
    Only used when change notifications are shared through Redis.
    """
    return redis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)
