from __future__ import annotations

from redis.asyncio import Redis

from clubhouse.settings import Settings


def create_redis(settings: Settings) -> Redis:
    """
    Redis client from REDIS_URL. Connections are opened lazily.
    decode_responses=True -> we get/put str, not bytes.
    """
    return Redis.from_url(settings.redis_url, encoding="utf-8", decode_responses=True)
