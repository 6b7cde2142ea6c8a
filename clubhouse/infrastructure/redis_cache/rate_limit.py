from __future__ import annotations

from redis.asyncio import Redis
from redis.exceptions import RedisError

from clubhouse.domain.errors import StoreError
from clubhouse.domain.ports.rate_limiter import RateLimiterPort


class RedisRateLimiter(RateLimiterPort):
    """Fixed-window counter: INCR the window key, set its TTL on first hit."""

    def __init__(self, redis: Redis, *, key_prefix: str = "rl:") -> None:
        self._redis = redis
        self._prefix = key_prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def hit(self, key: str, *, limit: int, window_seconds: int) -> bool:
        redis_key = self._key(key)
        try:
            pipe = self._redis.pipeline(transaction=True)
            pipe.incr(redis_key)
            pipe.expire(redis_key, window_seconds, nx=True)
            count, _ = await pipe.execute()
        except RedisError as e:
            raise StoreError(f"rate limiter unavailable: {e}") from e
        return int(count) <= limit
