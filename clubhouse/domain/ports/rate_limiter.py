from typing import Protocol


class RateLimiterPort(Protocol):
    async def hit(self, key: str, *, limit: int, window_seconds: int) -> bool:
        """
        Count one attempt for `key` in the current window.
        Return True while the count stays within `limit`, False once exceeded.
        """
