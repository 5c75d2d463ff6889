"""Per-user message rate limiting backed by Redis."""
import time
from typing import Optional, Tuple

import redis


class RateLimitExceeded(Exception):
    """Raised when a user sends more messages than the window allows."""

    def __init__(self, limit: int, window: int):
        super().__init__(f"Rate limit exceeded. Limit: {limit} messages per {window} seconds")
        self.limit = limit
        self.window = window


class RateLimiter:
    """Redis-based fixed window rate limiter."""

    def __init__(self, redis_client: redis.Redis, limit: int = 30, window: int = 60, prefix: str = "message_rate"):
        self.redis = redis_client
        self.limit = limit
        self.window = window
        self.prefix = prefix

    def _window_key(self, user_id: int, now: Optional[float] = None) -> str:
        """Key for the window containing ``now``: {prefix}:{user}:{bucket}."""
        bucket = int(now if now is not None else time.time()) // self.window
        return f"{self.prefix}:{user_id}:{bucket}"

    def hit(self, user_id: int) -> Tuple[bool, int]:
        """
        Count one send attempt for a user.

        Returns:
            Tuple of (allowed: bool, remaining: int)

        Example:
            >>> limiter = RateLimiter(redis_client, limit=30, window=60)
            >>> allowed, remaining = limiter.hit(5)
        """
        key = self._window_key(user_id)

        pipe = self.redis.pipeline()
        pipe.incr(key)
        pipe.expire(key, self.window)
        count = int(pipe.execute()[0])

        return count <= self.limit, max(0, self.limit - count)

    def check(self, user_id: int) -> int:
        """
        Count a send and raise if it is over the limit.

        Returns:
            Remaining sends in the current window

        Raises:
            RateLimitExceeded: If the user is over the limit
        """
        allowed, remaining = self.hit(user_id)
        if not allowed:
            raise RateLimitExceeded(self.limit, self.window)
        return remaining
