"""
Per-number rate limiting for OTP generation.

Counts accepted generations in ``rate_limit:<phone>``. Every accepted
attempt increments the counter and refreshes its TTL in the same pipeline,
so the window slides forward with each new attempt and resets only when
Redis expires the key.
"""

import logging
from typing import Optional

import redis

from .models import rate_limit_key
from .storage import storage_errors

logger = logging.getLogger(__name__)

MAX_REQUESTS = 3
WINDOW_SECONDS = 600  # 10 minutes


class RateLimiter:
    """Fixed-size counter with a sliding expiry window."""

    def __init__(
        self,
        client: redis.Redis,
        max_requests: int = MAX_REQUESTS,
        window_seconds: int = WINDOW_SECONDS
    ):
        self.client = client
        self.max_requests = max_requests
        self.window_seconds = window_seconds

    def exceeds(self, raw_count: Optional[str]) -> bool:
        """True if a stored counter value has reached the limit."""
        count = int(raw_count) if raw_count else 0
        return count >= self.max_requests

    def is_limited(self, phone_number: str) -> bool:
        """Check whether the number has used up its window."""
        with storage_errors("rate limit check"):
            raw = self.client.get(rate_limit_key(phone_number))
        return self.exceeds(raw)

    def record(self, pipe: redis.client.Pipeline, phone_number: str):
        """Queue the counter increment and window refresh on ``pipe``."""
        key = rate_limit_key(phone_number)
        pipe.incr(key)
        pipe.expire(key, self.window_seconds)
