"""One-time code lifecycle and rate limiting."""

from .models import OTPRecord, generate_code
from .rate_limiter import RateLimiter
from .storage import create_redis_client
from .store import OTPRepository, RedisOTPStore

__all__ = [
    "OTPRecord",
    "OTPRepository",
    "RateLimiter",
    "RedisOTPStore",
    "create_redis_client",
    "generate_code",
]
