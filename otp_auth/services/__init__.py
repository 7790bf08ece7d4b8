"""
Services layer for the OTP auth service.

Business logic lives here so the HTTP API and tests share it.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import redis

from ..auth import JWTHandler, UserStore
from ..config import Config, load_config
from ..otp import RateLimiter, RedisOTPStore, create_redis_client
from .auth_service import AuthService, RequestOTPResult, VerifyOTPResult
from .sms_service import SMSService
from .user_service import UserService, UserPage

logger = logging.getLogger(__name__)

__all__ = [
    "Services",
    "create_services",
    # Services
    "AuthService",
    "UserService",
    "SMSService",
    # Data classes
    "RequestOTPResult",
    "VerifyOTPResult",
    "UserPage",
]


@dataclass
class Services:
    """Container for all services and the stores they share."""
    config: Config
    redis: redis.Redis
    otp_store: RedisOTPStore
    users: UserStore
    jwt: JWTHandler
    sms: SMSService
    auth: AuthService
    user_service: UserService

    def close(self):
        """Release the Redis connection pool."""
        self.redis.close()


def create_services(
    config: Optional[Config] = None,
    redis_client: Optional[redis.Redis] = None
) -> Services:
    """
    Factory function to create all services with proper dependencies.

    Args:
        config: Optional config (loads from env if not provided)
        redis_client: Optional Redis client (built from config if not provided)

    Returns:
        Services container
    """
    cfg = config or load_config()
    client = redis_client or create_redis_client(cfg.redis)

    rate_limiter = RateLimiter(
        client,
        max_requests=cfg.otp.rate_limit_max,
        window_seconds=cfg.otp.rate_limit_window_seconds
    )
    otp_store = RedisOTPStore(
        client,
        rate_limiter=rate_limiter,
        ttl_seconds=cfg.otp.ttl_seconds,
        max_attempts=cfg.otp.max_attempts
    )
    users = UserStore()
    jwt = JWTHandler(secret_key=cfg.jwt.secret_key, expires_in=cfg.jwt.expire_hours * 3600)
    sms = SMSService(cfg.twilio)

    logger.info("Services initialized")

    return Services(
        config=cfg,
        redis=client,
        otp_store=otp_store,
        users=users,
        jwt=jwt,
        sms=sms,
        auth=AuthService(otp_store, users, jwt, sms),
        user_service=UserService(users)
    )
