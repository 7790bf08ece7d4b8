"""Configuration module for the OTP auth service."""

import os
from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

DEFAULT_JWT_SECRET = "your-secret-key-change-in-production"


@dataclass
class JWTConfig:
    """Bearer token signing configuration."""
    secret_key: str = field(default_factory=lambda: os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET))
    expire_hours: int = field(default_factory=lambda: int(os.getenv("JWT_EXPIRE_HOURS", "24")))


@dataclass
class RedisConfig:
    """Connection settings for the ephemeral keyed store."""
    addr: str = field(default_factory=lambda: os.getenv("REDIS_ADDR", "localhost:6379"))
    password: Optional[str] = field(default_factory=lambda: os.getenv("REDIS_PASSWORD") or None)
    db: int = field(default_factory=lambda: int(os.getenv("REDIS_DB", "0")))
    socket_timeout: float = field(default_factory=lambda: float(os.getenv("REDIS_SOCKET_TIMEOUT", "5")))

    @property
    def host(self) -> str:
        return self.addr.rsplit(":", 1)[0]

    @property
    def port(self) -> int:
        if ":" not in self.addr:
            return 6379
        return int(self.addr.rsplit(":", 1)[1])


@dataclass
class OTPConfig:
    """One-time code lifecycle and rate limiting."""
    ttl_seconds: int = field(default_factory=lambda: int(os.getenv("OTP_TTL_SECONDS", "120")))
    max_attempts: int = field(default_factory=lambda: int(os.getenv("OTP_MAX_ATTEMPTS", "3")))
    rate_limit_max: int = field(default_factory=lambda: int(os.getenv("RATE_LIMIT_MAX", "3")))
    rate_limit_window_seconds: int = field(default_factory=lambda: int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "600")))


@dataclass
class TwilioConfig:
    """SMS gateway credentials. Delivery falls back to logging when unset."""
    account_sid: Optional[str] = field(default_factory=lambda: os.getenv("TWILIO_ACCOUNT_SID"))
    auth_token: Optional[str] = field(default_factory=lambda: os.getenv("TWILIO_AUTH_TOKEN"))
    from_number: Optional[str] = field(default_factory=lambda: os.getenv("TWILIO_PHONE_NUMBER"))

    def is_configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)


@dataclass
class Config:
    """Main configuration container."""
    jwt: JWTConfig = field(default_factory=JWTConfig)
    redis: RedisConfig = field(default_factory=RedisConfig)
    otp: OTPConfig = field(default_factory=OTPConfig)
    twilio: TwilioConfig = field(default_factory=TwilioConfig)

    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8080")))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())


def load_config() -> Config:
    """Load configuration from environment variables."""
    return Config()
