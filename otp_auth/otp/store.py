"""
OTP storage backed by Redis.

Each phone number has at most one active record under ``otp:<phone>``.
Generation and verification are check-then-write sequences, so both run
inside WATCH/MULTI/EXEC transactions: if another client touches the
watched key between our read and our write, the transaction is re-run
against the fresh value.
"""

import hmac
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import redis

from ..errors import DomainError, ErrorKind
from .models import OTPRecord, generate_code, otp_key, rate_limit_key
from .rate_limiter import RateLimiter
from .storage import storage_errors

logger = logging.getLogger(__name__)

OTP_TTL_SECONDS = 120  # 2 minutes
MAX_ATTEMPTS = 3


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OTPRepository(ABC):
    """Capability interface for OTP backends."""

    @abstractmethod
    def generate(self, phone_number: str) -> str: ...

    @abstractmethod
    def verify(self, phone_number: str, code: str) -> bool: ...

    @abstractmethod
    def is_rate_limited(self, phone_number: str) -> bool: ...

    @abstractmethod
    def get_otp(self, phone_number: str) -> OTPRecord: ...


class RedisOTPStore(OTPRepository):
    """
    Redis-backed OTP lifecycle.

    Usage:
        store = RedisOTPStore(redis_client)
        code = store.generate("+1234567890")
        store.verify("+1234567890", code)  # True, record deleted
    """

    def __init__(
        self,
        client: redis.Redis,
        rate_limiter: Optional[RateLimiter] = None,
        ttl_seconds: int = OTP_TTL_SECONDS,
        max_attempts: int = MAX_ATTEMPTS,
        clock: Callable[[], datetime] = utcnow
    ):
        """
        Args:
            client: Redis client created with decode_responses=True
            rate_limiter: Limiter sharing the same client (default: 3 per 10 minutes)
            ttl_seconds: Lifetime of a code
            max_attempts: Wrong guesses allowed before the code is discarded
            clock: Source of the current timezone-aware time
        """
        self.client = client
        self.rate_limiter = rate_limiter or RateLimiter(client)
        self.ttl_seconds = ttl_seconds
        self.max_attempts = max_attempts
        self._clock = clock

    def is_rate_limited(self, phone_number: str) -> bool:
        return self.rate_limiter.is_limited(phone_number)

    def generate(self, phone_number: str) -> str:
        """
        Issue a fresh code, replacing any previous one.

        Returns:
            The 6-digit code, for out-of-band delivery

        Raises:
            DomainError(RATE_LIMIT_EXCEEDED): window already used up
            DomainError(STORAGE_FAILURE): Redis unavailable
        """
        record = OTPRecord(
            phone_number=phone_number,
            code=generate_code(),
            expires_at=self._clock() + timedelta(seconds=self.ttl_seconds),
            attempts=0
        )

        def _generate(pipe: redis.client.Pipeline):
            # Watching the counter makes the limit check and the increment one unit
            if self.rate_limiter.exceeds(pipe.get(rate_limit_key(phone_number))):
                raise DomainError(
                    ErrorKind.RATE_LIMIT_EXCEEDED,
                    details=f"phone number: {phone_number}"
                )
            pipe.multi()
            pipe.set(otp_key(phone_number), record.to_json(), ex=self.ttl_seconds)
            self.rate_limiter.record(pipe, phone_number)

        try:
            with storage_errors("OTP generation"):
                self.client.transaction(_generate, rate_limit_key(phone_number))
        except DomainError as e:
            if e.kind == ErrorKind.RATE_LIMIT_EXCEEDED:
                logger.warning(f"OTP rate limit reached for {phone_number}")
            raise

        logger.info(f"OTP generated for {phone_number}")
        return record.code

    def verify(self, phone_number: str, code: str) -> bool:
        """
        Check a code and consume it on success.

        Returns:
            True when the code matches (the record is deleted)

        Raises:
            DomainError: OTP_NOT_FOUND, OTP_EXPIRED, INVALID_OTP,
                TOO_MANY_ATTEMPTS or STORAGE_FAILURE
        """
        key = otp_key(phone_number)
        now = self._clock()

        def _verify(pipe: redis.client.Pipeline) -> Optional[ErrorKind]:
            raw = pipe.get(key)
            if raw is None:
                return ErrorKind.OTP_NOT_FOUND

            record = OTPRecord.from_json(raw)

            if record.is_expired(now):
                pipe.multi()
                pipe.delete(key)
                return ErrorKind.OTP_EXPIRED

            if hmac.compare_digest(record.code.encode(), code.encode()):
                pipe.multi()
                pipe.delete(key)
                return None

            record.attempts += 1
            pipe.multi()
            if record.attempts >= self.max_attempts:
                pipe.delete(key)
                return ErrorKind.TOO_MANY_ATTEMPTS

            # Keep the original deadline rather than granting a fresh TTL
            remaining_ms = int((record.expires_at - now).total_seconds() * 1000)
            pipe.set(key, record.to_json(), px=max(1, remaining_ms))
            return ErrorKind.INVALID_OTP

        with storage_errors("OTP verification"):
            failure = self.client.transaction(_verify, key, value_from_callable=True)

        if failure is not None:
            if failure == ErrorKind.TOO_MANY_ATTEMPTS:
                logger.warning(f"OTP discarded after {self.max_attempts} failed attempts for {phone_number}")
            else:
                logger.info(f"OTP verification failed for {phone_number}: {failure.value}")
            raise DomainError(failure)

        logger.info(f"OTP verified for {phone_number}")
        return True

    def get_otp(self, phone_number: str) -> OTPRecord:
        """Read the active record without touching it."""
        with storage_errors("OTP lookup"):
            raw = self.client.get(otp_key(phone_number))

        if raw is None:
            raise DomainError(ErrorKind.OTP_NOT_FOUND)

        return OTPRecord.from_json(raw)
