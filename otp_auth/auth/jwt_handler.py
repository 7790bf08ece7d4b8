"""
JWT token handler.

Issues and validates the bearer tokens handed out after a successful
OTP verification.
"""

import time
import logging
from typing import Callable, Optional
from dataclasses import dataclass, asdict

from jose import jwt, JWTError

from ..config import DEFAULT_JWT_SECRET
from ..errors import DomainError, ErrorKind

logger = logging.getLogger(__name__)

# Token configuration
ALGORITHM = "HS256"
TOKEN_EXPIRE_SECONDS = 86400  # 24 hours


@dataclass
class TokenClaims:
    """JWT token payload."""
    user_id: str
    phone_number: str
    iat: int  # Issued at timestamp
    exp: int  # Expiration timestamp

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "TokenClaims":
        return cls(
            user_id=data["user_id"],
            phone_number=data["phone_number"],
            iat=int(data["iat"]),
            exp=int(data["exp"])
        )


class JWTHandler:
    """
    Handles JWT token generation and validation.

    Tokens are signed with HS256 only; tokens whose header names any other
    algorithm are rejected before the signature is checked.
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        expires_in: int = TOKEN_EXPIRE_SECONDS,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize JWT handler.

        Args:
            secret_key: Secret key for signing tokens (falls back to the development default)
            expires_in: Token lifetime in seconds (default: 24 hours)
            clock: Source of the current UNIX time
        """
        self.secret_key = secret_key or DEFAULT_JWT_SECRET
        self.expires_in = expires_in
        self._clock = clock

        if self.secret_key == DEFAULT_JWT_SECRET:
            logger.warning(
                "Using default JWT secret key. "
                "Set JWT_SECRET environment variable in production!"
            )

    def issue(self, user_id: str, phone_number: str) -> str:
        """
        Create a bearer token for a user.

        Args:
            user_id: Unique user identifier
            phone_number: User's phone number

        Returns:
            Encoded JWT token string
        """
        now = int(self._clock())
        claims = TokenClaims(
            user_id=user_id,
            phone_number=phone_number,
            iat=now,
            exp=now + self.expires_in
        )

        token = jwt.encode(claims.to_dict(), self.secret_key, algorithm=ALGORITHM)
        logger.debug(f"Issued token for user {user_id}, expires in {self.expires_in}s")
        return token

    def validate(self, token: str) -> TokenClaims:
        """
        Verify and decode a token.

        Args:
            token: JWT token string

        Returns:
            TokenClaims carried by the token

        Raises:
            DomainError(INVALID_TOKEN): bad signature, unexpected algorithm,
                malformed claims or expired token
        """
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg") != ALGORITHM:
                raise DomainError(
                    ErrorKind.INVALID_TOKEN,
                    details=f"unexpected signing method: {header.get('alg')}"
                )

            data = jwt.decode(token, self.secret_key, algorithms=[ALGORITHM])
            claims = TokenClaims.from_dict(data)

        except JWTError as e:
            logger.debug(f"Token verification failed: {e}")
            raise DomainError(ErrorKind.INVALID_TOKEN, details=str(e))
        except (KeyError, TypeError, ValueError) as e:
            logger.debug(f"Token claims malformed: {e}")
            raise DomainError(ErrorKind.INVALID_TOKEN, details="malformed token claims")

        # Check expiration against our own clock as well
        if claims.exp <= int(self._clock()):
            logger.debug("Token expired")
            raise DomainError(ErrorKind.INVALID_TOKEN, details="token has expired")

        return claims
