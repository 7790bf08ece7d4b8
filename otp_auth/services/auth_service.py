"""
Authentication service.

Composes the OTP store, user directory and token issuer into the two
phone-login use cases: request a code, then trade the code for a token.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..auth import JWTHandler, TokenClaims, UserRepository, User
from ..auth.users import utcnow
from ..errors import DomainError, ErrorKind
from ..otp import OTPRepository
from .sms_service import SMSService

logger = logging.getLogger(__name__)


@dataclass
class RequestOTPResult:
    """Response to an OTP request."""
    phone_number: str
    message: str = "OTP sent successfully"

    def to_dict(self) -> dict:
        return {"message": self.message, "phone_number": self.phone_number}


@dataclass
class VerifyOTPResult:
    """Response to a successful OTP verification."""
    token: str
    user: User
    is_new_user: bool
    message: str = "Authentication successful"

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "token": self.token,
            "user": self.user.to_dict(),
            "is_new_user": self.is_new_user
        }


class AuthService:
    """
    Service for phone number authentication.

    Handles:
    - Requesting a one-time code
    - Verifying the code, registering first-time users
    - Validating bearer tokens for the request layer

    Errors from the underlying stores propagate unchanged.
    """

    def __init__(
        self,
        otp_store: OTPRepository,
        users: UserRepository,
        jwt_handler: JWTHandler,
        sms: Optional[SMSService] = None,
        clock: Callable[[], datetime] = utcnow
    ):
        self.otp = otp_store
        self.users = users
        self.jwt = jwt_handler
        self.sms = sms or SMSService()
        self._clock = clock

    def request_otp(self, phone_number: str) -> RequestOTPResult:
        """
        Generate a code for a phone number and send it.

        Raises:
            DomainError(RATE_LIMIT_EXCEEDED): too many requests in the window
            DomainError(STORAGE_FAILURE): OTP store unavailable
        """
        code = self.otp.generate(phone_number)
        self.sms.send_otp(phone_number, code)
        return RequestOTPResult(phone_number=phone_number)

    def verify_otp(self, phone_number: str, code: str) -> VerifyOTPResult:
        """
        Verify a code and authenticate the user.

        Creates the user on first login, otherwise records the login time.

        Returns:
            VerifyOTPResult with a bearer token
        """
        self.otp.verify(phone_number, code)

        now = self._clock()
        is_new_user = False

        try:
            user = self.users.get_by_phone_number(phone_number)
        except DomainError as e:
            if e.kind != ErrorKind.USER_NOT_FOUND:
                raise
            user = self.users.create(User.new(phone_number, now=now))
            is_new_user = True
            logger.info(f"Registered new user {user.id} for {phone_number}")
        else:
            user.last_login_at = now
            user = self.users.update(user)
            logger.info(f"User logged in: {user.id}")

        token = self.jwt.issue(user.id, user.phone_number)

        return VerifyOTPResult(token=token, user=user, is_new_user=is_new_user)

    def validate_token(self, token: str) -> TokenClaims:
        """
        Validate a bearer token.

        Raises:
            DomainError(INVALID_TOKEN): token rejected
        """
        return self.jwt.validate(token)
