"""
Authentication endpoints.

Handles OTP requests and OTP verification.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from otp_auth.auth import User
from otp_auth.validation import validate_phone_number, validate_verify_otp

from ..deps import ServicesDep

logger = logging.getLogger(__name__)

router = APIRouter()


# Request/Response models

class RequestOTPRequest(BaseModel):
    """OTP request."""
    phone_number: str = Field(..., description="Phone number in international format (e.g., +1234567890)")


class RequestOTPResponse(BaseModel):
    """OTP request acknowledgement."""
    message: str
    phone_number: str


class VerifyOTPRequest(BaseModel):
    """OTP verification request."""
    phone_number: str = Field(..., description="Phone number the code was sent to")
    otp: str = Field(..., description="6-digit code")


class UserResponse(BaseModel):
    """User info response."""
    id: str
    phone_number: str
    registered_at: datetime
    last_login_at: datetime
    is_active: bool

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            phone_number=user.phone_number,
            registered_at=user.registered_at,
            last_login_at=user.last_login_at,
            is_active=user.is_active
        )


class VerifyOTPResponse(BaseModel):
    """Authentication response with token and user info."""
    message: str
    token: str
    user: Optional[UserResponse] = None
    is_new_user: bool


# Endpoints

@router.post("/request-otp", response_model=RequestOTPResponse)
def request_otp(request: RequestOTPRequest, services: ServicesDep):
    """
    Request an OTP.

    Generates a code for the phone number and sends it out of band.
    At most 3 requests per number are accepted every 10 minutes.
    """
    phone_number = validate_phone_number(request.phone_number)

    result = services.auth.request_otp(phone_number)

    return RequestOTPResponse(message=result.message, phone_number=result.phone_number)


@router.post("/verify-otp", response_model=VerifyOTPResponse)
def verify_otp(request: VerifyOTPRequest, services: ServicesDep):
    """
    Verify an OTP and authenticate.

    Registers the user on first login. Returns a bearer token valid for 24 hours.
    """
    phone_number, otp = validate_verify_otp(request.phone_number, request.otp)

    result = services.auth.verify_otp(phone_number, otp)

    return VerifyOTPResponse(
        message=result.message,
        token=result.token,
        user=UserResponse.from_user(result.user),
        is_new_user=result.is_new_user
    )
