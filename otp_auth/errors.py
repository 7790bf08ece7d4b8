"""
Domain errors.

Every failure the service can report is a DomainError tagged with an
ErrorKind. The kind is stable and machine readable; the request layer maps
it to a transport status via ``http_status``.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Closed set of error kinds."""
    # OTP / authentication
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    OTP_NOT_FOUND = "OTP_NOT_FOUND"
    OTP_EXPIRED = "OTP_EXPIRED"
    INVALID_OTP = "INVALID_OTP"
    TOO_MANY_ATTEMPTS = "TOO_MANY_ATTEMPTS"
    INVALID_TOKEN = "INVALID_TOKEN"
    MISSING_AUTH_HEADER = "MISSING_AUTH_HEADER"
    INVALID_AUTH_FORMAT = "INVALID_AUTH_FORMAT"

    # Users
    USER_NOT_FOUND = "USER_NOT_FOUND"
    USER_ALREADY_EXISTS = "USER_ALREADY_EXISTS"

    # Validation
    INVALID_REQUEST = "INVALID_REQUEST"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    INVALID_PHONE_NUMBER = "INVALID_PHONE_NUMBER"
    INVALID_OTP_FORMAT = "INVALID_OTP_FORMAT"
    INVALID_USER_ID = "INVALID_USER_ID"
    INVALID_PAGINATION = "INVALID_PAGINATION"
    INVALID_SEARCH_QUERY = "INVALID_SEARCH_QUERY"

    # Infrastructure
    STORAGE_FAILURE = "STORAGE_FAILURE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# kind -> (default message, http status)
_DEFAULTS = {
    ErrorKind.RATE_LIMIT_EXCEEDED: ("Rate limit exceeded", 429),
    ErrorKind.OTP_NOT_FOUND: ("OTP not found", 401),
    ErrorKind.OTP_EXPIRED: ("OTP has expired", 401),
    ErrorKind.INVALID_OTP: ("Invalid OTP provided", 401),
    ErrorKind.TOO_MANY_ATTEMPTS: ("Too many failed attempts", 401),
    ErrorKind.INVALID_TOKEN: ("Invalid or expired token", 401),
    ErrorKind.MISSING_AUTH_HEADER: ("Authorization header is required", 401),
    ErrorKind.INVALID_AUTH_FORMAT: ("Invalid authorization header format", 401),
    ErrorKind.USER_NOT_FOUND: ("User not found", 404),
    ErrorKind.USER_ALREADY_EXISTS: ("User with this phone number already exists", 409),
    ErrorKind.INVALID_REQUEST: ("Invalid request body", 400),
    ErrorKind.MISSING_REQUIRED_FIELD: ("Required field is missing", 400),
    ErrorKind.INVALID_PHONE_NUMBER: ("Invalid phone number format", 400),
    ErrorKind.INVALID_OTP_FORMAT: ("Invalid OTP format", 400),
    ErrorKind.INVALID_USER_ID: ("Invalid user ID", 400),
    ErrorKind.INVALID_PAGINATION: ("Invalid pagination parameters", 400),
    ErrorKind.INVALID_SEARCH_QUERY: ("Invalid search query", 400),
    ErrorKind.STORAGE_FAILURE: ("Storage operation failed", 500),
    ErrorKind.INTERNAL_ERROR: ("Internal server error", 500),
}


class DomainError(Exception):
    """
    Application error carrying a stable kind.

    Usage:
        raise DomainError(ErrorKind.OTP_EXPIRED)
        raise DomainError(ErrorKind.INVALID_REQUEST, details="page must be greater than 0")
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: Optional[str] = None,
        details: Optional[str] = None
    ):
        default_message, status = _DEFAULTS[kind]
        self.kind = kind
        self.message = message or default_message
        self.details = details
        self.http_status = status
        super().__init__(str(self))

    @property
    def code(self) -> str:
        return self.kind.value

    def to_dict(self) -> dict:
        result = {"code": self.code, "message": self.message}
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        if self.details:
            return f"{self.code}: {self.message} ({self.details})"
        return f"{self.code}: {self.message}"

    def __repr__(self) -> str:
        return f"DomainError({self.kind.value!r}, {self.message!r}, details={self.details!r})"

