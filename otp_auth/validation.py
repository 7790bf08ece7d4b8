"""
Input validation.

Checks request fields before they reach the services. Each check raises a
DomainError with the matching validation kind.
"""

import re
from typing import Optional, Tuple

from .errors import DomainError, ErrorKind

# E.164 international format
PHONE_NUMBER_RE = re.compile(r"^\+[1-9]\d{1,14}$", re.ASCII)
OTP_RE = re.compile(r"^\d{6}$", re.ASCII)
UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")
SEARCH_RE = re.compile(r"^[a-zA-Z0-9\s+\-_]+$", re.ASCII)
DIGITS_RE = re.compile(r"^[0-9]+$")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def validate_phone_number(phone_number: Optional[str]) -> str:
    """
    Validate a phone number in international format.

    Returns:
        The trimmed phone number
    """
    if not phone_number:
        raise DomainError(ErrorKind.MISSING_REQUIRED_FIELD, details="phone_number is required")

    phone_number = phone_number.strip()

    if not PHONE_NUMBER_RE.match(phone_number):
        raise DomainError(
            ErrorKind.INVALID_PHONE_NUMBER,
            details=f"phone number '{phone_number}' must be in international format (e.g., +1234567890)"
        )

    if not 10 <= len(phone_number) <= 16:
        raise DomainError(
            ErrorKind.INVALID_PHONE_NUMBER,
            details=f"phone number length must be between 10 and 16 characters, got {len(phone_number)}"
        )

    return phone_number


def validate_otp(otp: Optional[str]) -> str:
    """Validate a 6-digit code. Returns the trimmed code."""
    if not otp:
        raise DomainError(ErrorKind.MISSING_REQUIRED_FIELD, details="otp is required")

    otp = otp.strip()
    if not OTP_RE.match(otp):
        raise DomainError(ErrorKind.INVALID_OTP_FORMAT, details=f"OTP must be exactly 6 digits, got '{otp}'")

    return otp


def validate_user_id(user_id: Optional[str]) -> str:
    if not user_id:
        raise DomainError(ErrorKind.MISSING_REQUIRED_FIELD, details="user ID is required")

    user_id = user_id.strip()
    if not UUID_RE.match(user_id):
        raise DomainError(ErrorKind.INVALID_USER_ID, details=f"invalid UUID format: '{user_id}'")

    return user_id


def _parse_positive_int(value: str, name: str) -> int:
    value = value.strip()
    if not DIGITS_RE.match(value):
        raise DomainError(ErrorKind.INVALID_PAGINATION, details=f"invalid {name} number")
    result = int(value)
    if result <= 0:
        raise DomainError(ErrorKind.INVALID_PAGINATION, details=f"{name} must be greater than 0")
    return result


def validate_pagination(page: Optional[str], limit: Optional[str]) -> Tuple[int, int]:
    """
    Parse and validate raw page/limit query values.

    Missing values take the defaults (page 1, limit 10).

    Returns:
        Tuple of (page, limit)
    """
    page_num = _parse_positive_int(page, "page") if page else DEFAULT_PAGE
    limit_num = _parse_positive_int(limit, "limit") if limit else DEFAULT_LIMIT

    if limit_num > MAX_LIMIT:
        raise DomainError(ErrorKind.INVALID_PAGINATION, details=f"limit must be between 1 and {MAX_LIMIT}")

    return page_num, limit_num


def validate_search_query(query: Optional[str]) -> str:
    """Validate a phone-number search query. Empty means no filter."""
    if not query:
        return ""

    query = query.strip()

    if len(query) < 3:
        raise DomainError(ErrorKind.INVALID_SEARCH_QUERY, details="search query must be at least 3 characters long")

    if len(query) > 50:
        raise DomainError(ErrorKind.INVALID_SEARCH_QUERY, details="search query must be less than 50 characters")

    if not SEARCH_RE.match(query):
        raise DomainError(ErrorKind.INVALID_SEARCH_QUERY, details="search query contains invalid characters")

    return query


def validate_verify_otp(phone_number: Optional[str], otp: Optional[str]) -> Tuple[str, str]:
    """Validate a verify-otp request. Returns (phone_number, otp)."""
    return validate_phone_number(phone_number), validate_otp(otp)
