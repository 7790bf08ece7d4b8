"""
Authentication module for the OTP auth service.

Provides bearer token handling and the in-memory user directory.
"""

from .jwt_handler import JWTHandler, TokenClaims
from .users import UserRepository, UserStore, User

__all__ = [
    "JWTHandler",
    "TokenClaims",
    "UserRepository",
    "UserStore",
    "User",
]
