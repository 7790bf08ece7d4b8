"""
User endpoints.

Paginated listing and lookup by id. Both require a bearer token.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from otp_auth.validation import validate_pagination, validate_search_query, validate_user_id

from ..deps import ServicesDep, CurrentClaims
from .auth import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


class UserListResponse(BaseModel):
    """One page of users."""
    users: List[UserResponse]
    total: int
    page: int
    limit: int


@router.get("", response_model=UserListResponse)
def list_users(
    services: ServicesDep,
    claims: CurrentClaims,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    search: Optional[str] = None
):
    """
    List users.

    - **page**: page number (default 1)
    - **limit**: items per page (default 10, max 100)
    - **search**: exact phone number match
    """
    page_num, limit_num = validate_pagination(page, limit)
    query = validate_search_query(search)

    result = services.user_service.list_users(page=page_num, limit=limit_num, search=query)
    logger.debug(f"User {claims.user_id} listed users page {page_num}")

    return UserListResponse(
        users=[UserResponse.from_user(u) for u in result.users],
        total=result.total,
        page=result.page,
        limit=result.limit
    )


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: str, services: ServicesDep, claims: CurrentClaims):
    """Get a user by id."""
    user = services.user_service.get_user(validate_user_id(user_id))
    return UserResponse.from_user(user)
