"""User directory read operations."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..auth import UserRepository, User
from ..validation import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT

logger = logging.getLogger(__name__)


@dataclass
class UserPage:
    """One page of users."""
    users: List[User] = field(default_factory=list)
    total: int = 0
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    def to_dict(self) -> dict:
        return {
            "users": [u.to_dict() for u in self.users],
            "total": self.total,
            "page": self.page,
            "limit": self.limit
        }


class UserService:
    """Lists and looks up registered users."""

    def __init__(self, users: UserRepository):
        self.users = users

    def list_users(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        search: str = ""
    ) -> UserPage:
        """
        List users with pagination and exact phone number search.

        Out-of-range page or limit values fall back to the defaults
        (page 1, limit 10); limit is capped at 100.
        """
        if not page or page < 1:
            page = DEFAULT_PAGE
        if not limit or limit < 1 or limit > MAX_LIMIT:
            limit = DEFAULT_LIMIT

        users, total = self.users.get_all(page, limit, search or "")
        return UserPage(users=users, total=total, page=page, limit=limit)

    def get_user(self, user_id: str) -> User:
        """
        Raises:
            DomainError(USER_NOT_FOUND): unknown id
        """
        return self.users.get_by_id(user_id)
