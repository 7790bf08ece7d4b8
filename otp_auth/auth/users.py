"""
User storage and management.

Users live in memory for the lifetime of the process. The store keeps a
primary map by id, a phone number index and an insertion-ordered list of
ids, all guarded by one reader/writer lock.
"""

import logging
import threading
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field, replace

from ..errors import DomainError, ErrorKind

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class User:
    """User data model."""
    id: str
    phone_number: str  # Unique across all users
    registered_at: datetime = field(default_factory=utcnow)
    last_login_at: datetime = field(default_factory=utcnow)
    is_active: bool = True

    @classmethod
    def new(cls, phone_number: str, now: Optional[datetime] = None) -> "User":
        """Create a fresh, active user with a random id."""
        now = now or utcnow()
        return cls(
            id=str(uuid.uuid4()),
            phone_number=phone_number,
            registered_at=now,
            last_login_at=now,
            is_active=True
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "phone_number": self.phone_number,
            "registered_at": self.registered_at.isoformat(),
            "last_login_at": self.last_login_at.isoformat(),
            "is_active": self.is_active,
        }


class ReadWriteLock:
    """
    Many readers or one writer.

    Waiting writers block new readers so a steady stream of reads cannot
    starve an update.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self):
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self):
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class UserRepository(ABC):
    """Capability interface for user directories."""

    @abstractmethod
    def create(self, user: User) -> User: ...

    @abstractmethod
    def get_by_phone_number(self, phone_number: str) -> User: ...

    @abstractmethod
    def get_by_id(self, user_id: str) -> User: ...

    @abstractmethod
    def update(self, user: User) -> User: ...

    @abstractmethod
    def get_all(self, page: int, limit: int, search: str = "") -> Tuple[List[User], int]: ...


class UserStore(UserRepository):
    """
    In-memory user directory.

    Thread-safe: reads run concurrently, writes are exclusive. Records are
    copied on the way in and out so callers only change stored state
    through ``update``.
    """

    def __init__(self):
        self._users: Dict[str, User] = {}
        self._phone_index: Dict[str, str] = {}  # phone number -> user id
        self._order: List[str] = []  # user ids in insertion order
        self._lock = ReadWriteLock()

    def create(self, user: User) -> User:
        """
        Insert a new user.

        Raises:
            DomainError(USER_ALREADY_EXISTS): phone number already bound
        """
        with self._lock.write():
            if user.phone_number in self._phone_index:
                raise DomainError(ErrorKind.USER_ALREADY_EXISTS)

            self._users[user.id] = replace(user)
            self._phone_index[user.phone_number] = user.id
            self._order.append(user.id)

        logger.info(f"Created user: {user.id}")
        return replace(user)

    def get_by_phone_number(self, phone_number: str) -> User:
        with self._lock.read():
            user_id = self._phone_index.get(phone_number)
            user = self._users.get(user_id) if user_id else None
            if user is None:
                raise DomainError(ErrorKind.USER_NOT_FOUND)
            return replace(user)

    def get_by_id(self, user_id: str) -> User:
        with self._lock.read():
            user = self._users.get(user_id)
            if user is None:
                raise DomainError(ErrorKind.USER_NOT_FOUND)
            return replace(user)

    def update(self, user: User) -> User:
        """
        Replace a stored user wholesale.

        Raises:
            DomainError(USER_NOT_FOUND): unknown id
        """
        with self._lock.write():
            if user.id not in self._users:
                raise DomainError(ErrorKind.USER_NOT_FOUND)
            self._users[user.id] = replace(user)

        logger.debug(f"Updated user: {user.id}")
        return replace(user)

    def get_all(self, page: int, limit: int, search: str = "") -> Tuple[List[User], int]:
        """
        List users in insertion order.

        Args:
            page: 1-based page number (already normalized by the caller)
            limit: Page size (already normalized by the caller)
            search: Exact phone number filter; empty means all users

        Returns:
            Tuple of (users on the page, total users matching the filter)
        """
        with self._lock.read():
            if search:
                user_id = self._phone_index.get(search)
                filtered = [self._users[user_id]] if user_id else []
            else:
                filtered = [self._users[user_id] for user_id in self._order]

            total = len(filtered)
            start = (page - 1) * limit
            if start >= total:
                return [], total

            end = min(total, start + limit)
            return [replace(u) for u in filtered[start:end]], total
