"""In-memory user repository for testing."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from portal.domain.error import DuplicateEntityError
from portal.domain.model.user import User
from portal.domain.repository.user import UserRepository
from portal.domain.value import Email, UserId


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing.

    Enforces the same email uniqueness as the ``uq_users_email`` constraint.
    """

    def __init__(self) -> None:
        self._users: dict[UserId, User] = {}
        self._link_locks: dict[UserId, asyncio.Lock] = {}

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        return self._users.get(user_id)

    async def find_by_email(self, email: Email) -> Optional[User]:
        for user in self._users.values():
            if user.email == email:
                return user
        return None

    async def create(self, user: User) -> User:
        if any(existing.email == user.email for existing in self._users.values()):
            raise DuplicateEntityError("User", user.email.root)
        self._users[user.id] = user
        return user

    async def update(self, user: User) -> User:
        self._users[user.id] = user
        return user

    @asynccontextmanager
    async def lock_for_linking(self, user_id: UserId) -> AsyncIterator[None]:
        lock = self._link_locks.setdefault(user_id, asyncio.Lock())
        async with lock:
            yield

    def all(self) -> list[User]:
        """All stored users (test helper)."""
        return list(self._users.values())
