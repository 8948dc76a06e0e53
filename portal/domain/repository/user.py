"""User repository interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Optional

from portal.domain.model.user import User
from portal.domain.value import Email, UserId


class UserRepository(ABC):
    """Repository for User aggregate.

    Implementations must enforce email uniqueness and report violations as
    ``DuplicateEntityError`` from ``create``.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: Email) -> Optional[User]:
        """Find a user by their canonical email.

        Args:
            email: Normalized email address

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Insert a new user.

        Args:
            user: The user to insert

        Returns:
            The inserted user

        Raises:
            DuplicateEntityError: If a user with the same email already exists
        """
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update profile fields of an existing user.

        Args:
            user: The user to update

        Returns:
            The updated user
        """
        pass

    @abstractmethod
    def lock_for_linking(self, user_id: UserId) -> AbstractAsyncContextManager[None]:
        """Serialize provider linking for one user.

        Callers read the user's links and insert a new one inside this
        context; concurrent linkers for the same user wait their turn.

        Args:
            user_id: The user being linked
        """
        pass
