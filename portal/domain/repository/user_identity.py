"""User identity repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from portal.domain.model.user_identity import UserIdentity
from portal.domain.value import AuthProvider, UserId


class UserIdentityRepository(ABC):
    """Repository for UserIdentity entity.

    Manages the links between users and their OAuth provider identities.
    """

    @abstractmethod
    async def find_by_provider(
        self, provider: AuthProvider, provider_user_id: str
    ) -> Optional[UserIdentity]:
        """Find an identity by provider and provider user ID.

        Args:
            provider: The authentication provider
            provider_user_id: The user's ID on that provider

        Returns:
            The identity if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_all_by_user_id(self, user_id: UserId) -> list[UserIdentity]:
        """Get all identities linked to a user, oldest first.

        Args:
            user_id: The user's unique identifier

        Returns:
            List of identities (may be empty)
        """
        pass

    @abstractmethod
    async def create(self, identity: UserIdentity) -> UserIdentity:
        """Insert a new provider link.

        Args:
            identity: The identity to insert

        Returns:
            The inserted identity

        Raises:
            DuplicateEntityError: If the provider subject is already linked,
                or the user already has a link for this provider
        """
        pass

    @abstractmethod
    async def update(self, identity: UserIdentity) -> UserIdentity:
        """Update timestamps of an existing identity.

        Args:
            identity: The identity to update

        Returns:
            The updated identity
        """
        pass
