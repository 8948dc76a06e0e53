"""In-memory user identity repository for testing."""

from typing import Optional

from portal.domain.error import DuplicateEntityError
from portal.domain.model.user_identity import UserIdentity
from portal.domain.repository.user_identity import UserIdentityRepository
from portal.domain.value import AuthProvider, UserId


class InMemoryUserIdentityRepository(UserIdentityRepository):
    """In-memory implementation of UserIdentityRepository for testing."""

    def __init__(self) -> None:
        self._identities: list[UserIdentity] = []

    async def find_by_provider(
        self, provider: AuthProvider, provider_user_id: str
    ) -> Optional[UserIdentity]:
        for identity in self._identities:
            if (
                identity.provider == provider
                and identity.provider_user_id == provider_user_id
            ):
                return identity
        return None

    async def find_all_by_user_id(self, user_id: UserId) -> list[UserIdentity]:
        matches = [i for i in self._identities if i.user_id == user_id]
        matches.sort(key=lambda i: i.created_at)
        return matches

    async def create(self, identity: UserIdentity) -> UserIdentity:
        for existing in self._identities:
            same_subject = (
                existing.provider == identity.provider
                and existing.provider_user_id == identity.provider_user_id
            )
            same_user_provider = (
                existing.user_id == identity.user_id
                and existing.provider == identity.provider
            )
            if same_subject or same_user_provider:
                raise DuplicateEntityError(
                    "UserIdentity",
                    f"{identity.provider.value}:{identity.provider_user_id}",
                )
        self._identities.append(identity)
        return identity

    async def update(self, identity: UserIdentity) -> UserIdentity:
        for i, existing in enumerate(self._identities):
            if existing.id == identity.id:
                self._identities[i] = identity
        return identity
