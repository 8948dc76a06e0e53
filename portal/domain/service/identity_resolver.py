"""Identity resolution domain service.

Maps an authenticated email (plus, for OAuth, the provider subject) onto a
single canonical user account and applies the cross-provider linking policy.
"""

from typing import NoReturn, Optional
from uuid import uuid4

import logfire

from portal.config import AuthSettings
from portal.domain.error import DuplicateEntityError, ProviderConflictError
from portal.domain.model.user import User
from portal.domain.model.user_identity import UserIdentity
from portal.domain.repository.user import UserRepository
from portal.domain.repository.user_identity import UserIdentityRepository
from portal.domain.value import (
    AuthProvider,
    Email,
    LinkingPolicy,
    UserId,
    UserIdentityId,
)
from portal.util.clock import Clock, utcnow

from .base import Service


class IdentityResolver(Service):
    """Domain service resolving external identities to user accounts."""

    def __init__(
        self,
        user_repository: UserRepository,
        user_identity_repository: UserIdentityRepository,
        auth_settings: AuthSettings,
        clock: Clock = utcnow,
    ) -> None:
        """Initialize identity resolver.

        Args:
            user_repository: User repository
            user_identity_repository: Provider link repository
            auth_settings: Linking policy and retry bounds
            clock: Time source
        """
        self.user_repository = user_repository
        self.user_identity_repository = user_identity_repository
        self.auth_settings = auth_settings
        self.clock = clock

    async def resolve_by_email(self, email: Email) -> tuple[User, bool]:
        """Get or create the account for an email proven by OTP.

        Proof of inbox control is enough; no provider conflict applies.

        Args:
            email: Normalized email address

        Returns:
            Tuple of (user, created) where created is True for a new account
        """
        with logfire.span("identity_resolver.resolve_by_email", email=email.root):
            for _ in range(self.auth_settings.resolve_max_retries):
                existing = await self.user_repository.find_by_email(email)
                if existing:
                    logfire.info("Existing user resolved", user_id=str(existing.id))
                    return existing, False

                now = self.clock()
                user = User(
                    id=UserId(uuid4()),
                    email=email,
                    auth_provider=AuthProvider.EMAIL_OTP,
                    created_at=now,
                    updated_at=now,
                )
                try:
                    created = await self.user_repository.create(user)
                except DuplicateEntityError:
                    # Lost a race with a concurrent first login; re-read the winner
                    logfire.info("Concurrent user creation detected", email=email.root)
                    continue

                logfire.info(
                    "New user created",
                    user_id=str(created.id),
                    provider=AuthProvider.EMAIL_OTP.value,
                )
                return created, True

            raise DuplicateEntityError("User", email.root)

    async def resolve_or_link(
        self,
        email: Email,
        provider: AuthProvider,
        provider_user_id: str,
        display_name: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> tuple[User, bool]:
        """Get, link or create the account for a verified OAuth identity.

        Resolution order:
        1. The provider subject is already linked: that account wins.
        2. An account owns the email: link or reject per linking policy.
        3. Otherwise: create the account and its first link.

        Args:
            email: Normalized email asserted by the provider
            provider: OAuth provider
            provider_user_id: Provider subject id
            display_name: Profile name from the provider
            avatar_url: Profile picture from the provider

        Returns:
            Tuple of (user, created) where created is True for a new account

        Raises:
            ProviderConflictError: If the email is owned through another
                provider and policy forbids linking
        """
        with logfire.span(
            "identity_resolver.resolve_or_link",
            email=email.root,
            provider=provider.value,
            provider_user_id=provider_user_id,
        ):
            for _ in range(self.auth_settings.resolve_max_retries):
                identity = await self.user_identity_repository.find_by_provider(
                    provider, provider_user_id
                )
                if identity:
                    user = await self.user_repository.find_by_id(identity.user_id)
                    if user:
                        refreshed = await self._refresh(user, identity, display_name, avatar_url)
                        return refreshed, False
                    logfire.error(
                        "Identity references missing user",
                        identity_id=str(identity.id),
                        user_id=str(identity.user_id),
                    )

                existing = await self.user_repository.find_by_email(email)
                if existing:
                    try:
                        linked = await self._link_existing(
                            existing, provider, provider_user_id, display_name, avatar_url
                        )
                    except DuplicateEntityError:
                        logfire.info(
                            "Concurrent provider link detected",
                            user_id=str(existing.id),
                            provider=provider.value,
                        )
                        continue
                    return linked, False

                try:
                    created = await self._create_with_link(
                        email, provider, provider_user_id, display_name, avatar_url
                    )
                except DuplicateEntityError:
                    logfire.info(
                        "Concurrent user creation detected",
                        email=email.root,
                        provider=provider.value,
                    )
                    continue
                return created, True

            raise DuplicateEntityError("UserIdentity", f"{provider.value}:{provider_user_id}")

    async def get_linked_identities(self, user_id: UserId) -> list[UserIdentity]:
        """Get every provider link of a user, oldest first."""
        return await self.user_identity_repository.find_all_by_user_id(user_id)

    async def _refresh(
        self,
        user: User,
        identity: UserIdentity,
        display_name: Optional[str],
        avatar_url: Optional[str],
    ) -> User:
        now = self.clock()
        updated = await self.user_repository.update(
            user.with_profile(display_name, avatar_url, now)
        )
        await self.user_identity_repository.update(
            identity.model_copy(update={"updated_at": now, "last_login_at": now})
        )
        logfire.info(
            "Existing user logged in",
            user_id=str(user.id),
            provider=identity.provider.value,
        )
        return updated

    async def _link_existing(
        self,
        user: User,
        provider: AuthProvider,
        provider_user_id: str,
        display_name: Optional[str],
        avatar_url: Optional[str],
    ) -> User:
        # Links are read and inserted under the user's lock
        async with self.user_repository.lock_for_linking(user.id):
            links = await self.user_identity_repository.find_all_by_user_id(user.id)
            self._check_linking_allowed(user, links, provider)

            now = self.clock()
            await self.user_identity_repository.create(
                UserIdentity(
                    id=UserIdentityId(uuid4()),
                    user_id=user.id,
                    provider=provider,
                    provider_user_id=provider_user_id,
                    created_at=now,
                    updated_at=now,
                    last_login_at=now,
                )
            )
        updated = await self.user_repository.update(
            user.with_profile(display_name, avatar_url, now)
        )
        logfire.info(
            "Provider linked to existing user",
            user_id=str(user.id),
            provider=provider.value,
            linked_count=len(links) + 1,
        )
        return updated

    def _check_linking_allowed(
        self,
        user: User,
        links: list[UserIdentity],
        provider: AuthProvider,
    ) -> None:
        """Raise ProviderConflictError unless ``provider`` may join ``user``.

        An account with no provider links was established by OTP; the first
        OAuth provider asserting its email is adopted under every policy.
        """
        if not links:
            return

        registered_with = [link.provider.value for link in links]

        # Same provider, different subject: never two links per provider
        if provider in {link.provider for link in links}:
            self._reject(user, provider, registered_with)

        policy = self.auth_settings.linking_policy
        if (
            policy is LinkingPolicy.LINK_VERIFIED_EMAIL
            and provider in self.auth_settings.linkable_providers
        ):
            return

        self._reject(user, provider, registered_with)

    def _reject(
        self, user: User, provider: AuthProvider, registered_with: list[str]
    ) -> NoReturn:
        logfire.warn(
            "Provider conflict",
            user_id=str(user.id),
            email=user.email.root,
            provider=provider.value,
            registered_with=registered_with,
            policy=self.auth_settings.linking_policy.value,
        )
        raise ProviderConflictError(user.email.root, provider.value, registered_with)

    async def _create_with_link(
        self,
        email: Email,
        provider: AuthProvider,
        provider_user_id: str,
        display_name: Optional[str],
        avatar_url: Optional[str],
    ) -> User:
        now = self.clock()
        user = User(
            id=UserId(uuid4()),
            email=email,
            display_name=display_name,
            avatar_url=avatar_url,
            auth_provider=provider,
            created_at=now,
            updated_at=now,
        )
        created = await self.user_repository.create(user)
        await self.user_identity_repository.create(
            UserIdentity(
                id=UserIdentityId(uuid4()),
                user_id=created.id,
                provider=provider,
                provider_user_id=provider_user_id,
                created_at=now,
                updated_at=now,
                last_login_at=now,
            )
        )
        logfire.info(
            "New user created",
            user_id=str(created.id),
            provider=provider.value,
            provider_user_id=provider_user_id,
        )
        return created
