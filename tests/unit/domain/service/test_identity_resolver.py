"""Unit tests for IdentityResolver."""

import asyncio

import pytest

from portal.config import AuthSettings
from portal.domain.error import ProviderConflictError
from portal.domain.service import IdentityResolver
from portal.domain.value import AuthProvider, Email, LinkingPolicy
from portal.persistence.repository.inmemory import (
    InMemoryUserIdentityRepository,
    InMemoryUserRepository,
)


class YieldingUserRepository(InMemoryUserRepository):
    """Suspends after email lookups so concurrent first logins interleave."""

    async def find_by_email(self, email):
        user = await super().find_by_email(email)
        await asyncio.sleep(0)
        return user


class YieldingUserIdentityRepository(InMemoryUserIdentityRepository):
    """Suspends after link lookups so concurrent provider links interleave."""

    async def find_all_by_user_id(self, user_id):
        links = await super().find_all_by_user_id(user_id)
        await asyncio.sleep(0)
        return links


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def identity_repository() -> InMemoryUserIdentityRepository:
    return InMemoryUserIdentityRepository()


@pytest.fixture
def resolver(user_repository, identity_repository, auth_settings, clock) -> IdentityResolver:
    return IdentityResolver(user_repository, identity_repository, auth_settings, clock=clock)


def linking_resolver(user_repository, identity_repository, clock, **overrides):
    settings = AuthSettings(linking_policy=LinkingPolicy.LINK_VERIFIED_EMAIL, **overrides)
    return IdentityResolver(user_repository, identity_repository, settings, clock=clock)


class TestResolveByEmail:
    """Tests for IdentityResolver.resolve_by_email()."""

    @pytest.mark.asyncio
    async def test_creates_account_on_first_login(self, resolver, alice_email):
        """First OTP login should create an email-established account."""
        # Act
        user, created = await resolver.resolve_by_email(alice_email)

        # Assert
        assert created is True
        assert user.email == alice_email
        assert user.auth_provider == AuthProvider.EMAIL_OTP

    @pytest.mark.asyncio
    async def test_returns_same_account_afterwards(self, resolver, alice_email):
        """Later logins should resolve to the same account."""
        first, _ = await resolver.resolve_by_email(alice_email)

        second, created = await resolver.resolve_by_email(Email(" ALICE@example.com "))

        assert created is False
        assert second.id == first.id

    @pytest.mark.asyncio
    async def test_logs_into_oauth_established_account(self, resolver, alice_email):
        """OTP proves inbox control, so it reaches an account made via GitHub."""
        # Arrange
        oauth_user, _ = await resolver.resolve_or_link(
            alice_email, AuthProvider.GITHUB, "gh-1"
        )

        # Act
        user, created = await resolver.resolve_by_email(alice_email)

        # Assert
        assert created is False
        assert user.id == oauth_user.id

    @pytest.mark.asyncio
    async def test_concurrent_first_logins_create_one_account(
        self, identity_repository, auth_settings, clock, alice_email
    ):
        """Racing first logins should both resolve to a single account."""
        # Arrange
        users = YieldingUserRepository()
        resolver = IdentityResolver(users, identity_repository, auth_settings, clock=clock)

        # Act
        (first, first_created), (second, second_created) = await asyncio.gather(
            resolver.resolve_by_email(alice_email),
            resolver.resolve_by_email(alice_email),
        )

        # Assert
        assert first.id == second.id
        assert sorted([first_created, second_created]) == [False, True]
        assert len(users.all()) == 1


class TestResolveOrLink:
    """Tests for IdentityResolver.resolve_or_link()."""

    @pytest.mark.asyncio
    async def test_creates_account_and_link(
        self, resolver, identity_repository, alice_email
    ):
        """First OAuth login should create the account and its provider link."""
        # Act
        user, created = await resolver.resolve_or_link(
            alice_email,
            AuthProvider.GITHUB,
            "gh-1",
            display_name="Alice",
            avatar_url="https://avatars.example.com/alice.png",
        )

        # Assert
        assert created is True
        assert user.auth_provider == AuthProvider.GITHUB
        assert user.display_name == "Alice"
        identity = await identity_repository.find_by_provider(AuthProvider.GITHUB, "gh-1")
        assert identity is not None
        assert identity.user_id == user.id

    @pytest.mark.asyncio
    async def test_returning_login_refreshes_profile(self, resolver, alice_email):
        """Profile updates from the provider should be applied, gaps kept."""
        # Arrange
        await resolver.resolve_or_link(
            alice_email,
            AuthProvider.GITHUB,
            "gh-1",
            display_name="Alice",
            avatar_url="https://avatars.example.com/old.png",
        )

        # Act
        user, created = await resolver.resolve_or_link(
            alice_email, AuthProvider.GITHUB, "gh-1", display_name="Alice L."
        )

        # Assert
        assert created is False
        assert user.display_name == "Alice L."
        assert user.avatar_url == "https://avatars.example.com/old.png"

    @pytest.mark.asyncio
    async def test_subject_link_wins_over_changed_email(self, resolver, alice_email):
        """A linked subject keeps its account even if the provider email changed."""
        original, _ = await resolver.resolve_or_link(
            alice_email, AuthProvider.GITHUB, "gh-1"
        )

        user, created = await resolver.resolve_or_link(
            Email("alice@new-employer.example"), AuthProvider.GITHUB, "gh-1"
        )

        assert created is False
        assert user.id == original.id

    @pytest.mark.asyncio
    async def test_second_provider_is_rejected_by_default(
        self, resolver, user_repository, identity_repository, alice_email
    ):
        """Under FIRST_PROVIDER_WINS another provider must not take over the email."""
        # Arrange
        owner, _ = await resolver.resolve_or_link(
            alice_email, AuthProvider.GITHUB, "gh-1"
        )

        # Act
        with pytest.raises(ProviderConflictError) as exc_info:
            await resolver.resolve_or_link(alice_email, AuthProvider.GITLAB, "gl-9")

        # Assert
        error = exc_info.value
        assert error.registered_with == ["github"]
        assert error.public_message == "Authentication failed"
        assert "github" not in error.public_message
        assert len(user_repository.all()) == 1
        links = await identity_repository.find_all_by_user_id(owner.id)
        assert [link.provider for link in links] == [AuthProvider.GITHUB]

    @pytest.mark.asyncio
    async def test_same_provider_different_subject_is_rejected(
        self, user_repository, identity_repository, clock, alice_email
    ):
        """Even with linking on, one provider may only be linked once per account."""
        resolver = linking_resolver(user_repository, identity_repository, clock)
        await resolver.resolve_or_link(alice_email, AuthProvider.GITHUB, "gh-1")

        with pytest.raises(ProviderConflictError):
            await resolver.resolve_or_link(alice_email, AuthProvider.GITHUB, "gh-2")

    @pytest.mark.asyncio
    async def test_link_verified_email_attaches_second_provider(
        self, user_repository, identity_repository, clock, alice_email
    ):
        """Under LINK_VERIFIED_EMAIL a second provider joins the same account."""
        # Arrange
        resolver = linking_resolver(user_repository, identity_repository, clock)
        owner, _ = await resolver.resolve_or_link(
            alice_email, AuthProvider.GITHUB, "gh-1"
        )
        clock.advance(minutes=1)

        # Act
        user, created = await resolver.resolve_or_link(
            alice_email, AuthProvider.GOOGLE, "google-7"
        )

        # Assert
        assert created is False
        assert user.id == owner.id
        links = await resolver.get_linked_identities(owner.id)
        assert [link.provider for link in links] == [
            AuthProvider.GITHUB,
            AuthProvider.GOOGLE,
        ]

    @pytest.mark.asyncio
    async def test_link_verified_email_respects_linkable_providers(
        self, user_repository, identity_repository, clock, alice_email
    ):
        """Providers outside linkable_providers are still rejected."""
        resolver = linking_resolver(
            user_repository,
            identity_repository,
            clock,
            linkable_providers=[AuthProvider.GOOGLE],
        )
        await resolver.resolve_or_link(alice_email, AuthProvider.GOOGLE, "google-7")

        with pytest.raises(ProviderConflictError):
            await resolver.resolve_or_link(alice_email, AuthProvider.GITLAB, "gl-9")

    @pytest.mark.asyncio
    async def test_otp_account_adopts_first_oauth_provider(
        self, resolver, alice_email
    ):
        """An account made by OTP should accept the first provider asserting its email."""
        # Arrange
        otp_user, _ = await resolver.resolve_by_email(alice_email)

        # Act
        user, created = await resolver.resolve_or_link(
            alice_email, AuthProvider.GITLAB, "gl-9", display_name="Alice"
        )

        # Assert
        assert created is False
        assert user.id == otp_user.id
        assert user.auth_provider == AuthProvider.EMAIL_OTP
        assert user.display_name == "Alice"

        # The adopted provider now owns it: a different one is rejected
        with pytest.raises(ProviderConflictError):
            await resolver.resolve_or_link(alice_email, AuthProvider.GOOGLE, "google-7")

    @pytest.mark.asyncio
    async def test_concurrent_first_oauth_logins_create_one_account(
        self, identity_repository, auth_settings, clock, alice_email
    ):
        """Racing callbacks for one subject should converge on one account."""
        # Arrange
        users = YieldingUserRepository()
        resolver = IdentityResolver(users, identity_repository, auth_settings, clock=clock)

        # Act
        (first, _), (second, _) = await asyncio.gather(
            resolver.resolve_or_link(alice_email, AuthProvider.GITHUB, "gh-1"),
            resolver.resolve_or_link(alice_email, AuthProvider.GITHUB, "gh-1"),
        )

        # Assert
        assert first.id == second.id
        assert len(users.all()) == 1

    @pytest.mark.asyncio
    async def test_concurrent_providers_cannot_both_adopt_otp_account(
        self, user_repository, auth_settings, clock, alice_email
    ):
        """Only one of two racing providers may claim an OTP-established account."""
        # Arrange
        identities = YieldingUserIdentityRepository()
        resolver = IdentityResolver(user_repository, identities, auth_settings, clock=clock)
        otp_user, _ = await resolver.resolve_by_email(alice_email)

        # Act
        results = await asyncio.gather(
            resolver.resolve_or_link(alice_email, AuthProvider.GITHUB, "gh-1"),
            resolver.resolve_or_link(alice_email, AuthProvider.GITLAB, "gl-1"),
            return_exceptions=True,
        )

        # Assert
        conflicts = [r for r in results if isinstance(r, ProviderConflictError)]
        linked = [r for r in results if isinstance(r, tuple)]
        assert len(conflicts) == 1
        assert len(linked) == 1
        assert linked[0][0].id == otp_user.id
        assert len(await identities.find_all_by_user_id(otp_user.id)) == 1
