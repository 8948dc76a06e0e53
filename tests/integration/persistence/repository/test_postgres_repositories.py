"""Integration tests for the PostgreSQL repositories.

Require a reachable database migrated to head (``scripts/run_migrations.py``).
"""

from datetime import timedelta
from uuid import uuid4

import pytest

from portal.domain.error import DuplicateEntityError
from portal.domain.model import PendingOtp, User, UserIdentity
from portal.domain.repository import (
    OtpRepository,
    UserIdentityRepository,
    UserRepository,
)
from portal.domain.value import AuthProvider, Email, OtpId, UserId, UserIdentityId
from portal.util.clock import utcnow
from tests.harness import create_env_fixture

# Integration test fixture
integration_env = create_env_fixture(unmock={"persistence"})


def unique_email() -> Email:
    return Email(f"user-{uuid4().hex[:12]}@example.com")


def new_user(email: Email) -> User:
    now = utcnow()
    return User(id=UserId(uuid4()), email=email, created_at=now, updated_at=now)


def new_otp(email: Email, attempts: int = 3) -> PendingOtp:
    now = utcnow()
    return PendingOtp(
        id=OtpId(uuid4()),
        email=email,
        code_hash="0" * 64,
        expires_at=now + timedelta(minutes=5),
        attempts_remaining=attempts,
        created_at=now,
    )


class TestUserRepositoryIntegration:
    """Integration tests for PostgresUserRepository."""

    @pytest.mark.asyncio
    async def test_create_and_find_by_email(self, integration_env):
        users = await integration_env.get(UserRepository)
        email = unique_email()

        created = await users.create(new_user(email))

        found = await users.find_by_email(email)
        assert found is not None
        assert found.id == created.id
        assert found.email == email

    @pytest.mark.asyncio
    async def test_duplicate_email_keeps_transaction_usable(self, integration_env):
        """A unique violation surfaces as DuplicateEntityError and the session survives."""
        # Arrange
        users = await integration_env.get(UserRepository)
        email = unique_email()
        await users.create(new_user(email))

        # Act
        with pytest.raises(DuplicateEntityError):
            await users.create(new_user(email))

        # Assert
        assert await users.find_by_email(email) is not None

    @pytest.mark.asyncio
    async def test_lock_for_linking_allows_reads_and_writes(self, integration_env):
        users = await integration_env.get(UserRepository)
        identities = await integration_env.get(UserIdentityRepository)
        user = await users.create(new_user(unique_email()))
        now = utcnow()

        async with users.lock_for_linking(user.id):
            assert await identities.find_all_by_user_id(user.id) == []
            await identities.create(
                UserIdentity(
                    id=UserIdentityId(uuid4()),
                    user_id=user.id,
                    provider=AuthProvider.GOOGLE,
                    provider_user_id=f"g-{uuid4().hex[:8]}",
                    created_at=now,
                    updated_at=now,
                )
            )

        assert len(await identities.find_all_by_user_id(user.id)) == 1


class TestUserIdentityRepositoryIntegration:
    """Integration tests for PostgresUserIdentityRepository."""

    @pytest.mark.asyncio
    async def test_provider_subject_is_unique(self, integration_env):
        users = await integration_env.get(UserRepository)
        identities = await integration_env.get(UserIdentityRepository)
        first = await users.create(new_user(unique_email()))
        second = await users.create(new_user(unique_email()))
        subject = f"gh-{uuid4().hex[:8]}"
        now = utcnow()

        await identities.create(
            UserIdentity(
                id=UserIdentityId(uuid4()),
                user_id=first.id,
                provider=AuthProvider.GITHUB,
                provider_user_id=subject,
                created_at=now,
                updated_at=now,
            )
        )

        with pytest.raises(DuplicateEntityError):
            await identities.create(
                UserIdentity(
                    id=UserIdentityId(uuid4()),
                    user_id=second.id,
                    provider=AuthProvider.GITHUB,
                    provider_user_id=subject,
                    created_at=now,
                    updated_at=now,
                )
            )

        found = await identities.find_by_provider(AuthProvider.GITHUB, subject)
        assert found.user_id == first.id


class TestOtpRepositoryIntegration:
    """Integration tests for PostgresOtpRepository."""

    @pytest.mark.asyncio
    async def test_upsert_replaces_pending_challenge(self, integration_env):
        otps = await integration_env.get(OtpRepository)
        email = unique_email()
        first = await otps.upsert(new_otp(email))

        second = await otps.upsert(new_otp(email))

        current = await otps.find_by_email(email)
        assert current.id == second.id
        assert await otps.delete_if_current(email, first.id) is False

    @pytest.mark.asyncio
    async def test_decrement_and_compare_and_delete(self, integration_env):
        otps = await integration_env.get(OtpRepository)
        email = unique_email()
        otp = await otps.upsert(new_otp(email, attempts=2))

        assert await otps.decrement_attempts(email, otp.id) == 1
        assert await otps.decrement_attempts(email, OtpId(uuid4())) is None
        assert await otps.delete_if_current(email, otp.id) is True
        assert await otps.delete_if_current(email, otp.id) is False
        assert await otps.find_by_email(email) is None
