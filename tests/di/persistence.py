"""Mock persistence providers for testing."""

from dishka import Scope, provide

from portal.domain.repository import (
    OtpRepository,
    UserIdentityRepository,
    UserRepository,
)
from portal.persistence.repository.inmemory import (
    InMemoryOtpRepository,
    InMemoryUserIdentityRepository,
    InMemoryUserRepository,
)
from portal.util.di.infrastructure.persistence import PersistenceProvider


class MockPersistenceProvider(PersistenceProvider):
    """Mock persistence provider using in-memory repositories.

    APP scope: state is shared by every request of one container, so an
    e2e flow can send a code in one request and confirm it in the next.
    Each test builds its own container and starts empty.
    """

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_user_repository(self) -> UserRepository:
        """Provide in-memory user repository."""
        return InMemoryUserRepository()

    @provide(scope=Scope.APP)
    def get_user_identity_repository(self) -> UserIdentityRepository:
        """Provide in-memory user identity repository."""
        return InMemoryUserIdentityRepository()

    @provide(scope=Scope.APP)
    def get_otp_repository(self) -> OtpRepository:
        """Provide in-memory pending OTP repository."""
        return InMemoryOtpRepository()
