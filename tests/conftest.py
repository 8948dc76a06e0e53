"""Test configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import logfire
import pytest

from portal.config import AuthSettings, OtpSettings
from portal.domain.value import Email

# Instrumentation calls in create_app need a configured logfire; keep it local
logfire.configure(send_to_logfire=False, console=False)


class FakeClock:
    """Controllable time source for services taking a ``clock``."""

    def __init__(self, now: datetime | None = None):
        self.now = now or datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def auth_settings() -> AuthSettings:
    return AuthSettings(jwt_secret="test-secret-with-enough-length-for-hs256")


@pytest.fixture
def otp_settings() -> OtpSettings:
    return OtpSettings()


@pytest.fixture
def alice_email() -> Email:
    return Email("alice@example.com")
