"""In-memory repository implementations for testing."""

from .otp import InMemoryOtpRepository
from .user import InMemoryUserRepository
from .user_identity import InMemoryUserIdentityRepository

__all__ = [
    "InMemoryOtpRepository",
    "InMemoryUserRepository",
    "InMemoryUserIdentityRepository",
]
