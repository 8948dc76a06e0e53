"""PostgreSQL repository implementations."""

from portal.persistence.repository.otp import PostgresOtpRepository
from portal.persistence.repository.user import PostgresUserRepository
from portal.persistence.repository.user_identity import PostgresUserIdentityRepository

__all__ = [
    "PostgresOtpRepository",
    "PostgresUserRepository",
    "PostgresUserIdentityRepository",
]
