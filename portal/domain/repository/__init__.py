"""Repository interfaces for Portal.

Interfaces live in the domain layer; implementations live in
``portal.persistence``.
"""

from portal.domain.repository.otp import OtpRepository
from portal.domain.repository.user import UserRepository
from portal.domain.repository.user_identity import UserIdentityRepository

__all__ = [
    "OtpRepository",
    "UserRepository",
    "UserIdentityRepository",
]
