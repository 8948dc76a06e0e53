"""Domain model entities for Portal."""

from portal.domain.model.otp import PendingOtp
from portal.domain.model.session import Session
from portal.domain.model.user import User
from portal.domain.model.user_identity import UserIdentity

__all__ = [
    "User",
    "UserIdentity",
    "PendingOtp",
    "Session",
]
