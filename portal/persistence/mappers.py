"""Mappers between database rows and domain models."""

from typing import Any, Dict
from uuid import UUID

from portal.domain.model import PendingOtp, User, UserIdentity
from portal.domain.value import (
    AuthProvider,
    Email,
    OtpId,
    UserId,
    UserIdentityId,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model."""
    return User(
        id=UserId(_uuid(row["id"])),
        email=Email(row["email"]),
        display_name=row.get("display_name"),
        avatar_url=row.get("avatar_url"),
        auth_provider=AuthProvider(row["auth_provider"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to database dict.

    Email serializes to its normalized string; the enum to its value.
    """
    return user.model_dump(mode="python") | {"auth_provider": user.auth_provider.value}


def row_to_user_identity(row: Dict[str, Any]) -> UserIdentity:
    """Convert database row to UserIdentity domain model."""
    return UserIdentity(
        id=UserIdentityId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        provider=AuthProvider(row["provider"]),
        provider_user_id=row["provider_user_id"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        last_login_at=row.get("last_login_at"),
    )


def user_identity_to_dict(identity: UserIdentity) -> Dict[str, Any]:
    """Convert UserIdentity domain model to database dict."""
    return identity.model_dump() | {"provider": identity.provider.value}


def row_to_pending_otp(row: Dict[str, Any]) -> PendingOtp:
    """Convert database row to PendingOtp domain model."""
    return PendingOtp(
        id=OtpId(_uuid(row["id"])),
        email=Email(row["email"]),
        code_hash=row["code_hash"],
        expires_at=row["expires_at"],
        attempts_remaining=row["attempts_remaining"],
        created_at=row["created_at"],
    )


def pending_otp_to_dict(otp: PendingOtp) -> Dict[str, Any]:
    """Convert PendingOtp domain model to database dict."""
    return otp.model_dump()
