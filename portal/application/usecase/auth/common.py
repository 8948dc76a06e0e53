"""Shared request parsing and responses for authentication use cases."""

from datetime import datetime

from pydantic import BaseModel, ValidationError

from portal.domain.error import InvalidEmailError
from portal.domain.model import Session, User
from portal.domain.value import AuthProvider, Email


class AuthSessionResponse(BaseModel):
    """Session issued by a successful OTP or OAuth login."""

    token: str
    expires_at: datetime
    user_id: str
    email: str
    display_name: str | None
    avatar_url: str | None
    auth_provider: AuthProvider
    is_new_user: bool


def parse_email(raw: str) -> Email:
    """Normalize and validate an email address.

    Raises:
        InvalidEmailError: If the address is malformed
    """
    try:
        return Email(raw)
    except ValidationError as e:
        raise InvalidEmailError(raw) from e


def session_response(session: Session, user: User, is_new_user: bool) -> AuthSessionResponse:
    return AuthSessionResponse(
        token=session.token,
        expires_at=session.expires_at,
        user_id=str(user.id),
        email=user.email.root,
        display_name=user.display_name,
        avatar_url=user.avatar_url,
        auth_provider=user.auth_provider,
        is_new_user=is_new_user,
    )
