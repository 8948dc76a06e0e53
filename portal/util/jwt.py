"""JWT token utilities."""

from datetime import datetime, timedelta
from uuid import uuid4

import jwt
from pydantic import BaseModel

from portal.config import AuthSettings


class TokenPayload(BaseModel):
    """JWT session payload."""

    sub: str  # User ID
    iat: datetime
    exp: datetime
    jti: str


class JWTError(Exception):
    """JWT-related error."""

    pass


class JWTExpiredError(JWTError):
    """Token signature is valid but the token has expired."""

    pass


class JWTSigningError(JWTError):
    """Token could not be signed with the configured key material."""

    pass


def create_token(user_id: str, issued_at: datetime, settings: AuthSettings) -> tuple[str, datetime]:
    """Create a signed session token.

    Args:
        user_id: User ID (becomes the ``sub`` claim)
        issued_at: Issue time (timezone-aware)
        settings: Authentication settings

    Returns:
        Tuple of (encoded token, expiry)

    Raises:
        JWTSigningError: If the secret or algorithm cannot sign
    """
    expiry = issued_at + timedelta(days=settings.jwt_expiry_days)

    payload = {
        "sub": user_id,
        "iat": issued_at,
        "exp": expiry,
        "jti": uuid4().hex,
    }

    try:
        token = jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    except (jwt.PyJWTError, NotImplementedError, ValueError, TypeError) as e:
        raise JWTSigningError(f"Could not sign token: {e}") from e

    return token, expiry


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Verify and decode a session token.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Token payload if valid

    Raises:
        JWTExpiredError: If the token has expired
        JWTError: If the token is invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp", "iat"]},
        )
        return TokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise JWTExpiredError("Token has expired")
    except (jwt.InvalidTokenError, ValueError):
        raise JWTError("Invalid token")
