"""Session issuing domain service."""

from uuid import UUID

import logfire

from portal.config import AuthSettings
from portal.domain.error import (
    SessionExpiredError,
    SessionInvalidError,
    SessionIssuanceError,
)
from portal.domain.model.session import Session
from portal.domain.value import UserId
from portal.util.clock import Clock, utcnow
from portal.util.jwt import (
    JWTError,
    JWTExpiredError,
    JWTSigningError,
    create_token,
    verify_token,
)

from .base import Service


class SessionIssuer(Service):
    """Mints and verifies signed session tokens bound to a user id."""

    def __init__(self, auth_settings: AuthSettings, clock: Clock = utcnow) -> None:
        """Initialize session issuer.

        Args:
            auth_settings: JWT secret, algorithm and expiry
            clock: Time source for ``iat``/``exp``
        """
        self.auth_settings = auth_settings
        self.clock = clock

    def issue(self, user_id: UserId) -> Session:
        """Issue a session for ``user_id``.

        Raises:
            SessionIssuanceError: If the token cannot be signed. Fatal for the
                request; not retried here.
        """
        with logfire.span("session_issuer.issue", user_id=str(user_id)):
            issued_at = self.clock()
            try:
                token, expires_at = create_token(
                    str(user_id), issued_at, self.auth_settings
                )
            except JWTSigningError as e:
                logfire.error("Session issuance failed", user_id=str(user_id), error=str(e))
                raise SessionIssuanceError(str(e)) from e

            logfire.info("Session issued", user_id=str(user_id))
            return Session(
                token=token,
                user_id=user_id,
                issued_at=issued_at,
                expires_at=expires_at,
            )

    def verify(self, token: str) -> UserId:
        """Verify a session token and return the user it is bound to.

        Raises:
            SessionExpiredError: If the token is past its expiry
            SessionInvalidError: If the token is malformed or forged
        """
        with logfire.span("session_issuer.verify"):
            try:
                payload = verify_token(token, self.auth_settings)
            except JWTExpiredError as e:
                logfire.info("Session expired")
                raise SessionExpiredError() from e
            except JWTError as e:
                logfire.warn("Session verification failed", error=str(e))
                raise SessionInvalidError() from e

            try:
                return UserId(UUID(payload.sub))
            except ValueError as e:
                raise SessionInvalidError("Session subject is not a user id") from e

    def get_user_id_from_token(self, token: str | None) -> UserId | None:
        """Extract the user id without raising.

        For routes that authenticate optionally.

        Returns:
            User ID if the token is valid, None if missing, invalid or expired
        """
        if not token:
            return None

        try:
            return self.verify(token)
        except (SessionExpiredError, SessionInvalidError):
            return None
