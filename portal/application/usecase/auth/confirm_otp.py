"""Confirm OTP use case."""

import logfire
from pydantic import BaseModel

from portal.application.usecase.base import BaseUseCase
from portal.domain.service import IdentityResolver, OtpStore, SessionIssuer

from .common import AuthSessionResponse, parse_email, session_response


class ConfirmOtpRequest(BaseModel):
    """Code entered by the user for an email address."""

    email: str
    otp: str


class ConfirmOtpUseCase(BaseUseCase[ConfirmOtpRequest, AuthSessionResponse]):
    """Validate an OTP and sign the user in, creating the account if needed."""

    def __init__(
        self,
        otp_store: OtpStore,
        identity_resolver: IdentityResolver,
        session_issuer: SessionIssuer,
    ) -> None:
        """Initialize confirm OTP use case.

        Args:
            otp_store: OTP domain service
            identity_resolver: Identity resolution domain service
            session_issuer: Session domain service
        """
        self.otp_store = otp_store
        self.identity_resolver = identity_resolver
        self.session_issuer = session_issuer

    async def execute(self, request: ConfirmOtpRequest) -> AuthSessionResponse:
        """Execute the OTP confirmation flow.

        Steps:
        1. Consume the pending challenge (exactly once)
        2. Resolve or create the account for the email
        3. Issue a session

        Raises:
            InvalidEmailError: If the email is malformed
            OtpNotFoundError, OtpExpiredError, OtpMismatchError,
            OtpAttemptsExhaustedError: Propagated from the OTP store; no
                session is created
            SessionIssuanceError: If the session cannot be signed
        """
        email = parse_email(request.email)

        with logfire.span("confirm_otp", email=email.root):
            await self.otp_store.consume(email, request.otp)

            user, created = await self.identity_resolver.resolve_by_email(email)
            session = self.session_issuer.issue(user.id)

            logfire.info(
                "OTP login completed",
                user_id=str(user.id),
                is_new_user=created,
            )
            return session_response(session, user, created)
