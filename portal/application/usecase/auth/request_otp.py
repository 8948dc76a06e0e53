"""Request OTP use case."""

import logfire
from pydantic import BaseModel

from portal.application.usecase.base import BaseUseCase
from portal.domain.error import OtpDeliveryError
from portal.domain.service import MailDeliveryError, Mailer, OtpStore

from .common import parse_email


class RequestOtpRequest(BaseModel):
    """Request a sign-in code for an email address."""

    email: str


class RequestOtpUseCase(BaseUseCase[RequestOtpRequest, None]):
    """Issue an OTP challenge and deliver the code by email.

    Returns nothing about the account: requesting a code looks the same for
    known and unknown addresses.
    """

    def __init__(self, otp_store: OtpStore, mailer: Mailer) -> None:
        """Initialize request OTP use case.

        Args:
            otp_store: OTP domain service
            mailer: Out-of-band code delivery
        """
        self.otp_store = otp_store
        self.mailer = mailer

    async def execute(self, request: RequestOtpRequest) -> None:
        """Execute the OTP request flow.

        Raises:
            InvalidEmailError: If the email is malformed
            OtpDeliveryError: If the mailer failed; the challenge stays valid
        """
        email = parse_email(request.email)

        with logfire.span("request_otp", email=email.root):
            code = await self.otp_store.create(email)

            try:
                await self.mailer.send(email, code)
            except MailDeliveryError as e:
                logfire.error("OTP delivery failed", email=email.root, error=str(e))
                raise OtpDeliveryError(email.root, str(e)) from e
