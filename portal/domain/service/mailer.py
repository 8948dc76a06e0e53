"""Mailer port for out-of-band OTP delivery."""

from portal.domain.value import Email


class MailDeliveryError(Exception):
    """A sign-in code could not be handed to the mail transport."""

    pass


class Mailer:
    """Delivers sign-in codes.

    Implementations raise ``MailDeliveryError`` on failure; callers do not
    retry.
    """

    async def send(self, email: Email, code: str) -> None:
        raise NotImplementedError
