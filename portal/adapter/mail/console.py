"""Mailers that do not send email: logging (development) and mock (tests)."""

from dataclasses import dataclass

import logfire

from portal.domain.service.mailer import MailDeliveryError, Mailer
from portal.domain.value import Email


class LoggingMailer(Mailer):
    """Writes codes to the log when outbound mail is disabled.

    With ``include_code`` off only the fact of issuance is logged, for
    setups whose logs leave the host.
    """

    def __init__(self, include_code: bool = True) -> None:
        self.include_code = include_code

    async def send(self, email: Email, code: str) -> None:
        if self.include_code:
            logfire.warn("Mail disabled; OTP not emailed", email=email.root, code=code)
        else:
            logfire.warn("Mail disabled; OTP not emailed", email=email.root)


@dataclass
class SentMessage:
    email: str
    code: str


class MockMailer(Mailer):
    """Records codes instead of sending them.

    Set ``fail_with`` to make the next sends raise ``MailDeliveryError``.
    """

    def __init__(self) -> None:
        self.sent: list[SentMessage] = []
        self.fail_with: str | None = None

    async def send(self, email: Email, code: str) -> None:
        if self.fail_with:
            raise MailDeliveryError(self.fail_with)
        self.sent.append(SentMessage(email=email.root, code=code))

    def last_code_for(self, email: str) -> str | None:
        for message in reversed(self.sent):
            if message.email == email:
                return message.code
        return None
