"""SMTP mailer backed by fastapi-mail."""

import logfire
from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType
from fastapi_mail.errors import ConnectionErrors

from portal.config import MailSettings, OtpSettings
from portal.domain.service.mailer import MailDeliveryError, Mailer
from portal.domain.value import Email


def render_otp_body(code: str, ttl_minutes: int) -> str:
    return (
        f"Your sign-in code is {code}.\n\n"
        f"It expires in {ttl_minutes} minutes and can be used once. "
        "If you did not request it, you can ignore this email."
    )


class SmtpMailer(Mailer):
    """Sends OTP emails over SMTP."""

    def __init__(self, mail_settings: MailSettings, otp_settings: OtpSettings) -> None:
        self.mail_settings = mail_settings
        self.otp_settings = otp_settings
        self.fast_mail = FastMail(
            ConnectionConfig(
                MAIL_USERNAME=mail_settings.username,
                MAIL_PASSWORD=mail_settings.password,
                MAIL_FROM=mail_settings.from_address,
                MAIL_FROM_NAME=mail_settings.from_name,
                MAIL_PORT=mail_settings.port,
                MAIL_SERVER=mail_settings.server,
                MAIL_STARTTLS=mail_settings.starttls,
                MAIL_SSL_TLS=mail_settings.ssl_tls,
                USE_CREDENTIALS=mail_settings.use_credentials,
                VALIDATE_CERTS=mail_settings.validate_certs,
            )
        )

    async def send(self, email: Email, code: str) -> None:
        message = MessageSchema(
            subject=self.mail_settings.subject,
            recipients=[email.root],
            body=render_otp_body(code, self.otp_settings.ttl_minutes),
            subtype=MessageType.plain,
        )
        try:
            await self.fast_mail.send_message(message)
        except ConnectionErrors as e:
            logfire.error("OTP email delivery failed", email=email.root, error=str(e))
            raise MailDeliveryError(str(e)) from e
        logfire.info("OTP email sent", email=email.root)
