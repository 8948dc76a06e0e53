"""Mail infrastructure providers."""

from dishka import Scope, provide

from portal.adapter.mail import LoggingMailer, SmtpMailer
from portal.config import MailSettings, OtpSettings, Settings
from portal.domain.service import Mailer
from portal.util.di.base import ProviderBase
from portal.util.error import DependencyInjectionError


class MailProvider(ProviderBase):
    """Mail component base."""

    __mock_component__ = "mail"


class ProdMailProvider(MailProvider):
    """Production mailer: SMTP when enabled, otherwise codes go to the log."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_mailer(
        self,
        settings: Settings,
        mail_settings: MailSettings,
        otp_settings: OtpSettings,
    ) -> Mailer:
        """Provide OTP mailer.

        Raises:
            DependencyInjectionError: If mail is disabled in production
        """
        if mail_settings.enabled:
            return SmtpMailer(mail_settings=mail_settings, otp_settings=otp_settings)
        if settings.is_production:
            raise DependencyInjectionError("MAIL__ENABLED must be true in production")
        # Codes stay out of logs shipped to Logfire
        return LoggingMailer(include_code=not settings.observability.sends_to_logfire)
