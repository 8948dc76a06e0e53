"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from portal.config import AuthSettings, MailSettings, OAuthSettings, OtpSettings, Settings
from portal.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    scope = Scope.APP

    @provide
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        return settings.auth

    @provide
    def provide_otp_settings(self, settings: Settings) -> OtpSettings:
        return settings.otp

    @provide
    def provide_oauth_settings(self, settings: Settings) -> OAuthSettings:
        return settings.oauth

    @provide
    def provide_mail_settings(self, settings: Settings) -> MailSettings:
        return settings.mail
