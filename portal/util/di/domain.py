"""Domain layer DI providers."""

from dishka import Scope, provide

from portal.config import AuthSettings, OtpSettings
from portal.domain.repository import (
    OtpRepository,
    UserIdentityRepository,
    UserRepository,
)
from portal.domain.service import (
    AuthService,
    IdentityResolver,
    OAuthClient,
    OtpStore,
    SessionIssuer,
)
from portal.domain.value import AuthProvider
from portal.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_auth_service(
        self, oauth_clients: dict[AuthProvider, OAuthClient]
    ) -> AuthService:
        """Provide multi-provider authentication domain service.

        Args:
            oauth_clients: Clients of the enabled OAuth providers

        Returns:
            AuthService configured with the enabled OAuth clients
        """
        return AuthService(oauth_clients=oauth_clients)

    @provide
    def get_otp_store(
        self, otp_repository: OtpRepository, otp_settings: OtpSettings
    ) -> OtpStore:
        """Provide OTP domain service."""
        return OtpStore(otp_repository=otp_repository, otp_settings=otp_settings)

    @provide
    def get_identity_resolver(
        self,
        user_repository: UserRepository,
        user_identity_repository: UserIdentityRepository,
        auth_settings: AuthSettings,
    ) -> IdentityResolver:
        """Provide identity resolution domain service."""
        return IdentityResolver(
            user_repository=user_repository,
            user_identity_repository=user_identity_repository,
            auth_settings=auth_settings,
        )

    @provide
    def get_session_issuer(self, auth_settings: AuthSettings) -> SessionIssuer:
        """Provide session domain service."""
        return SessionIssuer(auth_settings=auth_settings)
