"""Application layer DI providers."""

from dishka import Scope, provide

from portal.application.usecase.auth import (
    CompleteOAuthUseCase,
    ConfirmOtpUseCase,
    GetCurrentUserUseCase,
    RequestOtpUseCase,
)
from portal.domain.repository import UserRepository
from portal.domain.service import (
    IdentityResolver,
    Mailer,
    OtpStore,
    SessionIssuer,
)
from portal.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    @provide(scope=Scope.REQUEST)
    def get_request_otp_use_case(
        self, otp_store: OtpStore, mailer: Mailer
    ) -> RequestOtpUseCase:
        """Provide request OTP use case."""
        return RequestOtpUseCase(otp_store=otp_store, mailer=mailer)

    @provide(scope=Scope.REQUEST)
    def get_confirm_otp_use_case(
        self,
        otp_store: OtpStore,
        identity_resolver: IdentityResolver,
        session_issuer: SessionIssuer,
    ) -> ConfirmOtpUseCase:
        """Provide confirm OTP use case."""
        return ConfirmOtpUseCase(
            otp_store=otp_store,
            identity_resolver=identity_resolver,
            session_issuer=session_issuer,
        )

    @provide(scope=Scope.REQUEST)
    def get_complete_oauth_use_case(
        self,
        identity_resolver: IdentityResolver,
        session_issuer: SessionIssuer,
    ) -> CompleteOAuthUseCase:
        """Provide complete OAuth use case."""
        return CompleteOAuthUseCase(
            identity_resolver=identity_resolver,
            session_issuer=session_issuer,
        )

    @provide(scope=Scope.REQUEST)
    def get_current_user_use_case(
        self,
        session_issuer: SessionIssuer,
        user_repository: UserRepository,
        identity_resolver: IdentityResolver,
    ) -> GetCurrentUserUseCase:
        """Provide get current user use case."""
        return GetCurrentUserUseCase(
            session_issuer=session_issuer,
            user_repository=user_repository,
            identity_resolver=identity_resolver,
        )
