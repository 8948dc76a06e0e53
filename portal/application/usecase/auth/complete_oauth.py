"""Complete OAuth use case."""

import logfire
from pydantic import BaseModel

from portal.application.usecase.base import BaseUseCase
from portal.domain.error import MissingProviderEmailError, ProviderConflictError
from portal.domain.service import IdentityResolver, SessionIssuer
from portal.domain.value import AuthProvider, OAuthProviderInfo

from .common import AuthSessionResponse, parse_email, session_response


class CompleteOAuthRequest(BaseModel):
    """Verified identity yielded by a provider callback."""

    email: str | None
    provider: AuthProvider
    provider_user_id: str
    display_name: str | None = None
    avatar_url: str | None = None

    @classmethod
    def from_provider_info(cls, info: OAuthProviderInfo) -> "CompleteOAuthRequest":
        return cls(
            email=info.email,
            provider=info.provider,
            provider_user_id=info.provider_user_id,
            display_name=info.display_name,
            avatar_url=info.avatar_url,
        )


class CompleteOAuthUseCase(BaseUseCase[CompleteOAuthRequest, AuthSessionResponse]):
    """Resolve a verified OAuth identity to an account and issue a session.

    The provider integration has already verified the callback; this use
    case only decides which account the identity belongs to.
    """

    def __init__(
        self,
        identity_resolver: IdentityResolver,
        session_issuer: SessionIssuer,
    ) -> None:
        """Initialize complete OAuth use case.

        Args:
            identity_resolver: Identity resolution domain service
            session_issuer: Session domain service
        """
        self.identity_resolver = identity_resolver
        self.session_issuer = session_issuer

    async def execute(self, request: CompleteOAuthRequest) -> AuthSessionResponse:
        """Execute the OAuth completion flow.

        Raises:
            MissingProviderEmailError: If the provider shared no email
            InvalidEmailError: If the provider email is malformed
            ProviderConflictError: If the email belongs to an account owned
                through another provider. Detail is logged here; callers must
                only show ``public_message``.
            SessionIssuanceError: If the session cannot be signed
        """
        if not request.email or not request.email.strip():
            logfire.warn(
                "OAuth profile has no email",
                provider=request.provider.value,
                provider_user_id=request.provider_user_id,
            )
            raise MissingProviderEmailError(request.provider.value)

        email = parse_email(request.email)

        with logfire.span(
            "complete_oauth",
            provider=request.provider.value,
            email=email.root,
        ):
            try:
                user, created = await self.identity_resolver.resolve_or_link(
                    email,
                    request.provider,
                    request.provider_user_id,
                    request.display_name,
                    request.avatar_url,
                )
            except ProviderConflictError as e:
                logfire.warn(
                    "OAuth login rejected",
                    provider=request.provider.value,
                    email=email.root,
                    registered_with=e.registered_with,
                )
                raise

            session = self.session_issuer.issue(user.id)

            logfire.info(
                "OAuth login completed",
                user_id=str(user.id),
                provider=request.provider.value,
                is_new_user=created,
            )
            return session_response(session, user, created)
