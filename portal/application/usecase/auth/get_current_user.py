"""Get current user use case."""

from datetime import datetime

from pydantic import BaseModel

from portal.application.usecase.base import BaseUseCase
from portal.domain.error import NotFoundError
from portal.domain.repository import UserRepository
from portal.domain.service import IdentityResolver, SessionIssuer
from portal.domain.value import AuthProvider


class GetCurrentUserRequest(BaseModel):
    """Get current user request."""

    token: str  # Session token from cookie


class LinkedProviderInfo(BaseModel):
    """Provider linked to the account."""

    provider: AuthProvider
    linked_at: datetime
    last_login_at: datetime | None


class GetCurrentUserResponse(BaseModel):
    """Get current user response."""

    user_id: str
    email: str
    display_name: str | None
    avatar_url: str | None
    auth_provider: AuthProvider
    created_at: datetime
    linked_providers: list[LinkedProviderInfo]


class GetCurrentUserUseCase(BaseUseCase[GetCurrentUserRequest, GetCurrentUserResponse]):
    """Use case for getting the authenticated user."""

    def __init__(
        self,
        session_issuer: SessionIssuer,
        user_repository: UserRepository,
        identity_resolver: IdentityResolver,
    ) -> None:
        """Initialize get current user use case.

        Args:
            session_issuer: Session domain service
            user_repository: User repository
            identity_resolver: Identity resolution domain service
        """
        self.session_issuer = session_issuer
        self.user_repository = user_repository
        self.identity_resolver = identity_resolver

    async def execute(self, request: GetCurrentUserRequest) -> GetCurrentUserResponse:
        """Execute get current user flow.

        Raises:
            SessionInvalidError, SessionExpiredError: If the token is not valid
            NotFoundError: If the token's user no longer exists
        """
        user_id = self.session_issuer.verify(request.token)

        user = await self.user_repository.find_by_id(user_id)
        if not user:
            raise NotFoundError("User", str(user_id))

        identities = await self.identity_resolver.get_linked_identities(user.id)

        return GetCurrentUserResponse(
            user_id=str(user.id),
            email=user.email.root,
            display_name=user.display_name,
            avatar_url=user.avatar_url,
            auth_provider=user.auth_provider,
            created_at=user.created_at,
            linked_providers=[
                LinkedProviderInfo(
                    provider=identity.provider,
                    linked_at=identity.created_at,
                    last_login_at=identity.last_login_at,
                )
                for identity in identities
            ],
        )
