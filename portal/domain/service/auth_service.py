"""OAuth provider domain service."""

import logfire

from portal.domain.error import ProviderDisabledError
from portal.domain.value import AuthProvider, OAuthProviderInfo

from .base import Service


class OAuthClient:
    """OAuth client interface implemented once per provider."""

    async def initiate_authorization(self, state: str) -> str:
        """Start the provider's authorization flow.

        Args:
            state: State parameter for CSRF protection

        Returns:
            Authorization URL to redirect the browser to
        """
        raise NotImplementedError

    async def complete_authorization(self, code: str, state: str) -> OAuthProviderInfo:
        """Finish the flow after the provider redirected back.

        Args:
            code: Authorization code from the callback
            state: State parameter issued by ``initiate_authorization``

        Returns:
            Verified profile of the authenticated provider account
        """
        raise NotImplementedError


class AuthService(Service):
    """Multi-provider OAuth coordination.

    The registered clients are the capability table: a provider without a
    client is disabled, and every call for it fails with
    ``ProviderDisabledError`` before any provider I/O.
    """

    def __init__(self, oauth_clients: dict[AuthProvider, OAuthClient]) -> None:
        """Initialize auth service.

        Args:
            oauth_clients: Clients of the enabled providers
        """
        self.oauth_clients = oauth_clients

    def is_enabled(self, provider: AuthProvider) -> bool:
        return provider in self.oauth_clients

    def enabled_providers(self) -> list[AuthProvider]:
        return sorted(self.oauth_clients, key=lambda p: p.value)

    def _client_for(self, provider: AuthProvider) -> OAuthClient:
        client = self.oauth_clients.get(provider)
        if client is None:
            logfire.warn("OAuth provider disabled", provider=provider.value)
            raise ProviderDisabledError(provider.value)
        return client

    async def initiate_login(self, provider: AuthProvider, state: str) -> str:
        """Initiate OAuth login for a provider.

        Returns:
            Authorization URL to redirect the user to

        Raises:
            ProviderDisabledError: If the provider is not enabled
        """
        client = self._client_for(provider)
        with logfire.span("auth_service.initiate_login", provider=provider.value):
            return await client.initiate_authorization(state)

    async def complete_login(
        self, provider: AuthProvider, code: str, state: str
    ) -> OAuthProviderInfo:
        """Complete OAuth login for a provider.

        Returns:
            Verified provider profile

        Raises:
            ProviderDisabledError: If the provider is not enabled
        """
        client = self._client_for(provider)
        with logfire.span("auth_service.complete_login", provider=provider.value):
            return await client.complete_authorization(code, state)
