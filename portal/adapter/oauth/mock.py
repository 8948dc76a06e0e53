"""Mock OAuth client for tests and local development."""

from portal.domain.service.auth_service import OAuthClient
from portal.domain.value import AuthProvider, OAuthProviderInfo


class MockOAuthClient(OAuthClient):
    """Returns a configurable profile without network calls.

    ``profile`` can be reassigned by tests to simulate a different account
    (or a missing email) on the next callback.
    """

    def __init__(self, provider: AuthProvider, profile: OAuthProviderInfo | None = None):
        self.provider = provider
        self.profile = profile or OAuthProviderInfo(
            provider=provider,
            provider_user_id=f"mock-{provider.value}-123",
            email=f"mock@{provider.value}.example.com",
            display_name=f"Mock {provider.value.title()} User",
            avatar_url=f"https://{provider.value}.example.com/avatar.png",
        )
        self.completed_codes: list[str] = []

    async def initiate_authorization(self, state: str) -> str:
        return f"https://{self.provider.value}.example.com/oauth/authorize?state={state}&mock=true"

    async def complete_authorization(self, code: str, state: str) -> OAuthProviderInfo:
        self.completed_codes.append(code)
        return self.profile
