"""GitLab OAuth client (gitlab.com or self-hosted)."""

import httpx

from portal.adapter.error import OAuthProviderError
from portal.domain.value import AuthProvider, OAuthProviderInfo

from .base import BaseOAuth2Client


class GitlabOAuthClient(BaseOAuth2Client):
    """GitLab OAuth application client."""

    provider = AuthProvider.GITLAB
    scopes = ("read_user",)

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        base_url: str = "https://gitlab.com",
        timeout: float = 30.0,
    ) -> None:
        super().__init__(client_id, client_secret, redirect_uri, timeout)
        self.base_url = base_url.rstrip("/")

    @property
    def authorize_url(self) -> str:
        return f"{self.base_url}/oauth/authorize"

    @property
    def token_url(self) -> str:
        return f"{self.base_url}/oauth/token"

    async def _fetch_profile(
        self, client: httpx.AsyncClient, access_token: str
    ) -> OAuthProviderInfo:
        user = await self._get_json(client, f"{self.base_url}/api/v4/user", access_token)
        if "id" not in user:
            raise OAuthProviderError(self.provider.value, "User response has no id")

        # Unconfirmed addresses are not an attestation of ownership
        email = user.get("email") if user.get("confirmed_at") else None

        return OAuthProviderInfo(
            provider=self.provider,
            provider_user_id=str(user["id"]),
            email=email,
            display_name=user.get("name") or user.get("username"),
            avatar_url=user.get("avatar_url"),
        )
