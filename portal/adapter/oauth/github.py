"""GitHub OAuth client."""

import httpx

from portal.adapter.error import OAuthProviderError
from portal.domain.value import AuthProvider, OAuthProviderInfo

from .base import BaseOAuth2Client


class GithubOAuthClient(BaseOAuth2Client):
    """GitHub OAuth app client.

    The ``/user`` email is only set when the user made it public, so the
    primary verified address is read from ``/user/emails``.
    """

    provider = AuthProvider.GITHUB
    scopes = ("read:user", "user:email")

    authorize_url = "https://github.com/login/oauth/authorize"
    token_url = "https://github.com/login/oauth/access_token"
    api_url = "https://api.github.com"

    async def _fetch_profile(
        self, client: httpx.AsyncClient, access_token: str
    ) -> OAuthProviderInfo:
        user = await self._get_json(client, f"{self.api_url}/user", access_token)
        if "id" not in user:
            raise OAuthProviderError(self.provider.value, "User response has no id")

        emails = await self._get_json(client, f"{self.api_url}/user/emails", access_token)

        return OAuthProviderInfo(
            provider=self.provider,
            provider_user_id=str(user["id"]),
            email=_primary_verified_email(emails) or None,
            display_name=user.get("name") or user.get("login"),
            avatar_url=user.get("avatar_url"),
        )


def _primary_verified_email(emails: list[dict]) -> str | None:
    verified = [e for e in emails if e.get("verified")]
    for entry in verified:
        if entry.get("primary"):
            return entry.get("email")
    return verified[0].get("email") if verified else None
