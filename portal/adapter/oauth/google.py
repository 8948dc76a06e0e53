"""Google OAuth client (OpenID Connect userinfo)."""

import httpx

from portal.adapter.error import OAuthProviderError
from portal.domain.value import AuthProvider, OAuthProviderInfo

from .base import BaseOAuth2Client


class GoogleOAuthClient(BaseOAuth2Client):
    """Google OAuth 2.0 web client."""

    provider = AuthProvider.GOOGLE
    scopes = ("openid", "email", "profile")

    authorize_url = "https://accounts.google.com/o/oauth2/v2/auth"
    token_url = "https://oauth2.googleapis.com/token"
    userinfo_url = "https://openidconnect.googleapis.com/v1/userinfo"

    def _extra_authorize_params(self) -> dict[str, str]:
        return {"prompt": "select_account"}

    async def _fetch_profile(
        self, client: httpx.AsyncClient, access_token: str
    ) -> OAuthProviderInfo:
        info = await self._get_json(client, self.userinfo_url, access_token)
        if "sub" not in info:
            raise OAuthProviderError(self.provider.value, "Userinfo has no subject")

        email = info.get("email") if info.get("email_verified") else None

        return OAuthProviderInfo(
            provider=self.provider,
            provider_user_id=str(info["sub"]),
            email=email,
            display_name=info.get("name"),
            avatar_url=info.get("picture"),
        )
