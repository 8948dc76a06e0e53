"""OAuth 2.0 authorization code flow with PKCE, shared by all providers.

Subclasses supply the endpoints, scopes and the mapping from the provider's
user document to ``OAuthProviderInfo``.
"""

import hashlib
import secrets
from base64 import urlsafe_b64encode
from datetime import datetime, timedelta
from typing import Any, ClassVar
from urllib.parse import urlencode

import httpx
import logfire

from portal.adapter.error import OAuthProviderError
from portal.domain.service.auth_service import OAuthClient
from portal.domain.value import AuthProvider, OAuthProviderInfo
from portal.util.clock import Clock, utcnow


class BaseOAuth2Client(OAuthClient):
    """Provider-agnostic OAuth 2.0 client.

    PKCE verifiers are kept in memory per ``state``; a state can be
    completed once and only within ``pending_ttl``. Abandoned states are
    evicted on the next initiation, and at most ``max_pending`` are kept.
    Multi-instance deployments need sticky sessions or a shared store for
    this map.
    """

    provider: ClassVar[AuthProvider]
    scopes: ClassVar[tuple[str, ...]] = ()
    pending_ttl: ClassVar[timedelta] = timedelta(minutes=10)
    max_pending: ClassVar[int] = 10_000

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        timeout: float = 30.0,
    ) -> None:
        """Initialize OAuth client.

        Args:
            client_id: OAuth client ID
            client_secret: OAuth client secret
            redirect_uri: Callback URL registered with the provider
            timeout: HTTP timeout in seconds
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout = timeout
        self.clock: Clock = utcnow
        # state -> (verifier, issued at), oldest first
        self._pkce_verifiers: dict[str, tuple[str, datetime]] = {}

    @property
    def authorize_url(self) -> str:
        raise NotImplementedError

    @property
    def token_url(self) -> str:
        raise NotImplementedError

    def _generate_pkce_pair(self) -> tuple[str, str]:
        """Generate PKCE code verifier and S256 challenge.

        Returns:
            Tuple of (verifier, challenge)
        """
        code_verifier = urlsafe_b64encode(secrets.token_bytes(32)).decode("utf-8")
        code_verifier = code_verifier.rstrip("=")

        challenge_bytes = hashlib.sha256(code_verifier.encode("utf-8")).digest()
        code_challenge = urlsafe_b64encode(challenge_bytes).decode("utf-8")
        code_challenge = code_challenge.rstrip("=")

        return code_verifier, code_challenge

    def _evict_pending(self, now: datetime) -> None:
        """Drop expired states, then the oldest ones beyond ``max_pending``."""
        cutoff = now - self.pending_ttl
        expired = [s for s, (_, issued_at) in self._pkce_verifiers.items() if issued_at < cutoff]
        for state in expired:
            del self._pkce_verifiers[state]

        while len(self._pkce_verifiers) >= self.max_pending:
            del self._pkce_verifiers[next(iter(self._pkce_verifiers))]

    def _extra_authorize_params(self) -> dict[str, str]:
        return {}

    async def initiate_authorization(self, state: str) -> str:
        code_verifier, code_challenge = self._generate_pkce_pair()
        now = self.clock()
        self._evict_pending(now)
        self._pkce_verifiers[state] = (code_verifier, now)

        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": " ".join(self.scopes),
            "state": state,
            "code_challenge": code_challenge,
            "code_challenge_method": "S256",
            **self._extra_authorize_params(),
        }

        logfire.info(
            "OAuth authorization initiated",
            provider=self.provider.value,
            redirect_uri=self.redirect_uri,
        )
        return f"{self.authorize_url}?{urlencode(params)}"

    async def complete_authorization(self, code: str, state: str) -> OAuthProviderInfo:
        pending = self._pkce_verifiers.pop(state, None)
        if pending is None:
            raise OAuthProviderError(
                self.provider.value, "Invalid state or PKCE verifier not found"
            )
        code_verifier, issued_at = pending
        if self.clock() - issued_at > self.pending_ttl:
            raise OAuthProviderError(self.provider.value, "Authorization state expired")

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            access_token = await self._exchange_code_for_token(client, code, code_verifier)
            info = await self._fetch_profile(client, access_token)

        logfire.info(
            "OAuth completed",
            provider=self.provider.value,
            provider_user_id=info.provider_user_id,
            has_email=bool(info.email),
        )
        return info

    async def _exchange_code_for_token(
        self, client: httpx.AsyncClient, code: str, code_verifier: str
    ) -> str:
        """Exchange the authorization code for an access token.

        Raises:
            OAuthProviderError: If the exchange fails
        """
        data = {
            "code": code,
            "grant_type": "authorization_code",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "redirect_uri": self.redirect_uri,
            "code_verifier": code_verifier,
        }
        result = await self._request_json(
            client,
            "POST",
            self.token_url,
            data=data,
            headers={"Accept": "application/json"},
        )
        access_token = result.get("access_token") if isinstance(result, dict) else None
        if not access_token:
            raise OAuthProviderError(self.provider.value, "Token response has no access_token")
        return access_token

    async def _get_json(
        self, client: httpx.AsyncClient, url: str, access_token: str
    ) -> Any:
        return await self._request_json(
            client,
            "GET",
            url,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
        )

    async def _request_json(
        self,
        client: httpx.AsyncClient,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> Any:
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logfire.error(
                "OAuth provider HTTP error",
                provider=self.provider.value,
                url=url,
                error=str(e),
            )
            raise OAuthProviderError(self.provider.value, f"HTTP error: {e}") from e

        if response.status_code != 200:
            logfire.error(
                "OAuth provider request failed",
                provider=self.provider.value,
                url=url,
                status_code=response.status_code,
                error=response.text,
            )
            raise OAuthProviderError(
                self.provider.value, f"Request failed: {response.status_code}"
            )
        return response.json()

    async def _fetch_profile(
        self, client: httpx.AsyncClient, access_token: str
    ) -> OAuthProviderInfo:
        raise NotImplementedError
