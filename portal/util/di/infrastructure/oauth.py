"""OAuth infrastructure providers for multi-provider authentication."""

from dishka import Scope, provide
import logfire

from portal.adapter.oauth import (
    GithubOAuthClient,
    GitlabOAuthClient,
    GoogleOAuthClient,
)
from portal.config import OAuthSettings
from portal.domain.service.auth_service import OAuthClient
from portal.domain.value import AuthProvider
from portal.util.di.base import ProviderBase


class OAuthClientsProvider(ProviderBase):
    """OAuth component base.

    Provides the capability table: a client per enabled provider. A provider
    missing from the dict is disabled and refused by ``AuthService``.
    """

    __mock_component__ = "oauth"


class ProdOAuthClientsProvider(OAuthClientsProvider):
    """Production OAuth clients talking to GitHub, GitLab and Google."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_oauth_clients(
        self, oauth_settings: OAuthSettings
    ) -> dict[AuthProvider, OAuthClient]:
        """Provide dictionary of configured OAuth clients by provider.

        Providers without credentials, or switched off, are left out.
        """
        clients: dict[AuthProvider, OAuthClient] = {}

        github = oauth_settings.github
        if github.is_configured:
            clients[AuthProvider.GITHUB] = GithubOAuthClient(
                client_id=github.client_id,
                client_secret=github.client_secret,
                redirect_uri=github.callback_url,
            )

        gitlab = oauth_settings.gitlab
        if gitlab.is_configured:
            clients[AuthProvider.GITLAB] = GitlabOAuthClient(
                client_id=gitlab.client_id,
                client_secret=gitlab.client_secret,
                redirect_uri=gitlab.callback_url,
                base_url=gitlab.base_url,
            )

        google = oauth_settings.google
        if google.is_configured:
            clients[AuthProvider.GOOGLE] = GoogleOAuthClient(
                client_id=google.client_id,
                client_secret=google.client_secret,
                redirect_uri=google.callback_url,
            )

        logfire.info(
            "OAuth providers configured",
            enabled=[provider.value for provider in clients],
        )
        return clients
