"""Unit tests for AuthService."""

import pytest

from portal.adapter.oauth import MockOAuthClient
from portal.domain.error import ProviderDisabledError
from portal.domain.service import AuthService
from portal.domain.value import AuthProvider


@pytest.fixture
def github_client() -> MockOAuthClient:
    return MockOAuthClient(AuthProvider.GITHUB)


@pytest.fixture
def auth_service(github_client) -> AuthService:
    return AuthService(oauth_clients={AuthProvider.GITHUB: github_client})


class TestCapabilities:
    """Tests for the enabled provider table."""

    def test_enabled_providers(self, auth_service):
        assert auth_service.enabled_providers() == [AuthProvider.GITHUB]
        assert auth_service.is_enabled(AuthProvider.GITHUB)
        assert not auth_service.is_enabled(AuthProvider.GOOGLE)


class TestInitiateLogin:
    """Tests for AuthService.initiate_login()."""

    @pytest.mark.asyncio
    async def test_enabled_provider_returns_authorization_url(self, auth_service):
        url = await auth_service.initiate_login(AuthProvider.GITHUB, "state-1")

        assert url.startswith("https://github.example.com/")
        assert "state=state-1" in url

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "provider", [AuthProvider.GITLAB, AuthProvider.GOOGLE, AuthProvider.EMAIL_OTP]
    )
    async def test_disabled_provider_is_refused(self, auth_service, provider):
        """Should raise ProviderDisabledError for providers without a client."""
        with pytest.raises(ProviderDisabledError) as exc_info:
            await auth_service.initiate_login(provider, "state-1")

        assert provider.value in str(exc_info.value)


class TestCompleteLogin:
    """Tests for AuthService.complete_login()."""

    @pytest.mark.asyncio
    async def test_returns_provider_profile(self, auth_service, github_client):
        info = await auth_service.complete_login(AuthProvider.GITHUB, "code-1", "state-1")

        assert info.provider == AuthProvider.GITHUB
        assert info.provider_user_id == "mock-github-123"
        assert github_client.completed_codes == ["code-1"]

    @pytest.mark.asyncio
    async def test_disabled_provider_makes_no_client_call(self, github_client):
        """A disabled provider must fail before any provider I/O."""
        gitlab_client = MockOAuthClient(AuthProvider.GITLAB)
        service = AuthService(oauth_clients={AuthProvider.GITHUB: github_client})

        with pytest.raises(ProviderDisabledError):
            await service.complete_login(AuthProvider.GITLAB, "code-1", "state-1")

        assert gitlab_client.completed_codes == []
        assert github_client.completed_codes == []
