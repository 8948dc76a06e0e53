"""End-to-end tests for the authentication API."""

from urllib.parse import parse_qs, urlparse

import pytest

from portal.domain.service import Mailer
from portal.domain.service.auth_service import OAuthClient
from portal.domain.value import AuthProvider, OAuthProviderInfo
from tests.harness import create_test_client, resolve

FRONTEND_URL = "http://localhost:3000"


@pytest.fixture
def client():
    """Test client over a fully mocked container."""
    with create_test_client() as test_client:
        yield test_client


def oauth_clients(client) -> dict[AuthProvider, OAuthClient]:
    return resolve(client, dict[AuthProvider, OAuthClient])


def login_with_otp(client, email: str):
    assert client.post(f"/auth/send-otp/{email}").status_code == 200
    code = resolve(client, Mailer).last_code_for(email.lower())
    return client.post("/auth/validate-otp", params={"email": email, "otp": code})


class TestHealth:
    def test_health_lists_enabled_providers(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["providers"] == ["github", "gitlab", "google"]


class TestOtpFlow:
    """End-to-end tests for email OTP sign-in."""

    def test_send_and_validate_sets_cookie(self, client):
        """A correct code should sign the user in and set the session cookie."""
        # Act
        response = login_with_otp(client, "alice@example.com")

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "alice@example.com"
        assert data["is_new_user"] is True
        assert "token" not in data
        assert "auth_token" in response.cookies
        assert "httponly" in response.headers["set-cookie"].lower()

        me = client.get("/auth/me")
        assert me.status_code == 200
        assert me.json()["authenticated"] is True
        assert me.json()["user"]["email"] == "alice@example.com"

    def test_send_otp_invalid_email(self, client):
        response = client.post("/auth/send-otp/not-an-email")

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_input"

    def test_send_otp_delivery_failure(self, client):
        """Delivery faults answer 502 without exposing mailer detail."""
        resolve(client, Mailer).fail_with = "SMTP 421 at mail.internal:587"

        response = client.post("/auth/send-otp/bob@example.com")

        assert response.status_code == 502
        assert response.json()["error"] == "otp_delivery_failure"
        assert "mail.internal" not in response.text

    def test_wrong_code(self, client):
        """A wrong code answers 401 and reports remaining attempts."""
        client.post("/auth/send-otp/carol@example.com")
        code = resolve(client, Mailer).last_code_for("carol@example.com")
        wrong = "000000" if code != "000000" else "999999"

        response = client.post(
            "/auth/validate-otp", params={"email": "carol@example.com", "otp": wrong}
        )

        assert response.status_code == 401
        assert response.json()["error"] == "otp_mismatch"
        assert "4 attempt(s) remaining" in response.json()["detail"]
        assert "auth_token" not in response.cookies

    def test_validate_without_request(self, client):
        response = client.post(
            "/auth/validate-otp", params={"email": "dave@example.com", "otp": "123456"}
        )

        assert response.status_code == 404
        assert response.json()["error"] == "otp_not_found"

    def test_code_is_single_use(self, client):
        client.post("/auth/send-otp/erin@example.com")
        code = resolve(client, Mailer).last_code_for("erin@example.com")
        params = {"email": "erin@example.com", "otp": code}

        assert client.post("/auth/validate-otp", params=params).status_code == 200
        assert client.post("/auth/validate-otp", params=params).status_code == 404

    def test_logout_clears_session(self, client):
        login_with_otp(client, "frank@example.com")

        response = client.post("/auth/logout")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert client.get("/auth/me").json()["authenticated"] is False


class TestCurrentUser:
    def test_anonymous(self, client):
        response = client.get("/auth/me")

        assert response.status_code == 200
        assert response.json() == {"authenticated": False, "user": None}

    def test_garbage_cookie(self, client):
        client.cookies.set("auth_token", "garbage")

        response = client.get("/auth/me")

        assert response.json()["authenticated"] is False


class TestOAuthFlow:
    """End-to-end tests for OAuth sign-in via the mock providers."""

    def test_login_returns_authorization_url(self, client):
        response = client.post("/auth/login", json={"provider": "github"})

        assert response.status_code == 200
        url = response.json()["authorization_url"]
        assert "mock=true" in url
        assert parse_qs(urlparse(url).query)["state"][0]

    def test_provider_redirect(self, client):
        response = client.get("/auth/gitlab", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"].startswith("https://gitlab.example.com/")

    @pytest.mark.parametrize("provider", ["github", "gitlab", "google"])
    def test_callback_signs_in(self, client, provider):
        """Every provider's callback should redirect to the front-end with a cookie."""
        # Act
        response = client.get(
            f"/auth/callback/{provider}",
            params={"code": "code-1", "state": "state-1"},
            follow_redirects=False,
        )

        # Assert
        assert response.status_code == 302
        assert response.headers["location"] == FRONTEND_URL
        assert "auth_token" in response.cookies

        me = client.get("/auth/me").json()
        assert me["authenticated"] is True
        assert me["user"]["email"] == f"mock@{provider}.example.com"
        assert [p["provider"] for p in me["user"]["linked_providers"]] == [provider]

    def test_conflict_redirect_hides_owning_provider(self, client):
        """A second provider for a known email fails without naming the owner."""
        # Arrange
        client.get(
            "/auth/callback/github",
            params={"code": "c", "state": "s"},
            follow_redirects=False,
        )
        client.cookies.clear()
        clients = oauth_clients(client)
        clients[AuthProvider.GITLAB].profile = OAuthProviderInfo(
            provider=AuthProvider.GITLAB,
            provider_user_id="gl-1",
            email="mock@github.example.com",
        )

        # Act
        response = client.get(
            "/auth/callback/gitlab",
            params={"code": "c", "state": "s"},
            follow_redirects=False,
        )

        # Assert
        assert response.status_code == 302
        location = response.headers["location"]
        assert location.startswith(f"{FRONTEND_URL}/auth/error?")
        assert parse_qs(urlparse(location).query) == {"error": ["authentication_failed"]}
        assert "provider_conflict" not in location
        assert "github" not in location
        assert "auth_token" not in response.cookies

    def test_otp_account_adopts_oauth_login(self, client):
        """Signing in with OTP then GitHub for the same email yields one account."""
        otp_user = login_with_otp(client, "mock@github.example.com").json()

        client.get(
            "/auth/callback/github",
            params={"code": "c", "state": "s"},
            follow_redirects=False,
        )

        me = client.get("/auth/me").json()
        assert me["user"]["user_id"] == otp_user["user_id"]

    def test_missing_email_redirect(self, client):
        oauth_clients(client)[AuthProvider.GOOGLE].profile = OAuthProviderInfo(
            provider=AuthProvider.GOOGLE, provider_user_id="g-1", email=None
        )

        response = client.get(
            "/auth/callback/google",
            params={"code": "c", "state": "s"},
            follow_redirects=False,
        )

        assert response.status_code == 302
        assert "error=missing_provider_email" in response.headers["location"]

    def test_denied_consent_redirects_to_error_page(self, client):
        """The provider reports access_denied and sends no code."""
        response = client.get(
            "/auth/callback/github",
            params={"error": "access_denied", "state": "s"},
            follow_redirects=False,
        )

        assert response.status_code == 302
        location = response.headers["location"]
        assert location.startswith(f"{FRONTEND_URL}/auth/error?")
        assert parse_qs(urlparse(location).query) == {"error": ["provider_error"]}
        assert "auth_token" not in response.cookies

    def test_callback_without_state_redirects_to_error_page(self, client):
        response = client.get(
            "/auth/callback/gitlab",
            params={"code": "c"},
            follow_redirects=False,
        )

        assert response.status_code == 302
        assert "error=provider_error" in response.headers["location"]


class TestDisabledProvider:
    """End-to-end tests for a provider switched off by configuration."""

    @pytest.fixture
    def client(self, monkeypatch):
        monkeypatch.setenv("OAUTH__GOOGLE__ENABLED", "false")
        with create_test_client() as test_client:
            yield test_client

    def test_login_is_refused(self, client):
        response = client.post("/auth/login", json={"provider": "google"})

        assert response.status_code == 400
        assert response.json()["error"] == "provider_disabled"

    def test_redirect_is_refused(self, client):
        response = client.get("/auth/google", follow_redirects=False)

        assert response.status_code == 400

    def test_callback_redirects_with_error(self, client):
        response = client.get(
            "/auth/callback/google",
            params={"code": "c", "state": "s"},
            follow_redirects=False,
        )

        assert response.status_code == 302
        assert "error=provider_disabled" in response.headers["location"]

    def test_other_providers_still_work(self, client):
        assert client.post("/auth/login", json={"provider": "github"}).status_code == 200
        assert client.get("/health").json()["providers"] == ["github", "gitlab"]
