"""Authentication routes."""

import logging
import secrets
from urllib.parse import urlencode

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Response, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from portal.adapter.error import OAuthProviderError
from portal.application.usecase.auth import (
    AuthSessionResponse,
    CompleteOAuthRequest,
    CompleteOAuthUseCase,
    ConfirmOtpRequest,
    ConfirmOtpUseCase,
    GetCurrentUserRequest,
    GetCurrentUserResponse,
    GetCurrentUserUseCase,
    RequestOtpRequest,
    RequestOtpUseCase,
)
from portal.config import Settings
from portal.domain.error import (
    AuthError,
    NotFoundError,
    SessionExpiredError,
    SessionInvalidError,
)
from portal.domain.service import AuthService
from portal.domain.value import AuthProvider
from portal.interface.error import (
    PROVIDER_ERROR_CODE,
    UNEXPECTED_ERROR_CODE,
    redirect_error_code,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)


class InitiateLoginRequest(BaseModel):
    """Initiate login request for an OAuth provider."""

    provider: AuthProvider


class InitiateLoginResponse(BaseModel):
    """Initiate login response."""

    authorization_url: str


class SendOtpResponse(BaseModel):
    """Send OTP response; identical for known and unknown emails."""

    success: bool
    message: str


class OtpLoginResponse(BaseModel):
    """User signed in by OTP. The token itself travels only in the cookie."""

    user_id: str
    email: str
    display_name: str | None
    avatar_url: str | None
    is_new_user: bool
    expires_at: str


class LogoutResponse(BaseModel):
    """Logout response."""

    success: bool
    message: str


class AuthStatusResponse(BaseModel):
    """Response for checking authentication status.

    Used by /auth/me to return current user if authenticated,
    or indicate unauthenticated state without raising an error.
    """

    authenticated: bool
    user: GetCurrentUserResponse | None = None


def _new_state() -> str:
    return secrets.token_urlsafe(32)


def _set_auth_cookie(response: Response, token: str, settings: Settings) -> None:
    """Attach the session cookie.

    Production front-ends live on another subdomain, which requires
    ``SameSite=None`` and therefore ``Secure``. Development is same-site over
    plain HTTP.
    """
    is_production = settings.is_production
    response.set_cookie(
        key=settings.auth.cookie_name,
        value=token,
        httponly=True,
        secure=is_production,
        samesite="none" if is_production else "lax",
        domain=settings.auth.cookie_domain if is_production else None,
        path="/",
        max_age=settings.auth.jwt_expiry_days * 24 * 60 * 60,
    )


def _error_redirect(settings: Settings, code: str) -> RedirectResponse:
    query = urlencode({"error": code})
    return RedirectResponse(
        url=f"{settings.api.frontend_url}/auth/error?{query}",
        status_code=status.HTTP_302_FOUND,
    )


@router.post("/send-otp/{email}", response_model=SendOtpResponse)
async def send_otp(
    email: str,
    request_otp_use_case: FromDishka[RequestOtpUseCase],
) -> SendOtpResponse:
    """Send a one-time sign-in code to an email address.

    Example:
        POST /auth/send-otp/alice@example.com

        Response:
        {
            "success": true,
            "message": "Sign-in code sent"
        }
    """
    await request_otp_use_case.execute(RequestOtpRequest(email=email))
    return SendOtpResponse(success=True, message="Sign-in code sent")


@router.post("/validate-otp", response_model=OtpLoginResponse)
async def validate_otp(
    email: str,
    otp: str,
    response: Response,
    confirm_otp_use_case: FromDishka[ConfirmOtpUseCase],
    settings: FromDishka[Settings],
) -> OtpLoginResponse:
    """Check a one-time code and sign the user in.

    Creates the account on first sign-in. On success the session is set in
    the ``auth_token`` cookie.

    Example:
        POST /auth/validate-otp?email=alice@example.com&otp=123456
    """
    result = await confirm_otp_use_case.execute(
        ConfirmOtpRequest(email=email, otp=otp)
    )
    _set_auth_cookie(response, result.token, settings)
    logger.info(f"OTP login successful: user_id={result.user_id}")

    return OtpLoginResponse(
        user_id=result.user_id,
        email=result.email,
        display_name=result.display_name,
        avatar_url=result.avatar_url,
        is_new_user=result.is_new_user,
        expires_at=result.expires_at.isoformat(),
    )


@router.post("/login", response_model=InitiateLoginResponse)
async def initiate_login(
    request: InitiateLoginRequest,
    auth_service: FromDishka[AuthService],
) -> InitiateLoginResponse:
    """Initiate OAuth login and return the provider authorization URL.

    Example:
        POST /auth/login
        {
            "provider": "github"
        }

        Response:
        {
            "authorization_url": "https://github.com/login/oauth/authorize?..."
        }
    """
    logger.info(f"Initiating {request.provider.value} login")
    auth_url = await auth_service.initiate_login(request.provider, _new_state())
    return InitiateLoginResponse(authorization_url=auth_url)


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    response: Response,
    settings: FromDishka[Settings],
) -> LogoutResponse:
    """Logout user by clearing authentication cookie."""
    # Same domain/path as when it was set
    response.delete_cookie(
        key=settings.auth.cookie_name,
        domain=settings.auth.cookie_domain if settings.is_production else None,
        path="/",
    )
    return LogoutResponse(success=True, message="Successfully logged out")


@router.get("/me", response_model=AuthStatusResponse)
async def get_current_user(
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    auth_token: str | None = Cookie(default=None),
) -> AuthStatusResponse:
    """Get current user if authenticated, or return unauthenticated status.

    Safe to call without a session: answers ``authenticated=false`` instead
    of an error so the front-end can probe its state.
    """
    if not auth_token:
        return AuthStatusResponse(authenticated=False)

    try:
        user = await get_current_user_use_case.execute(
            GetCurrentUserRequest(token=auth_token)
        )
        return AuthStatusResponse(authenticated=True, user=user)

    except (SessionInvalidError, SessionExpiredError):
        return AuthStatusResponse(authenticated=False)
    except NotFoundError:
        # Valid token for a user that no longer exists
        return AuthStatusResponse(authenticated=False)


@router.get("/callback/{provider}")
async def oauth_callback(
    provider: AuthProvider,
    auth_service: FromDishka[AuthService],
    complete_oauth_use_case: FromDishka[CompleteOAuthUseCase],
    settings: FromDishka[Settings],
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
):
    """Handle an OAuth provider callback and complete login.

    Every provider goes through the same path. Failures redirect to the
    front-end error page with a short code and never with internal detail.

    Example:
        GET /auth/callback/github?code=abc123&state=xyz789

        Redirects to: {frontend_url}
        Sets cookie: auth_token

        GET /auth/callback/github?error=access_denied&state=xyz789

        Redirects to: {frontend_url}/auth/error?error=provider_error
    """
    logger.info(f"OAuth callback received: provider={provider.value}")

    # Denied consent or a malformed callback carries no authorization code
    if error or not code or not state:
        logger.warning(
            f"OAuth callback without code: provider={provider.value}, error={error}"
        )
        return _error_redirect(settings, PROVIDER_ERROR_CODE)

    try:
        info = await auth_service.complete_login(provider, code, state)
        result: AuthSessionResponse = await complete_oauth_use_case.execute(
            CompleteOAuthRequest.from_provider_info(info)
        )
    except AuthError as e:
        logger.warning(
            f"OAuth login failed: provider={provider.value}, kind={e.kind.value}"
        )
        return _error_redirect(settings, redirect_error_code(e))
    except OAuthProviderError as e:
        logger.error(f"OAuth provider error during callback: {e}")
        return _error_redirect(settings, PROVIDER_ERROR_CODE)
    except Exception:
        logger.exception(f"Unexpected error during {provider.value} callback")
        return _error_redirect(settings, UNEXPECTED_ERROR_CODE)

    logger.info(f"OAuth login successful: user_id={result.user_id}")

    # Cookies must be set on the returned response object
    redirect_response = RedirectResponse(
        url=settings.api.frontend_url,
        status_code=status.HTTP_302_FOUND,
    )
    _set_auth_cookie(redirect_response, result.token, settings)
    return redirect_response


@router.get("/{provider}")
async def redirect_to_provider(
    provider: AuthProvider,
    auth_service: FromDishka[AuthService],
) -> RedirectResponse:
    """Redirect the browser straight to the provider's consent page.

    Responds 400 when the provider is disabled in this environment.
    """
    auth_url = await auth_service.initiate_login(provider, _new_state())
    return RedirectResponse(url=auth_url, status_code=status.HTTP_302_FOUND)
