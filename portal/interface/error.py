"""Mapping of authentication failures onto HTTP responses."""

from fastapi import status

from portal.domain.error import AuthError, AuthErrorKind

# Single source of truth for HTTP statuses of auth failures
STATUS_BY_KIND: dict[AuthErrorKind, int] = {
    AuthErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    AuthErrorKind.OTP_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    AuthErrorKind.OTP_EXPIRED: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.OTP_MISMATCH: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.OTP_ATTEMPTS_EXHAUSTED: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.OTP_DELIVERY_FAILURE: status.HTTP_502_BAD_GATEWAY,
    AuthErrorKind.PROVIDER_DISABLED: status.HTTP_400_BAD_REQUEST,
    AuthErrorKind.MISSING_PROVIDER_EMAIL: status.HTTP_422_UNPROCESSABLE_ENTITY,
    AuthErrorKind.PROVIDER_CONFLICT: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.SESSION_ISSUANCE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    AuthErrorKind.SESSION_INVALID: status.HTTP_401_UNAUTHORIZED,
    AuthErrorKind.SESSION_EXPIRED: status.HTTP_401_UNAUTHORIZED,
}

# Error codes for the front-end /auth/error page when a callback fails
PROVIDER_ERROR_CODE = "provider_error"
UNEXPECTED_ERROR_CODE = "unexpected"

# Kinds whose code would reveal account state; clients see a generic failure
AUTHENTICATION_FAILED_CODE = "authentication_failed"
GENERIC_KINDS = frozenset({AuthErrorKind.PROVIDER_CONFLICT})


def status_for(error: AuthError) -> int:
    return STATUS_BY_KIND.get(error.kind, status.HTTP_400_BAD_REQUEST)


def public_code(error: AuthError) -> str:
    """Error code exposed to clients for ``error``."""
    if error.kind in GENERIC_KINDS:
        return AUTHENTICATION_FAILED_CODE
    return error.kind.value


def error_body(error: AuthError) -> dict[str, str]:
    """JSON body for an auth failure; never carries internal detail."""
    return {"error": public_code(error), "detail": error.public_message}


def redirect_error_code(error: AuthError) -> str:
    """Code placed in the ``error`` query parameter of the failure redirect."""
    return public_code(error)
