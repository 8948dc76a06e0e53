"""Domain services."""

from .auth_service import AuthService, OAuthClient
from .base import Service
from .identity_resolver import IdentityResolver
from .mailer import MailDeliveryError, Mailer
from .otp_store import OtpStore
from .session_issuer import SessionIssuer

__all__ = [
    "AuthService",
    "IdentityResolver",
    "MailDeliveryError",
    "Mailer",
    "OAuthClient",
    "OtpStore",
    "Service",
    "SessionIssuer",
]
