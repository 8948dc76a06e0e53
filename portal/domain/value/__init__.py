"""Domain value objects for Portal."""

from portal.domain.value.identifiers import OtpId, UserId, UserIdentityId
from portal.domain.value.types import (
    OAUTH_PROVIDERS,
    AuthProvider,
    Email,
    LinkingPolicy,
    OAuthProviderInfo,
    OtpAlphabet,
)

__all__ = [
    # Identifiers
    "UserId",
    "UserIdentityId",
    "OtpId",
    # Types
    "AuthProvider",
    "OAUTH_PROVIDERS",
    "Email",
    "LinkingPolicy",
    "OAuthProviderInfo",
    "OtpAlphabet",
]
