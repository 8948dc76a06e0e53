"""Domain value objects for Portal.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules (email normalization, provider names).
"""

import re
from enum import Enum

from pydantic import field_validator

from portal.domain.value.common import RootValueObject, ValueObject

# One "@", no whitespace, a dot in the domain part.
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class AuthProvider(str, Enum):
    """Channels through which an account can be established or linked."""

    EMAIL_OTP = "email_otp"
    GITHUB = "github"
    GITLAB = "gitlab"
    GOOGLE = "google"

    @property
    def is_oauth(self) -> bool:
        return self is not AuthProvider.EMAIL_OTP


OAUTH_PROVIDERS: tuple[AuthProvider, ...] = (
    AuthProvider.GITHUB,
    AuthProvider.GITLAB,
    AuthProvider.GOOGLE,
)


class LinkingPolicy(str, Enum):
    """What happens when a second OAuth provider asserts an existing email.

    FIRST_PROVIDER_WINS: the provider that first linked the account owns it;
    any other provider is rejected with a conflict.
    LINK_VERIFIED_EMAIL: providers listed as linkable are attached to the
    existing account.
    """

    FIRST_PROVIDER_WINS = "first_provider_wins"
    LINK_VERIFIED_EMAIL = "link_verified_email"


class OtpAlphabet(str, Enum):
    """Character sets OTP codes are drawn from."""

    NUMERIC = "numeric"
    ALPHANUMERIC = "alphanumeric"

    @property
    def characters(self) -> str:
        if self is OtpAlphabet.NUMERIC:
            return "0123456789"
        # No lowercase: codes are typed from an email by hand
        return "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"


class Email(RootValueObject[str]):
    """Email address, normalized to lowercase without surrounding space.

    The normalized form is the canonical identity key: two spellings that
    differ only in case resolve to the same account.
    """

    @field_validator("root", mode="before")
    @classmethod
    def normalize(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("root")
    @classmethod
    def validate_email_format(cls, v: str) -> str:
        if len(v) > 320 or not _EMAIL_PATTERN.match(v):
            raise ValueError("Email address is malformed")
        return v


class OAuthProviderInfo(ValueObject):
    """Verified profile returned by an OAuth provider after its callback."""

    provider: AuthProvider
    provider_user_id: str  # Stable subject id assigned by the provider
    email: str | None = None
    display_name: str | None = None
    avatar_url: str | None = None
