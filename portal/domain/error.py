"""Domain layer errors.

Every authentication failure is an ``AuthError`` carrying an
``AuthErrorKind``. The kind drives HTTP status mapping and redirect codes in
the interface layer; ``public_message`` is the only text that may reach an
end user.
"""

from enum import Enum


class DomainError(Exception):
    """Base domain error."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class DuplicateEntityError(DomainError):
    """Raised by repositories when a uniqueness constraint is violated."""

    def __init__(self, resource: str, key: str):
        self.resource = resource
        self.key = key
        super().__init__(f"{resource} already exists: {key}")


class AuthErrorKind(str, Enum):
    """Error kinds reported by the authentication core."""

    INVALID_INPUT = "invalid_input"
    OTP_NOT_FOUND = "otp_not_found"
    OTP_EXPIRED = "otp_expired"
    OTP_MISMATCH = "otp_mismatch"
    OTP_ATTEMPTS_EXHAUSTED = "otp_attempts_exhausted"
    OTP_DELIVERY_FAILURE = "otp_delivery_failure"
    PROVIDER_DISABLED = "provider_disabled"
    MISSING_PROVIDER_EMAIL = "missing_provider_email"
    PROVIDER_CONFLICT = "provider_conflict"
    SESSION_ISSUANCE_FAILURE = "session_issuance_failure"
    SESSION_INVALID = "session_invalid"
    SESSION_EXPIRED = "session_expired"


class AuthError(DomainError):
    """Base authentication error."""

    kind: AuthErrorKind = AuthErrorKind.INVALID_INPUT

    @property
    def public_message(self) -> str:
        """Message safe to show to the end user."""
        return str(self)


class InvalidEmailError(AuthError):
    kind = AuthErrorKind.INVALID_INPUT

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Invalid email address: {email!r}")


class OtpNotFoundError(AuthError):
    kind = AuthErrorKind.OTP_NOT_FOUND

    def __init__(self, email: str):
        self.email = email
        super().__init__("No pending code for this email. Request a new code.")


class OtpExpiredError(AuthError):
    kind = AuthErrorKind.OTP_EXPIRED

    def __init__(self, email: str):
        self.email = email
        super().__init__("The code has expired. Request a new code.")


class OtpMismatchError(AuthError):
    kind = AuthErrorKind.OTP_MISMATCH

    def __init__(self, email: str, attempts_remaining: int):
        self.email = email
        self.attempts_remaining = attempts_remaining
        super().__init__(
            f"The code is incorrect. {attempts_remaining} attempt(s) remaining."
        )


class OtpAttemptsExhaustedError(AuthError):
    kind = AuthErrorKind.OTP_ATTEMPTS_EXHAUSTED

    def __init__(self, email: str):
        self.email = email
        super().__init__("Too many incorrect attempts. Request a new code.")


class OtpDeliveryError(AuthError):
    kind = AuthErrorKind.OTP_DELIVERY_FAILURE

    def __init__(self, email: str, reason: str):
        self.email = email
        self.reason = reason
        super().__init__(f"Could not deliver code to {email}: {reason}")

    @property
    def public_message(self) -> str:
        return "The code could not be delivered. Try again later."


class ProviderDisabledError(AuthError):
    kind = AuthErrorKind.PROVIDER_DISABLED

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"{provider} login is not enabled in this environment")


class MissingProviderEmailError(AuthError):
    kind = AuthErrorKind.MISSING_PROVIDER_EMAIL

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(
            f"Email information is missing from the {provider} profile. "
            "Grant email access and try again."
        )


class ProviderConflictError(AuthError):
    """An email is already owned through a different provider.

    ``str(error)`` names the owning provider for internal diagnostics only;
    ``public_message`` stays generic to avoid account enumeration.
    """

    kind = AuthErrorKind.PROVIDER_CONFLICT

    def __init__(self, email: str, provider: str, registered_with: list[str]):
        self.email = email
        self.provider = provider
        self.registered_with = registered_with
        super().__init__(
            f"{email} is registered through {', '.join(registered_with)}; "
            f"refusing login via {provider}"
        )

    @property
    def public_message(self) -> str:
        return "Authentication failed"


class SessionIssuanceError(AuthError):
    kind = AuthErrorKind.SESSION_ISSUANCE_FAILURE

    @property
    def public_message(self) -> str:
        return "Could not create a session"


class SessionInvalidError(AuthError):
    kind = AuthErrorKind.SESSION_INVALID

    def __init__(self, message: str = "Invalid session token"):
        super().__init__(message)


class SessionExpiredError(AuthError):
    kind = AuthErrorKind.SESSION_EXPIRED

    def __init__(self, message: str = "Session has expired"):
        super().__init__(message)
