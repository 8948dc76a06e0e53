"""Pending one-time passcode challenge."""

from datetime import datetime

from pydantic import Field

from portal.domain.model.common import DomainModel
from portal.domain.value import Email, OtpId


class PendingOtp(DomainModel):
    """Live OTP challenge for an email address.

    Only the SHA-256 digest of the code is kept. ``id`` changes every time a
    challenge is (re)issued, so a consumer holding a stale read can never
    claim or decrement a newer challenge.
    """

    id: OtpId
    email: Email
    code_hash: str
    expires_at: datetime
    attempts_remaining: int = Field(ge=0)
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
