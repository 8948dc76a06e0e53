"""In-memory pending OTP repository for testing."""

from datetime import datetime
from typing import Optional

from portal.domain.model.otp import PendingOtp
from portal.domain.repository.otp import OtpRepository
from portal.domain.value import Email, OtpId


class InMemoryOtpRepository(OtpRepository):
    """In-memory implementation of OtpRepository for testing.

    Methods never await internally, so each call is atomic on the event loop.
    """

    def __init__(self) -> None:
        self._otps: dict[Email, PendingOtp] = {}

    async def upsert(self, otp: PendingOtp) -> PendingOtp:
        self._otps[otp.email] = otp
        return otp

    async def find_by_email(self, email: Email) -> Optional[PendingOtp]:
        return self._otps.get(email)

    async def delete_if_current(self, email: Email, otp_id: OtpId) -> bool:
        current = self._otps.get(email)
        if current is None or current.id != otp_id:
            return False
        del self._otps[email]
        return True

    async def decrement_attempts(self, email: Email, otp_id: OtpId) -> Optional[int]:
        current = self._otps.get(email)
        if current is None or current.id != otp_id or current.attempts_remaining <= 0:
            return None
        remaining = current.attempts_remaining - 1
        self._otps[email] = current.model_copy(update={"attempts_remaining": remaining})
        return remaining

    async def delete_expired(self, now: datetime) -> int:
        expired = [email for email, otp in self._otps.items() if otp.is_expired(now)]
        for email in expired:
            del self._otps[email]
        return len(expired)
