"""Pending OTP repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from portal.domain.model.otp import PendingOtp
from portal.domain.value import Email, OtpId


class OtpRepository(ABC):
    """Repository for pending OTP challenges, keyed by email.

    The conditional operations (``delete_if_current``, ``decrement_attempts``)
    are atomic in every implementation; they are what makes consumption
    exactly-once without holding locks across calls.
    """

    @abstractmethod
    async def upsert(self, otp: PendingOtp) -> PendingOtp:
        """Store a challenge, replacing any existing one for the same email."""
        pass

    @abstractmethod
    async def find_by_email(self, email: Email) -> Optional[PendingOtp]:
        """Get the live challenge for an email, if any."""
        pass

    @abstractmethod
    async def delete_if_current(self, email: Email, otp_id: OtpId) -> bool:
        """Delete the challenge only if it is still the one identified by ``otp_id``.

        Returns:
            True if this call removed the record, False if it was already
            consumed or replaced.
        """
        pass

    @abstractmethod
    async def decrement_attempts(self, email: Email, otp_id: OtpId) -> Optional[int]:
        """Decrement the attempt counter of the current challenge.

        Returns:
            The remaining attempts after the decrement, or None if the
            challenge was consumed or replaced meanwhile.
        """
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Delete every challenge expired at ``now``.

        Returns:
            Number of records removed
        """
        pass
