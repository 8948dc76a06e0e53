"""One-time passcode domain service."""

import hashlib
import hmac
import secrets
from datetime import timedelta
from uuid import uuid4

import logfire

from portal.config import OtpSettings
from portal.domain.error import (
    OtpAttemptsExhaustedError,
    OtpExpiredError,
    OtpMismatchError,
    OtpNotFoundError,
)
from portal.domain.model.otp import PendingOtp
from portal.domain.repository.otp import OtpRepository
from portal.domain.value import Email, OtpAlphabet, OtpId
from portal.util.clock import Clock, utcnow

from .base import Service


def hash_code(code: str) -> str:
    """SHA-256 hex digest of an OTP code."""
    return hashlib.sha256(code.encode("utf-8")).hexdigest()


class OtpStore(Service):
    """Issues and consumes email OTP challenges.

    At most one live challenge exists per email. Consumption is
    exactly-once: the winning consumer is the one whose compare-and-delete
    on the challenge id succeeds.
    """

    def __init__(
        self,
        otp_repository: OtpRepository,
        otp_settings: OtpSettings,
        clock: Clock = utcnow,
    ) -> None:
        """Initialize OTP store.

        Args:
            otp_repository: Pending OTP repository
            otp_settings: Code length, alphabet, expiry and attempt policy
            clock: Time source
        """
        self.otp_repository = otp_repository
        self.otp_settings = otp_settings
        self.clock = clock

    def generate_code(self) -> str:
        """Generate a fresh random code."""
        alphabet = self.otp_settings.alphabet.characters
        return "".join(secrets.choice(alphabet) for _ in range(self.otp_settings.length))

    def _normalize(self, candidate: str) -> str:
        candidate = candidate.strip()
        if self.otp_settings.alphabet is OtpAlphabet.ALPHANUMERIC:
            return candidate.upper()
        return candidate

    async def create(self, email: Email) -> str:
        """Issue a new challenge for ``email``, replacing any pending one.

        Args:
            email: Normalized email address

        Returns:
            The plain code, to be delivered out-of-band
        """
        with logfire.span("otp_store.create", email=email.root):
            code = self.generate_code()
            now = self.clock()
            otp = PendingOtp(
                id=OtpId(uuid4()),
                email=email,
                code_hash=hash_code(code),
                expires_at=now + timedelta(minutes=self.otp_settings.ttl_minutes),
                attempts_remaining=self.otp_settings.max_attempts,
                created_at=now,
            )
            await self.otp_repository.upsert(otp)
            logfire.info(
                "OTP issued",
                email=email.root,
                expires_at=otp.expires_at.isoformat(),
            )
            return code

    async def consume(self, email: Email, candidate: str) -> None:
        """Check ``candidate`` against the pending challenge and consume it.

        Args:
            email: Normalized email address
            candidate: Code entered by the user

        Raises:
            OtpNotFoundError: No pending challenge (or it was consumed concurrently)
            OtpExpiredError: The challenge has expired; it is discarded
            OtpMismatchError: Wrong code, attempts remain
            OtpAttemptsExhaustedError: Wrong code, no attempts left; it is discarded
        """
        with logfire.span("otp_store.consume", email=email.root):
            otp = await self.otp_repository.find_by_email(email)
            if otp is None:
                logfire.warn("OTP not found", email=email.root)
                raise OtpNotFoundError(email.root)

            if otp.is_expired(self.clock()):
                await self.otp_repository.delete_if_current(email, otp.id)
                logfire.warn("OTP expired", email=email.root)
                raise OtpExpiredError(email.root)

            if hmac.compare_digest(hash_code(self._normalize(candidate)), otp.code_hash):
                claimed = await self.otp_repository.delete_if_current(email, otp.id)
                if not claimed:
                    # Another confirmation consumed or replaced it first
                    logfire.warn("OTP already consumed", email=email.root)
                    raise OtpNotFoundError(email.root)
                logfire.info("OTP consumed", email=email.root)
                return

            remaining = await self.otp_repository.decrement_attempts(email, otp.id)
            if remaining is None:
                logfire.warn("OTP replaced during check", email=email.root)
                raise OtpNotFoundError(email.root)

            if remaining <= 0:
                await self.otp_repository.delete_if_current(email, otp.id)
                logfire.warn("OTP attempts exhausted", email=email.root)
                raise OtpAttemptsExhaustedError(email.root)

            logfire.warn("OTP mismatch", email=email.root, attempts_remaining=remaining)
            raise OtpMismatchError(email.root, remaining)

    async def purge_expired(self) -> int:
        """Delete all expired challenges.

        Returns:
            Number of challenges removed
        """
        with logfire.span("otp_store.purge_expired"):
            removed = await self.otp_repository.delete_expired(self.clock())
            logfire.info("Expired OTPs purged", count=removed)
            return removed
