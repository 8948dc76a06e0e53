"""Pending OTP repository implementation using PostgreSQL.

Each conditional operation is a single statement, so concurrent
confirmations serialize on the row lock.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from portal.domain.model.otp import PendingOtp
from portal.domain.repository.otp import OtpRepository
from portal.domain.value import Email, OtpId
from portal.persistence.mappers import pending_otp_to_dict, row_to_pending_otp
from portal.persistence.tables import pending_otps_table


class PostgresOtpRepository(OtpRepository):
    """PostgreSQL implementation of OtpRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def upsert(self, otp: PendingOtp) -> PendingOtp:
        values = pending_otp_to_dict(otp)
        stmt = insert(pending_otps_table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[pending_otps_table.c.email],
            set_={key: stmt.excluded[key] for key in values if key != "email"},
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return otp

    async def find_by_email(self, email: Email) -> Optional[PendingOtp]:
        stmt = select(pending_otps_table).where(pending_otps_table.c.email == email.root)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_pending_otp(dict(row)) if row else None

    async def delete_if_current(self, email: Email, otp_id: OtpId) -> bool:
        stmt = (
            delete(pending_otps_table)
            .where(
                pending_otps_table.c.email == email.root,
                pending_otps_table.c.id == otp_id,
            )
            .returning(pending_otps_table.c.email)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def decrement_attempts(self, email: Email, otp_id: OtpId) -> Optional[int]:
        stmt = (
            update(pending_otps_table)
            .where(
                pending_otps_table.c.email == email.root,
                pending_otps_table.c.id == otp_id,
                pending_otps_table.c.attempts_remaining > 0,
            )
            .values(attempts_remaining=pending_otps_table.c.attempts_remaining - 1)
            .returning(pending_otps_table.c.attempts_remaining)
        )
        result = await self.session.execute(stmt)
        row = result.first()
        return row[0] if row else None

    async def delete_expired(self, now: datetime) -> int:
        stmt = delete(pending_otps_table).where(pending_otps_table.c.expires_at <= now)
        result = await self.session.execute(stmt)
        return result.rowcount or 0
