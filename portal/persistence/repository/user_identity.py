"""UserIdentity repository implementation using PostgreSQL."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from portal.domain.error import DuplicateEntityError
from portal.domain.model.user_identity import UserIdentity
from portal.domain.repository.user_identity import UserIdentityRepository
from portal.domain.value import AuthProvider, UserId
from portal.persistence.mappers import row_to_user_identity, user_identity_to_dict
from portal.persistence.tables import user_identities_table


class PostgresUserIdentityRepository(UserIdentityRepository):
    """PostgreSQL implementation of UserIdentityRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_provider(
        self, provider: AuthProvider, provider_user_id: str
    ) -> Optional[UserIdentity]:
        stmt = select(user_identities_table).where(
            user_identities_table.c.provider == provider.value,
            user_identities_table.c.provider_user_id == provider_user_id,
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user_identity(dict(row)) if row else None

    async def find_all_by_user_id(self, user_id: UserId) -> list[UserIdentity]:
        stmt = (
            select(user_identities_table)
            .where(user_identities_table.c.user_id == user_id)
            .order_by(user_identities_table.c.created_at)
        )
        result = await self.session.execute(stmt)
        return [row_to_user_identity(dict(row)) for row in result.mappings().all()]

    async def create(self, identity: UserIdentity) -> UserIdentity:
        stmt = user_identities_table.insert().values(**user_identity_to_dict(identity))
        try:
            async with self.session.begin_nested():
                await self.session.execute(stmt)
        except IntegrityError as e:
            raise DuplicateEntityError(
                "UserIdentity", f"{identity.provider.value}:{identity.provider_user_id}"
            ) from e
        return identity

    async def update(self, identity: UserIdentity) -> UserIdentity:
        stmt = (
            user_identities_table.update()
            .where(user_identities_table.c.id == identity.id)
            .values(
                updated_at=identity.updated_at,
                last_login_at=identity.last_login_at,
            )
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return identity
