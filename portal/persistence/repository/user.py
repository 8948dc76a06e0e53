"""User repository implementation using PostgreSQL."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from portal.domain.error import DuplicateEntityError
from portal.domain.model.user import User
from portal.domain.repository.user import UserRepository
from portal.domain.value import Email, UserId
from portal.persistence.mappers import row_to_user, user_to_dict
from portal.persistence.tables import users_table


class PostgresUserRepository(UserRepository):
    """PostgreSQL implementation of UserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        stmt = select(users_table).where(users_table.c.id == user_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def find_by_email(self, email: Email) -> Optional[User]:
        stmt = select(users_table).where(users_table.c.email == email.root)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def create(self, user: User) -> User:
        """Insert a user inside a savepoint.

        A unique violation rolls back only the savepoint, leaving the
        request transaction usable for the re-read that follows.
        """
        stmt = users_table.insert().values(**user_to_dict(user))
        try:
            async with self.session.begin_nested():
                await self.session.execute(stmt)
        except IntegrityError as e:
            raise DuplicateEntityError("User", user.email.root) from e
        return user

    async def update(self, user: User) -> User:
        stmt = (
            users_table.update()
            .where(users_table.c.id == user.id)
            .values(
                display_name=user.display_name,
                avatar_url=user.avatar_url,
                updated_at=user.updated_at,
            )
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return user

    @asynccontextmanager
    async def lock_for_linking(self, user_id: UserId) -> AsyncIterator[None]:
        """Take a row lock on the user, held until the request transaction ends.

        A concurrent linker blocks on the same row and, once it proceeds,
        reads the links committed by the winner.
        """
        stmt = (
            select(users_table.c.id)
            .where(users_table.c.id == user_id)
            .with_for_update()
        )
        await self.session.execute(stmt)
        yield
