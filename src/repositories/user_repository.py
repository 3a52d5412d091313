"""Queries for the users table."""
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession

from models.user import User
from repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """User queries. Users are not owned by anyone, so ``get`` is never user-scoped."""

    model = User

    async def get_by_email(self, db: AsyncSession, email: str) -> User | None:
        """Get an active user by email (case-insensitive)."""
        query = self._select().where(func.lower(User.email) == email.lower())
        return await self._one_or_none(db, query)


user_repository = UserRepository()
