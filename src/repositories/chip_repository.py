"""Queries for the chips table."""
from sqlalchemy.ext.asyncio import AsyncSession

from models.chip import Chip
from repositories.base import BaseRepository


class ChipRepository(BaseRepository[Chip]):
    """Chip queries, always scoped to the owning user."""

    model = Chip

    async def list_for_user(
        self,
        db: AsyncSession,
        user_id: int,
        folder_id: int | None = None,
    ) -> list[Chip]:
        """List a user's active chips, optionally restricted to one folder."""
        query = self._select().where(Chip.user_id == user_id)
        if folder_id is not None:
            query = query.where(Chip.folder_id == folder_id)
        return await self._all(db, query.order_by(Chip.id))


chip_repository = ChipRepository()
