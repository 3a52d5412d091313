"""Queries for the folders table."""
from typing import Literal

from sqlalchemy import ColumnElement, Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.base import Lifecycle
from models.folder import Folder
from repositories.base import BaseRepository

SortOrder = Literal["asc", "desc"]


class FolderRepository(BaseRepository[Folder]):
    """Folder queries. Root folders have a NULL ``folder_id``."""

    model = Folder

    def _children_of(self, user_id: int, parent_id: int | None) -> Select[tuple[Folder]]:
        query = self._select().where(Folder.user_id == user_id)
        if parent_id is None:
            return query.where(Folder.folder_id.is_(None))
        return query.where(Folder.folder_id == parent_id)

    async def list_children(
        self,
        db: AsyncSession,
        user_id: int,
        parent_id: int | None,
    ) -> list[Folder]:
        """List a user's active folders directly under ``parent_id`` (None = root)."""
        query = self._children_of(user_id, parent_id).order_by(Folder.id)
        return await self._all(db, query)

    async def list_sorted(
        self,
        db: AsyncSession,
        user_id: int,
        parent_id: int | None,
        sort_columns: list[ColumnElement],
        sort_order: SortOrder,
    ) -> list[Folder]:
        """
        List folders under ``parent_id`` ordered by the given columns.

        ``id`` is appended as a tiebreaker in the same direction so equal keys
        come back in a stable order.
        """
        columns = [*sort_columns, Folder.id]
        if sort_order == "desc":
            order_by = [column.desc() for column in columns]
        else:
            order_by = [column.asc() for column in columns]
        query = self._children_of(user_id, parent_id).order_by(*order_by)
        return await self._all(db, query)

    async def descendant_ids(self, db: AsyncSession, user_id: int, folder_id: int) -> list[int]:
        """
        Return ids of every active folder below ``folder_id`` (any depth).

        Uses a recursive CTE over the parent pointer.
        """
        tree = (
            select(Folder.id)
            .where(
                Folder.folder_id == folder_id,
                Folder.user_id == user_id,
                Folder.lifecycle == Lifecycle.ACTIVE,
            )
            .cte(name="folder_tree", recursive=True)
        )
        child = select(Folder.id).where(
            Folder.folder_id == tree.c.id,
            Folder.lifecycle == Lifecycle.ACTIVE,
        )
        tree = tree.union_all(child)
        result = await db.execute(select(tree.c.id))
        return list(result.scalars().all())


folder_repository = FolderRepository()
