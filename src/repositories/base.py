"""
Base repository for soft-deletable entities.

Every read issued through a repository goes through ``_select()``, which
always restricts rows to ``Lifecycle.ACTIVE``. Deleted rows are unreachable
from the application; there is no flag to include them.
"""
from collections.abc import Sequence
from typing import Any, Generic, Protocol, TypeVar

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from models.base import Lifecycle


class SoftDeletable(Protocol):
    """Protocol for models carrying the lifecycle column."""

    id: int
    lifecycle: Lifecycle


T = TypeVar("T", bound=SoftDeletable)


class BaseRepository(Generic[T]):
    """
    Shared query helpers for one model.

    Subclasses set ``model`` and add entity-specific queries built on
    ``_select()``.
    """

    model: type[T]

    def _select(self) -> Select[tuple[T]]:
        """SELECT over active rows only."""
        return select(self.model).where(self.model.lifecycle == Lifecycle.ACTIVE)

    async def _all(self, db: AsyncSession, query: Select[tuple[T]]) -> list[T]:
        result = await db.execute(query)
        return list(result.unique().scalars().all())

    async def _one_or_none(self, db: AsyncSession, query: Select[tuple[T]]) -> T | None:
        result = await db.execute(query)
        return result.unique().scalar_one_or_none()

    async def _reload(self, db: AsyncSession, entity: T) -> None:
        """Reload server-generated columns and the image relationship, if any."""
        await db.refresh(entity)
        if hasattr(self.model, "image"):
            await db.refresh(entity, attribute_names=["image"])

    async def get(
        self,
        db: AsyncSession,
        entity_id: int,
        user_id: int | None = None,
    ) -> T | None:
        """
        Get an active entity by ID, optionally scoped to its owner.

        Returns:
            The entity, or None if missing, deleted, or owned by someone else.
        """
        query = self._select().where(self.model.id == entity_id)
        if user_id is not None:
            query = query.where(self.model.user_id == user_id)
        return await self._one_or_none(db, query)

    async def add(self, db: AsyncSession, entity: T) -> T:
        """
        Insert an entity and reload server-generated columns.

        Note:
            Does not commit. Caller (session generator) handles commit at request end.
        """
        db.add(entity)
        await db.flush()
        await self._reload(db, entity)
        return entity

    async def save(self, db: AsyncSession, entity: T, **changes: Any) -> T:
        """Apply column changes to a loaded entity and persist them."""
        for key, value in changes.items():
            setattr(entity, key, value)
        await db.flush()
        await self._reload(db, entity)
        return entity

    async def soft_delete(self, db: AsyncSession, entity: T, updated_by: str) -> None:
        """Mark an entity as deleted."""
        entity.lifecycle = Lifecycle.DELETED
        entity.updated_by = updated_by
        await db.flush()

    async def soft_delete_where(
        self,
        db: AsyncSession,
        column: InstrumentedAttribute,
        values: Sequence[int],
        updated_by: str,
    ) -> int:
        """
        Mark every active row whose ``column`` is in ``values`` as deleted.

        Returns:
            Number of rows changed.
        """
        if not values:
            return 0
        result = await db.execute(
            update(self.model)
            .where(
                column.in_(values),
                self.model.lifecycle == Lifecycle.ACTIVE,
            )
            .values(lifecycle=Lifecycle.DELETED, updated_by=updated_by)
            .execution_options(synchronize_session="fetch"),
        )
        return result.rowcount or 0
