"""Queries for the images table."""
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession

from models.image import Image, ImageType
from repositories.base import BaseRepository


class ImageRepository(BaseRepository[Image]):
    """Image queries. Shared placeholder images have no owner (``user_id`` NULL)."""

    model = Image

    async def list_for_user(self, db: AsyncSession, user_id: int) -> list[Image]:
        """List images uploaded by a user."""
        query = self._select().where(Image.user_id == user_id).order_by(Image.id)
        return await self._all(db, query)

    async def get_visible(self, db: AsyncSession, image_id: int, user_id: int) -> Image | None:
        """Get an image owned by the user or a shared placeholder."""
        query = self._select().where(
            Image.id == image_id,
            or_(Image.user_id == user_id, Image.user_id.is_(None)),
        )
        return await self._one_or_none(db, query)

    async def get_placeholder(
        self,
        db: AsyncSession,
        image_type: ImageType,
        name: str,
    ) -> Image | None:
        """Get the shared placeholder image for an entity kind."""
        query = (
            self._select()
            .where(
                Image.user_id.is_(None),
                Image.type == image_type,
                Image.name == name,
            )
            .order_by(Image.id)
            .limit(1)
        )
        return await self._one_or_none(db, query)


image_repository = ImageRepository()
