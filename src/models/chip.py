"""Chip model - a single bookmark inside a folder."""
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import AuditMixin, Base, LifecycleMixin, TimestampMixin

if TYPE_CHECKING:
    from models.image import Image


class Chip(Base, TimestampMixin, AuditMixin, LifecycleMixin):
    """Chip model - a named bookmark belonging to one folder and one user."""

    __tablename__ = "chips"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str | None] = mapped_column(Text, nullable=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    folder_id: Mapped[int] = mapped_column(
        ForeignKey("folders.id", ondelete="CASCADE"),
        index=True,
    )
    image_id: Mapped[int | None] = mapped_column(
        ForeignKey("images.id", ondelete="SET NULL"),
        nullable=True,
    )

    image: Mapped["Image"] = relationship("Image", lazy="joined")

    @property
    def image_url(self) -> str | None:
        """URL of the chip image, if any."""
        return self.image.url if self.image is not None else None
