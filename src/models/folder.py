"""Folder model - nested, user-owned containers for chips."""
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import AuditMixin, Base, LifecycleMixin, TimestampMixin

if TYPE_CHECKING:
    from models.image import Image


class Folder(Base, TimestampMixin, AuditMixin, LifecycleMixin):
    """
    Folder model.

    Folders form an adjacency list through ``folder_id`` (the parent). A NULL
    parent marks a root folder. The parent link is set at creation and never
    changed, so the tree cannot contain cycles.
    """

    __tablename__ = "folders"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    folder_id: Mapped[int | None] = mapped_column(
        ForeignKey("folders.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    image_id: Mapped[int | None] = mapped_column(
        ForeignKey("images.id", ondelete="SET NULL"),
        nullable=True,
    )

    image: Mapped["Image"] = relationship("Image", lazy="joined")

    @property
    def image_url(self) -> str | None:
        """URL of the folder image, if any."""
        return self.image.url if self.image is not None else None
