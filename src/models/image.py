"""Image model for uploaded and placeholder images."""
import enum

from sqlalchemy import Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, validates

from models.base import AuditMixin, Base, LifecycleMixin, TimestampMixin


class ImageType(str, enum.Enum):
    """Kind of entity an image belongs to."""

    USER = "user"
    FOLDER = "folder"
    CHIP = "chip"


class Image(Base, TimestampMixin, AuditMixin, LifecycleMixin):
    """Image model - a stored image URL referenced by users, folders and chips."""

    __tablename__ = "images"

    id: Mapped[int] = mapped_column(primary_key=True)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[ImageType] = mapped_column(
        Enum(
            ImageType,
            native_enum=False,
            length=16,
            values_callable=lambda e: [member.value for member in e],
        ),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    # NULL for shared placeholder images
    user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    @validates("url")
    def _url_is_immutable(self, _key: str, value: str) -> str:
        if self.url is not None and value != self.url:
            raise ValueError("Image url cannot be changed once set")
        return value
