"""User model for registered accounts."""
import enum
from typing import TYPE_CHECKING

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import AuditMixin, Base, LifecycleMixin, TimestampMixin

if TYPE_CHECKING:
    from models.image import Image


class UserRole(str, enum.Enum):
    """Account role."""

    USER = "user"
    ADMIN = "admin"


class User(Base, TimestampMixin, AuditMixin, LifecycleMixin):
    """User model - credentials, profile image and role."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(191), unique=True, index=True, nullable=False)
    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt hash - plaintext is never stored",
    )
    role: Mapped[UserRole] = mapped_column(
        Enum(
            UserRole,
            native_enum=False,
            length=16,
            values_callable=lambda e: [member.value for member in e],
        ),
        default=UserRole.USER,
        nullable=False,
    )
    # Plain integer (no FK) so users <-> images do not form a circular constraint
    image_id: Mapped[int | None] = mapped_column(nullable=True)

    image: Mapped["Image"] = relationship(
        "Image",
        primaryjoin="foreign(User.image_id) == Image.id",
        lazy="joined",
        viewonly=True,
    )

    @property
    def image_url(self) -> str | None:
        """URL of the profile image, if any."""
        return self.image.url if self.image is not None else None
