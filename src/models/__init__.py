"""SQLAlchemy models."""
from models.base import AuditMixin, Base, Lifecycle, LifecycleMixin, TimestampMixin
from models.image import Image, ImageType  # Must be before user/folder/chip (relationship targets)
from models.chip import Chip
from models.folder import Folder
from models.user import User, UserRole

__all__ = [
    "AuditMixin",
    "Base",
    "Chip",
    "Folder",
    "Image",
    "ImageType",
    "Lifecycle",
    "LifecycleMixin",
    "TimestampMixin",
    "User",
    "UserRole",
]
