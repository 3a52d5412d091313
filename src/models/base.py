"""SQLAlchemy declarative base with common mixins."""
import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class Lifecycle(str, enum.Enum):
    """Lifecycle state of a row. Rows are never removed, only marked DELETED."""

    ACTIVE = "active"
    DELETED = "deleted"


class TimestampMixin:
    """
    Mixin that adds created_at and updated_at columns.

    All timestamps are timezone-aware (stored as TIMESTAMP WITH TIME ZONE in PostgreSQL).
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,  # Index for "sort by date" queries
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class AuditMixin:
    """Mixin recording the username that created and last changed the row."""

    created_by: Mapped[str] = mapped_column(String(255), nullable=False)
    updated_by: Mapped[str] = mapped_column(String(255), nullable=False)


class LifecycleMixin:
    """
    Mixin for soft deletion.

    Repositories filter on ``lifecycle == ACTIVE`` for every read; see
    repositories.base.BaseRepository.
    """

    lifecycle: Mapped[Lifecycle] = mapped_column(
        Enum(
            Lifecycle,
            native_enum=False,
            length=16,
            values_callable=lambda e: [member.value for member in e],
        ),
        default=Lifecycle.ACTIVE,
        server_default=Lifecycle.ACTIVE.value,
        nullable=False,
        index=True,
    )

    @property
    def is_deleted(self) -> bool:
        """True once the row has been soft-deleted."""
        return self.lifecycle == Lifecycle.DELETED
