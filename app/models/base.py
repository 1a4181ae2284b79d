"""Base models and mixins for database models"""

from sqlalchemy import Column, DateTime, event
from sqlalchemy.orm import DeclarativeBase, declared_attr
from sqlalchemy.sql import func
from datetime import datetime, timezone
from typing import Optional

# Create declarative base
class Base(DeclarativeBase):

    def __repr__(self):
        """String representation"""
        class_name = self.__class__.__name__
        attributes = []

        for column in self.__table__.columns:
            if column.primary_key:
                value = getattr(self, column.name)
                attributes.append(f"{column.name}={value!r}")

        return f"<{class_name}({', '.join(attributes)})>"

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class TimestampedModel:
    """
    Mixin for adding created_at and updated_at timestamps

    Both columns default to the database clock on insert. ``updated_at`` is
    refreshed on every update: Core UPDATE statements pick up the ``onupdate``
    clock and ORM flushes go through ``touch_updated_at`` below. The migrations
    install the matching ``set_updated_at()`` trigger on every table.
    """

    __mapper_args__ = {"eager_defaults": True}

    @declared_attr
    def created_at(cls):
        return Column(
            DateTime(timezone=True),
            nullable=False,
            server_default=func.now(),
        )

    @declared_attr
    def updated_at(cls):
        return Column(
            DateTime(timezone=True),
            nullable=False,
            server_default=func.now(),
            onupdate=utcnow
        )

@event.listens_for(TimestampedModel, "before_update", propagate=True)
def touch_updated_at(mapper, connection, target):
    """Overwrite updated_at for every timestamped row flushed as an UPDATE"""
    target.updated_at = utcnow()

class SoftDeleteModel:
    """Mixin for soft delete functionality"""

    @declared_attr
    def deleted_at(cls):
        return Column(
            DateTime(timezone=True),
            nullable=True
        )

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None

    def soft_delete(self, when: Optional[datetime] = None):
        """Soft delete the record"""
        self.deleted_at = when or utcnow()

    def restore(self):
        """Restore soft deleted record"""
        self.deleted_at = None

__all__ = [
    'Base',
    'TimestampedModel',
    'SoftDeleteModel',
    'touch_updated_at',
    'utcnow',
]
