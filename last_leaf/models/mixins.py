"""Mixins for SQLAlchemy models."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, String, func


def utcnow() -> datetime:
    """Current UTC time, used as the client-side timestamp default."""
    return datetime.now(UTC)


def new_uuid() -> str:
    """Generate a string primary key."""
    return str(uuid.uuid4())


class UUIDPrimaryKeyMixin:
    """Mixin to add a UUID string primary key."""

    id = Column(String(36), primary_key=True, default=new_uuid)


class TimestampMixin:
    """Mixin to add created_at and updated_at timestamp columns.

    The Python-side default keeps sub-second ordering on backends whose
    ``now()`` only has second resolution.
    """

    created_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        index=True,
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )
