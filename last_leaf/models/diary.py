"""Diary model."""

from sqlalchemy import Column, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from last_leaf.database import Base
from last_leaf.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin


class Diary(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A single diary entry, owned by one user."""

    __tablename__ = "diaries"

    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content = Column(Text, nullable=False)

    # Relationships
    user = relationship("User", back_populates="diaries")
