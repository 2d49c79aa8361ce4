"""Emergency contact model."""

from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.orm import relationship

from last_leaf.database import Base
from last_leaf.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin


class Contact(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Someone to notify when the owner's inactivity timer fires."""

    __tablename__ = "contacts"

    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)

    # Relationships
    user = relationship("User", back_populates="contacts")
