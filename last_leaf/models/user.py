"""User model."""

from sqlalchemy import Column, DateTime, Enum, Integer, String
from sqlalchemy.orm import relationship

from last_leaf.database import Base
from last_leaf.models.enums import IdleThreshold, TimerStatus
from last_leaf.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin


class User(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """User model for authentication, ownership and the inactivity timer."""

    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)  # always lowercased
    password_hash = Column(String(255), nullable=True)  # null for Google-only accounts
    nickname = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    timer_status = Column(
        Enum(
            TimerStatus,
            name="timerstatus",
            values_callable=lambda x: [e.value for e in x],
        ),
        default=TimerStatus.INACTIVE,
        server_default=TimerStatus.INACTIVE.value,
        nullable=False,
    )
    timer_idle_threshold_sec = Column(
        Integer,
        default=IdleThreshold.DAYS_30.value,
        server_default=str(IdleThreshold.DAYS_30.value),
        nullable=False,
    )
    last_active_at = Column(DateTime(timezone=True), nullable=True, index=True)

    # Relationships
    diaries = relationship(
        "Diary", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    contacts = relationship(
        "Contact", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
