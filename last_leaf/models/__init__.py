"""SQLAlchemy models."""

from last_leaf.models.contact import Contact
from last_leaf.models.diary import Diary
from last_leaf.models.enums import IdleThreshold, TimerStatus
from last_leaf.models.user import User

__all__ = [
    "User",
    "Diary",
    "Contact",
    "TimerStatus",
    "IdleThreshold",
]
