"""Enums for model fields."""

from enum import Enum


class TimerStatus(str, Enum):
    """State of a user's inactivity timer."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    PAUSED = "paused"

    @classmethod
    def parse(cls, value: str) -> "TimerStatus":
        """Parse a status name case-insensitively ("PAUSED" and "paused" both work)."""
        return cls(value.lower())


class IdleThreshold(int, Enum):
    """Allowed idle thresholds, in seconds."""

    DAYS_30 = 30 * 24 * 60 * 60
    DAYS_60 = 60 * 24 * 60 * 60
    DAYS_90 = 90 * 24 * 60 * 60
    DAYS_180 = 180 * 24 * 60 * 60

    @classmethod
    def values(cls) -> list[int]:
        """All allowed thresholds in ascending order."""
        return [member.value for member in cls]
