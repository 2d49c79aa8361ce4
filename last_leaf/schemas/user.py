"""User settings schemas: profile, preferences and emergency contacts."""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from last_leaf.models.enums import IdleThreshold, TimerStatus
from last_leaf.schemas.validation import is_blank, is_valid_email


class ProfileUpdate(BaseModel):
    """Update profile fields. Email cannot be changed and is ignored if sent."""

    nickname: str | None = Field(None, max_length=255)
    name: str | None = Field(None, max_length=255)

    @field_validator("nickname", mode="before")
    @classmethod
    def nickname_not_blank(cls, value: Any) -> str:
        if is_blank(value):
            raise ValueError("Nickname cannot be empty")
        return value

    @model_validator(mode="after")
    def require_one_field(self) -> "ProfileUpdate":
        if not self.model_fields_set & {"nickname", "name"}:
            raise ValueError("At least one field (nickname or name) must be provided")
        return self


class UserProfile(BaseModel):
    """User projection without the password hash."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str = Field(validation_alias=AliasChoices("user_id", "id"))
    email: str
    nickname: str
    name: str | None
    timer_status: TimerStatus
    timer_idle_threshold_sec: int
    created_at: datetime
    updated_at: datetime
    last_active_at: datetime | None


class ProfileResponse(BaseModel):
    """Profile response."""

    user: UserProfile


class PreferencesUpdate(BaseModel):
    """Update inactivity timer settings."""

    timer_status: TimerStatus | None = None
    timer_idle_threshold_sec: int | None = None

    @field_validator("timer_status", mode="before")
    @classmethod
    def parse_timer_status(cls, value: Any) -> TimerStatus:
        try:
            return TimerStatus.parse(value)
        except (AttributeError, ValueError):
            raise ValueError("Invalid timer_status. Must be PAUSED, ACTIVE, or INACTIVE") from None

    @field_validator("timer_idle_threshold_sec", mode="before")
    @classmethod
    def check_threshold(cls, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise ValueError("timer_idle_threshold_sec must be a number")
        if value not in IdleThreshold.values():
            allowed = ", ".join(str(v) for v in IdleThreshold.values())
            raise ValueError(f"Invalid timer_idle_threshold_sec. Must be one of: {allowed}")
        return int(value)

    @model_validator(mode="after")
    def require_one_field(self) -> "PreferencesUpdate":
        if not self.model_fields_set & {"timer_status", "timer_idle_threshold_sec"}:
            raise ValueError(
                "At least one field (timer_status or timer_idle_threshold_sec) must be provided"
            )
        return self


class PreferencesResponse(BaseModel):
    """Inactivity timer settings."""

    model_config = ConfigDict(from_attributes=True)

    timer_status: TimerStatus
    timer_idle_threshold_sec: int


class ContactIn(BaseModel):
    """One emergency contact as submitted by the client."""

    email: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=20)

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, value: Any) -> str | None:
        if not is_valid_email(value):
            raise ValueError(f"Invalid email format: {value}")
        return value or None

    @field_validator("phone", mode="before")
    @classmethod
    def blank_phone_is_none(cls, value: Any) -> Any:
        return value or None


class ContactsUpdate(BaseModel):
    """Replace the full contact list."""

    contacts: list[ContactIn]

    @model_validator(mode="before")
    @classmethod
    def require_contacts_array(cls, data: Any) -> Any:
        if isinstance(data, dict):
            if "contacts" not in data:
                raise ValueError("contacts field is required")
            if not isinstance(data["contacts"], list):
                raise ValueError("contacts must be an array")
        return data


class ContactResponse(BaseModel):
    """Saved emergency contact."""

    model_config = ConfigDict(from_attributes=True)

    contact_id: str = Field(validation_alias=AliasChoices("contact_id", "id"))
    email: str | None
    phone: str | None


class ContactsResponse(BaseModel):
    """Contact list response."""

    contacts: list[ContactResponse]
