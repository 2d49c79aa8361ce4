"""Diary schemas."""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from last_leaf.schemas.validation import CONTENT_REQUIRED_MESSAGE, is_blank


class DiaryCreate(BaseModel):
    """Create a new diary entry."""

    content: str = Field(None, validate_default=True)

    @field_validator("content", mode="before")
    @classmethod
    def content_not_blank(cls, value: Any) -> str:
        if is_blank(value):
            raise ValueError(CONTENT_REQUIRED_MESSAGE)
        return value


class DiaryUpdate(BaseModel):
    """Update a diary entry.

    Content is checked by the service after the ownership checks, so anything
    that is not a string is passed through as missing.
    """

    content: str | None = None

    @field_validator("content", mode="before")
    @classmethod
    def drop_non_string(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None


class DiaryCreated(BaseModel):
    """Response for a newly created entry."""

    diary_id: str


class DiaryResponse(BaseModel):
    """Diary entry response."""

    model_config = ConfigDict(from_attributes=True)

    diary_id: str = Field(validation_alias=AliasChoices("diary_id", "id"))
    content: str
    created_at: datetime
    updated_at: datetime


class DiaryPage(BaseModel):
    """One page of a user's diary, newest first."""

    model_config = ConfigDict(populate_by_name=True)

    diaries: list[DiaryResponse]
    next_cursor: str | None = Field(None, alias="nextCursor")
