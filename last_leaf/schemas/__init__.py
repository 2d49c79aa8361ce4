"""Pydantic schemas for API requests and responses."""

from last_leaf.schemas.auth import (
    LoginResponse,
    MessageResponse,
    SignupResponse,
    TokenPayload,
    UserLogin,
    UserSignup,
)
from last_leaf.schemas.diary import DiaryCreate, DiaryCreated, DiaryPage, DiaryResponse, DiaryUpdate
from last_leaf.schemas.user import (
    ContactIn,
    ContactResponse,
    ContactsResponse,
    ContactsUpdate,
    PreferencesResponse,
    PreferencesUpdate,
    ProfileResponse,
    ProfileUpdate,
    UserProfile,
)

__all__ = [
    "UserSignup",
    "UserLogin",
    "TokenPayload",
    "SignupResponse",
    "LoginResponse",
    "MessageResponse",
    "DiaryCreate",
    "DiaryUpdate",
    "DiaryCreated",
    "DiaryResponse",
    "DiaryPage",
    "ProfileUpdate",
    "ProfileResponse",
    "UserProfile",
    "PreferencesUpdate",
    "PreferencesResponse",
    "ContactIn",
    "ContactsUpdate",
    "ContactResponse",
    "ContactsResponse",
]
