"""Authentication schemas."""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from last_leaf.schemas.validation import EMAIL_REGEX, MIN_PASSWORD_LENGTH, is_blank


class UserSignup(BaseModel):
    """User signup request.

    Checks run in a fixed order so the client always sees the first problem
    with the form.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=128)
    password_confirm: str | None = Field(None, alias="passwordConfirm")
    nickname: str = Field(..., max_length=255)

    @model_validator(mode="before")
    @classmethod
    def check_signup_form(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        email = data.get("email")
        password = data.get("password")
        if not email:
            raise ValueError("Email is required")
        if not isinstance(email, str) or not EMAIL_REGEX.match(email):
            raise ValueError("Invalid email format")
        if not password:
            raise ValueError("Password is required")
        if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        if password != data.get("passwordConfirm", data.get("password_confirm")):
            raise ValueError("Passwords do not match")
        if is_blank(data.get("nickname")):
            raise ValueError("Nickname is required")

        return {**data, "email": email.lower(), "nickname": data["nickname"].strip()}


class UserLogin(BaseModel):
    """User login request."""

    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=128)

    @model_validator(mode="before")
    @classmethod
    def require_credentials(cls, data: Any) -> Any:
        if isinstance(data, dict) and (not data.get("email") or not data.get("password")):
            raise ValueError("Email and password are required")
        return data


class TokenPayload(BaseModel):
    """Identity claims carried by a session token."""

    user_id: str
    email: str


class SignupUser(BaseModel):
    """User summary returned on signup."""

    model_config = ConfigDict(from_attributes=True)

    email: str
    nickname: str


class SignupResponse(BaseModel):
    """Signup response."""

    user: SignupUser


class LoginUser(BaseModel):
    """User summary returned on login."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str = Field(validation_alias=AliasChoices("user_id", "id"))
    email: str
    nickname: str


class LoginResponse(BaseModel):
    """Login response."""

    success: bool = True
    user: LoginUser


class MessageResponse(BaseModel):
    """Generic acknowledgement."""

    success: bool = True
    message: str
