"""FastAPI dependencies for authentication, sessions and services."""

import logging
from typing import Annotated

from fastapi import Depends, Response
from fastapi.security import APIKeyCookie
from sqlalchemy.orm import Session

from last_leaf.config import get_settings
from last_leaf.database import get_db
from last_leaf.exceptions import AuthenticationError, InvalidTokenError
from last_leaf.schemas.auth import TokenPayload
from last_leaf.services.auth import decode_access_token
from last_leaf.services.diary_service import DiaryService
from last_leaf.services.user_service import UserService

logger = logging.getLogger(__name__)
settings = get_settings()

auth_cookie = APIKeyCookie(name=settings.auth_cookie_name, auto_error=False)


def set_auth_cookie(response: Response, token: str) -> None:
    """Attach the session cookie to a response."""
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.auth_cookie_max_age,
        path="/",
    )


def clear_auth_cookie(response: Response) -> None:
    """Expire the session cookie (logout, account deletion)."""
    response.set_cookie(
        key=settings.auth_cookie_name,
        value="",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=0,
        path="/",
    )


def get_current_identity(
    token: Annotated[str | None, Depends(auth_cookie)],
) -> TokenPayload:
    """Get the authenticated identity from the session cookie.

    Only the token is checked here; handlers that need the user row load it
    themselves.
    """
    if not token:
        raise AuthenticationError()

    try:
        return decode_access_token(token)
    except InvalidTokenError as e:
        logger.debug(f"Rejected session token: {e.message}")
        raise AuthenticationError() from e


def get_diary_service(
    db: Annotated[Session, Depends(get_db)],
) -> DiaryService:
    """Get diary service with dependencies."""
    return DiaryService(db)


def get_user_service(
    db: Annotated[Session, Depends(get_db)],
) -> UserService:
    """Get user service with dependencies."""
    return UserService(db)
