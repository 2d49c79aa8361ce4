"""Authentication API endpoints: password login and Google sign-in."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from last_leaf.api.dependencies import clear_auth_cookie, set_auth_cookie
from last_leaf.database import get_db
from last_leaf.exceptions import AuthenticationError, OAuthConfigError, OAuthExchangeError
from last_leaf.schemas.auth import (
    LoginResponse,
    LoginUser,
    MessageResponse,
    SignupResponse,
    SignupUser,
    UserLogin,
    UserSignup,
)
from last_leaf.services.auth import (
    authenticate_user,
    create_access_token,
    create_user,
    mark_logged_in,
    upsert_oauth_user,
)
from last_leaf.services.google_oauth import (
    GoogleOAuthService,
    get_google_oauth_service,
    is_local_path,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

LOGIN_PAGE = "/login"
DEFAULT_LANDING_PAGE = "/diary"


def login_error_redirect(error: str) -> RedirectResponse:
    """Send the browser back to the login page with an error code."""
    return RedirectResponse(f"{LOGIN_PAGE}?error={error}", status_code=status.HTTP_302_FOUND)


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: UserSignup,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new user and start a session."""
    user = create_user(db, user_data.email, user_data.password, user_data.nickname)

    set_auth_cookie(response, create_access_token(user.id, user.email))
    return SignupResponse(user=SignupUser.model_validate(user))


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: UserLogin,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
):
    """Login with email and password."""
    user = authenticate_user(db, credentials.email, credentials.password)
    if not user:
        logger.info("Failed login attempt")
        raise AuthenticationError("Invalid email or password")

    user = mark_logged_in(db, user)

    set_auth_cookie(response, create_access_token(user.id, user.email))
    return LoginResponse(user=LoginUser(user_id=user.id, email=user.email, nickname=user.nickname))


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """Logout by expiring the session cookie."""
    clear_auth_cookie(response)
    return MessageResponse(message="Logged out successfully")


@router.get("/google")
async def google_login(
    oauth: Annotated[GoogleOAuthService, Depends(get_google_oauth_service)],
    next: str | None = None,
):
    """Redirect to Google's consent screen."""
    try:
        url = oauth.build_authorization_url(next)
    except OAuthConfigError as e:
        logger.error(f"Google OAuth initiation error: {e.message}")
        raise OAuthConfigError() from e
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


@router.get("/google/callback")
async def google_callback(
    db: Annotated[Session, Depends(get_db)],
    oauth: Annotated[GoogleOAuthService, Depends(get_google_oauth_service)],
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
):
    """Finish Google sign-in.

    Flow: code received, token exchanged, identity fetched, user upserted,
    session cookie set, redirect. Failures send the browser back to the login
    page; only missing client configuration is reported as a JSON 500.
    """
    if error:
        logger.info(f"Google sign-in denied: {error}")
        return login_error_redirect("google_login_failed")
    if not code:
        return login_error_redirect("missing_code")

    try:
        oauth.require_configured(need_secret=True)
    except OAuthConfigError as e:
        logger.error(f"Google OAuth callback error: {e.message}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Google OAuth not configured"},
        )

    try:
        token = await oauth.exchange_code_for_token(code)
        user_info = await oauth.get_user_info(token.access_token)
    except OAuthExchangeError as e:
        logger.error(f"Google OAuth callback error: {e.message}")
        return login_error_redirect("authentication_failed")

    try:
        user = upsert_oauth_user(db, user_info.email, user_info.name)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to upsert Google user {user_info.email}: {e}")
        return login_error_redirect("authentication_failed")

    target = state if is_local_path(state) else DEFAULT_LANDING_PAGE
    response = RedirectResponse(target, status_code=status.HTTP_302_FOUND)
    set_auth_cookie(response, create_access_token(user.id, user.email))
    return response
