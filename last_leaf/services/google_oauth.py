"""Google OAuth 2.0 client for the sign-in flow."""

import logging
import secrets
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel

from last_leaf.config import get_settings
from last_leaf.exceptions import OAuthConfigError, OAuthExchangeError

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"  # noqa: S105
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"


class GoogleToken(BaseModel):
    """Token response from Google."""

    access_token: str
    token_type: str = "Bearer"  # noqa: S105
    expires_in: int | None = None
    refresh_token: str | None = None


class GoogleUserInfo(BaseModel):
    """Subset of the Google userinfo response we rely on."""

    email: str
    name: str | None = None
    picture: str | None = None
    id: str | None = None


def is_local_path(target: str | None) -> bool:
    """True for same-site paths like ``/diary/123``; rejects ``//host`` and URLs."""
    return bool(target) and target.startswith("/") and not target.startswith(("//", "/\\"))


class GoogleOAuthService:
    """Service for the Google authorization code flow."""

    def __init__(self) -> None:
        self.settings = get_settings()
        self.timeout = 10.0

    def require_configured(self, need_secret: bool = False) -> None:
        """Raise OAuthConfigError when client settings are missing."""
        if not self.settings.google_client_id:
            raise OAuthConfigError("GOOGLE_CLIENT_ID is not configured")
        if not self.settings.google_redirect_uri:
            raise OAuthConfigError("GOOGLE_REDIRECT_URI is not configured")
        if need_secret and not self.settings.google_client_secret:
            raise OAuthConfigError("GOOGLE_CLIENT_SECRET is not configured")

    def build_authorization_url(self, next_path: str | None = None) -> str:
        """Build the consent screen URL.

        A local ``next_path`` travels through Google as ``state`` and becomes
        the post-login redirect. Otherwise ``state`` is a random token.
        """
        self.require_configured()
        state = next_path if is_local_path(next_path) else secrets.token_hex(32)
        params = {
            "client_id": self.settings.google_client_id,
            "redirect_uri": self.settings.google_redirect_uri,
            "response_type": "code",
            "scope": "email profile",
            "access_type": "offline",
            "prompt": "consent",
            "state": state,
        }
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    async def exchange_code_for_token(self, code: str) -> GoogleToken:
        """Exchange an authorization code for an access token."""
        self.require_configured(need_secret=True)
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    GOOGLE_TOKEN_URL,
                    data={
                        "code": code,
                        "client_id": self.settings.google_client_id,
                        "client_secret": self.settings.google_client_secret,
                        "redirect_uri": self.settings.google_redirect_uri,
                        "grant_type": "authorization_code",
                    },
                )
                response.raise_for_status()
                return GoogleToken.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            logger.error(f"Google token exchange failed: {e.response.status_code} {e.response.text}")
            raise OAuthExchangeError("Token exchange failed") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Google token exchange failed: {e}")
            raise OAuthExchangeError("Token exchange failed") from e

    async def get_user_info(self, access_token: str) -> GoogleUserInfo:
        """Fetch the signed-in Google account's profile."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    GOOGLE_USERINFO_URL,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                response.raise_for_status()
                return GoogleUserInfo.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            logger.error(f"Google userinfo failed: {e.response.status_code} {e.response.text}")
            raise OAuthExchangeError("Failed to get user info") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Google userinfo failed: {e}")
            raise OAuthExchangeError("Failed to get user info") from e


def get_google_oauth_service() -> GoogleOAuthService:
    """Get a Google OAuth service instance."""
    return GoogleOAuthService()
