"""Exception hierarchy for the API.

Every error raised from a service or dependency carries the HTTP status it
maps to and a message that is safe to show to the client. The handlers in
``last_leaf.main`` render them as ``{"error": message}``.
"""

from fastapi import status


class LastLeafError(Exception):
    """Base exception for all application errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        """Convert exception to a dictionary for API responses."""
        return {"error": self.message}


class ValidationError(LastLeafError):
    """Input validation failed."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(LastLeafError):
    """Missing, invalid or expired credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Session token failed signature, structure or expiry checks."""


class AuthorizationError(LastLeafError):
    """Valid identity acting on a resource it does not own."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class NotFoundError(LastLeafError):
    """Resource not found."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class ConflictError(LastLeafError):
    """Unique field already taken."""

    status_code = status.HTTP_409_CONFLICT


class InternalError(LastLeafError):
    """Unexpected failure reported with a generic message."""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)


class OAuthConfigError(InternalError):
    """Google OAuth client settings are missing."""

    def __init__(self, message: str = "Google OAuth not configured"):
        super().__init__(message)


class OAuthExchangeError(LastLeafError):
    """A call to Google during the OAuth flow failed."""

    status_code = status.HTTP_502_BAD_GATEWAY
