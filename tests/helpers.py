"""Shared test helpers."""

from fastapi.testclient import TestClient

from last_leaf.config import get_settings

AUTH_COOKIE = get_settings().auth_cookie_name
TEST_PASSWORD = "testpass123"


def use_token(client: TestClient, token: str | None) -> None:
    """Make the client act as the owner of token (None logs out)."""
    client.cookies.clear()
    if token:
        client.cookies.set(AUTH_COOKIE, token)
