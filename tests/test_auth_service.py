"""Tests for password hashing, the session token codec and the auth dependency."""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from last_leaf.api.dependencies import get_current_identity
from last_leaf.config import get_settings
from last_leaf.exceptions import (
    AuthenticationError,
    ConflictError,
    InvalidTokenError,
    ValidationError,
)
from last_leaf.services.auth import (
    authenticate_user,
    create_access_token,
    create_user,
    decode_access_token,
    get_password_hash,
    upsert_oauth_user,
    verify_password,
)

settings = get_settings()


class TestPasswordHashing:
    """Tests for the credential hasher."""

    def test_hash_and_verify(self):
        hashed = get_password_hash("correct horse")
        assert hashed != "correct horse"
        assert verify_password("correct horse", hashed) is True
        assert verify_password("wrong horse!", hashed) is False

    def test_hashes_are_salted(self):
        assert get_password_hash("samepassword") != get_password_hash("samepassword")

    def test_uses_ten_rounds(self):
        assert get_password_hash("roundsroundsrounds").startswith("$2b$10$")

    def test_empty_password_rejected(self):
        with pytest.raises(ValidationError, match="Password cannot be empty"):
            get_password_hash("")

    def test_short_password_rejected(self):
        with pytest.raises(ValidationError, match="at least 8 characters"):
            get_password_hash("short")

    def test_verify_empty_inputs(self):
        hashed = get_password_hash("something long")
        assert verify_password("", hashed) is False
        assert verify_password("something long", None) is False
        assert verify_password("something long", "") is False

    def test_verify_malformed_hash_raises(self):
        with pytest.raises(ValidationError, match="Invalid hash format"):
            verify_password("something long", "not-a-bcrypt-hash")


class TestTokenCodec:
    """Tests for session token issue and verification."""

    def test_round_trip_claims(self):
        token = create_access_token("user-123", "u@example.com")
        payload = decode_access_token(token)
        assert payload.user_id == "user-123"
        assert payload.email == "u@example.com"

    def test_default_lifetime_is_seven_days(self):
        token = create_access_token("user-123", "u@example.com")
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        assert claims["exp"] - claims["iat"] == 7 * 24 * 60 * 60

    def test_expired_token(self):
        token = create_access_token("user-123", "u@example.com", expires_delta=timedelta(seconds=-1))
        with pytest.raises(InvalidTokenError):
            decode_access_token(token)

    def test_wrong_secret(self):
        token = jwt.encode(
            {"sub": "user-123", "email": "u@example.com"},
            "some-other-secret",
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(InvalidTokenError):
            decode_access_token(token)

    def test_tampered_token(self):
        token = create_access_token("user-123", "u@example.com")
        header, payload, signature = token.split(".")
        tampered = f"{header}.{payload}.{signature[::-1]}"
        with pytest.raises(InvalidTokenError):
            decode_access_token(tampered)

    def test_missing_identity_claims(self):
        token = jwt.encode(
            {"sub": "user-123", "exp": datetime.now(UTC) + timedelta(minutes=5)},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(InvalidTokenError, match="missing identity claims"):
            decode_access_token(token)

    def test_garbage(self):
        with pytest.raises(InvalidTokenError):
            decode_access_token("garbage")


class TestCurrentIdentity:
    """Tests for the cookie authentication dependency."""

    def test_valid_cookie(self):
        identity = get_current_identity(create_access_token("user-1", "one@example.com"))
        assert identity.user_id == "user-1"

    @pytest.mark.parametrize("token", [None, "", "garbage"])
    def test_missing_or_invalid_cookie(self, token):
        with pytest.raises(AuthenticationError) as exc_info:
            get_current_identity(token)
        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Unauthorized"


class TestUserAccounts:
    """Tests for account creation and lookup."""

    def test_create_user_lowercases_email(self, db):
        user = create_user(db, "Person@Example.com", "longenough", "Person")
        assert user.email == "person@example.com"
        assert user.password_hash != "longenough"

    def test_create_user_duplicate(self, db):
        create_user(db, "dup@example.com", "longenough", "Dup")
        with pytest.raises(ConflictError, match="Email already exists"):
            create_user(db, "DUP@example.com", "longenough", "Dup")

    def test_authenticate_user(self, db):
        create_user(db, "auth@example.com", "longenough", "Auth")
        assert authenticate_user(db, "Auth@example.com", "longenough") is not None
        assert authenticate_user(db, "auth@example.com", "wrongpassword") is None
        assert authenticate_user(db, "nobody@example.com", "longenough") is None

    def test_upsert_oauth_user_creates(self, db):
        user = upsert_oauth_user(db, "New@Gmail.com", "New Person")
        assert user.email == "new@gmail.com"
        assert user.nickname == "New Person"
        assert user.password_hash is None
        assert user.last_active_at is not None

    def test_upsert_oauth_user_without_name(self, db):
        user = upsert_oauth_user(db, "handle@gmail.com", None)
        assert user.nickname == "handle"

    def test_upsert_oauth_user_existing(self, db):
        existing = create_user(db, "both@example.com", "longenough", "Both")
        assert existing.last_active_at is None

        user = upsert_oauth_user(db, "both@example.com", "Other Name")
        assert user.id == existing.id
        assert user.nickname == "Both"
        assert user.password_hash is not None
        assert user.last_active_at is not None
