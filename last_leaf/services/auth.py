"""Authentication service for JWT and password handling."""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from last_leaf.config import get_settings
from last_leaf.exceptions import ConflictError, InvalidTokenError, ValidationError
from last_leaf.models.user import User
from last_leaf.schemas.auth import TokenPayload
from last_leaf.schemas.validation import MIN_PASSWORD_LENGTH

logger = logging.getLogger(__name__)
settings = get_settings()

BCRYPT_ROUNDS = 10

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def get_password_hash(password: str) -> str:
    """Hash a password.

    Raises:
        ValidationError: if the password is empty or too short
    """
    if not password:
        raise ValidationError("Password cannot be empty")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Verify a password against its hash.

    A wrong password returns False. Only a stored hash that cannot be parsed
    raises.
    """
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        raise ValidationError("Invalid hash format") from e


def create_access_token(
    user_id: str, email: str, expires_delta: timedelta | None = None
) -> str:
    """Create a JWT access token."""
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(minutes=settings.jwt_expiration_minutes))
    to_encode = {
        "sub": str(user_id),
        "email": email,
        "iat": now,
        "exp": expire,
    }
    encoded_jwt = jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return encoded_jwt


def decode_access_token(token: str) -> TokenPayload:
    """Decode and validate a JWT token.

    Raises:
        InvalidTokenError: if the signature is bad, the token is expired or
            the identity claims are missing
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise InvalidTokenError(f"Token verification failed: {e}") from e

    user_id = payload.get("sub")
    email = payload.get("email")
    if not user_id or not email:
        raise InvalidTokenError("Token verification failed: missing identity claims")

    return TokenPayload(user_id=user_id, email=email)


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email, ignoring case."""
    return db.query(User).filter(User.email == email.lower()).first()


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Authenticate a user by email and password."""
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def create_user(db: Session, email: str, password: str, nickname: str) -> User:
    """Create a new password user.

    Raises:
        ConflictError: if the email is already registered
    """
    if get_user_by_email(db, email):
        raise ConflictError("Email already exists")

    hashed_password = get_password_hash(password)
    user = User(email=email.lower(), password_hash=hashed_password, nickname=nickname)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError("Email already exists") from e
    db.refresh(user)
    logger.info(f"Created user {user.id}")
    return user


def mark_logged_in(db: Session, user: User) -> User:
    """Record a successful login on the user's activity clock."""
    user.last_active_at = datetime.now(UTC)
    db.commit()
    db.refresh(user)
    return user


def upsert_oauth_user(db: Session, email: str, display_name: str | None) -> User:
    """Find the user for an external identity, creating a password-less one if needed."""
    user = get_user_by_email(db, email)
    now = datetime.now(UTC)
    if user:
        user.last_active_at = now
    else:
        nickname = display_name or email.split("@")[0]
        user = User(email=email.lower(), password_hash=None, nickname=nickname, last_active_at=now)
        db.add(user)
        logger.info(f"Creating user for Google account {email.lower()}")
    db.commit()
    db.refresh(user)
    return user
