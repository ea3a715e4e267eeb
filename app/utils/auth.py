"""
Authentication utilities with JWT tokens and bcrypt password hashing.

- bcrypt with salt for password hashing
- HS256-signed JWTs carrying the user id and email
- One hour token lifetime by default (ACCESS_TOKEN_EXPIRE_MINUTES)
- UTC timezone consistency
"""

import uuid
from datetime import UTC, datetime, timedelta

import bcrypt
from jose import JWTError, jwt

from app.config import settings

# bcrypt only looks at the first 72 bytes and rejects longer input
MAX_PASSWORD_BYTES = 72


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain text password against a hashed password."""
    pwd_bytes = plain_password.encode("utf-8")
    if len(pwd_bytes) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(pwd_bytes, hashed_password.encode("utf-8"))


def get_password_hash(password: str) -> str:
    """Hash a plain text password using bcrypt."""
    pwd_bytes = password.encode("utf-8")
    if len(pwd_bytes) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password is longer than {MAX_PASSWORD_BYTES} bytes")
    salt = bcrypt.gensalt()
    hashed_password = bcrypt.hashpw(password=pwd_bytes, salt=salt)
    return hashed_password.decode("utf-8")


def create_access_token(
    user_id: uuid.UUID, email: str, expires_delta: timedelta | None = None
) -> str:
    """Create a signed access token for the given user."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    to_encode = {
        "userId": str(user_id),
        "email": email,
        "exp": datetime.now(UTC) + expires_delta,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict | None:
    """Decode and verify a JWT access token."""
    try:
        return jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except JWTError:
        return None


def extract_user_id_from_token(token: str) -> uuid.UUID | None:
    """Extract the user id claim from a JWT token."""
    payload = decode_access_token(token)
    if payload is None:
        return None
    try:
        return uuid.UUID(payload.get("userId", ""))
    except (TypeError, ValueError):
        return None
