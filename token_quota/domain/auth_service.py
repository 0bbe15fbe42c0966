"""Authentication service for password hashing and JWT."""
from datetime import datetime, timedelta, timezone

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError, InvalidHashError, VerificationError
from pydantic import BaseModel

from token_quota.common.config import settings


# Argon2 password hasher
ph = PasswordHasher()


class JWTPayload(BaseModel):
    """JWT token payload."""

    sub: str  # Subject (user_id)
    exp: int  # Expiration timestamp
    iat: int  # Issued at timestamp


def hash_password(password: str) -> str:
    """Hash a password using Argon2."""
    return ph.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Args:
        password: Plain text password to verify
        hashed_password: The hashed password to check against

    Returns:
        True if password matches, False otherwise
    """
    try:
        ph.verify(hashed_password, password)
        return True
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token for quota management calls.

    Args:
        user_id: The user's ID
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_expire_minutes)

    now = datetime.now(timezone.utc)
    expire = now + expires_delta

    payload = JWTPayload(
        sub=str(user_id),
        exp=int(expire.timestamp()),
        iat=int(now.timestamp()),
    )

    return jwt.encode(
        payload.model_dump(),
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def extract_user_id_from_token(token: str) -> int:
    """Extract user ID from a JWT token.

    Raises:
        jwt.ExpiredSignatureError: If token is expired
        jwt.InvalidTokenError: If token is invalid
    """
    payload_dict = jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm],
    )
    payload = JWTPayload(**payload_dict)

    try:
        return int(payload.sub)
    except ValueError:
        raise jwt.InvalidTokenError("Invalid token payload")
