"""Database models."""
from token_quota.models.user import User, UserRole, UserStatus
from token_quota.models.token import Token, TokenStatus

__all__ = [
    "User",
    "UserRole",
    "UserStatus",
    "Token",
    "TokenStatus",
]
