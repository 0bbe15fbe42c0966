"""Repository layer for database operations."""
from token_quota.repository.user_repository import UserRepository
from token_quota.repository.token_repository import TokenRepository

__all__ = [
    "UserRepository",
    "TokenRepository",
]
