"""User repository for database operations."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, OperationalError, DBAPIError

from token_quota.models.user import User, UserRole, UserStatus
from .exceptions import (
    DuplicateRecordException,
    DatabaseConnectionException,
    DatabaseOperationException,
)


class UserRepository:
    """Repository for User model operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        username: str,
        password_hash: str,
        role: int = UserRole.COMMON,
        status: int = UserStatus.ENABLED,
        display_name: str = "",
    ) -> User:
        """Create a new user.

        Raises:
            DuplicateRecordException: If username already exists
            DatabaseConnectionException: If database connection fails
            DatabaseOperationException: If database operation fails
        """
        try:
            user = User(
                username=username,
                password_hash=password_hash,
                role=role,
                status=status,
                display_name=display_name or username,
            )
            self.session.add(user)
            await self.session.flush()
            await self.session.refresh(user)
            return user
        except IntegrityError as e:
            if "unique" in str(e.orig).lower():
                raise DuplicateRecordException(f"Username '{username}' already exists")
            raise DatabaseOperationException("Failed to create user", detail=str(e.orig))
        except OperationalError as e:
            raise DatabaseConnectionException(detail=str(e.orig))
        except DBAPIError as e:
            raise DatabaseOperationException(detail=str(e.orig))

    async def get_by_id(self, user_id: int) -> User | None:
        """Get user by ID."""
        result = await self.session.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> User | None:
        """Get user by username."""
        try:
            result = await self.session.execute(
                select(User).where(User.username == username)
            )
        except OperationalError as e:
            raise DatabaseConnectionException(detail=str(e.orig))
        return result.scalar_one_or_none()
