"""Token repository for database operations."""
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, OperationalError, DBAPIError

from token_quota.models.token import MAX_QUOTA, Token, TokenStatus
from .exceptions import (
    DuplicateRecordException,
    DatabaseConnectionException,
    DatabaseOperationException,
    ValueOutOfRangeException,
)


class TokenRepository:
    """Repository for Token model operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        user_id: int,
        name: str,
        key: str,
        remain_quota: int,
        expired_time: int,
        group: str,
        created_time: int,
    ) -> Token:
        """Create a new token.

        Args:
            user_id: Owner user ID
            name: Token display name
            key: Generated secret key
            remain_quota: Initial quota
            expired_time: Expiry timestamp, -1 for never
            group: Policy group label
            created_time: Creation timestamp (also used as accessed time)

        Returns:
            Created Token object

        Raises:
            DuplicateRecordException: If key already exists
            DatabaseConnectionException: If database connection fails
            DatabaseOperationException: If database operation fails
        """
        try:
            token = Token(
                user_id=user_id,
                name=name,
                key=key,
                status=TokenStatus.ENABLED,
                created_time=created_time,
                accessed_time=created_time,
                expired_time=expired_time,
                remain_quota=remain_quota,
                used_quota=0,
                unlimited_quota=False,
                model_limits_enabled=False,
                model_limits="",
                allow_ips=None,
                group=group,
            )
            self.session.add(token)
            await self.session.flush()
            await self.session.refresh(token)
            return token
        except IntegrityError as e:
            error_msg = str(e.orig).lower()
            if "unique" in error_msg and "key" in error_msg:
                raise DuplicateRecordException("Token key collision detected")
            raise DatabaseOperationException("Failed to create token", detail=str(e.orig))
        except OperationalError as e:
            raise DatabaseConnectionException(detail=str(e.orig))
        except DBAPIError as e:
            raise DatabaseOperationException(detail=str(e.orig))

    async def get_by_id(self, token_id: int) -> Token | None:
        """Get token by ID.

        Returns:
            Token object if found, None otherwise
        """
        try:
            result = await self.session.execute(
                select(Token).where(Token.id == token_id)
            )
        except OperationalError as e:
            raise DatabaseConnectionException(detail=str(e.orig))
        return result.scalar_one_or_none()

    async def get_by_key(self, key: str, must_be_active: bool = False) -> Token | None:
        """Get token by its secret key.

        Args:
            key: Secret key (without the ``sk-`` prefix)
            must_be_active: Only match enabled tokens

        Returns:
            Token object if found, None otherwise
        """
        stmt = select(Token).where(Token.key == key)
        if must_be_active:
            stmt = stmt.where(Token.status == TokenStatus.ENABLED)
        try:
            result = await self.session.execute(stmt)
        except OperationalError as e:
            raise DatabaseConnectionException(detail=str(e.orig))
        return result.scalar_one_or_none()

    async def set_remain_quota(self, token: Token, remain_quota: int) -> Token:
        """Overwrite a token's remaining quota.

        Raises:
            DatabaseConnectionException: If database connection fails
            DatabaseOperationException: If database operation fails
        """
        try:
            token.remain_quota = remain_quota
            await self.session.flush()
            await self.session.refresh(token)
            return token
        except OperationalError as e:
            raise DatabaseConnectionException(detail=str(e.orig))
        except DBAPIError as e:
            raise DatabaseOperationException("Failed to update token quota", detail=str(e.orig))

    async def add_remain_quota(
        self, key: str, delta: int, must_be_active: bool = False
    ) -> int | None:
        """Atomically increment a token's remaining quota.

        The increment is a single ``UPDATE ... SET remain_quota = remain_quota + delta``
        so concurrent additions on the same row are serialized by the database.
        The new balance is read back inside the same transaction. Rows whose
        balance would pass MAX_QUOTA are left untouched.

        Args:
            key: Secret key (without the ``sk-`` prefix)
            delta: Amount to add
            must_be_active: Only match enabled tokens

        Returns:
            New remaining quota, or None if no token matched

        Raises:
            ValueOutOfRangeException: If the sum would exceed MAX_QUOTA
            DatabaseConnectionException: If database connection fails
            DatabaseOperationException: If database operation fails
        """
        conditions = [Token.key == key]
        if must_be_active:
            conditions.append(Token.status == TokenStatus.ENABLED)

        try:
            result = await self.session.execute(
                update(Token)
                .where(*conditions, Token.remain_quota <= MAX_QUOTA - delta)
                .values(remain_quota=Token.remain_quota + delta)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                existing = await self.session.execute(select(Token.id).where(*conditions))
                if existing.scalar_one_or_none() is not None:
                    raise ValueOutOfRangeException(f"remain_quota would exceed {MAX_QUOTA}")
                return None

            new_quota = await self.session.execute(
                select(Token.remain_quota).where(Token.key == key)
            )
            return new_quota.scalar_one()
        except OperationalError as e:
            raise DatabaseConnectionException(detail=str(e.orig))
        except DBAPIError as e:
            raise DatabaseOperationException("Failed to add token quota", detail=str(e.orig))
