"""Authentication usecase: credential checks and management access tokens."""
import logging

import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from token_quota.common.exceptions import (
    UnauthorizedException,
    InternalServerException,
    TokenExpiredException,
    InvalidTokenException,
)
from token_quota.domain.auth_service import (
    verify_password,
    create_access_token,
    extract_user_id_from_token,
)
from token_quota.domain.quota_policy import require_credentials
from token_quota.domain.schemas import UserLoginRequest, TokenResponse
from token_quota.models.user import User
from token_quota.repository.user_repository import UserRepository
from token_quota.repository.exceptions import RepositoryException

logger = logging.getLogger(__name__)


class AuthUsecase:
    """Usecase for authentication operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)

    async def validate_credentials(self, username: str, password: str) -> User | None:
        """Resolve a username/password pair to a user.

        The user's status is not checked here; callers decide what a
        disabled account may do.

        Returns:
            User if the credentials match, None otherwise

        Raises:
            InternalServerException: If the user store cannot be read
        """
        try:
            async with self.session.begin():
                user = await self.user_repo.get_by_username(username)
        except RepositoryException as e:
            logger.error(f"Failed to load user '{username}': {e.detail or e.message}")
            raise InternalServerException("Failed to validate credentials")

        if not user or not verify_password(password, user.password_hash):
            logger.warning(f"Invalid credentials for user '{username}'")
            return None

        return user

    async def login(self, request: UserLoginRequest) -> TokenResponse:
        """Authenticate user and return a JWT for quota management.

        Raises:
            ValidationException: If username or password is empty
            UnauthorizedException: If credentials are invalid
        """
        require_credentials(request.username, request.password)

        user = await self.validate_credentials(request.username, request.password)
        if not user:
            raise UnauthorizedException("Invalid username or password")

        return TokenResponse(access_token=create_access_token(user.id))

    async def authenticate_jwt(self, jwt_token: str) -> User:
        """Authenticate user from JWT token.

        Raises:
            TokenExpiredException: If token has expired
            InvalidTokenException: If token is invalid or user not found
        """
        try:
            user_id = extract_user_id_from_token(jwt_token)
        except jwt.ExpiredSignatureError:
            raise TokenExpiredException()
        except jwt.InvalidTokenError:
            raise InvalidTokenException()

        async with self.session.begin():
            user = await self.user_repo.get_by_id(user_id)

        if not user:
            # User was deleted after the token was issued
            raise InvalidTokenException()

        return user
