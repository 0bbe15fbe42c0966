"""Token usecase for API key creation and quota management."""
import logging
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from token_quota.common.config import settings
from token_quota.common.exceptions import (
    UnauthorizedException,
    ForbiddenException,
    ValidationException,
    NotFoundException,
    InternalServerException,
)
from token_quota.common.time_utils import get_timestamp
from token_quota.domain.key_service import KeyGenerationError, generate_key, normalize_key
from token_quota.domain.quota_policy import (
    TokenDefaults,
    resolve_token_fields,
    require_credentials,
    require_api_key,
    require_token_id,
    require_remain_quota,
    require_add_quota,
)
from token_quota.domain.schemas import (
    AutoCreateTokenRequest,
    AutoCreateTokenResponse,
    UpdateTokenQuotaRequest,
    UpdateTokenQuotaByKeyRequest,
    AddTokenQuotaRequest,
    GetTokenInfoRequest,
    TokenInfoResponse,
)
from token_quota.models.token import MAX_QUOTA, Token
from token_quota.repository.token_repository import TokenRepository
from token_quota.repository.exceptions import (
    DuplicateRecordException,
    RepositoryException,
    ValueOutOfRangeException,
)
from token_quota.usecase.auth_usecase import AuthUsecase

logger = logging.getLogger(__name__)

MAX_KEY_ATTEMPTS = 3


class TokenUsecase:
    """Usecase for token quota operations."""

    def __init__(
        self,
        session: AsyncSession,
        defaults: TokenDefaults | None = None,
        key_generator: Callable[[], str] = generate_key,
        lookup_active_only: bool | None = None,
    ):
        self.session = session
        self.token_repo = TokenRepository(session)
        self.auth = AuthUsecase(session)
        self.defaults = defaults or TokenDefaults.from_settings()
        self.key_generator = key_generator
        if lookup_active_only is None:
            lookup_active_only = settings.quota_lookup_active_only
        self.lookup_active_only = lookup_active_only

    async def create_token(self, request: AutoCreateTokenRequest) -> AutoCreateTokenResponse:
        """Create a token for a user identified by username and password.

        Returns:
            AutoCreateTokenResponse with the secret key (shown only once)

        Raises:
            ValidationException: If credentials are missing or the name is too long
            UnauthorizedException: If credentials are invalid
            ForbiddenException: If the user account is disabled
            InternalServerException: If key generation or persistence fails
        """
        require_credentials(request.username, request.password)
        fields = resolve_token_fields(
            self.defaults,
            name=request.token_name,
            remain_quota=request.remain_quota,
            expired_time=request.expired_time,
            group=request.group,
        )

        user = await self.auth.validate_credentials(request.username, request.password)
        if user is None:
            raise UnauthorizedException("Invalid username or password")

        if not user.is_enabled:
            raise ForbiddenException("User account is disabled")

        # Regenerate on key collision (extremely rare)
        token = None
        for attempt in range(MAX_KEY_ATTEMPTS):
            try:
                key = self.key_generator()
            except KeyGenerationError as e:
                logger.error(f"Failed to generate token key: {e}")
                raise InternalServerException(f"Failed to generate API key: {e}")

            now = get_timestamp()
            try:
                async with self.session.begin():
                    token = await self.token_repo.create(
                        user_id=user.id,
                        name=fields.name,
                        key=key,
                        remain_quota=fields.remain_quota,
                        expired_time=fields.expired_time,
                        group=fields.group,
                        created_time=now,
                    )
                break
            except DuplicateRecordException:
                if attempt == MAX_KEY_ATTEMPTS - 1:
                    logger.error("Failed to generate a unique token key")
                    raise InternalServerException("Failed to create token")
                continue
            except RepositoryException as e:
                logger.error(f"Failed to create token for user {user.id}: {e.detail or e.message}")
                raise InternalServerException("Failed to create token")

        logger.info(f"Created token {token.id} for user {user.id}")

        return AutoCreateTokenResponse(
            token_id=token.id,
            key=token.key,
            user_id=user.id,
        )

    async def update_quota(self, request: UpdateTokenQuotaRequest) -> None:
        """Overwrite the remaining quota of a token found by ID.

        Raises:
            ValidationException: If token_id <= 0 or remain_quota < 0
            NotFoundException: If token not found
            InternalServerException: If persistence fails
        """
        require_token_id(request.token_id)
        require_remain_quota(request.remain_quota)

        try:
            async with self.session.begin():
                token = await self.token_repo.get_by_id(request.token_id)
                if not token:
                    raise NotFoundException("Token not found")
                await self._set_quota(token, request.remain_quota)
        except RepositoryException as e:
            logger.error(f"Failed to update quota of token {request.token_id}: {e.detail or e.message}")
            raise InternalServerException("Failed to update token quota")

    async def update_quota_by_key(self, request: UpdateTokenQuotaByKeyRequest) -> None:
        """Overwrite the remaining quota of a token found by key.

        Raises:
            ValidationException: If api_key is empty or remain_quota < 0
            NotFoundException: If token not found
            InternalServerException: If persistence fails
        """
        key = normalize_key(request.api_key)
        require_api_key(key)
        require_remain_quota(request.remain_quota)

        try:
            async with self.session.begin():
                token = await self.token_repo.get_by_key(key, must_be_active=self.lookup_active_only)
                if not token:
                    raise NotFoundException("Token not found")
                await self._set_quota(token, request.remain_quota)
        except RepositoryException as e:
            logger.error(f"Failed to update quota by key: {e.detail or e.message}")
            raise InternalServerException("Failed to update token quota")

    async def add_quota(self, request: AddTokenQuotaRequest) -> int:
        """Add to the remaining quota of a token found by key.

        The increment is applied atomically by the database, so concurrent
        additions on one key are each counted exactly once.

        Returns:
            The new remaining quota

        Raises:
            ValidationException: If api_key is empty or add_quota <= 0,
                or the new balance would exceed MAX_QUOTA
            NotFoundException: If token not found
            InternalServerException: If persistence fails
        """
        key = normalize_key(request.api_key)
        require_api_key(key)
        require_add_quota(request.add_quota)

        try:
            async with self.session.begin():
                new_quota = await self.token_repo.add_remain_quota(
                    key, request.add_quota, must_be_active=self.lookup_active_only
                )
        except ValueOutOfRangeException:
            raise ValidationException(
                f"Invalid add_quota: remain_quota would exceed {MAX_QUOTA}"
            )
        except RepositoryException as e:
            logger.error(f"Failed to add token quota: {e.detail or e.message}")
            raise InternalServerException("Failed to add token quota")

        if new_quota is None:
            raise NotFoundException("Token not found")

        logger.info(
            f"Added {request.add_quota} quota to token: "
            f"{new_quota - request.add_quota} -> {new_quota}"
        )
        return new_quota

    async def get_token_info(self, request: GetTokenInfoRequest) -> TokenInfoResponse:
        """Read a token's quota state by key.

        Raises:
            ValidationException: If api_key is empty
            NotFoundException: If token not found
        """
        key = normalize_key(request.api_key)
        require_api_key(key)

        try:
            async with self.session.begin():
                token = await self.token_repo.get_by_key(key, must_be_active=self.lookup_active_only)
        except RepositoryException as e:
            logger.error(f"Failed to load token: {e.detail or e.message}")
            raise InternalServerException("Failed to load token")

        if not token:
            raise NotFoundException("Token not found")

        return TokenInfoResponse(
            token_id=token.id,
            name=token.name,
            remain_quota=token.remain_quota,
            used_quota=token.used_quota,
            created_time=token.created_time,
            expired_time=token.expired_time,
            group=token.group,
            status=token.status,
        )

    async def _set_quota(self, token: Token, remain_quota: int) -> None:
        old_quota = token.remain_quota
        await self.token_repo.set_remain_quota(token, remain_quota)
        logger.info(f"Set quota of token {token.id}: {old_quota} -> {remain_quota}")
