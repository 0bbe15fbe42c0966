"""Dependencies for API endpoints (quota management authorization)."""
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from token_quota.common.config import settings
from token_quota.common.database import get_db
from token_quota.common.exceptions import UnauthorizedException, ForbiddenException
from token_quota.models.user import User, UserRole
from token_quota.usecase.auth_usecase import AuthUsecase


async def get_current_user_from_jwt(
    authorization: Annotated[str | None, Header()] = None,
    session: AsyncSession = Depends(get_db),
) -> User:
    """Get current user from JWT token.

    Raises:
        UnauthorizedException: If token is missing or invalid
    """
    if not authorization:
        raise UnauthorizedException("Missing authorization header")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise UnauthorizedException("Invalid access token")

    auth_usecase = AuthUsecase(session)
    return await auth_usecase.authenticate_jwt(parts[1])


async def authorize_quota_management(
    authorization: Annotated[str | None, Header()] = None,
    session: AsyncSession = Depends(get_db),
) -> User | None:
    """Gate for quota update, quota add and token info endpoints.

    With ``quota_admin_auth_enabled`` off every caller is admitted and None is
    returned; the endpoints are then expected to be reachable only by trusted
    internal services. With it on, the caller must present a JWT for an
    enabled admin user. Override this dependency to plug in another policy.

    Raises:
        UnauthorizedException: If the access token is missing or invalid
        ForbiddenException: If the user is disabled or not an admin
    """
    if not settings.quota_admin_auth_enabled:
        return None

    user = await get_current_user_from_jwt(authorization, session)

    if not user.is_enabled:
        raise ForbiddenException("User account is disabled")

    if user.role < UserRole.ADMIN:
        raise ForbiddenException("Insufficient permissions")

    return user

