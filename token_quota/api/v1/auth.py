"""Authentication API endpoints."""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from token_quota.common.database import get_db
from token_quota.common.responses import success_response
from token_quota.common.rate_limit import limiter, RATE_LIMIT
from token_quota.domain.schemas import UserLoginRequest
from token_quota.usecase.auth_usecase import AuthUsecase

router = APIRouter()


@router.post("/auth/login", response_model=dict)
@limiter.limit(RATE_LIMIT)
async def login(
    request: Request,
    login_request: UserLoginRequest,
    session: AsyncSession = Depends(get_db),
):
    """Login and get a JWT access token for quota management.

    Args:
        request: FastAPI Request object (for rate limiting)
        login_request: User login request
        session: Database session

    Returns:
        Success response with access token
    """
    usecase = AuthUsecase(session)
    token = await usecase.login(login_request)
    return success_response("Login successful", token.model_dump())
