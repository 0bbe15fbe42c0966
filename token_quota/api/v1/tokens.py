"""Token quota API endpoints."""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from token_quota.common.database import get_db
from token_quota.common.responses import success_response
from token_quota.common.rate_limit import limiter, RATE_LIMIT
from token_quota.domain.schemas import (
    AutoCreateTokenRequest,
    UpdateTokenQuotaRequest,
    UpdateTokenQuotaByKeyRequest,
    AddTokenQuotaRequest,
    GetTokenInfoRequest,
)
from token_quota.usecase.token_usecase import TokenUsecase
from .dependencies import authorize_quota_management

router = APIRouter()


@router.post("/token/auto_create", response_model=dict)
@limiter.limit(RATE_LIMIT)
async def auto_create_token(
    request: Request,
    token_request: AutoCreateTokenRequest,
    session: AsyncSession = Depends(get_db),
):
    """Create a token for a user authenticated by username and password.

    Intended for external systems that provision keys on a user's behalf.

    Args:
        request: FastAPI Request object (for rate limiting)
        token_request: Credentials plus optional token fields
        session: Database session

    Returns:
        Success response with token ID, secret key (shown only once) and user ID
    """
    usecase = TokenUsecase(session)
    token = await usecase.create_token(token_request)
    return success_response("Token created successfully", token.model_dump())


@router.post("/token/update_quota", response_model=dict, dependencies=[Depends(authorize_quota_management)])
async def update_token_quota(
    quota_request: UpdateTokenQuotaRequest,
    session: AsyncSession = Depends(get_db),
):
    """Set the remaining quota of a token by ID."""
    usecase = TokenUsecase(session)
    await usecase.update_quota(quota_request)
    return success_response("Token quota updated successfully")


@router.post("/token/update_quota_by_key", response_model=dict, dependencies=[Depends(authorize_quota_management)])
async def update_token_quota_by_key(
    quota_request: UpdateTokenQuotaByKeyRequest,
    session: AsyncSession = Depends(get_db),
):
    """Set the remaining quota of a token by API key."""
    usecase = TokenUsecase(session)
    await usecase.update_quota_by_key(quota_request)
    return success_response("Token quota updated successfully")


@router.post("/token/add_quota", response_model=dict, dependencies=[Depends(authorize_quota_management)])
async def add_token_quota(
    quota_request: AddTokenQuotaRequest,
    session: AsyncSession = Depends(get_db),
):
    """Add to the remaining quota of a token by API key."""
    usecase = TokenUsecase(session)
    new_quota = await usecase.add_quota(quota_request)
    return success_response("Token quota added successfully", {"remain_quota": new_quota})


@router.post("/token/info", response_model=dict, dependencies=[Depends(authorize_quota_management)])
async def get_token_info(
    info_request: GetTokenInfoRequest,
    session: AsyncSession = Depends(get_db),
):
    """Get quota information for a token by API key."""
    usecase = TokenUsecase(session)
    info = await usecase.get_token_info(info_request)
    return success_response("Token information retrieved successfully", info.model_dump())
