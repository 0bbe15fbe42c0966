"""Pydantic schemas for API request/response."""
from pydantic import BaseModel, Field

from token_quota.models.token import MAX_QUOTA, MAX_TOKEN_ID, MIN_TIMESTAMP, MAX_TIMESTAMP


# ===== Auth Schemas =====


class UserLoginRequest(BaseModel):
    """Management login request."""

    username: str = ""
    password: str = ""


class TokenResponse(BaseModel):
    """JWT token response."""

    access_token: str
    token_type: str = "bearer"


# ===== Token Quota Schemas =====


class AutoCreateTokenRequest(BaseModel):
    """Create a token for a user authenticated by username/password."""

    username: str = ""
    password: str = ""
    token_name: str = ""
    remain_quota: int = Field(default=0, le=MAX_QUOTA)
    expired_time: int = Field(default=0, ge=MIN_TIMESTAMP, le=MAX_TIMESTAMP)  # 0 selects the configured default (never expire)
    group: str = ""


class AutoCreateTokenResponse(BaseModel):
    """Created token (the key is only returned here)."""

    token_id: int
    key: str
    user_id: int


class UpdateTokenQuotaRequest(BaseModel):
    """Set a token's remaining quota by numeric ID."""

    token_id: int = Field(default=0, le=MAX_TOKEN_ID)
    remain_quota: int = Field(default=0, le=MAX_QUOTA)


class UpdateTokenQuotaByKeyRequest(BaseModel):
    """Set a token's remaining quota by API key."""

    api_key: str = ""
    remain_quota: int = Field(default=0, le=MAX_QUOTA)


class AddTokenQuotaRequest(BaseModel):
    """Add to a token's remaining quota by API key."""

    api_key: str = ""
    add_quota: int = Field(default=0, le=MAX_QUOTA)


class GetTokenInfoRequest(BaseModel):
    """Look up a token by API key."""

    api_key: str = ""


class TokenInfoResponse(BaseModel):
    """Read-only projection of a token."""

    token_id: int
    name: str
    remain_quota: int
    used_quota: int
    created_time: int
    expired_time: int
    group: str
    status: int
