"""Usecase layer for application services."""
from token_quota.usecase.auth_usecase import AuthUsecase
from token_quota.usecase.token_usecase import TokenUsecase

__all__ = [
    "AuthUsecase",
    "TokenUsecase",
]
