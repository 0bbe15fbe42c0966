"""Token defaults and request validation rules."""
from dataclasses import dataclass

from token_quota.common.config import Settings, settings
from token_quota.common.exceptions import ValidationException


@dataclass(frozen=True)
class TokenDefaults:
    """Values substituted for absent fields when a token is auto-created."""

    name: str = "Auto-generated token"
    remain_quota: int = 100000
    expired_time: int = -1  # never expires
    group: str = "default"
    name_max_length: int = 30

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "TokenDefaults":
        return cls(
            name=config.token_default_name,
            remain_quota=config.token_default_remain_quota,
            expired_time=config.token_default_expired_time,
            group=config.token_default_group,
            name_max_length=config.token_name_max_length,
        )


@dataclass(frozen=True)
class ResolvedTokenFields:
    """Creation fields after defaults have been applied."""

    name: str
    remain_quota: int
    expired_time: int
    group: str


def resolve_token_fields(
    defaults: TokenDefaults,
    name: str,
    remain_quota: int,
    expired_time: int,
    group: str,
) -> ResolvedTokenFields:
    """Validate the token name and fill in defaults.

    Raises:
        ValidationException: If the name is longer than allowed
    """
    if not name:
        name = defaults.name

    if len(name) > defaults.name_max_length:
        raise ValidationException(
            f"Token name too long (max {defaults.name_max_length} characters)"
        )

    if remain_quota <= 0:
        remain_quota = defaults.remain_quota

    if expired_time == 0:
        expired_time = defaults.expired_time

    if not group:
        group = defaults.group

    return ResolvedTokenFields(
        name=name,
        remain_quota=remain_quota,
        expired_time=expired_time,
        group=group,
    )


def require_credentials(username: str, password: str) -> None:
    if not username:
        raise ValidationException("Username is required")
    if not password:
        raise ValidationException("Password is required")


def require_api_key(api_key: str) -> None:
    if not api_key:
        raise ValidationException("API key is required")


def require_token_id(token_id: int) -> None:
    if token_id <= 0:
        raise ValidationException("Invalid token_id: must be greater than 0")


def require_remain_quota(remain_quota: int) -> None:
    if remain_quota < 0:
        raise ValidationException("Invalid remain_quota: must be >= 0")


def require_add_quota(add_quota: int) -> None:
    if add_quota <= 0:
        raise ValidationException("Invalid add_quota: must be greater than 0")
