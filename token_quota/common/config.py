from pydantic_settings import BaseSettings
from pydantic import field_validator
import json


class Settings(BaseSettings):
    # Application
    app_name: str = "Token Quota Service"
    app_version: str = "0.1.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    app_port: int = 8000
    log_dir: str | None = None

    # Database
    database_url: str = "sqlite+aiosqlite:///./token_quota.db"

    # JWT Security (management access tokens)
    jwt_secret_key: str = "change-me-to-a-long-random-secret-string"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60

    # Rate Limiting
    rate_limit_per_minute: int = 60

    # CORS
    cors_origins: list[str] | str = '["http://localhost:3000","http://localhost:8000"]'

    # Token defaults applied on auto creation
    token_default_name: str = "Auto-generated token"
    token_default_remain_quota: int = 100000
    token_default_expired_time: int = -1  # -1 means never expires
    token_default_group: str = "default"
    token_name_max_length: int = 30
    token_key_length: int = 48

    # Quota management gate
    quota_admin_auth_enabled: bool = False
    quota_lookup_active_only: bool = True  # key lookups only match enabled tokens

    # SQLite lock wait, seconds
    sqlite_busy_timeout: float = 30.0

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [v]
        return v

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Ignore extra fields from .env


settings = Settings()
