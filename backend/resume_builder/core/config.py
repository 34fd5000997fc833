"""
Settings for the Resume Builder API, read from the environment and ``.env``.

The Gemini key is optional at startup: without it the server still serves
document CRUD, and every AI endpoint answers with a configuration error.
"""

import secrets
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_assignment=True,
        extra="ignore",
    )

    app_name: str = "Resume Builder API"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"
    api_v1_str: str = "/api/v1"

    # Auth
    secret_key: str = Field(default_factory=lambda: secrets.token_urlsafe(32))
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    cors_origins: List[str] = ["*"]
    cors_credentials: bool = True
    cors_methods: List[str] = ["*"]
    cors_headers: List[str] = ["*"]

    # Document store; pool options apply to PostgreSQL only
    database_url: str = "sqlite+aiosqlite:///./resume_builder.db"
    database_pool_size: int = 10
    database_max_overflow: int = 20
    database_pool_timeout: int = 30
    database_pool_recycle: int = 3600
    database_echo: bool = False

    # Generative AI
    gemini_api_key: Optional[str] = None
    ai_request_timeout: float = Field(default=45.0, gt=0)
    intent_history_turns: int = Field(default=10, ge=0)

    # Per-user limit on AI endpoints
    rate_limit_enabled: bool = True
    ai_rate_limit: str = "20/minute"

    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_max_bytes: int = 10 * 1024 * 1024
    log_backup_count: int = 5

    @field_validator("secret_key", mode="before")
    @classmethod
    def validate_secret_key(cls, v):
        if not v:
            return secrets.token_urlsafe(32)
        if len(v) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters long")
        return v

    @field_validator("database_url")
    @classmethod
    def use_async_driver(cls, v):
        """Rewrite plain PostgreSQL and SQLite URLs to their async drivers."""
        if not v:
            raise ValueError("DATABASE_URL is required")
        for sync_prefix, async_prefix in (
            ("postgresql://", "postgresql+asyncpg://"),
            ("sqlite:///", "sqlite+aiosqlite:///"),
        ):
            if v.startswith(sync_prefix):
                return async_prefix + v[len(sync_prefix):]
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("LOG_LEVEL must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return level

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
