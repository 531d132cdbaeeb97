"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - JWT secrets are at least 32 characters; startup fails otherwise
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - NODE_ENV accepted as an alias of ENVIRONMENT so existing .env files keep working
    - Defaults provided for all non-secret settings except DATABASE_URL
"""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from blog_api.db.session import async_database_url

JWT_SECRET_MIN_LENGTH = 32


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore",
    )

    # Server
    host: str = "0.0.0.0"
    port: int = Field(3000, ge=1, le=65535)
    environment: Literal["development", "test", "production"] = Field(
        "development",
        validation_alias=AliasChoices("environment", "node_env"),
    )

    # Database
    database_url: str

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        if isinstance(v, str):
            return async_database_url(v)
        return v

    database_pool_size: int = 10
    database_max_overflow: int = 5
    database_echo: bool = False

    # Auth
    jwt_access_secret: str = Field(min_length=JWT_SECRET_MIN_LENGTH)
    jwt_refresh_secret: str = Field(min_length=JWT_SECRET_MIN_LENGTH)
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 7
    bcrypt_rounds: int = Field(10, ge=4, le=31)

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cookie_secure(self) -> bool:
        return self.is_production


@lru_cache
def get_settings() -> Settings:
    return Settings()
