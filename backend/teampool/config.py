"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every value can be overridden by an environment variable of the same name
    - get_settings() is cached (lru_cache): one Settings instance per process
    - Out-of-range values (TTL < 1 day, zero token attempts) fail at startup, not per request

Design Decisions:
    - Defaults work out-of-the-box with docker-compose; production sets DATABASE_URL and APP_URL
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "postgresql+asyncpg://teampool:teampool@db:5432/teampool"
    database_pool_size: int = Field(default=20, ge=1)
    database_max_overflow: int = Field(default=10, ge=0)

    # Invitations
    invite_ttl_days: int = Field(default=7, ge=1)
    invite_token_max_attempts: int = Field(default=3, ge=1)
    app_url: str = "http://localhost:3000"

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    @field_validator("app_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    return Settings()
