"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded beyond a dev default)
    - get_settings() is cached (lru_cache): single instance per process
    - Non-dev environments refuse to start with the default JWT secret

Design Decisions:
    - Defaults work out-of-the-box with docker-compose and the test suite
    - Lock and pool timeouts are settings, not constants: the admission
      controller surfaces them as retryable failures
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "dev_secret_change_me"


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    env: str = "dev"

    # Database
    database_url: str = "postgresql+asyncpg://studyhub:studyhub@db:5432/studyhub"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres hands out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        if isinstance(v, str) and v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 10
    database_max_overflow: int = 10
    database_pool_timeout_seconds: float = 10.0
    database_lock_timeout_seconds: float = 5.0

    # Auth
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = 7
    password_hash_rounds: int = 29_000

    # Messages
    require_membership_to_post: bool = True

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @model_validator(mode="after")
    def reject_default_secret_outside_dev(self):
        if self.env.lower() not in ("dev", "test") and self.jwt_secret == DEFAULT_JWT_SECRET:
            raise ValueError("JWT_SECRET must be set to a non-default value outside dev")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
