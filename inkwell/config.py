"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
    - database_auto_create is off by default: production schema comes from alembic
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    app_name: str = "Inkwell API"
    app_version: str = "1.0.0"
    environment: str = "development"
    api_prefix: str = "/api"

    # Database
    database_url: str = (
        "postgresql+asyncpg://inkwell:inkwell@db:5432/inkwell"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    database_timeout_seconds: float = 5.0
    database_auto_create: bool = False

    # Security
    bcrypt_rounds: int = 12

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
