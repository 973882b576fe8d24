"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Secrets and deployment paths come from environment variables or .env
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - Defaults work out of the box with a local SQLite file and ./public assets
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "sqlite+aiosqlite:///./drinkreview.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Assets
    assets_dir: str = "public"
    pictures_subdir: str = "pictures"

    # Passwords (bcrypt cost factor)
    password_hash_rounds: int = 12

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
