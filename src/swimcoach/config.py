"""Application configuration with environment validation.

Usage:
    from swimcoach.config import get_settings

    settings = get_settings()
    print(settings.supabase_url)
    print(settings.storage_retry_attempts)

Values come from environment variables or a .env file in the working
directory (or the project root).
"""

from enum import StrEnum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_env_file() -> Path | None:
    """Find .env file, checking both current dir and project root."""
    if Path(".env").exists():
        return Path(".env")
    # config.py -> swimcoach -> src -> project_root
    project_root = Path(__file__).parent.parent.parent
    env_file = project_root / ".env"
    if env_file.exists():
        return env_file
    return None


class Environment(StrEnum):
    """Application environment."""

    LOCAL = "local"
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class LogFormat(StrEnum):
    """Log output format."""

    CONSOLE = "console"
    JSON = "json"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=_find_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Environment = Environment.LOCAL

    # Supabase
    supabase_url: str = Field(description="Supabase project URL")
    supabase_key: SecretStr = Field(description="Supabase service or anon key")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: LogFormat = Field(default=LogFormat.CONSOLE, description="Log output format")

    # Entries files
    entries_encoding: str = Field(
        default="utf-8-sig", description="Text encoding of uploaded entries files"
    )
    entries_delimiter: str = Field(
        default=",", min_length=1, max_length=1, description="Entries file field delimiter"
    )

    # Storage retries (idempotent writes only)
    storage_retry_attempts: int = Field(
        default=3, ge=1, description="Attempts per idempotent write before giving up"
    )
    storage_retry_backoff: float = Field(
        default=0.25, ge=0, description="Seconds to wait between attempts, scaled by attempt"
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are loaded once and cached. To reload, clear the cache:
        get_settings.cache_clear()
    """
    return Settings()
