"""
Configuration module - Central access point for environment variables.

CRITICAL: Access ALL environment variables through this module.
NEVER use os.getenv() directly in application code.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DB_CONNECTION: str = Field(
        ...,
        description="MongoDB connection string (mongodb:// or mongodb+srv://)"
    )
    DB_NAME: str = Field(
        default="event_vendor_seed",
        description="Database used when the connection string does not name one"
    )
    DB_SERVER_SELECTION_TIMEOUT_MS: int = Field(default=5000, ge=1)

    # Seeding
    SEED_RANDOM_SEED: int | None = Field(
        default=None,
        description="Seed for Faker and its random source; unset for a fresh dataset each run"
    )
    SEED_STRICT_PAST_DATES: bool = Field(
        default=False,
        description="Keep dependent dates before past anchors instead of any past date"
    )

    # HTTP
    API_PORT: int = Field(default=3000, ge=1, le=65535)

    # Application Settings
    LOG_LEVEL: str = Field(default="INFO")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    """
    return Settings()
