"""
Settings for the Cenly API.

Values come from the environment (case-insensitive) or a local .env file.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-wide configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ============ Application ============
    app_name: str = "Cenly"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # ============ Auth ============
    # HS256 secret shared with the hosted auth provider
    secret_key: str = "change-me-in-production-use-a-long-random-string"
    jwt_algorithm: str = "HS256"
    jwt_audience: Optional[str] = None
    jwt_expire_days: int = 7

    # ============ CORS ============
    cors_origins: List[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: List[str] = ["*"]
    cors_allow_headers: List[str] = ["*"]

    # ============ Storage ============
    database_enabled: bool = True
    database_url: Optional[str] = None  # postgresql+asyncpg://...
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_echo: bool = False

    redis_url: str = "redis://localhost:6379/0"
    redis_max_connections: int = 10

    # ============ Gemini ============
    google_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"
    history_max_messages: int = Field(default=20, ge=0)

    # ============ Free plan ============
    free_project_limit: int = Field(default=5, ge=0)
    free_daily_image_limit: int = Field(default=5, ge=0)
    generation_slot_ttl: int = Field(default=300, gt=0)  # seconds

    # ============ Logging ============
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @field_validator("environment")
    @classmethod
    def _normalize_environment(cls, value: str) -> str:
        return value.strip().lower()

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_database_configured(self) -> bool:
        """PostgreSQL is enabled and has a URL."""
        return bool(self.database_enabled and self.database_url)

    @property
    def is_gemini_configured(self) -> bool:
        return bool(self.google_api_key)


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings()
