"""Application configuration using pydantic-settings."""
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str
    db_pool_size: int = 5
    db_max_overflow: int = 10
    # Upper bound for any single query, applied as PostgreSQL statement_timeout
    db_statement_timeout_ms: int = 10_000

    # Listen address
    host: str = "0.0.0.0"
    port: int = 8000

    # Redis (rate limiting)
    redis_url: str = "redis://localhost:6379"
    redis_enabled: bool = True
    rate_limit_enabled: bool = True
    # Requests per client address per clock minute
    rate_limit_reads_per_minute: int = 240
    rate_limit_writes_per_minute: int = 60

    log_level: str = "INFO"

    # Stored as str | list so pydantic-settings doesn't try to JSON-decode the env var
    cors_origins: str | list[str] = ["http://localhost:5173"]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Accept a comma-separated string or a list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Log level names are matched upper-case by the logging module."""
        return v.upper()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
