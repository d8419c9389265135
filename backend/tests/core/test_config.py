"""Tests for application configuration."""
import pytest
from pydantic import ValidationError

from core.config import Settings


class TestCorsOriginsParsing:
    """Tests for CORS origins parsing from environment variables."""

    def test_parse_single_origin_string(self) -> None:
        """Single origin string is parsed correctly."""
        settings = Settings(
            database_url="postgresql://test",
            cors_origins="http://localhost:5173",
        )
        assert settings.cors_origins == ["http://localhost:5173"]

    def test_parse_multiple_origins_comma_separated(self) -> None:
        """Multiple comma-separated origins are parsed correctly."""
        settings = Settings(
            database_url="postgresql://test",
            cors_origins="http://localhost:5173,https://example.com",
        )
        assert settings.cors_origins == [
            "http://localhost:5173",
            "https://example.com",
        ]

    def test_parse_origins_with_whitespace(self) -> None:
        """Whitespace around origins is stripped."""
        settings = Settings(
            database_url="postgresql://test",
            cors_origins="  http://localhost:5173 , https://example.com  ",
        )
        assert settings.cors_origins == [
            "http://localhost:5173",
            "https://example.com",
        ]

    def test_parse_origins_list_passthrough(self) -> None:
        """List of origins is passed through unchanged."""
        origins = ["http://localhost:5173", "https://example.com"]
        settings = Settings(
            database_url="postgresql://test",
            cors_origins=origins,
        )
        assert settings.cors_origins == origins

    def test_parse_empty_string(self) -> None:
        """Empty string results in empty list."""
        settings = Settings(
            database_url="postgresql://test",
            cors_origins="",
        )
        assert settings.cors_origins == []

    def test_parse_trailing_comma(self) -> None:
        """Trailing comma is handled (empty entries filtered)."""
        settings = Settings(
            database_url="postgresql://test",
            cors_origins="http://localhost:5173,",
        )
        assert settings.cors_origins == ["http://localhost:5173"]

    def test_default_cors_origins(self) -> None:
        """Default CORS origins is localhost:5173."""
        settings = Settings(database_url="postgresql://test")
        assert settings.cors_origins == ["http://localhost:5173"]


class TestDefaults:
    """Tests for settings defaults and normalization."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Unset optional settings fall back to their defaults."""
        for name in (
            "DB_POOL_SIZE",
            "DB_MAX_OVERFLOW",
            "DB_STATEMENT_TIMEOUT_MS",
            "HOST",
            "PORT",
            "REDIS_ENABLED",
            "RATE_LIMIT_ENABLED",
            "RATE_LIMIT_READS_PER_MINUTE",
            "RATE_LIMIT_WRITES_PER_MINUTE",
            "LOG_LEVEL",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None, database_url="postgresql://test")

        assert settings.db_pool_size == 5
        assert settings.db_max_overflow == 10
        assert settings.db_statement_timeout_ms == 10_000
        assert settings.host == "0.0.0.0"
        assert settings.port == 8000
        assert settings.redis_enabled is True
        assert settings.rate_limit_enabled is True
        assert settings.rate_limit_reads_per_minute == 240
        assert settings.rate_limit_writes_per_minute == 60
        assert settings.log_level == "INFO"

    def test_log_level_upper_cased(self) -> None:
        """Log level is normalized to upper case."""
        settings = Settings(_env_file=None, database_url="postgresql://test", log_level="debug")
        assert settings.log_level == "DEBUG"

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Settings are read from environment variables."""
        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@db:5432/bookmarks")
        monkeypatch.setenv("DB_STATEMENT_TIMEOUT_MS", "2500")
        monkeypatch.setenv("RATE_LIMIT_ENABLED", "false")

        settings = Settings(_env_file=None)

        assert settings.database_url == "postgresql+asyncpg://u:p@db:5432/bookmarks"
        assert settings.db_statement_timeout_ms == 2500
        assert settings.rate_limit_enabled is False

    def test_database_url_required(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Missing DATABASE_URL fails validation."""
        monkeypatch.delenv("DATABASE_URL", raising=False)
        with pytest.raises(ValidationError):
            Settings(_env_file=None)
