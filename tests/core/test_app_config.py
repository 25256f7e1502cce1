"""Tests for application configuration."""
import pytest
from pydantic import ValidationError

from core.config import DEFAULT_SESSION_COOKIE_MAX_AGE, Settings


class TestCorsOriginsParsing:
    """Tests for CORS origins parsing from environment variables."""

    def test_parse_multiple_origins_comma_separated(self) -> None:
        """Multiple comma-separated origins are parsed and stripped."""
        settings = Settings(
            _env_file=None,
            NOTE_STORE_BACKEND="memory",
            CORS_ORIGINS=" http://localhost:5173 , https://example.com ,",
        )
        assert settings.cors_origins == [
            "http://localhost:5173",
            "https://example.com",
        ]

    def test_parse_empty_string(self) -> None:
        """Empty string results in empty list."""
        settings = Settings(_env_file=None, NOTE_STORE_BACKEND="memory", CORS_ORIGINS="")
        assert settings.cors_origins == []


class TestStoreBackend:
    """Tests for storage backend selection."""

    def test_database_backend_requires_url(self) -> None:
        """Selecting the database backend without DATABASE_URL fails fast."""
        with pytest.raises(ValidationError, match="DATABASE_URL must be set"):
            Settings(_env_file=None, NOTE_STORE_BACKEND="database", DATABASE_URL="")

    def test_database_backend_with_url(self) -> None:
        settings = Settings(
            _env_file=None,
            NOTE_STORE_BACKEND="database",
            DATABASE_URL="postgresql+asyncpg://localhost/notes",
        )
        assert settings.note_store_backend == "database"

    def test_memory_backend_needs_no_url(self) -> None:
        settings = Settings(_env_file=None, NOTE_STORE_BACKEND="memory", DATABASE_URL="")
        assert settings.note_store_backend == "memory"

    def test_unknown_backend_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, NOTE_STORE_BACKEND="redis")

    def test_backend_read_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NOTE_STORE_BACKEND", "memory")
        monkeypatch.delenv("DATABASE_URL", raising=False)
        assert Settings(_env_file=None).note_store_backend == "memory"


class TestSessionCookieDefaults:
    """Tests for session cookie settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("SESSION_COOKIE_NAME", "SESSION_COOKIE_MAX_AGE", "SESSION_COOKIE_SECURE"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None, NOTE_STORE_BACKEND="memory")

        assert settings.session_cookie_name == "session_id"
        assert settings.session_cookie_max_age == DEFAULT_SESSION_COOKIE_MAX_AGE
        assert settings.session_cookie_secure is False
