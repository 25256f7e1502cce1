"""Application configuration using pydantic-settings."""
import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Ten years: the session cookie is effectively permanent for an anonymous browser
DEFAULT_SESSION_COOKIE_MAX_AGE = 60 * 60 * 24 * 365 * 10


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Storage backend: "database" (PostgreSQL via SQLAlchemy) or "memory" (volatile, for dev)
    note_store_backend: Literal["database", "memory"] = Field(
        default="database", validation_alias="NOTE_STORE_BACKEND",
    )

    # Database
    database_url: str = Field(default="", validation_alias="DATABASE_URL")
    db_pool_size: int = Field(default=5, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=10, validation_alias="DB_MAX_OVERFLOW")

    # CORS - comma-separated list of allowed origins (stored as string, parsed via property)
    cors_origins_str: str = Field(
        default="http://localhost:5173",
        validation_alias="CORS_ORIGINS",
    )

    # Anonymous session cookie
    session_cookie_name: str = Field(default="session_id", validation_alias="SESSION_COOKIE_NAME")
    session_cookie_max_age: int = Field(
        default=DEFAULT_SESSION_COOKIE_MAX_AGE, validation_alias="SESSION_COOKIE_MAX_AGE",
    )
    session_cookie_secure: bool = Field(default=False, validation_alias="SESSION_COOKIE_SECURE")

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @model_validator(mode="after")
    def validate_database_backend(self) -> "Settings":
        """Require DATABASE_URL when the database backend is selected."""
        if self.note_store_backend == "database" and not self.database_url:
            raise ValueError(
                "DATABASE_URL must be set when NOTE_STORE_BACKEND is 'database'. "
                "Use NOTE_STORE_BACKEND=memory to run without a database.",
            )
        return self

    @property
    def cors_origins(self) -> list[str]:
        """Parse comma-separated CORS origins string into a list."""
        if not self.cors_origins_str:
            return []
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str) -> None:
    """Configure root logging for the application process."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
