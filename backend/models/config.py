import os
import sys
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _should_load_env_file() -> str | None:
    """Load `.env` for local runs only.

    Under pytest or CI the environment is the single source of truth, so a
    developer's `.env` cannot mask a missing SECRET_KEY.
    """
    if any("pytest" in str(x) for x in sys.argv if x):
        return None
    if os.environ.get("CI") in ("1", "true", "True"):
        return None
    return ".env"


class Settings(BaseSettings):
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment: 'development', 'staging', 'production' or 'test'",
    )

    DATABASE_URL: str = "sqlite:///./data/citicare.db"
    SECRET_KEY: str = Field(
        ...,
        description="JWT secret key - must be set via SECRET_KEY environment variable",
    )
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=60 * 24 * 7,
        description="Bearer token lifetime in minutes (7 days)",
    )
    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:8080", "http://localhost:5173"],
        description="Allowed CORS origins (comma-separated in env var)",
    )

    # Bootstrap administrator (used by init_db.py)
    ADMIN_EMAIL: str = Field(
        ...,
        description="Admin email - must be set via ADMIN_EMAIL environment variable",
    )
    ADMIN_PASSWORD: str = Field(
        ...,
        description="Admin password - must be set via ADMIN_PASSWORD environment variable",
    )

    # Database connection pool settings
    DB_POOL_SIZE: int = Field(default=5, description="Persistent connections in pool")
    DB_MAX_OVERFLOW: int = Field(
        default=10, description="Extra connections when pool exhausted"
    )
    DB_POOL_TIMEOUT: int = Field(
        default=30, description="Seconds to wait for connection from pool"
    )
    DB_POOL_RECYCLE: int = Field(
        default=1800, description="Recycle connections after N seconds"
    )

    AUTO_CREATE_DB: bool = Field(
        default=False,
        description="When true (development only), call Base.metadata.create_all on startup",
    )

    SLOW_REQUEST_THRESHOLD: float = Field(
        default=1.0,
        description="Log warning for requests slower than this (seconds)",
    )
    LOG_DIR: str = Field(default="logs", description="Directory for app.log")

    # File uploads
    UPLOAD_DIR: str = Field(
        default="./uploads",
        description="Directory where complaint images and avatars are written",
    )
    UPLOAD_URL_PREFIX: str = Field(
        default="/uploads",
        description="Public URL prefix under which UPLOAD_DIR is served",
    )
    MAX_IMAGE_SIZE: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum size of a single complaint image in bytes",
    )
    MAX_IMAGES_PER_REQUEST: int = Field(
        default=10,
        description="Maximum number of images accepted in one request",
    )
    MAX_AVATAR_SIZE: int = Field(
        default=5 * 1024 * 1024,
        description="Maximum avatar size in bytes",
    )

    PASSWORD_MIN_LENGTH: int = Field(
        default=6,
        description="Minimum password length for registration and password changes",
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | List[str]) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str) and not v.lstrip().startswith("["):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v  # type: ignore[return-value]

    model_config = SettingsConfigDict(
        env_file=_should_load_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Raises pydantic.ValidationError at import time if SECRET_KEY or the admin
# bootstrap credentials are missing.
settings = Settings()  # type: ignore[call-arg]


def get_settings() -> Settings:
    """Get the settings instance (for dependency injection)."""
    return settings
