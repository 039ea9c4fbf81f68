"""
Foundation settings for the Inkpost packages.
"""

from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class InkpostSettings(BaseSettings):
    """
    Core settings shared by every Inkpost package.

    Values come from the process environment first, then from a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Basic Environment ---
    DEBUG: bool = True
    SECRET_KEY: str = ""
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # --- Pagination ---
    DEFAULT_LIST_PER_PAGE: int = 10
    MAX_API_LIMIT: int = 100

    # --- Security ---
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # --- Database ---
    DATABASE_URL: str = "sqlite+aiosqlite:///inkpost.db"
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 0
    # Seconds a request may wait for a pooled connection
    DB_POOL_TIMEOUT: float = 2.0
    DB_POOL_RECYCLE: int = 1800
    DB_ECHO: bool = False

    # --- HTTP ---
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    ENABLE_CORS: bool = True
    FRONTEND_URL: str = "http://localhost:3000"
    GZIP_MINIMUM_SIZE: int = 1000

    # --- Rate limiting ---
    # "<count>/<n> <unit>", per client address
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_API: str = "100/15 minutes"
    # Only failed logins count against this one
    RATE_LIMIT_LOGIN: str = "5/15 minutes"

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None
    ENABLE_REQUEST_ID: bool = True

    @model_validator(mode="after")
    def validate_security(self) -> "InkpostSettings":
        """Ensures production doesn't ship without a secret key."""
        if not self.DEBUG and not self.SECRET_KEY:
            raise ValueError("SECRET_KEY is mandatory in production mode.")
        return self

    def is_development(self) -> bool:
        return self.DEBUG or self.ENVIRONMENT == "development"

    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def signing_key(self) -> str:
        """Token signing secret; development falls back to a fixed key."""
        return self.SECRET_KEY or "inkpost-development-secret-key-change-me"

    def allowed_origins(self) -> list[str]:
        if self.is_production():
            return [self.FRONTEND_URL]
        origins = ["http://localhost:3000"]
        if self.FRONTEND_URL not in origins:
            origins.append(self.FRONTEND_URL)
        return origins


# Process-wide default, used when an app is built without explicit settings
inkpost_settings = InkpostSettings()
