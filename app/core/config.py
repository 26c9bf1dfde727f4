"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (datastore path, secrets, token policy)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, field_validator, ValidationInfo
from pydantic_settings import BaseSettings
from typing import Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Server
    HOST: str = Field(
        default="0.0.0.0",
        description="Interface the HTTP server binds to"
    )
    PORT: int = Field(
        default=3001,
        description="Port the HTTP server listens on"
    )

    # JSON datastore
    DB_PATH: str = Field(
        default="db.json",
        description="Path of the JSON document holding users, menu, orders and banners"
    )

    # Single-page app fallback
    STATIC_INDEX_PATH: str = Field(
        default="dist/index.html",
        description="index.html served to unmatched GET requests accepting text/html"
    )

    # Sessions
    TOKEN_SCHEME: Literal["jwt", "legacy"] = Field(
        default="jwt",
        description="'jwt' for signed expiring tokens, 'legacy' for fake-jwt-token-<id>"
    )
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=60 * 24 * 7,
        description="Lifetime of a signed session token in minutes"
    )

    # Password reset
    RESET_TOKEN_TTL_MINUTES: int = Field(
        default=30,
        description="Lifetime of a password reset token in minutes"
    )
    RESET_LINK_PATH: str = Field(
        default="/reset-password",
        description="Frontend path the reset link points at"
    )

    # Password hashing
    BCRYPT_ROUNDS: int = Field(
        default=12,
        description="bcrypt cost factor"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    # Security
    SECRET_KEY: str = Field(
        default="change-me-in-production",
        description="Key used to sign session tokens"
    )

    @field_validator("SECRET_KEY")
    @classmethod
    def validate_secret_key(cls, v: str, info: ValidationInfo) -> str:
        """Ensure secret key is changed in production."""
        if info.data.get("ENVIRONMENT") == "production" and v == "change-me-in-production":
            raise ValueError("SECRET_KEY must be changed in production environment")
        return v

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        """bcrypt only accepts cost factors between 4 and 31."""
        if not 4 <= v <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    if not settings.DB_PATH:
        errors.append("DB_PATH is required")

    if settings.ACCESS_TOKEN_EXPIRE_MINUTES <= 0:
        errors.append("ACCESS_TOKEN_EXPIRE_MINUTES must be positive")

    if settings.RESET_TOKEN_TTL_MINUTES <= 0:
        errors.append("RESET_TOKEN_TTL_MINUTES must be positive")

    # Production-specific validations
    if settings.is_production:
        if settings.TOKEN_SCHEME == "legacy":
            errors.append("TOKEN_SCHEME=legacy is not allowed in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
