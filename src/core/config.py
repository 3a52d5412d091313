"""Application configuration using pydantic-settings."""
import re
from datetime import timedelta
from functools import lru_cache
from typing import Any

from fastapi import Request
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Shorthand lifetimes such as "15m", "1h", "7d"
_LIFETIME_PATTERN = re.compile(r"^\s*(\d+)\s*([smhd])\s*$")
_LIFETIME_UNITS = {"s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


def parse_lifetime(value: Any) -> Any:
    """
    Convert shorthand durations ("30s", "15m", "1h", "7d") to timedelta.

    Anything else is returned unchanged so pydantic can handle plain seconds
    and ISO-8601 durations.
    """
    if isinstance(value, str):
        match = _LIFETIME_PATTERN.match(value)
        if match:
            amount, unit = match.groups()
            return timedelta(**{_LIFETIME_UNITS[unit]: int(amount)})
    return value


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="LITMARK_BACKEND", validation_alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", validation_alias="SERVER_HOST")
    server_port: int = Field(default=5000, validation_alias="SERVER_PORT")
    api_prefix: str = Field(default="/api", validation_alias="API_PREFIX")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Database
    database_url: str
    db_pool_size: int = Field(default=5, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=10, validation_alias="DB_MAX_OVERFLOW")

    # Tokens
    access_token_secret: str = Field(validation_alias="ACCESS_TOKEN_SECRET")
    access_token_lifetime: timedelta = Field(
        default=timedelta(hours=1), validation_alias="ACCESS_TOKEN_LIFETIME",
    )
    refresh_token_secret: str = Field(validation_alias="REFRESH_TOKEN_SECRET")
    refresh_token_lifetime: timedelta = Field(
        default=timedelta(days=7), validation_alias="REFRESH_TOKEN_LIFETIME",
    )
    password_hash_rounds: int = Field(default=10, validation_alias="PASSWORD_HASH_ROUNDS")

    # Image storage (Cloudinary)
    cloudinary_cloud_name: str = Field(default="", validation_alias="CLOUDINARY_CLOUD_NAME")
    cloudinary_api_key: str = Field(default="", validation_alias="CLOUDINARY_API_KEY")
    cloudinary_api_secret: str = Field(default="", validation_alias="CLOUDINARY_API_SECRET")
    cloudinary_folder: str = Field(default="litmark", validation_alias="CLOUDINARY_FOLDER")
    max_image_size_bytes: int = Field(
        default=5 * 1024 * 1024, validation_alias="MAX_IMAGE_SIZE_BYTES",
    )

    # Placeholder images assigned when an entity is created without one
    default_folder_image_url: str = Field(
        default="https://res.cloudinary.com/dxsqdqnoe/image/upload/v1709878273/litmark/xo5sncdhybhemuvacf4u.png",
        validation_alias="DEFAULT_FOLDER_IMAGE_URL",
    )
    default_user_image_url: str = Field(
        default="https://res.cloudinary.com/dxsqdqnoe/image/upload/v1709878273/litmark/xo5sncdhybhemuvacf4u.png",
        validation_alias="DEFAULT_USER_IMAGE_URL",
    )

    # CORS - comma-separated list of allowed origins (stored as string, parsed via property)
    cors_origins_str: str = Field(default="*", validation_alias="CORS_ORIGINS")

    @field_validator("access_token_lifetime", "refresh_token_lifetime", mode="before")
    @classmethod
    def parse_token_lifetime(cls, v: Any) -> Any:
        """Accept shorthand durations for token lifetimes."""
        return parse_lifetime(v)

    @property
    def cors_origins(self) -> list[str]:
        """Parse comma-separated CORS origins string into a list."""
        if not self.cors_origins_str:
            return []
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    @property
    def storage_configured(self) -> bool:
        """True when all Cloudinary credentials are present."""
        return bool(
            self.cloudinary_cloud_name
            and self.cloudinary_api_key
            and self.cloudinary_api_secret,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance built from the environment."""
    return Settings()


def get_app_settings(request: Request) -> Settings:
    """Dependency returning the settings the running app was created with."""
    return request.app.state.settings
