"""
Centralized configuration using Pydantic BaseSettings.
All environment variables are optional to prevent application startup failure.
"""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Core authentication and security
    jwt_secret_key: Optional[str] = Field(default=None, alias="JWT_SECRET_KEY")

    # Identity provider (user directory + role claims)
    identity_provider_api_url: Optional[str] = Field(default=None, alias="IDENTITY_PROVIDER_API_URL")
    identity_provider_api_key: Optional[str] = Field(default=None, alias="IDENTITY_PROVIDER_API_KEY")
    identity_provider_timeout_seconds: float = Field(default=5.0, alias="IDENTITY_PROVIDER_TIMEOUT_SECONDS")
    identity_webhook_secret: Optional[str] = Field(default=None, alias="IDENTITY_WEBHOOK_SECRET")

    # Comma separated user ids treated as admins when no identity provider is configured
    admin_user_ids: Optional[str] = Field(default=None, alias="ADMIN_USER_IDS")

    # Infrastructure configuration
    database_url: Optional[str] = Field(default="sqlite+aiosqlite:///./todos.db", alias="DATABASE_URL")

    # Subscription workflow
    subscription_period_days: int = Field(default=30, alias="SUBSCRIPTION_PERIOD_DAYS")

    # Frontend configuration
    frontend_url: Optional[str] = Field(default="http://localhost:3000", alias="FRONTEND_URL")
    sign_in_url: str = Field(default="/sign-in", alias="SIGN_IN_URL")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: Optional[str] = Field(default="./logs", alias="LOG_DIR")

    # Environment configuration
    env: Optional[str] = Field(default=None, alias="ENV")

    @property
    def admin_ids(self) -> List[str]:
        if not self.admin_user_ids:
            return []
        return [part.strip() for part in self.admin_user_ids.split(",") if part.strip()]


# Instantiate settings object
settings = Settings()

# Determine if we're in production mode
IS_PRODUCTION = bool(settings.env and settings.env.lower() == "production")
