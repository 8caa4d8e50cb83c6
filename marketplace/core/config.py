# marketplace/core/config.py
from functools import lru_cache
from typing import Any, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TOKEN_SECRET = "development-secret"


class Settings(BaseSettings):
    """Runtime configuration loaded from ``MARKETPLACE_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="MARKETPLACE_",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Expert Marketplace API"
    environment: str = "local"
    log_level: str = "INFO"

    database_url: str = "sqlite:///./marketplace.db"
    database_echo: bool = False

    cors_allow_origins: List[str] = Field(default_factory=list)

    auth_token_secret: str = DEFAULT_TOKEN_SECRET
    auth_token_algorithm: str = "HS256"
    auth_token_exp_minutes: int = 60 * 24 * 7

    otp_length: int = Field(6, ge=4, le=10)
    otp_expires_seconds: int = 300
    otp_allowed_attempts: int = 3
    otp_temp_email_domain: str = "phone.local"

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_cors_origins(cls, value: Any) -> List[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        if value is None:
            return []
        return value

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() in ("prod", "production")


@lru_cache
def get_settings() -> Settings:
    return Settings()
