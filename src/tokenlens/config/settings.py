"""Application settings using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """tokenlens configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )

    # Application
    app_name: str = Field(default="tokenlens", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Minimum log level"
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    # Upstream market data API
    ave_api_key: SecretStr = Field(default=SecretStr(""), description="Ave.ai API key")
    ave_base_url: str = Field(
        default="https://prod.ave-api.com/v2",
        description="Ave.ai API base URL",
    )
    request_timeout_seconds: float = Field(
        default=10.0, gt=0, description="Timeout for a single upstream request"
    )

    # Rate limit handling
    rate_limit_backoff_seconds: float = Field(
        default=2.0, ge=0, description="Pause before the single retry after a 429"
    )
    candidate_rate_limit_pause_seconds: float = Field(
        default=5.0, ge=0, description="Pause before the next candidate after a 429"
    )

    @field_validator("ave_base_url")
    @classmethod
    def validate_ave_base_url(cls, v: str) -> str:
        """Validate upstream URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Ave base URL must start with http:// or https://")
        return v.rstrip("/")

    @property
    def upstream_configured(self) -> bool:
        """True when an API key has been provided."""
        return bool(self.ave_api_key.get_secret_value())


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
