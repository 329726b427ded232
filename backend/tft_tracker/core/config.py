"""Configuration settings for the TFT match tracker."""

from __future__ import annotations

from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database Configuration
    postgres_db: str = Field(default="tft_tracker_db")
    postgres_user: str = Field(default="tft_tracker_user")
    postgres_password: str = Field(default="dev_password")
    postgres_host: str = Field(default="postgres")
    postgres_port: int = Field(default=5432)

    @property
    def database_url(self) -> str:
        """Construct async database URL from components."""
        return f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"

    # Application Configuration
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Riot API Configuration
    riot_api_key: str = Field(default="", description="Static X-Riot-Token credential")
    default_platform: str = Field(default="euw1")
    api_max_retries: int = Field(default=3, ge=0)
    api_retry_base_delay: float = Field(
        default=1.0, ge=0, description="First retry delay in seconds, doubled per attempt"
    )
    api_request_timeout: float = Field(default=10.0, gt=0)

    # Tracker Configuration
    tracker_enabled: bool = Field(default=True)
    poll_interval_seconds: float = Field(default=15.0)
    max_backoff_seconds: float = Field(default=600.0)
    unhealthy_threshold: int = Field(default=5, ge=1)
    match_cache_ttl_seconds: int = Field(
        default=1200, ge=60, description="Dedup window, 20 minutes by default"
    )
    match_cache_maxsize: int = Field(default=500, ge=1)

    # Notification Configuration
    discord_webhook_url: Optional[str] = Field(
        default=None,
        description="Channel webhook; notifications are only logged when unset",
    )

    @field_validator("poll_interval_seconds", "max_backoff_seconds")
    @classmethod
    def validate_positive_interval(cls, v: float) -> float:
        """Reject non-positive scheduling intervals at startup."""
        if v <= 0:
            raise ValueError("Scheduling intervals must be positive")
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix for environment variables
        extra="ignore",
    )


def get_settings() -> Settings:
    """Get application settings instance."""
    return Settings()


# Create a global settings instance lazily
settings: Settings | None = None


def get_global_settings() -> Settings:
    """Get or create the global settings instance."""
    global settings
    if settings is None:
        settings = get_settings()
    return settings
