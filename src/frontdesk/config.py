"""
Application configuration with environment-driven settings.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "frontdesk-dialer"
    app_env: Literal["dev", "qa", "uat", "prod"] = "dev"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./frontdesk.db",
        description="Async SQLAlchemy URL for the call record store",
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:8880",
        description="Comma-separated list of allowed CORS origins",
    )

    # Automation loop
    automation_autostart: bool = Field(
        default=False,
        description="Start the dispatch loop at application startup.",
    )
    dispatch_interval_seconds: float = Field(default=30.0, gt=0, le=3600)
    break_check_interval_seconds: float = Field(default=3600.0, gt=0)
    break_duration_seconds: float = Field(default=900.0, gt=0)
    call_completion_timeout_seconds: float = Field(
        default=1200.0,
        gt=0,
        description="Upper bound on waiting for the dialer to report a finished call.",
    )
    fatal_sink_failure_threshold: int = Field(default=3, ge=1, le=100)
    lunch_hour: int = Field(default=12, ge=0, le=23)
    lunch_call_threshold: int = Field(default=20, ge=0)
    fatigue_call_threshold: int = Field(default=50, ge=0)
    low_success_rate_threshold: float = Field(default=0.10, ge=0, le=1)

    # Queue
    max_attempts: int = Field(default=3, ge=1, le=20)
    time_window_hours: int = Field(default=2, ge=0, le=12)
    daily_target: int = Field(default=200, ge=1)
    inbound_target: int = Field(default=10, ge=0)

    # Working day used by end-of-day projections
    workday_start_hour: int = Field(default=9, ge=0, le=23)
    workday_end_hour: int = Field(default=17, ge=0, le=23)

    # Candidate rules applied to prospects loaded over the API
    candidate_filter_enabled: bool = True
    candidate_min_days: int = Field(default=2, ge=0)
    candidate_statuses: str = Field(
        default="Prospect,New,Callback,Follow-up",
        description="Comma-separated statuses eligible for dialing",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return str(v).strip().upper()

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def candidate_statuses_list(self) -> list[str]:
        """Parse candidate statuses into a list."""
        return [status.strip() for status in self.candidate_statuses.split(",") if status.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
