"""
Dialer configuration.

Loaded from DIALER_* environment variables and .env.
"""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderType(str, Enum):
    """Supported dialer backends."""

    HTTP = "http"
    MOCK = "mock"


class DialerConfig(BaseSettings):
    """Dialer bridge configuration from environment."""

    model_config = SettingsConfigDict(
        env_prefix="DIALER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    provider_type: ProviderType = Field(default=ProviderType.MOCK)

    # Dialer bridge the HTTP sink posts call requests to
    base_url: str = Field(default="http://localhost:9000")
    initiate_path: str = Field(default="/calls")
    api_key: str = Field(default="")
    request_timeout_seconds: float = Field(default=10.0, gt=0, le=120)

    # Where the bridge should post completion webhooks back to
    public_base_url: str = Field(default="http://localhost:8000")

    # Shared secret expected in X-Dialer-Token on webhooks; empty disables the check
    webhook_token: str = Field(default="")

    def get_initiate_url(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.initiate_path}"

    def get_completion_url(self, call_id: str) -> str:
        base = self.public_base_url.rstrip("/")
        return f"{base}/webhooks/dialer/calls/{call_id}/completed"


def get_dialer_config() -> DialerConfig:
    return DialerConfig()
