"""
Tests for application and dialer configuration.
"""

import pytest
from pydantic import ValidationError

from frontdesk.automation.controller import AutomationConfig
from frontdesk.config import Settings
from frontdesk.dialer.config import DialerConfig, ProviderType


class TestSettings:
    def test_declared_defaults(self) -> None:
        # Settings extends BaseSettings: the environment may override runtime values,
        # so check the declared field defaults instead.
        fields = Settings.model_fields
        assert fields["dispatch_interval_seconds"].default == 30.0
        assert fields["break_duration_seconds"].default == 900.0
        assert fields["fatal_sink_failure_threshold"].default == 3
        assert fields["max_attempts"].default == 3
        assert fields["daily_target"].default == 200

    def test_list_parsing(self) -> None:
        settings = Settings(
            cors_origins="http://a.example, http://b.example ,",
            candidate_statuses="New, Callback",
            log_level=" debug ",
        )

        assert settings.cors_origins_list == ["http://a.example", "http://b.example"]
        assert settings.candidate_statuses_list == ["New", "Callback"]
        assert settings.log_level == "DEBUG"

    def test_rejects_out_of_range_values(self) -> None:
        with pytest.raises(ValidationError):
            Settings(dispatch_interval_seconds=0)
        with pytest.raises(ValidationError):
            Settings(lunch_hour=24)
        with pytest.raises(ValidationError):
            Settings(low_success_rate_threshold=1.5)

    def test_automation_config_from_settings(self) -> None:
        settings = Settings(
            dispatch_interval_seconds=15,
            break_duration_seconds=600,
            fatal_sink_failure_threshold=5,
            fatigue_call_threshold=40,
        )

        config = AutomationConfig.from_settings(settings)

        assert config.dispatch_interval_seconds == 15
        assert config.break_duration_seconds == 600
        assert config.fatal_sink_failure_threshold == 5
        assert config.fatigue_call_threshold == 40


class TestDialerConfig:
    def test_declared_default_provider(self) -> None:
        assert DialerConfig.model_fields["provider_type"].default == ProviderType.MOCK

    def test_urls(self) -> None:
        config = DialerConfig(
            provider_type=ProviderType.HTTP,
            base_url="https://dialer.example.com/",
            initiate_path="/v2/dial",
            public_base_url="https://frontdesk.example.com/",
        )

        assert config.get_initiate_url() == "https://dialer.example.com/v2/dial"
        assert (
            config.get_completion_url("42")
            == "https://frontdesk.example.com/webhooks/dialer/calls/42/completed"
        )

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DIALER_PROVIDER_TYPE", "http")
        monkeypatch.setenv("DIALER_API_KEY", "from-env")

        config = DialerConfig()

        assert config.provider_type == ProviderType.HTTP
        assert config.api_key == "from-env"

    def test_rejects_invalid_timeout(self) -> None:
        with pytest.raises(ValidationError):
            DialerConfig(request_timeout_seconds=0)
