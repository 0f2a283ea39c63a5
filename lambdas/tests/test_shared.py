"""Tests for shared module."""
import json

import pytest

from shared.config import Config, get_config, load_quota_limits
from shared.exceptions import (
    ConfigurationError,
    ModelResponseError,
    SanctifyError,
    ValidationError,
)
from shared.quota_limits import DAY_MS, QuotaLimits
from shared.utils import current_time_ms, error_body, extract_user_id, utc_now


class TestExceptions:
    """Tests for custom exceptions."""

    def test_sanctify_error(self):
        """Test base exception."""
        error = SanctifyError("test message")
        assert str(error) == "test message"
        assert error.message == "test message"

    def test_validation_error(self):
        """Test ValidationError."""
        error = ValidationError("Invalid value", field="message")
        assert "Invalid value" in str(error)
        assert error.field == "message"

    def test_configuration_error(self):
        """Test ConfigurationError."""
        error = ConfigurationError("Missing config", config_key="QUOTA_DAILY_MAX")
        assert "Missing config" in str(error)
        assert error.config_key == "QUOTA_DAILY_MAX"

    def test_model_response_error(self):
        """ModelResponseError is a SanctifyError."""
        error = ModelResponseError("No response generated")
        assert isinstance(error, SanctifyError)
        assert error.message == "No response generated"


class TestQuotaLimits:
    """Tests for quota limit defaults and validation."""

    def test_defaults(self):
        """Defaults match the production budget."""
        limits = QuotaLimits()
        assert limits.short_window_ms == 120_000
        assert limits.short_window_max == 10
        assert limits.daily_window_ms == DAY_MS
        assert limits.daily_max == 100
        assert limits.daily_cost_limit == 200
        assert limits.estimated_cost_per_request == 2

    @pytest.mark.parametrize(
        "field", ["short_window_ms", "short_window_max", "daily_max", "daily_cost_limit"]
    )
    def test_rejects_non_positive(self, field):
        """Limits must be positive."""
        with pytest.raises(ValueError, match=field):
            QuotaLimits(**{field: 0})

    def test_rejects_negative_cost(self):
        """Per-request cost cannot be negative."""
        with pytest.raises(ValueError):
            QuotaLimits(estimated_cost_per_request=-1)

    def test_allows_zero_cost(self):
        """Free requests are allowed."""
        assert QuotaLimits(estimated_cost_per_request=0).estimated_cost_per_request == 0


class TestConfig:
    """Tests for configuration module."""

    def test_config_from_env(self, env_setup):
        """Test loading config from environment."""
        config = Config.from_env()
        assert config.environment == "test"
        assert config.log_level == "DEBUG"
        assert config.allowed_origin == "https://app.example.com"
        assert config.classifier_rules_path is None
        assert config.quota_limits == QuotaLimits()

    def test_config_is_production(self, env_setup, monkeypatch):
        """Test production environment detection."""
        monkeypatch.setenv("ENVIRONMENT", "prod")
        assert Config.from_env().is_production is True

    def test_config_is_not_production(self, env_setup):
        """Non-prod environments are not production."""
        assert Config.from_env().is_production is False

    def test_quota_overrides(self, env_setup, monkeypatch):
        """QUOTA_* variables override the defaults."""
        monkeypatch.setenv("QUOTA_SHORT_WINDOW_SECONDS", "30")
        monkeypatch.setenv("QUOTA_SHORT_WINDOW_MAX", "5")
        monkeypatch.setenv("QUOTA_DAILY_MAX", "50")
        monkeypatch.setenv("QUOTA_DAILY_COST_LIMIT_CENTS", "500")
        monkeypatch.setenv("QUOTA_COST_PER_REQUEST_CENTS", "3")
        monkeypatch.setenv("QUOTA_RETENTION_SECONDS", "7200")

        limits = load_quota_limits()

        assert limits.short_window_ms == 30_000
        assert limits.short_window_max == 5
        assert limits.daily_max == 50
        assert limits.daily_cost_limit == 500
        assert limits.estimated_cost_per_request == 3
        assert limits.retention_ms == 7_200_000

    def test_blank_value_uses_default(self, env_setup, monkeypatch):
        """Blank variables fall back to defaults."""
        monkeypatch.setenv("QUOTA_DAILY_MAX", " ")
        assert load_quota_limits().daily_max == 100

    def test_non_integer_value(self, env_setup, monkeypatch):
        """Non-integer values raise ConfigurationError."""
        monkeypatch.setenv("QUOTA_DAILY_MAX", "lots")

        with pytest.raises(ConfigurationError) as exc_info:
            load_quota_limits()
        assert exc_info.value.config_key == "QUOTA_DAILY_MAX"

    def test_out_of_range_value(self, env_setup, monkeypatch):
        """Out-of-range values raise ConfigurationError."""
        monkeypatch.setenv("QUOTA_SHORT_WINDOW_MAX", "0")

        with pytest.raises(ConfigurationError, match="Invalid quota configuration"):
            load_quota_limits()

    def test_get_config_cached(self, env_setup):
        """get_config returns the same instance."""
        assert get_config() is get_config()


class TestUtils:
    """Tests for utility functions."""

    def test_extract_user_id(self):
        """Test user ID extraction from headers."""
        assert extract_user_id({"X-User-Id": "user123"}) == "user123"
        assert extract_user_id({"x-user-id": "user456"}) == "user456"
        assert extract_user_id({"X-USER-ID": "user789"}) == "user789"
        assert extract_user_id({}) is None
        assert extract_user_id(None) is None

    def test_utc_now(self):
        """Test UTC timestamp generation."""
        timestamp = utc_now()
        assert "T" in timestamp
        assert "+00:00" in timestamp

    def test_current_time_ms(self):
        """Epoch milliseconds are integers in a sane range."""
        now = current_time_ms()
        assert isinstance(now, int)
        assert now > 1_600_000_000_000

    def test_error_body(self):
        """Test error body formatting."""
        body = json.loads(error_body("too_many_requests", "Slow down"))
        assert body["error"] == "too_many_requests"
        assert body["message"] == "Slow down"
        assert "timestamp" in body
        assert "details" not in body

    def test_error_body_with_details(self):
        """Details are included when given."""
        body = json.loads(error_body("daily_limit_reached", "Come back", {"retryAfter": 60}))
        assert body["details"] == {"retryAfter": 60}
