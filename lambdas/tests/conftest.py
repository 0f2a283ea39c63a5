"""Shared pytest fixtures."""

import pytest

from shared.config import get_config


@pytest.fixture
def env_setup(monkeypatch):
    """Set a test environment and reset the cached config."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("POWERTOOLS_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("ALLOWED_ORIGIN", "https://app.example.com")
    for name in (
        "QUOTA_SHORT_WINDOW_SECONDS",
        "QUOTA_SHORT_WINDOW_MAX",
        "QUOTA_DAILY_MAX",
        "QUOTA_DAILY_COST_LIMIT_CENTS",
        "QUOTA_COST_PER_REQUEST_CENTS",
        "QUOTA_SWEEP_INTERVAL_SECONDS",
        "QUOTA_RETENTION_SECONDS",
        "CLASSIFIER_RULES_PATH",
    ):
        monkeypatch.delenv(name, raising=False)

    if hasattr(get_config, "_config"):
        delattr(get_config, "_config")
    yield
    if hasattr(get_config, "_config"):
        delattr(get_config, "_config")


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake AWS credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
