"""Environment configuration for Lambda functions."""
import os
from dataclasses import dataclass

from .exceptions import ConfigurationError
from .quota_limits import SECOND_MS, QuotaLimits


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable.

    Raises:
        ConfigurationError: If the value is not an integer
    """
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be an integer, got {raw!r}",
            config_key=name,
        ) from None


def load_quota_limits() -> QuotaLimits:
    """Build quota limits from QUOTA_* environment variables.

    Raises:
        ConfigurationError: If a value is malformed or out of range
    """
    defaults = QuotaLimits()
    try:
        return QuotaLimits(
            short_window_ms=_env_int(
                "QUOTA_SHORT_WINDOW_SECONDS", defaults.short_window_ms // SECOND_MS
            )
            * SECOND_MS,
            short_window_max=_env_int("QUOTA_SHORT_WINDOW_MAX", defaults.short_window_max),
            daily_max=_env_int("QUOTA_DAILY_MAX", defaults.daily_max),
            daily_cost_limit=_env_int(
                "QUOTA_DAILY_COST_LIMIT_CENTS", defaults.daily_cost_limit
            ),
            estimated_cost_per_request=_env_int(
                "QUOTA_COST_PER_REQUEST_CENTS", defaults.estimated_cost_per_request
            ),
            sweep_interval_seconds=_env_int(
                "QUOTA_SWEEP_INTERVAL_SECONDS", defaults.sweep_interval_seconds
            ),
            retention_ms=_env_int(
                "QUOTA_RETENTION_SECONDS", defaults.retention_ms // SECOND_MS
            )
            * SECOND_MS,
        )
    except ValueError as e:
        raise ConfigurationError(f"Invalid quota configuration: {e}") from e


@dataclass
class Config:
    """Application configuration loaded from environment variables."""

    environment: str
    log_level: str
    allowed_origin: str
    classifier_rules_path: str | None
    quota_limits: QuotaLimits

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables.

        Returns:
            Config instance with values from environment

        Raises:
            ConfigurationError: If an environment variable is malformed
        """
        return cls(
            environment=os.environ.get("ENVIRONMENT", "dev"),
            log_level=os.environ.get("POWERTOOLS_LOG_LEVEL", "INFO"),
            allowed_origin=os.environ.get("ALLOWED_ORIGIN", "*"),
            classifier_rules_path=os.environ.get("CLASSIFIER_RULES_PATH") or None,
            quota_limits=load_quota_limits(),
        )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "prod"


def get_config() -> Config:
    """Get cached configuration instance.

    Returns:
        Config instance (cached after first call)
    """
    if not hasattr(get_config, "_config"):
        get_config._config = Config.from_env()
    return get_config._config
