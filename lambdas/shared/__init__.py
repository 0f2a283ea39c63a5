"""Shared utilities for Sanctify Lambda functions."""

from .config import Config
from .exceptions import (
    ConfigurationError,
    ModelResponseError,
    SanctifyError,
    ValidationError,
)
from .quota_limits import QuotaLimits
from .quota_tracker import (
    QuotaDecision,
    QuotaReason,
    QuotaStatus,
    QuotaTracker,
    UsageSweeper,
)
from .usage_store import InMemoryUsageStore, UsageRecord, UsageStore

__all__ = [
    # Config
    "Config",
    "QuotaLimits",
    # Exceptions
    "ConfigurationError",
    "ModelResponseError",
    "SanctifyError",
    "ValidationError",
    # Quota
    "InMemoryUsageStore",
    "QuotaDecision",
    "QuotaReason",
    "QuotaStatus",
    "QuotaTracker",
    "UsageRecord",
    "UsageStore",
    "UsageSweeper",
]
