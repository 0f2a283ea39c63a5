"""Quota limit configuration."""

from dataclasses import dataclass

SECOND_MS = 1_000
DAY_MS = 24 * 60 * 60 * SECOND_MS


@dataclass(frozen=True)
class QuotaLimits:
    """Per-caller request and cost limits.

    Costs are integer cents. The daily window is fixed at 24h and
    aligned to midnight UTC.
    """

    # Burst control: 10 requests per 2 minutes
    short_window_ms: int = 2 * 60 * SECOND_MS
    short_window_max: int = 10

    daily_window_ms: int = DAY_MS
    daily_max: int = 100

    # $2.00/day at a flat 2 cents per request
    daily_cost_limit: int = 200
    estimated_cost_per_request: int = 2

    # Sweep cadence and how long idle records are kept
    sweep_interval_seconds: int = 60 * 60
    retention_ms: int = DAY_MS

    def __post_init__(self) -> None:
        """Validate limit values are positive."""
        for name in (
            "short_window_ms",
            "short_window_max",
            "daily_window_ms",
            "daily_max",
            "daily_cost_limit",
            "sweep_interval_seconds",
            "retention_ms",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be > 0")
        if self.estimated_cost_per_request < 0:
            raise ValueError("estimated_cost_per_request must be >= 0")
