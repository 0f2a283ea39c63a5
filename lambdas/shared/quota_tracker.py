"""Per-caller burst, daily request and daily cost limits."""

import math
import threading
from dataclasses import dataclass, replace
from enum import Enum

from aws_lambda_powertools import Logger

from .quota_limits import SECOND_MS, QuotaLimits
from .usage_store import UsageRecord, UsageStore, normalize_caller_id
from .utils import current_time_ms

logger = Logger(child=True)


class QuotaReason(str, Enum):
    """Why a request was rejected."""

    BURST_LIMIT = "burst_limit"
    DAILY_REQUEST_LIMIT = "daily_request_limit"
    DAILY_COST_LIMIT = "daily_cost_limit"


@dataclass
class QuotaDecision:
    """Outcome of a quota evaluation."""

    allowed: bool
    caller_id: str
    reason: QuotaReason | None = None
    retry_after_seconds: int | None = None
    window_requests: int = 0
    daily_requests: int = 0
    daily_cost_units: int = 0


@dataclass(frozen=True)
class QuotaStatus:
    """Read-only view of a caller's usage against the limits."""

    caller_id: str
    window_requests: int
    window_limit: int
    window_remaining: int
    window_resets_in_seconds: int
    daily_requests: int
    daily_limit: int
    daily_remaining: int
    daily_cost_units: int
    daily_cost_limit: int
    daily_cost_remaining: int
    daily_resets_in_seconds: int

    def to_dict(self) -> dict[str, int | str]:
        """Serialize for JSON responses."""
        return dict(self.__dict__)


def _align(now_ms: int, size_ms: int) -> int:
    return (now_ms // size_ms) * size_ms


def _seconds_until(boundary_ms: int, now_ms: int) -> int:
    return max(0, math.ceil((boundary_ms - now_ms) / SECOND_MS))


class QuotaTracker:
    """Decides whether a caller may make another model request."""

    def __init__(self, store: UsageStore, limits: QuotaLimits | None = None):
        """Initialize tracker.

        Args:
            store: Usage store holding one record per caller
            limits: Quota limits. Uses defaults if not provided.
        """
        self.store = store
        self.limits = limits or QuotaLimits()

    def _rolled_over(self, record: UsageRecord, now_ms: int) -> UsageRecord:
        """Return ``record`` with any elapsed window or day reset."""
        window_start = _align(now_ms, self.limits.short_window_ms)
        daily_start = _align(now_ms, self.limits.daily_window_ms)

        if window_start > record.window_start:
            record.window_start = window_start
            record.window_requests = 0

        if daily_start > record.daily_start:
            record.daily_start = daily_start
            record.daily_requests = 0
            record.daily_cost_units = 0

        return record

    def evaluate(self, caller_id: str | None, now_ms: int | None = None) -> QuotaDecision:
        """Check limits for a caller and record the request if allowed.

        Rejection precedence: burst window, then daily requests, then
        daily cost. Window rollovers are saved even when rejecting.

        Args:
            caller_id: Caller identity. Blank maps to the anonymous bucket.
            now_ms: Current time in epoch milliseconds. Defaults to now.

        Returns:
            QuotaDecision indicating if the request should proceed
        """
        caller_id = normalize_caller_id(caller_id)
        now_ms = current_time_ms() if now_ms is None else now_ms
        limits = self.limits

        with self.store.lock(caller_id):
            record = self.store.get(caller_id) or UsageRecord(caller_id=caller_id)
            record = self._rolled_over(record, now_ms)

            reason = None
            retry_after = None
            if record.window_requests >= limits.short_window_max:
                reason = QuotaReason.BURST_LIMIT
                retry_after = _seconds_until(
                    record.window_start + limits.short_window_ms, now_ms
                )
            elif record.daily_requests >= limits.daily_max:
                reason = QuotaReason.DAILY_REQUEST_LIMIT
            elif (
                record.daily_cost_units + limits.estimated_cost_per_request
                > limits.daily_cost_limit
            ):
                reason = QuotaReason.DAILY_COST_LIMIT

            if reason is None:
                record.window_requests += 1
                record.daily_requests += 1
                record.daily_cost_units += limits.estimated_cost_per_request
            elif retry_after is None:
                retry_after = _seconds_until(
                    record.daily_start + limits.daily_window_ms, now_ms
                )

            self.store.put(record)

        if reason is not None:
            logger.warning(
                "Quota limit reached",
                extra={
                    "caller_id": caller_id,
                    "reason": reason.value,
                    "window_requests": record.window_requests,
                    "daily_requests": record.daily_requests,
                    "daily_cost_units": record.daily_cost_units,
                    "retry_after_seconds": retry_after,
                },
            )

        return QuotaDecision(
            allowed=reason is None,
            caller_id=caller_id,
            reason=reason,
            retry_after_seconds=retry_after,
            window_requests=record.window_requests,
            daily_requests=record.daily_requests,
            daily_cost_units=record.daily_cost_units,
        )

    def status(self, caller_id: str | None, now_ms: int | None = None) -> QuotaStatus:
        """Report a caller's effective usage without changing it.

        Args:
            caller_id: Caller identity. Blank maps to the anonymous bucket.
            now_ms: Current time in epoch milliseconds. Defaults to now.

        Returns:
            QuotaStatus snapshot
        """
        caller_id = normalize_caller_id(caller_id)
        now_ms = current_time_ms() if now_ms is None else now_ms
        limits = self.limits

        with self.store.lock(caller_id):
            stored = self.store.get(caller_id)

        # Rollovers applied to a copy only
        record = self._rolled_over(
            replace(stored) if stored else UsageRecord(caller_id=caller_id), now_ms
        )

        return QuotaStatus(
            caller_id=caller_id,
            window_requests=record.window_requests,
            window_limit=limits.short_window_max,
            window_remaining=max(0, limits.short_window_max - record.window_requests),
            window_resets_in_seconds=_seconds_until(
                record.window_start + limits.short_window_ms, now_ms
            ),
            daily_requests=record.daily_requests,
            daily_limit=limits.daily_max,
            daily_remaining=max(0, limits.daily_max - record.daily_requests),
            daily_cost_units=record.daily_cost_units,
            daily_cost_limit=limits.daily_cost_limit,
            daily_cost_remaining=max(0, limits.daily_cost_limit - record.daily_cost_units),
            daily_resets_in_seconds=_seconds_until(
                record.daily_start + limits.daily_window_ms, now_ms
            ),
        )

    def sweep(self, now_ms: int | None = None, retention_ms: int | None = None) -> int:
        """Remove records idle for longer than the retention period.

        A record is removed only when both its window start and its day
        start are older than ``now - retention``.

        Args:
            now_ms: Current time in epoch milliseconds. Defaults to now.
            retention_ms: Retention period. Defaults to the configured one.

        Returns:
            Number of records removed
        """
        now_ms = current_time_ms() if now_ms is None else now_ms
        retention_ms = self.limits.retention_ms if retention_ms is None else retention_ms
        cutoff = now_ms - retention_ms

        removed = 0
        for caller_id in self.store.caller_ids():
            with self.store.lock(caller_id):
                record = self.store.get(caller_id)
                if record is None:
                    continue
                if record.window_start < cutoff and record.daily_start < cutoff:
                    if self.store.delete(caller_id):
                        removed += 1

        logger.info(
            "Usage records swept",
            extra={"removed": removed, "cutoff_ms": cutoff},
        )
        return removed


class UsageSweeper:
    """Runs ``QuotaTracker.sweep`` on a fixed interval in a daemon thread."""

    def __init__(
        self,
        tracker: QuotaTracker,
        interval_seconds: float | None = None,
        retention_ms: int | None = None,
    ):
        """Initialize sweeper.

        Args:
            tracker: Tracker whose store is swept
            interval_seconds: Seconds between sweeps. Defaults to the limits.
            retention_ms: Retention passed to each sweep
        """
        self.tracker = tracker
        self.interval_seconds = (
            tracker.limits.sweep_interval_seconds
            if interval_seconds is None
            else interval_seconds
        )
        self.retention_ms = retention_ms
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background thread. No-op if already running."""
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="usage-sweeper", daemon=True
        )
        self._thread.start()
        logger.info("Usage sweeper started", extra={"interval_seconds": self.interval_seconds})

    def stop(self, timeout: float | None = None) -> None:
        """Signal the thread to exit and wait for it."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        while not self._stop.wait(self.interval_seconds):
            try:
                self.tracker.sweep(retention_ms=self.retention_ms)
            except Exception:
                # Keep the thread alive; the next interval retries
                logger.exception("Usage sweep failed")


def get_limit_message(reason: QuotaReason | str | None) -> str:
    """Get user-facing message for a quota rejection.

    Args:
        reason: The rejection reason

    Returns:
        A short message suitable for the chat UI.
    """
    if reason == QuotaReason.BURST_LIMIT:
        return (
            "You're sending messages a little too quickly. "
            "Please take a moment and try again shortly."
        )

    if reason == QuotaReason.DAILY_REQUEST_LIMIT:
        return (
            "You've reached today's message limit. "
            "Please come back tomorrow to continue the conversation."
        )

    if reason == QuotaReason.DAILY_COST_LIMIT:
        return (
            "Today's usage allowance has been reached. "
            "The assistant will be available again tomorrow (midnight UTC)."
        )

    return "The assistant is temporarily unavailable. Please try again later."
