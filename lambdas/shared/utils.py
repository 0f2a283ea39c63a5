"""Small helpers shared by the Sanctify handlers."""
import json
import time
from datetime import UTC, datetime
from typing import Any

USER_ID_HEADER = "x-user-id"


def utc_now() -> str:
    """Current UTC time as an ISO 8601 string."""
    return datetime.now(UTC).isoformat()


def current_time_ms() -> int:
    """Get current time as integer epoch milliseconds."""
    return time.time_ns() // 1_000_000


def extract_user_id(headers: dict[str, str] | None) -> str | None:
    """Find the caller id in request headers.

    Header names are matched without regard to case, since API Gateway
    passes them through as the client sent them.

    Args:
        headers: Request headers, may be None

    Returns:
        The X-User-Id value, or None when absent
    """
    if not headers:
        return None
    return next(
        (value for key, value in headers.items() if key.lower() == USER_ID_HEADER),
        None,
    )


def error_body(
    error: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> str:
    """Serialize an error payload for an HTTP response.

    Args:
        error: Machine-readable error code, e.g. "too_many_requests"
        message: Text shown to the user
        details: Extra fields such as retryAfter

    Returns:
        JSON string with error, message, timestamp and optional details
    """
    payload: dict[str, Any] = {"error": error, "message": message, "timestamp": utc_now()}
    if details:
        payload["details"] = details
    return json.dumps(payload)
