"""Chat Lambda handler: quota check, classification and model call."""

import threading
from typing import Any

import anthropic
from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.event_handler import (
    APIGatewayRestResolver,
    CORSConfig,
    Response,
)
from aws_lambda_powertools.event_handler.exceptions import BadRequestError
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from botocore.exceptions import ClientError
from pydantic import ValidationError

from chat.classifier import ClassifierRules, IntentClassifier
from chat.models import ChatRequest
from chat.service import ChatService
from shared.config import get_config
from shared.exceptions import ConfigurationError, ModelResponseError
from shared.quota_tracker import (
    QuotaReason,
    QuotaTracker,
    UsageSweeper,
    get_limit_message,
)
from shared.usage_store import InMemoryUsageStore
from shared.utils import error_body, extract_user_id, utc_now

SERVICE_VERSION = "1.0.0"

logger = Logger()
tracer = Tracer()
metrics = Metrics(namespace="Sanctify")

config = get_config()
cors_config = CORSConfig(
    allow_origin=(config.allowed_origin if config.is_production else "*"),
    allow_headers=["Content-Type", "X-User-ID", "X-User-Id"],
    expose_headers=["Retry-After"],
)
app = APIGatewayRestResolver(cors=cors_config)

_init_lock = threading.Lock()
_service: ChatService | None = None
_tracker: QuotaTracker | None = None
_sweeper: UsageSweeper | None = None


def get_quota_tracker() -> QuotaTracker:
    """Get or create the QuotaTracker singleton and start its sweeper."""
    global _tracker, _sweeper
    with _init_lock:
        if _tracker is None:
            _tracker = QuotaTracker(InMemoryUsageStore(), config.quota_limits)
            _sweeper = UsageSweeper(_tracker)
            _sweeper.start()
    return _tracker


def get_service() -> ChatService:
    """Get or create the chat service singleton."""
    global _service
    with _init_lock:
        if _service is None:
            rules = None
            if config.classifier_rules_path:
                rules = ClassifierRules.from_file(config.classifier_rules_path)
                logger.info(
                    "Loaded classifier rules",
                    extra={
                        "path": config.classifier_rules_path,
                        "rules_version": rules.version,
                    },
                )
            _service = ChatService(classifier=IntentClassifier(rules))
    return _service


def get_caller_id() -> str | None:
    """Caller identity from the X-User-Id header, if present."""
    return extract_user_id(app.current_event.headers)


def _json_response(status_code: int, body: str, headers: dict[str, str] | None = None) -> Response:
    return Response(
        status_code=status_code,
        content_type="application/json",
        body=body,
        headers=headers,
    )


def parse_chat_request() -> ChatRequest:
    """Parse and validate the request body.

    Raises:
        BadRequestError: If the body is missing, not JSON or invalid
    """
    if not app.current_event.body:
        raise BadRequestError("Request body is required")

    try:
        body = app.current_event.json_body
    except ValueError:
        raise BadRequestError("Request body must be valid JSON") from None

    if not isinstance(body, dict):
        raise BadRequestError("Request body must be a JSON object")

    try:
        return ChatRequest(**body)
    except ValidationError as e:
        error_msg = e.errors()[0].get("msg", "Invalid request")
        logger.warning("Chat request validation failed", extra={"errors": e.errors()})
        raise BadRequestError(error_msg) from None


@app.get("/health")
def health() -> dict[str, Any]:
    """Liveness check."""
    return {"status": "healthy", "timestamp": utc_now(), "version": SERVICE_VERSION}


@app.get("/ai/usage")
@tracer.capture_method
def get_usage() -> dict[str, Any]:
    """Current quota usage for the calling identity."""
    return get_quota_tracker().status(get_caller_id()).to_dict()


@app.post("/ai/chat")
@tracer.capture_method
def post_chat() -> Response:
    """Answer a chat message.

    Returns:
        Response with the model answer, verse references and timings
    """
    request = parse_chat_request()

    # Check quota before the model call
    decision = get_quota_tracker().evaluate(get_caller_id())

    if not decision.allowed:
        metrics.add_metric(name="LimitHits", unit=MetricUnit.Count, value=1)
        metrics.add_dimension(
            name="Reason", value=decision.reason.value if decision.reason else "unknown"
        )
        headers = None
        if decision.retry_after_seconds is not None:
            headers = {"Retry-After": str(decision.retry_after_seconds)}

        if decision.reason == QuotaReason.BURST_LIMIT:
            error = "too_many_requests"
        else:
            error = "daily_limit_reached"

        return _json_response(
            429,
            error_body(
                error,
                get_limit_message(decision.reason),
                details={"retryAfter": decision.retry_after_seconds},
            ),
            headers,
        )

    try:
        response = get_service().respond(request)
        return _json_response(200, response.to_json())
    except ModelResponseError as e:
        return _json_response(500, error_body("no_response", e.message))
    except (ConfigurationError, ClientError) as e:
        logger.error(f"Model credential unavailable: {e}")
        return _json_response(
            500, error_body("not_configured", "AI service not configured")
        )
    except anthropic.RateLimitError:
        logger.warning("Claude API rate limit exceeded")
        return _json_response(
            429,
            error_body("rate_limited", "Rate limit exceeded. Please try again later."),
        )
    except anthropic.APIConnectionError as e:
        logger.error(f"Claude API connection error: {e}")
        return _json_response(
            503,
            error_body("unavailable", "AI service temporarily unavailable"),
        )
    except anthropic.APIStatusError as e:
        logger.error(f"Claude API error: {e.status_code} - {e.message}")
        return _json_response(
            500,
            error_body("model_error", "AI service temporarily unavailable"),
        )


@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@tracer.capture_lambda_handler
@metrics.log_metrics
def lambda_handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Main Lambda entry point."""
    return app.resolve(event, context)
