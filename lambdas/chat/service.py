"""Chat service: classify, prompt, call the model, post-process."""

import time
from typing import Protocol, Sequence

from aws_lambda_powertools import Logger, Metrics
from aws_lambda_powertools.metrics import MetricUnit

from chat.claude_client import ModelResponse
from chat.classifier import IntentClassifier
from chat.models import ChatRequest, ChatResponse, HistoryMessage, Performance
from chat.parser import parse_ai_response
from chat.prompts import build_system_prompt
from shared.exceptions import ModelResponseError

logger = Logger(child=True)
metrics = Metrics(namespace="Sanctify")


class AIClient(Protocol):
    """Protocol for the model client interface."""

    def send_chat(
        self,
        system_prompt: str,
        history: Sequence[HistoryMessage],
        message: str,
    ) -> ModelResponse:
        """Send a chat turn and return response with usage stats."""
        ...


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class ChatService:
    """Service answering chat messages through Claude."""

    def __init__(
        self,
        ai_client: AIClient | None = None,
        classifier: IntentClassifier | None = None,
    ):
        """Initialize chat service.

        Args:
            ai_client: Optional pre-configured AI client (for testing)
            classifier: Intent classifier. Uses default rules if not provided.
        """
        self._ai_client = ai_client
        self.classifier = classifier or IntentClassifier()

    def _get_ai_client(self) -> AIClient:
        """Lazy initialization of the Claude client."""
        if self._ai_client is None:
            from chat.claude_client import ClaudeClient
            from shared.secrets import get_model_api_key

            self._ai_client = ClaudeClient(get_model_api_key())
            logger.info("Using Claude via Anthropic API")
        return self._ai_client

    def respond(self, request: ChatRequest) -> ChatResponse:
        """Answer a chat message.

        Args:
            request: Validated chat request

        Returns:
            ChatResponse with the answer, verse references and timings

        Raises:
            ModelResponseError: If the model returned no content
        """
        request_start = time.perf_counter()

        result = self.classifier.classify(request.message)
        if result.fallback_used:
            metrics.add_metric(name="ClassifierFallbacks", unit=MetricUnit.Count, value=1)
        metrics.add_metric(name="TopicClassified", unit=MetricUnit.Count, value=1)

        history = request.recent_history()
        logger.info(
            "Chat request classified",
            extra={
                "topic": result.topic.value,
                "fallback_used": result.fallback_used,
                "guidance_topic": request.topic,
                "history_total": len(request.conversation_history),
                "history_used": len(history),
                "message_preview": request.message[:50],
            },
        )

        system_prompt = build_system_prompt(result.topic, request.topic)

        network_start = time.perf_counter()
        model_response = self._get_ai_client().send_chat(
            system_prompt=system_prompt,
            history=history,
            message=request.message,
        )
        network_time = _elapsed_ms(network_start)

        if not model_response.text or not model_response.text.strip():
            logger.error(
                "No content in model response",
                extra={"output_tokens": model_response.output_tokens},
            )
            raise ModelResponseError("No response generated")

        parse_start = time.perf_counter()
        parsed = parse_ai_response(model_response.text)
        parse_time = _elapsed_ms(parse_start)

        total_time = _elapsed_ms(request_start)
        logger.info(
            "Chat response ready",
            extra={
                "network_ms": network_time,
                "parse_ms": parse_time,
                "total_ms": total_time,
                "verse_references": len(parsed.verse_references),
            },
        )

        return ChatResponse(
            **parsed.model_dump(),
            topic=result.topic.value,
            performance=Performance(
                network_time=network_time,
                parse_time=parse_time,
                total_time=total_time,
            ),
        )
