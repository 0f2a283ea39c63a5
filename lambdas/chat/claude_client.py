"""Claude API client with prompt caching."""

from dataclasses import dataclass
from typing import Sequence

import anthropic
from aws_lambda_powertools import Logger

from .models import MAX_HISTORY_MESSAGES, HistoryMessage

logger = Logger(child=True)


@dataclass
class ModelResponse:
    """Model answer with usage stats."""

    text: str
    input_tokens: int
    output_tokens: int


class ClaudeClient:
    """Wrapper for Claude API with prompt caching."""

    MODEL = "claude-3-haiku-20240307"
    MAX_TOKENS = 800
    TEMPERATURE = 0.7

    # USD per million tokens; cache writes cost 125% of input, reads 10%
    INPUT_PRICE = 0.25
    OUTPUT_PRICE = 1.25
    CACHE_WRITE_PRICE = 0.30
    CACHE_READ_PRICE = 0.025

    def __init__(self, api_key: str):
        """Initialize Claude client.

        Args:
            api_key: Anthropic API key
        """
        self.client = anthropic.Anthropic(api_key=api_key)

    @classmethod
    def estimate_cost_usd(
        cls,
        input_tokens: int,
        output_tokens: int,
        cache_read_tokens: int = 0,
        cache_write_tokens: int = 0,
    ) -> float:
        """Estimated USD cost of one call, rounded to micro-dollars."""
        cost = (
            input_tokens * cls.INPUT_PRICE
            + output_tokens * cls.OUTPUT_PRICE
            + cache_read_tokens * cls.CACHE_READ_PRICE
            + cache_write_tokens * cls.CACHE_WRITE_PRICE
        ) / 1_000_000
        return round(cost, 6)

    @staticmethod
    def build_messages(
        history: Sequence[HistoryMessage], message: str
    ) -> list[dict[str, str]]:
        """Build the messages list from recent history plus the new message.

        Keeps the last MAX_HISTORY_MESSAGES turns and drops leading
        assistant turns so the conversation opens with the user.
        """
        recent = list(history)[-MAX_HISTORY_MESSAGES:]
        while recent and recent[0].role != "user":
            recent.pop(0)

        messages = [{"role": m.role, "content": m.content} for m in recent]
        messages.append({"role": "user", "content": message})
        return messages

    def send_chat(
        self,
        system_prompt: str,
        history: Sequence[HistoryMessage],
        message: str,
    ) -> ModelResponse:
        """Send the user's message to Claude, return response with usage stats.

        Uses prompt caching on system_prompt for cost savings.

        Args:
            system_prompt: Topic-specific system prompt (cacheable)
            history: Earlier conversation turns
            message: The user's new message

        Returns:
            ModelResponse with text and token usage
        """
        response = self.client.messages.create(
            model=self.MODEL,
            max_tokens=self.MAX_TOKENS,
            temperature=self.TEMPERATURE,
            system=[
                {
                    "type": "text",
                    "text": system_prompt,
                    "cache_control": {"type": "ephemeral"},
                }
            ],
            messages=self.build_messages(history, message),
        )

        usage = response.usage
        cache_creation = getattr(usage, "cache_creation_input_tokens", 0) or 0
        cache_read = getattr(usage, "cache_read_input_tokens", 0) or 0
        estimated_cost = self.estimate_cost_usd(
            usage.input_tokens, usage.output_tokens, cache_read, cache_creation
        )

        logger.info(
            "Claude API usage",
            extra={
                "input_tokens": usage.input_tokens,
                "output_tokens": usage.output_tokens,
                "cache_creation_input_tokens": cache_creation,
                "cache_read_input_tokens": cache_read,
                "history_messages": len(history),
                "estimated_cost_usd": estimated_cost,
            },
        )

        text = "".join(getattr(block, "text", "") or "" for block in response.content)

        return ModelResponse(
            text=text,
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
        )
