"""Tests for Claude API client."""

from unittest.mock import MagicMock, patch

import pytest

from chat.models import HistoryMessage


def make_mock_response(text: str = "Response", **usage_fields) -> MagicMock:
    """Create a mock messages.create response."""
    mock_usage = MagicMock()
    mock_usage.input_tokens = usage_fields.get("input_tokens", 100)
    mock_usage.output_tokens = usage_fields.get("output_tokens", 200)
    mock_usage.cache_creation_input_tokens = usage_fields.get("cache_creation", 0)
    mock_usage.cache_read_input_tokens = usage_fields.get("cache_read", 0)

    mock_response = MagicMock()
    mock_response.usage = mock_usage
    mock_response.content = [MagicMock(text=text)]
    return mock_response


class TestClaudeClient:
    """Tests for ClaudeClient class."""

    def test_init_creates_anthropic_client(self) -> None:
        """Client should create Anthropic client with API key."""
        with patch("anthropic.Anthropic") as mock_anthropic:
            from chat.claude_client import ClaudeClient

            client = ClaudeClient("test-api-key")

            mock_anthropic.assert_called_once_with(api_key="test-api-key")
            assert client.client == mock_anthropic.return_value

    def test_send_chat_calls_messages_create(self) -> None:
        """send_chat should call messages.create with correct parameters."""
        with patch("anthropic.Anthropic") as mock_anthropic:
            mock_client = MagicMock()
            mock_anthropic.return_value = mock_client
            mock_client.messages.create.return_value = make_mock_response(
                "Peace be with you", cache_read=50
            )

            from chat.claude_client import ClaudeClient

            client = ClaudeClient("test-key")
            result = client.send_chat(
                system_prompt="You are Sanctify",
                history=[],
                message="I feel anxious",
            )

            assert result.text == "Peace be with you"
            assert result.input_tokens == 100
            assert result.output_tokens == 200

            call_kwargs = mock_client.messages.create.call_args.kwargs
            assert call_kwargs["model"] == "claude-3-haiku-20240307"
            assert call_kwargs["max_tokens"] == 800
            assert call_kwargs["temperature"] == 0.7
            assert call_kwargs["system"][0]["text"] == "You are Sanctify"
            assert call_kwargs["system"][0]["cache_control"] == {"type": "ephemeral"}
            assert call_kwargs["messages"] == [{"role": "user", "content": "I feel anxious"}]

    def test_send_chat_logs_token_usage(self) -> None:
        """send_chat should log token usage and cost metrics."""
        with patch("anthropic.Anthropic") as mock_anthropic:
            mock_client = MagicMock()
            mock_anthropic.return_value = mock_client
            mock_client.messages.create.return_value = make_mock_response(
                input_tokens=1000, output_tokens=500, cache_creation=800, cache_read=200
            )

            from chat.claude_client import ClaudeClient

            with patch("chat.claude_client.logger") as mock_logger:
                client = ClaudeClient("test-key")
                client.send_chat("system", [], "hello")

                call_args = mock_logger.info.call_args
                assert call_args.args[0] == "Claude API usage"
                extra = call_args.kwargs["extra"]
                assert extra["input_tokens"] == 1000
                assert extra["output_tokens"] == 500
                assert extra["cache_creation_input_tokens"] == 800
                assert extra["cache_read_input_tokens"] == 200
                assert extra["estimated_cost_usd"] == pytest.approx(0.00112)

    def test_send_chat_handles_missing_cache_tokens(self) -> None:
        """send_chat should handle missing cache token attributes."""
        with patch("anthropic.Anthropic") as mock_anthropic:
            mock_client = MagicMock()
            mock_anthropic.return_value = mock_client

            mock_usage = MagicMock(spec=["input_tokens", "output_tokens"])
            mock_usage.input_tokens = 100
            mock_usage.output_tokens = 50

            mock_response = MagicMock()
            mock_response.usage = mock_usage
            mock_response.content = [MagicMock(text="Response")]
            mock_client.messages.create.return_value = mock_response

            from chat.claude_client import ClaudeClient

            result = ClaudeClient("test-key").send_chat("system", [], "hi")

            assert result.text == "Response"

    def test_send_chat_empty_content(self) -> None:
        """No content blocks yields empty text."""
        with patch("anthropic.Anthropic") as mock_anthropic:
            mock_client = MagicMock()
            mock_anthropic.return_value = mock_client
            mock_response = make_mock_response()
            mock_response.content = []
            mock_client.messages.create.return_value = mock_response

            from chat.claude_client import ClaudeClient

            result = ClaudeClient("test-key").send_chat("system", [], "hi")

            assert result.text == ""

    def test_model_constant(self) -> None:
        """ClaudeClient should use Haiku 3 model."""
        from chat.claude_client import ClaudeClient

        assert ClaudeClient.MODEL == "claude-3-haiku-20240307"

    def test_estimate_cost_usd(self) -> None:
        """Cost uses Haiku per-million-token prices."""
        from chat.claude_client import ClaudeClient

        assert ClaudeClient.estimate_cost_usd(1_000_000, 0) == 0.25
        assert ClaudeClient.estimate_cost_usd(0, 1_000_000) == 1.25
        assert ClaudeClient.estimate_cost_usd(0, 0, 1_000_000) == 0.025
        assert ClaudeClient.estimate_cost_usd(0, 0, 0, 1_000_000) == 0.3

    def test_max_tokens_constant(self) -> None:
        """ClaudeClient should have max_tokens of 800."""
        from chat.claude_client import ClaudeClient

        assert ClaudeClient.MAX_TOKENS == 800


class TestBuildMessages:
    """Tests for ClaudeClient.build_messages."""

    def test_history_then_message(self) -> None:
        """History comes first, new message last."""
        from chat.claude_client import ClaudeClient

        history = [
            HistoryMessage(role="user", content="Hi"),
            HistoryMessage(role="assistant", content="Hello!"),
        ]

        messages = ClaudeClient.build_messages(history, "Pray for me")

        assert messages == [
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello!"},
            {"role": "user", "content": "Pray for me"},
        ]

    def test_keeps_last_eight(self) -> None:
        """Only the eight most recent turns are sent."""
        from chat.claude_client import ClaudeClient

        history = [
            HistoryMessage(role="user" if i % 2 == 0 else "assistant", content=f"m{i}")
            for i in range(12)
        ]

        messages = ClaudeClient.build_messages(history, "new")

        assert len(messages) == 9
        assert messages[0]["content"] == "m4"
        assert messages[-1]["content"] == "new"

    def test_drops_leading_assistant_turns(self) -> None:
        """Conversation sent to the model starts with the user."""
        from chat.claude_client import ClaudeClient

        history = [
            HistoryMessage(role="assistant", content="Welcome"),
            HistoryMessage(role="user", content="Thanks"),
            HistoryMessage(role="assistant", content="Anytime"),
        ]

        messages = ClaudeClient.build_messages(history, "Question")

        assert messages[0] == {"role": "user", "content": "Thanks"}
        assert len(messages) == 3
