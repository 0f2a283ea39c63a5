"""Pydantic models for chat requests and responses."""

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

MAX_MESSAGE_LENGTH = 2000
MAX_HISTORY_MESSAGES = 8


class HistoryMessage(BaseModel):
    """Earlier turn of the conversation, as sent by the client."""

    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Request body for POST /ai/chat."""

    message: str = Field(..., max_length=MAX_MESSAGE_LENGTH)
    conversation_history: list[HistoryMessage] = Field(
        default_factory=list, alias="conversationHistory"
    )
    topic: str | None = None

    model_config = {"populate_by_name": True}

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, v: str) -> str:
        """Reject whitespace-only messages."""
        if not v.strip():
            raise ValueError("Message is required and must be a non-empty string")
        return v

    @field_validator("conversation_history", mode="before")
    @classmethod
    def none_history_is_empty(cls, v: object) -> object:
        return [] if v is None else v

    def recent_history(self, limit: int = MAX_HISTORY_MESSAGES) -> list[HistoryMessage]:
        """Most recent non-empty history messages, oldest first."""
        if limit <= 0:
            return []
        turns = [m for m in self.conversation_history if m.content.strip()]
        return turns[-limit:]


class VerseReference(BaseModel):
    """Scripture reference found in a model answer."""

    book: str
    reference: str
    full_reference: str = Field(serialization_alias="fullReference")


class ParsedResponse(BaseModel):
    """Model answer with extracted verse references."""

    content: str
    verse_references: list[VerseReference] = Field(
        default_factory=list, serialization_alias="verseReferences"
    )
    content_type: str = Field(default="spiritual_guidance", serialization_alias="contentType")
    formatted_at: str = Field(
        default_factory=lambda: datetime.now(UTC).isoformat(),
        serialization_alias="formattedAt",
    )


class Performance(BaseModel):
    """Timing breakdown in milliseconds."""

    network_time: int = Field(serialization_alias="networkTime")
    parse_time: int = Field(serialization_alias="parseTime")
    total_time: int = Field(serialization_alias="totalTime")


class ChatResponse(ParsedResponse):
    """Response body for POST /ai/chat."""

    topic: str
    performance: Performance
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())

    def to_json(self) -> str:
        """Serialize with the camelCase keys the client expects."""
        return self.model_dump_json(by_alias=True)
