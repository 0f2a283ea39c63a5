"""Chat module: intent classification and AI-powered spiritual guidance."""

from .claude_client import ClaudeClient, ModelResponse
from .classifier import (
    DEFAULT_RULES,
    ClassificationResult,
    ClassifierRules,
    IntentClassifier,
    Topic,
    classify,
)
from .models import ChatRequest, ChatResponse, HistoryMessage, VerseReference
from .parser import extract_verse_references, parse_ai_response
from .service import ChatService

__all__ = [
    "DEFAULT_RULES",
    "ChatRequest",
    "ChatResponse",
    "ChatService",
    "ClassificationResult",
    "ClassifierRules",
    "ClaudeClient",
    "HistoryMessage",
    "IntentClassifier",
    "ModelResponse",
    "Topic",
    "VerseReference",
    "classify",
    "extract_verse_references",
    "parse_ai_response",
]
