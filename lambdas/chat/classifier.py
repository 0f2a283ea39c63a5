"""Keyword heuristics that pick a response format for a chat message."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ConfigDict, NonNegativeInt, field_validator
from pydantic import ValidationError as PydanticValidationError

from shared.exceptions import ValidationError

logger = Logger(child=True)


class Topic(str, Enum):
    """Response format selected for a message."""

    PRAYER = "prayer"
    INFORMATIONAL = "informational"
    CONVERSATIONAL = "conversational"
    PRACTICAL = "practical"


_KEYWORD_FIELDS = (
    "prayer_creation_phrases",
    "prayer_terms",
    "prayer_informational_phrases",
    "informational_phrases",
    "help_indicators",
    "spiritual_terms",
    "casual_words",
)


class ClassifierRules(BaseModel):
    """Keyword sets driving the classifier.

    All phrases are matched as lower-case substrings of the message.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    version: str = "2024.1"

    # Explicit requests to compose a prayer
    prayer_creation_phrases: tuple[str, ...] = (
        "create a prayer",
        "make a prayer",
        "write a prayer",
        "create me a prayer",
        "create me an",
        "write me a prayer",
        "make me a prayer",
        "generate a prayer",
        "help me pray",
    )
    prayer_terms: tuple[str, ...] = ("prayer", "pray")
    # Questions *about* prayer are informational, not prayer requests
    prayer_informational_phrases: tuple[str, ...] = (
        "what is prayer",
        "explain prayer",
        "define prayer",
        "what does prayer",
        "what is pray",
    )

    informational_phrases: tuple[str, ...] = (
        # direct questions
        "what is", "what does", "what are", "what will", "what happens",
        "what happened", "who is", "who was", "who are", "where is",
        "where does", "when did", "when will", "how is", "how does",
        "why is", "why does", "why did",
        # educational
        "explain", "define", "tell me about", "what's the meaning",
        "what means", "what's the difference", "difference between",
        # scripture lookups
        "where in the bible", "where does the bible", "what verse",
        "which verse", "scripture says", "bible verse about", "biblical",
        "according to scripture", "give me a passage", "give me a verse",
        "show me a verse", "find me a verse", "give me a random",
        "random verse", "random passage", "any verse", "share a verse",
        "passage from", "verse from", "scripture from", "bible passage about",
        # theological yes/no stems
        "do my", "does my", "will my", "can my", "do i get", "does god",
        "will god", "is it true", "is there", "are there", "do we go",
        "will we go", "can we", "am i saved", "are we saved",
        "do good deeds", "does faith", "will jesus",
    )

    help_indicators: tuple[str, ...] = (
        "i need", "i keep", "i cant", "i can't", "i dont", "i don't",
        "i struggle", "i'm struggling", "help me", "struggling with",
        "dealing with", "having trouble", "keep falling", "keep failing",
        "dont know what to do", "don't know what to do", "need guidance",
        "need advice", "need help", "falling into", "addicted to",
        "overcome", "stop doing", "break free", "get rid of",
    )

    spiritual_terms: tuple[str, ...] = (
        "sin", "lust", "temptation", "anxiety", "depression", "fear",
        "worry", "anger", "pride", "addiction", "doubt", "faith", "prayer",
        "bible", "god", "jesus", "spiritual", "christian",
    )

    # "k" and "ke" are left out: they match inside most words
    casual_words: tuple[str, ...] = (
        "hi", "hello", "hey", "thanks", "thank you", "ok", "okay", "yes",
        "no", "good", "great", "awesome", "cool", "nice", "wow", "amen",
        "bless", "lol", "haha",
    )

    # Messages shorter than this are treated as casual
    very_short_length: NonNegativeInt = 6
    # Single tokens shorter than this are treated as casual
    single_word_max_length: NonNegativeInt = 8

    @field_validator(*_KEYWORD_FIELDS)
    @classmethod
    def lowercase_phrases(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(phrase.lower() for phrase in v)

    @classmethod
    def from_dict(cls, data: dict[str, Any], base: "ClassifierRules | None" = None) -> "ClassifierRules":
        """Build rules by overriding fields of ``base`` (defaults if None).

        Args:
            data: Mapping of field name to keyword list or threshold
            base: Rules to start from

        Returns:
            New ClassifierRules

        Raises:
            ValidationError: On unknown keys or wrongly typed values
        """
        base = base or cls()
        try:
            return cls.model_validate({**base.model_dump(), **data})
        except PydanticValidationError as e:
            raise _rules_error(e) from None

    @classmethod
    def from_file(cls, path: str) -> "ClassifierRules":
        """Load rule overrides from a JSON file.

        Raises:
            FileNotFoundError: If the file does not exist
            ValidationError: If the file content is invalid
        """
        content = Path(path).read_text(encoding="utf-8")
        try:
            return cls.model_validate_json(content)
        except PydanticValidationError as e:
            raise _rules_error(e, path) from None


def _rules_error(e: PydanticValidationError, path: str | None = None) -> ValidationError:
    """Convert a pydantic error into the project ValidationError."""
    errors = e.errors()
    unknown = sorted(str(err["loc"][0]) for err in errors if err["type"] == "extra_forbidden")
    if unknown:
        return ValidationError(f"Unknown classifier rule keys: {unknown}")

    first = errors[0]
    if first["type"] == "json_invalid":
        return ValidationError(f"Invalid JSON in classifier rules {path}: {first['msg']}")

    name = str(first["loc"][0]) if first["loc"] else None
    if name is None:
        return ValidationError(f"Classifier rules must be a JSON object: {first['msg']}")
    return ValidationError(f"'{name}': {first['msg']}", field=name)


DEFAULT_RULES = ClassifierRules()


@dataclass(frozen=True)
class ClassificationResult:
    """Topic chosen for a message and the signals behind it."""

    topic: Topic
    fallback_used: bool = False
    signals: dict[str, bool] = field(default_factory=dict)


def _contains_any(text: str, phrases: tuple[str, ...]) -> bool:
    return any(phrase in text for phrase in phrases)


class IntentClassifier:
    """Maps message text to a Topic.

    Decision order: prayer, informational, conversational, practical.
    """

    def __init__(self, rules: ClassifierRules | None = None):
        """Initialize classifier.

        Args:
            rules: Keyword rules. Uses DEFAULT_RULES if not provided.
        """
        self.rules = rules or DEFAULT_RULES

    def signals(self, text: str) -> dict[str, bool]:
        """Evaluate every predicate against normalized ``text``."""
        rules = self.rules

        is_prayer_request = _contains_any(text, rules.prayer_creation_phrases) or (
            _contains_any(text, rules.prayer_terms)
            and not _contains_any(text, rules.prayer_informational_phrases)
        )
        indicates_need_for_help = _contains_any(text, rules.help_indicators)
        is_spiritual_context = _contains_any(text, rules.spiritual_terms)

        looks_casual = (
            len(text) < rules.very_short_length
            or (" " not in text and len(text) < rules.single_word_max_length)
            or _contains_any(text, rules.casual_words)
        )

        return {
            "is_prayer_request": is_prayer_request,
            "is_informational_request": _contains_any(text, rules.informational_phrases),
            "indicates_need_for_help": indicates_need_for_help,
            "is_spiritual_context": is_spiritual_context,
            "is_casual_message": (
                looks_casual and not indicates_need_for_help and not is_spiritual_context
            ),
        }

    def classify(self, message: str | None) -> ClassificationResult:
        """Classify a chat message.

        Never raises: any internal failure falls back to CONVERSATIONAL
        with ``fallback_used`` set.

        Args:
            message: Raw user message

        Returns:
            ClassificationResult with the selected topic
        """
        try:
            text = (message or "").lower()
            signals = self.signals(text)

            if signals["is_prayer_request"]:
                topic = Topic.PRAYER
            elif signals["is_informational_request"]:
                topic = Topic.INFORMATIONAL
            elif signals["is_casual_message"]:
                topic = Topic.CONVERSATIONAL
            else:
                topic = Topic.PRACTICAL
        except Exception:
            logger.exception(
                "Message classification failed, using conversational format",
                extra={"rules_version": self.rules.version},
            )
            return ClassificationResult(topic=Topic.CONVERSATIONAL, fallback_used=True)

        logger.debug(
            "Message classified",
            extra={
                "topic": topic.value,
                "message_length": len(text),
                "rules_version": self.rules.version,
                **signals,
            },
        )
        return ClassificationResult(topic=topic, signals=signals)


_default_classifier = IntentClassifier()


def classify(message: str | None) -> Topic:
    """Classify with the default rules and return just the topic."""
    return _default_classifier.classify(message).topic
