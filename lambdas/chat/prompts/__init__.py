"""Prompt building utilities for the chat assistant."""

from .formats import FORMATS, get_format
from .guidance import TOPIC_GUIDANCE, get_topic_guidance
from .system_prompt import build_system_prompt

__all__ = [
    "FORMATS",
    "TOPIC_GUIDANCE",
    "build_system_prompt",
    "get_format",
    "get_topic_guidance",
]
