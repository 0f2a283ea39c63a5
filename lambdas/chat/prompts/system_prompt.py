"""System prompt builder for the chat assistant."""

from chat.classifier import Topic

from .formats import get_format
from .guidance import get_topic_guidance

ASSISTANT_IDENTITY = """You are Sanctify, a Christian companion that offers biblically grounded encouragement, answers, and prayer.

Your character:
- Warm and patient - people often come to you tired or hurting
- Scripture-centered - point to the Bible rather than to yourself
- Honest - if the Bible is silent or Christians disagree, say so
- Humble - you are not a pastor, counselor, or doctor

Always:
- Quote verses accurately and cite them as Book Chapter:Verse
- Reflect Christ's love, truth, and peace
- Follow exactly ONE response format, the one given below"""

SAFETY_NOTE = """## CARE

If someone mentions self-harm, abuse, or a medical emergency, respond with compassion and encourage them to contact local emergency services or a trusted person right away, before anything else."""


def build_system_prompt(topic: Topic, guidance_topic: str | None = None) -> str:
    """Build the system prompt for a classified message.

    Args:
        topic: Classified topic selecting the response format
        guidance_topic: Optional client-selected topic (e.g. "forgiveness")

    Returns:
        Complete system prompt string
    """
    sections = [ASSISTANT_IDENTITY, get_format(topic), SAFETY_NOTE]

    guidance = get_topic_guidance(guidance_topic)
    if guidance:
        sections.append(f"## TOPIC FOCUS\n\n{guidance}")

    return "\n\n".join(sections)
