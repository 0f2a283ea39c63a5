"""Extra guidance for topics the client app lets users pick."""

TOPIC_GUIDANCE = {
    "finding-peace": (
        "Focus on biblical peace, relief from anxiety, and trusting God. "
        "Philippians 4:6-7 and Matthew 6:25-34 fit well."
    ),
    "life-guidance": (
        "Emphasize seeking God's will, wisdom, and direction. "
        "Consider Proverbs 3:5-6 and James 1:5."
    ),
    "prayer-life": (
        "Focus on prayer, communion with God, and spiritual disciplines. "
        "Consider Matthew 6:9-13 and 1 Thessalonians 5:17."
    ),
    "bible-study": (
        "Emphasize studying, meditating on, and applying Scripture. "
        "Consider 2 Timothy 3:16-17 and Joshua 1:8."
    ),
    "purpose-calling": (
        "Focus on God's purpose, calling, and identity in Christ. "
        "Consider Jeremiah 29:11 and Ephesians 2:10."
    ),
    "forgiveness": (
        "Emphasize forgiveness, grace, and healing. "
        "Consider Matthew 6:14-15 and 1 John 1:9."
    ),
    "relationships": (
        "Focus on love, community, and relationships shaped by the gospel. "
        "Consider 1 Corinthians 13 and Ephesians 4:32."
    ),
    "struggles": (
        "Emphasize God's strength in weakness and perseverance. "
        "Consider 2 Corinthians 12:9 and Romans 8:28."
    ),
    "gratitude": (
        "Focus on thankfulness, praise, and recognizing God's blessings. "
        "Consider 1 Thessalonians 5:18 and Psalm 103."
    ),
}


def get_topic_guidance(topic: str | None) -> str:
    """Get guidance text for a client-selected topic, or ''."""
    if not topic:
        return ""
    return TOPIC_GUIDANCE.get(topic.strip().lower(), "")
