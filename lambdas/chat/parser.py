"""Parser for extracting scripture references from model answers."""

import re

from aws_lambda_powertools import Logger

from .models import ParsedResponse, VerseReference

logger = Logger(child=True)

BIBLE_BOOKS = [
    "Genesis", "Exodus", "Leviticus", "Numbers", "Deuteronomy", "Joshua",
    "Judges", "Ruth", "1 Samuel", "2 Samuel", "1 Kings", "2 Kings",
    "1 Chronicles", "2 Chronicles", "Ezra", "Nehemiah", "Esther", "Job",
    "Psalms", "Psalm", "Proverbs", "Ecclesiastes", "Song of Solomon",
    "Isaiah", "Jeremiah", "Lamentations", "Ezekiel", "Daniel", "Hosea",
    "Joel", "Amos", "Obadiah", "Jonah", "Micah", "Nahum", "Habakkuk",
    "Zephaniah", "Haggai", "Zechariah", "Malachi", "Matthew", "Mark",
    "Luke", "John", "Acts", "Romans", "1 Corinthians", "2 Corinthians",
    "Galatians", "Ephesians", "Philippians", "Colossians",
    "1 Thessalonians", "2 Thessalonians", "1 Timothy", "2 Timothy",
    "Titus", "Philemon", "Hebrews", "James", "1 Peter", "2 Peter",
    "1 John", "2 John", "3 John", "Jude", "Revelation",
]

# Numbered books must be tried before their bare names ("1 John" before
# "John"), and "Psalms" before "Psalm"; the lookbehind stops "1 John"
# from also matching as "John".
_BOOK_ALTERNATION = "|".join(
    re.escape(book).replace(r"\ ", r"\s+")
    for book in sorted(BIBLE_BOOKS, key=len, reverse=True)
)

VERSE_PATTERN = re.compile(
    rf"(?<![\w])(?P<book>{_BOOK_ALTERNATION})\s+(?P<ref>\d+:\d+(?:-\d+)?)\b",
    re.IGNORECASE,
)


def extract_verse_references(text: str) -> list[VerseReference]:
    """Find Book Chapter:Verse references in text.

    Parenthesised references are matched too. Duplicates (by full
    reference) are dropped, keeping first-seen order.

    Args:
        text: Model answer text

    Returns:
        Unique verse references
    """
    if not text:
        return []

    seen: set[str] = set()
    references: list[VerseReference] = []
    for match in VERSE_PATTERN.finditer(text):
        book = " ".join(match.group("book").split())
        reference = match.group("ref")
        full_reference = f"{book} {reference}"
        if full_reference in seen:
            continue
        seen.add(full_reference)
        references.append(
            VerseReference(book=book, reference=reference, full_reference=full_reference)
        )

    return references


def parse_ai_response(content: str) -> ParsedResponse:
    """Parse a model answer into structured data.

    Args:
        content: Raw answer text from the model

    Returns:
        ParsedResponse with trimmed content and verse references
    """
    content = (content or "").strip()
    references = extract_verse_references(content)
    logger.debug("Verse references extracted", extra={"count": len(references)})
    return ParsedResponse(content=content, verse_references=references)
