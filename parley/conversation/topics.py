"""Best-effort keyword extraction for thread topics."""

import re

STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "is", "are", "was", "were", "be", "been", "being",
        "have", "has", "had", "do", "does", "did", "will", "would", "could",
        "should", "may", "might", "can", "this", "that", "these", "those",
        "i", "you", "he", "she", "it", "we", "they", "me", "him", "her", "us",
        "them",
    }
)

_PUNCTUATION = re.compile(r"[^\w\s]")


def extract_keywords(content: str, limit: int = 5) -> list[str]:
    """Extract up to ``limit`` keywords in order of appearance.

    Lower-cases, replaces punctuation with spaces and keeps tokens longer than
    two characters that are not stop words.
    """
    words = _PUNCTUATION.sub(" ", content.lower()).split()
    keywords = [w for w in words if len(w) > 2 and w not in STOP_WORDS]
    return keywords[:limit]


def merge_topics(existing: list[str], new: list[str], cap: int = 10) -> list[str]:
    """Merge new keywords into existing topics, first occurrence wins."""
    merged = list(dict.fromkeys([*existing, *new]))
    return merged[:cap]
