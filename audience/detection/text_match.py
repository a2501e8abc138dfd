"""Text matching utilities shared by the intent and segment detectors."""

from typing import Iterable, List, Pattern


def _contains_patterns(text: str, patterns: List[Pattern]) -> bool:
    """Check if text matches any of the compiled regex patterns."""
    return any(pattern.search(text) for pattern in patterns)


def _contains_keywords(text: str, keywords: Iterable[str]) -> bool:
    """Check if text contains any of the keywords as a substring."""
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


def _contains_every(text: str, keywords: Iterable[str]) -> bool:
    """Check if text contains all of the keywords as substrings."""
    lowered = text.lower()
    return all(keyword in lowered for keyword in keywords)
