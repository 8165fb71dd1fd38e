"""
Rule-based search intent extraction.

Used whenever the language model is unavailable or returns something
unusable. Pure keyword and regex matching, so it always produces an intent.
"""

import re
from typing import Dict, List, Optional
from app.constants import (
    DIETARY_KEYWORDS,
    FAMILY_SERVINGS,
    HEALTH_BENEFIT_KEYWORDS,
    HEALTH_TAG_KEYWORDS,
    QUICK_MEAL_MINUTES,
    QUICK_MEAL_WORDS,
)
from app.schemas.search import SearchIntent

# Ordered: the first pattern that matches decides the time
TIME_PATTERNS = [
    re.compile(r"(\d+)\s*(min|minute|minutes)"),
    re.compile(r"(\d+)\s*(hour|hours|hr|hrs)"),
    re.compile(r"under\s+(\d+)\s*(min|minute|minutes)"),
    re.compile(r"less\s+than\s+(\d+)\s*(min|minute|minutes)"),
    re.compile(r"quick\s+(\d+)\s*(min|minute|minutes)"),
]

SERVING_PATTERNS = [
    re.compile(r"(\d+)\s*(people|person|serving|servings)"),
    re.compile(r"serves?\s+(\d+)"),
    re.compile(r"for\s+(\d+)"),
    re.compile(r"(single|one)\s+(serving|person)"),
    re.compile(r"(family|large)\s+(serving|meal)"),
]


def match_tags(text: str, keyword_map: Dict[str, List[str]]) -> List[str]:
    """Return every tag with at least one keyword occurring in `text`, in map order."""
    return [
        tag
        for tag, keywords in keyword_map.items()
        if any(keyword in text for keyword in keywords)
    ]


def extract_total_time(text: str) -> Optional[int]:
    for pattern in TIME_PATTERNS:
        match = pattern.search(text)
        if match:
            value = int(match.group(1))
            unit = match.group(2)
            minutes = value * 60 if unit.startswith(("hour", "hr")) else value
            if minutes:
                return minutes
            break

    if any(word in text for word in QUICK_MEAL_WORDS):
        return QUICK_MEAL_MINUTES
    return None


def extract_servings(text: str) -> Optional[int]:
    for pattern in SERVING_PATTERNS:
        match = pattern.search(text)
        if match:
            value = match.group(1)
            if value in ("single", "one"):
                return 1
            if value in ("family", "large"):
                return FAMILY_SERVINGS
            return int(value) or None
    return None


def extract_intent_fallback(query: str) -> SearchIntent:
    """
    Build a SearchIntent from keyword synonyms and time/servings patterns.

    Args:
        query: Free-text recipe query

    Returns:
        SearchIntent with every list field present (possibly empty) and
        total_time / servings either positive or None.
    """
    text = (query or "").lower()
    return SearchIntent(
        dietary_tags=match_tags(text, DIETARY_KEYWORDS),
        health_tags=match_tags(text, HEALTH_TAG_KEYWORDS),
        health_benefits=match_tags(text, HEALTH_BENEFIT_KEYWORDS),
        total_time=extract_total_time(text),
        servings=extract_servings(text),
    )
