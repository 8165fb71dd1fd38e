"""
Helpers for pulling structured data out of free-form language model replies,
and for coercing it into the shapes the search pipeline expects.
"""

import json
import math
import re
from typing import Any, Dict, List, Optional
from app.schemas.search import SearchIntent

_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)
_BARE_JSON = re.compile(r"\{.*\}", re.DOTALL)

INTENT_TAG_FIELDS = ("dietary_tags", "health_tags", "health_benefits")


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """
    Return the first JSON object found in a model reply, or None.

    Fenced ```json blocks are preferred; otherwise the outermost {...} span is
    tried. Anything that does not decode to a dict yields None.
    """
    if not text:
        return None

    candidates = []
    fenced = _FENCED_JSON.search(text)
    if fenced:
        candidates.append(fenced.group(1))
    bare = _BARE_JSON.search(text)
    if bare:
        candidates.append(bare.group(0))

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed
    return None


def _clean_tags(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    tags = []
    for item in value:
        if isinstance(item, str) and item.strip():
            tags.append(item.strip().lower())
    return tags


def _clean_int(value: Any, minimum: int) -> Optional[int]:
    # bool is an int subclass but never a valid count
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    number = int(round(value))
    return number if number >= minimum else None


def sanitize_intent(raw: Any) -> SearchIntent:
    """
    Coerce an untrusted parsed object into a fully-defaulted SearchIntent.

    Non-list tag fields become empty lists and non-string tags are dropped.
    total_time must be a non-negative number and servings a positive one;
    anything else is treated as absent. Never raises.
    """
    if not isinstance(raw, dict):
        return SearchIntent()

    return SearchIntent(
        dietary_tags=_clean_tags(raw.get("dietary_tags")),
        health_tags=_clean_tags(raw.get("health_tags")),
        health_benefits=_clean_tags(raw.get("health_benefits")),
        total_time=_clean_int(raw.get("total_time"), minimum=0),
        servings=_clean_int(raw.get("servings"), minimum=1),
    )


def parse_intent_response(text: str) -> Optional[SearchIntent]:
    """Parse a raw model reply into a SearchIntent, or None when no JSON object is present."""
    parsed = extract_json_object(text)
    if parsed is None:
        return None
    return sanitize_intent(parsed)
