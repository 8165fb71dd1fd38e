"""
Relevance scoring and result selection for recipe search.

The score blends three signals:
- vector similarity (weight 0.40)
- structured intent overlap (weight 0.60), averaged over the intent
  dimensions the query actually specified
- a small lexical bonus for query words in the title/description (max 0.10)
"""

from typing import List, Optional, Set
from app.config import RelevanceConfig
from app.schemas.search import RecipeCandidate, SearchIntent

SIMILARITY_WEIGHT = 0.40
INTENT_WEIGHT = 0.60

DIETARY_WEIGHT = 0.20
HEALTH_TAG_WEIGHT = 0.20
HEALTH_BENEFIT_WEIGHT = 0.15
TIME_WEIGHT = 0.03
SERVINGS_WEIGHT = 0.02

TITLE_KEYWORD_BONUS = 0.05
DESCRIPTION_KEYWORD_BONUS = 0.02
MAX_KEYWORD_BONUS = 0.10
MIN_KEYWORD_LENGTH = 3

SERVINGS_WINDOW = 4


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def _normalized(tags) -> Set[str]:
    return {tag.strip().lower() for tag in tags or [] if isinstance(tag, str)}


def tag_overlap(requested: List[str], available: List[str]) -> float:
    """Fraction of the requested tags present on the recipe."""
    wanted = _normalized(requested)
    if not wanted:
        return 0.0
    return len(wanted & _normalized(available)) / len(wanted)


def time_fit(recipe_minutes: int, target_minutes: int) -> float:
    """1.0 within the target, then linear decay with the relative overshoot."""
    if recipe_minutes <= target_minutes:
        return 1.0
    if target_minutes <= 0:
        return 0.0
    overshoot = recipe_minutes - target_minutes
    return _clamp(1.0 - overshoot / target_minutes)


def servings_fit(recipe_servings: int, target_servings: int) -> float:
    return _clamp(1.0 - abs(recipe_servings - target_servings) / SERVINGS_WINDOW)


def keyword_bonus(candidate: RecipeCandidate, query: str) -> float:
    title = (candidate.title or "").lower()
    description = (candidate.description or "").lower()
    bonus = 0.0
    for token in query.lower().split():
        if len(token) < MIN_KEYWORD_LENGTH:
            continue
        if token in title:
            bonus += TITLE_KEYWORD_BONUS
        if token in description:
            bonus += DESCRIPTION_KEYWORD_BONUS
    return min(bonus, MAX_KEYWORD_BONUS)


def intent_match(candidate: RecipeCandidate, intent: SearchIntent) -> Optional[float]:
    """
    Weighted intent overlap in [0, 1], or None when the intent is empty.

    Only dimensions present in the intent take part, each contributing its
    weight to both the achieved and the achievable total.
    """
    achieved = 0.0
    achievable = 0.0

    if intent.dietary_tags:
        achieved += tag_overlap(intent.dietary_tags, candidate.dietary_tags) * DIETARY_WEIGHT
        achievable += DIETARY_WEIGHT
    if intent.health_tags:
        achieved += tag_overlap(intent.health_tags, candidate.health_tags) * HEALTH_TAG_WEIGHT
        achievable += HEALTH_TAG_WEIGHT
    if intent.health_benefits:
        achieved += (
            tag_overlap(intent.health_benefits, candidate.health_benefits)
            * HEALTH_BENEFIT_WEIGHT
        )
        achievable += HEALTH_BENEFIT_WEIGHT
    if intent.total_time is not None:
        achieved += time_fit(candidate.total_time, intent.total_time) * TIME_WEIGHT
        achievable += TIME_WEIGHT
    if intent.servings is not None:
        achieved += servings_fit(candidate.servings, intent.servings) * SERVINGS_WEIGHT
        achievable += SERVINGS_WEIGHT

    if achievable == 0:
        return None
    return achieved / achievable


def score_candidate(
    candidate: RecipeCandidate, intent: SearchIntent, query: str
) -> float:
    """
    Compute the relevance of one candidate for a query. Pure and deterministic.

    The raw sum is divided by the largest sum the intent allows: 1.0 when
    the intent names any dimension, 0.40 when it is empty. With an empty
    intent, similarity and keyword bonus alone can reach the 0.6 threshold.

    Args:
        candidate: Recipe with its similarity score
        intent: Extracted search intent
        query: The trimmed query text

    Returns:
        Relevance in [0, 1]
    """
    raw = _clamp(candidate.similarity_score) * SIMILARITY_WEIGHT
    max_raw = SIMILARITY_WEIGHT

    match = intent_match(candidate, intent)
    if match is not None:
        raw += match * INTENT_WEIGHT
        max_raw += INTENT_WEIGHT

    raw += keyword_bonus(candidate, query)
    return round(_clamp(raw / max_raw), 4)


def score_candidates(
    candidates: List[RecipeCandidate], intent: SearchIntent, query: str
) -> List[RecipeCandidate]:
    return [
        candidate.model_copy(
            update={"relevance_score": score_candidate(candidate, intent, query)}
        )
        for candidate in candidates
    ]


def _rank_key(candidate: RecipeCandidate):
    return (-(candidate.relevance_score or 0.0), -candidate.similarity_score, str(candidate.id))


def select_results(
    candidates: List[RecipeCandidate],
    config: RelevanceConfig,
    limit: Optional[int] = None,
) -> List[RecipeCandidate]:
    """
    Keep candidates at or above the relevance threshold, best first.

    Ties on relevance are broken by similarity (desc) and then recipe id, so
    the order never depends on retrieval order. `limit` can only lower the
    configured maximum; a missing or non-positive limit is ignored.
    """
    cap = config.max_results
    if limit is not None and limit > 0:
        cap = min(limit, config.max_results)
    eligible = [
        candidate
        for candidate in candidates
        if candidate.relevance_score is not None
        and candidate.relevance_score >= config.min_relevance_threshold
    ]
    return sorted(eligible, key=_rank_key)[:cap]
