"""
Candidate retrieval for recipe search.

Retrieval is an ordered chain of strategies. Each strategy's attempt() returns
None when it does not apply, a possibly empty list of candidates otherwise,
or raises. The first strategy that yields at least one candidate wins.

1. VectorSimilarityStrategy - pgvector cosine similarity (needs an embedding).
   Backend errors are logged and the chain moves on.
2. TextMatchStrategy - case-insensitive substring match on title/description.
   Backend errors are fatal, there is nothing left to fall back to.
"""

import logging
from typing import List, Optional, Sequence
from sqlalchemy import or_, select
from sqlalchemy.orm import Session
from app.config import RelevanceConfig
from app.errors import RetrievalError
from app.models import Recipe
from app.schemas.search import RecipeCandidate, RetrievalResult

logger = logging.getLogger(__name__)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class RetrievalStrategy:
    name = "none"
    # True when a failure should fall through to the next strategy
    fail_soft = False

    def attempt(
        self, query: str, embedding: Optional[List[float]]
    ) -> Optional[List[RecipeCandidate]]:
        raise NotImplementedError


class VectorSimilarityStrategy(RetrievalStrategy):
    name = "vector_similarity"
    fail_soft = True

    def __init__(self, db: Session, config: RelevanceConfig):
        self.db = db
        self.config = config

    def attempt(self, query, embedding):
        if not embedding:
            return None

        similarity = 1 - Recipe.embedding.cosine_distance(embedding)
        stmt = (
            select(Recipe, similarity.label("similarity_score"))
            .where(Recipe.embedding.is_not(None))
            .where(similarity > self.config.min_similarity_threshold)
            .order_by(similarity.desc())
            .limit(self.config.candidate_pool_size)
        )
        rows = self.db.execute(stmt).all()
        return [RecipeCandidate.from_recipe(recipe, score) for recipe, score in rows]


class TextMatchStrategy(RetrievalStrategy):
    name = "text_search"

    def __init__(self, db: Session, config: RelevanceConfig):
        self.db = db
        self.config = config

    def attempt(self, query, embedding):
        pattern = f"%{_escape_like(query)}%"
        stmt = (
            select(Recipe)
            .where(
                or_(
                    Recipe.title.ilike(pattern, escape="\\"),
                    Recipe.description.ilike(pattern, escape="\\"),
                )
            )
            .order_by(Recipe.created_at.desc())
            .limit(self.config.candidate_pool_size)
        )
        recipes = self.db.scalars(stmt).all()
        return [
            RecipeCandidate.from_recipe(recipe, self.config.text_match_similarity)
            for recipe in recipes
        ]


class CandidateRetriever:
    """Runs the retrieval strategies in order until one yields candidates."""

    def __init__(self, strategies: Sequence[RetrievalStrategy], db: Optional[Session] = None):
        self.strategies = list(strategies)
        self.db = db

    @classmethod
    def for_session(cls, db: Session, config: RelevanceConfig) -> "CandidateRetriever":
        return cls(
            [VectorSimilarityStrategy(db, config), TextMatchStrategy(db, config)],
            db=db,
        )

    def retrieve(self, query: str, embedding: Optional[List[float]]) -> RetrievalResult:
        """
        Get the candidate set for a query.

        Args:
            query: Trimmed search text
            embedding: Query vector, or None when embedding failed

        Returns:
            RetrievalResult naming the strategy that produced the candidates
            ("none" with an empty list when nothing matched)

        Raises:
            RetrievalError: a strategy without a fallback failed
        """
        for strategy in self.strategies:
            try:
                candidates = strategy.attempt(query, embedding)
            except Exception as e:
                if self.db is not None:
                    self.db.rollback()
                if strategy.fail_soft:
                    logger.warning(
                        "[CandidateRetriever] %s failed, trying next strategy: %s",
                        strategy.name,
                        e,
                    )
                    continue
                logger.error("[CandidateRetriever] %s failed: %s", strategy.name, e)
                raise RetrievalError(
                    "Recipe search failed",
                    debug_info={"strategy": strategy.name, "error": type(e).__name__},
                ) from e

            if candidates is None:
                logger.debug("[CandidateRetriever] %s not applicable", strategy.name)
                continue
            if candidates:
                logger.info(
                    "[CandidateRetriever] %s found %d candidates",
                    strategy.name,
                    len(candidates),
                )
                return RetrievalResult(candidates=candidates, method=strategy.name)
            logger.info("[CandidateRetriever] %s returned no results", strategy.name)

        return RetrievalResult(candidates=[], method="none")
