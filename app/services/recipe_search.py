import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from langsmith import traceable
from starlette.concurrency import run_in_threadpool
from app.config import Settings
from app.errors import InvalidSearchQueryError
from app.schemas.search import (
    IntentExtraction,
    ProcessingInfo,
    RelevanceInfo,
    RecipeCandidate,
    SearchResponse,
)
from app.services.embeddings import EmbeddingGenerator
from app.services.fallback_intent import extract_intent_fallback
from app.services.intent_extractor import IntentExtractor
from app.services.relevance import score_candidates, select_results
from app.services.retrieval import CandidateRetriever

logger = logging.getLogger(__name__)


class RecipeSearchService:
    """
    Semantic recipe search pipeline.

    intent extraction + query embedding (concurrent, failures isolated)
    -> candidate retrieval -> relevance scoring -> result selection
    """

    def __init__(
        self,
        settings: Settings,
        intent_extractor: IntentExtractor,
        embedding_generator: EmbeddingGenerator,
        retriever: CandidateRetriever,
    ):
        self.config = settings.relevance
        self.intent_extractor = intent_extractor
        self.embedding_generator = embedding_generator
        self.retriever = retriever

    @staticmethod
    def validate_query(query: Optional[str]) -> str:
        if query is None or not query.strip():
            raise InvalidSearchQueryError("Search query is required")
        return query.strip()

    async def _understand_query(
        self, query: str
    ) -> Tuple[IntentExtraction, Optional[List[float]]]:
        """Run intent extraction and embedding side by side; neither failure cancels the other."""
        intent_result, embedding_result = await asyncio.gather(
            self.intent_extractor.extract(query),
            self.embedding_generator.embed(query),
            return_exceptions=True,
        )

        if isinstance(intent_result, BaseException):
            logger.warning(
                "[RecipeSearch] Intent extraction failed: %s, using keyword fallback",
                intent_result,
            )
            intent_result = IntentExtraction(
                intent=extract_intent_fallback(query), method="fallback"
            )

        embedding = None
        if isinstance(embedding_result, BaseException):
            logger.warning(
                "[RecipeSearch] Embedding failed: %s, continuing with text search only",
                embedding_result,
            )
        else:
            embedding = embedding_result

        return intent_result, embedding

    def _relevance_info(self, results: List[RecipeCandidate]) -> RelevanceInfo:
        return RelevanceInfo(
            max_results=self.config.max_results,
            min_similarity_threshold=self.config.min_similarity_threshold,
            min_relevance_threshold=self.config.min_relevance_threshold,
            perfect_match_threshold=self.config.perfect_match_threshold,
            high_relevance_count=sum(
                1
                for r in results
                if r.relevance_score >= self.config.high_relevance_threshold
            ),
            perfect_matches=sum(
                1
                for r in results
                if r.relevance_score >= self.config.perfect_match_threshold
            ),
        )

    @traceable(name="recipe_semantic_search")
    async def search(self, query: Optional[str], limit: Optional[int] = None) -> SearchResponse:
        """
        Search recipes for a free-text query.

        Args:
            query: Raw query text from the request
            limit: Optional upper bound on the number of results

        Returns:
            SearchResponse with at most `max_results` ranked recipes

        Raises:
            InvalidSearchQueryError: query missing or blank (no external call is made)
            RetrievalError: text search failed and no fallback remains
        """
        query = self.validate_query(query)
        logger.info("[RecipeSearch] Processing search query: %s", query)

        extraction, embedding = await self._understand_query(query)

        retrieval = await run_in_threadpool(self.retriever.retrieve, query, embedding)
        scored = score_candidates(retrieval.candidates, extraction.intent, query)
        results = select_results(scored, self.config, limit=limit)

        logger.info(
            "[RecipeSearch] %d of %d candidates selected via %s",
            len(results),
            len(retrieval.candidates),
            retrieval.method,
        )

        return SearchResponse(
            success=True,
            query=query,
            intent=extraction.intent,
            results=results,
            total_results=len(results),
            relevance_info=self._relevance_info(results),
            processing_info=ProcessingInfo(
                intent_extraction=extraction.method,
                embedding_generation="success" if embedding is not None else "failed",
                search_method=retrieval.method,
            ),
            timestamp=datetime.now(timezone.utc),
        )
