"""
FastAPI dependency providers.

Model-backed components are built once per Settings instance and reused
across requests; database-bound components are built per request.
"""

from functools import lru_cache
from fastapi import Depends
from sqlalchemy.orm import Session
from app.config import Settings, get_settings
from app.database import get_db
from app.services.description_enhancer import DescriptionEnhancer
from app.services.embeddings import EmbeddingGenerator
from app.services.intent_extractor import IntentExtractor
from app.services.recipe_analyzer import RecipeAnalyzer
from app.services.recipe_search import RecipeSearchService
from app.services.retrieval import CandidateRetriever


@lru_cache
def _intent_extractor(settings: Settings) -> IntentExtractor:
    return IntentExtractor(settings)


@lru_cache
def _embedding_generator(settings: Settings) -> EmbeddingGenerator:
    return EmbeddingGenerator(settings)


@lru_cache
def _recipe_analyzer(settings: Settings) -> RecipeAnalyzer:
    return RecipeAnalyzer(settings, _embedding_generator(settings))


@lru_cache
def _description_enhancer(settings: Settings) -> DescriptionEnhancer:
    return DescriptionEnhancer(settings)


def get_intent_extractor(settings: Settings = Depends(get_settings)) -> IntentExtractor:
    return _intent_extractor(settings)


def get_embedding_generator(
    settings: Settings = Depends(get_settings),
) -> EmbeddingGenerator:
    return _embedding_generator(settings)


def get_description_enhancer(
    settings: Settings = Depends(get_settings),
) -> DescriptionEnhancer:
    return _description_enhancer(settings)


def get_search_service(
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
    intent_extractor: IntentExtractor = Depends(get_intent_extractor),
    embedding_generator: EmbeddingGenerator = Depends(get_embedding_generator),
) -> RecipeSearchService:
    return RecipeSearchService(
        settings=settings,
        intent_extractor=intent_extractor,
        embedding_generator=embedding_generator,
        retriever=CandidateRetriever.for_session(db, settings.relevance),
    )


def get_recipe_analyzer(settings: Settings = Depends(get_settings)) -> RecipeAnalyzer:
    return _recipe_analyzer(settings)
