import asyncio
import logging
import uuid
from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI
from langsmith import traceable
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from app.config import Settings
from app.errors import RecipeAnalysisError, RecipeNotFoundError
from app.models import Recipe
from app.schemas import AnalysisResult, RecipeData
from app.services.embeddings import EmbeddingGenerator
from app.utils.json_extraction import extract_json_object
from app.utils.prompt_helpers import build_analysis_prompt, build_embedding_text

logger = logging.getLogger(__name__)

REQUIRED_SECTIONS = ("health_tags", "dietary_tags", "health_benefits", "nutritional_info")


def parse_analysis_response(text: str) -> AnalysisResult:
    """Validate a model reply against the analysis shape; raises RecipeAnalysisError."""
    parsed = extract_json_object(text)
    if parsed is None:
        raise RecipeAnalysisError("No valid JSON found in analysis response")

    missing = [section for section in REQUIRED_SECTIONS if section not in parsed]
    if missing:
        raise RecipeAnalysisError(
            "Invalid analysis result structure",
            debug_info={"missing_sections": missing},
        )
    try:
        return AnalysisResult.model_validate(parsed)
    except ValidationError as e:
        raise RecipeAnalysisError(
            "Invalid analysis result structure",
            debug_info={"validation_errors": e.error_count()},
        ) from e


class RecipeAnalyzer:
    """
    Tags a recipe (health, dietary, benefits, nutrition) and stores its
    embedding so it becomes reachable through vector search.
    """

    def __init__(self, settings: Settings, embedding_generator: EmbeddingGenerator, llm=None):
        self.timeout = settings.external_call_timeout_seconds
        self.embedding_generator = embedding_generator
        self.llm = llm
        if self.llm is None and settings.has_openai_credentials:
            self.llm = ChatOpenAI(
                model=settings.generative_model,
                api_key=settings.openai_api_key,
                temperature=0.1,
                max_tokens=1000,
            )

    @traceable(name="analyze_recipe_llm")
    async def analyze_with_llm(self, recipe_data: RecipeData) -> AnalysisResult:
        if self.llm is None:
            raise RecipeAnalysisError("OpenAI API key not configured")
        try:
            response = await asyncio.wait_for(
                self.llm.ainvoke([HumanMessage(content=build_analysis_prompt(recipe_data))]),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise RecipeAnalysisError(
                f"Analysis model timed out after {self.timeout}s"
            ) from e
        except Exception as e:
            raise RecipeAnalysisError(f"Analysis model call failed: {e}") from e

        content = response.content if isinstance(response.content, str) else ""
        return parse_analysis_response(content)

    def _save(
        self, db: Session, recipe_id: uuid.UUID, embedding, analysis: AnalysisResult
    ) -> Recipe:
        recipe = db.get(Recipe, recipe_id)
        if recipe is None:
            raise RecipeNotFoundError(f"Recipe {recipe_id} not found")
        recipe.health_tags = analysis.health_tags
        recipe.dietary_tags = analysis.dietary_tags
        recipe.health_benefits = analysis.health_benefits
        recipe.nutritional_info = analysis.nutritional_info.model_dump()
        recipe.embedding = embedding
        db.commit()
        db.refresh(recipe)
        return recipe

    async def analyze(
        self, db: Session, recipe_id: uuid.UUID, recipe_data: RecipeData
    ) -> tuple:
        """
        Analyze a recipe and persist the results.

        Embedding and LLM analysis run concurrently and are both required;
        the first failure cancels the other call.

        Returns:
            (AnalysisResult, embedding dimensions)

        Raises:
            RecipeNotFoundError, RecipeAnalysisError, EmbeddingError
        """
        if await run_in_threadpool(db.get, Recipe, recipe_id) is None:
            raise RecipeNotFoundError(f"Recipe {recipe_id} not found")

        logger.info("[RecipeAnalyzer] Analyzing recipe %s (%s)", recipe_id, recipe_data.title)
        embed_task = asyncio.create_task(
            self.embedding_generator.embed(build_embedding_text(recipe_data))
        )
        analysis_task = asyncio.create_task(self.analyze_with_llm(recipe_data))
        tasks = (embed_task, analysis_task)

        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        for task in tasks:
            if task in done and task.exception() is not None:
                logger.warning(
                    "[RecipeAnalyzer] Analysis of recipe %s failed: %s",
                    recipe_id,
                    task.exception(),
                )
                raise task.exception()
        embedding = embed_task.result()
        analysis = analysis_task.result()

        await run_in_threadpool(self._save, db, recipe_id, embedding, analysis)
        logger.info(
            "[RecipeAnalyzer] Recipe %s updated: %d health tags, %d dietary tags, %d benefits",
            recipe_id,
            len(analysis.health_tags),
            len(analysis.dietary_tags),
            len(analysis.health_benefits),
        )
        return analysis, len(embedding)
