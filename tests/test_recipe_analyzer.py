import asyncio
import threading
import uuid
import pytest
from app.errors import EmbeddingError, RecipeAnalysisError, RecipeNotFoundError
from app.models import Recipe
from app.schemas import RecipeData
from app.services.embeddings import EmbeddingGenerator
from app.services.recipe_analyzer import RecipeAnalyzer, parse_analysis_response
from conftest import FakeChatModel, FakeEmbeddings

ANALYSIS_REPLY = (
    '{"health_tags": ["high-protein"], "dietary_tags": ["keto"], '
    '"health_benefits": ["muscle-building"], '
    '"nutritional_info": {"calories_estimate": 400, "protein_grams": 30}}'
)

RECIPE_DATA = RecipeData(title="Seared Steak", prep_time=5, cook_time=10, servings=2)


class ThreadRecordingSession:
    """Session proxy that records which thread each get() runs on"""

    def __init__(self, db):
        self.db = db
        self.get_threads = []

    def get(self, *args, **kwargs):
        self.get_threads.append(threading.get_ident())
        return self.db.get(*args, **kwargs)

    def __getattr__(self, name):
        return getattr(self.db, name)


async def analyze_and_collect_pending(analyzer, db, recipe_id, error_type):
    with pytest.raises(error_type):
        await analyzer.analyze(db, recipe_id, RECIPE_DATA)
    return [task for task in asyncio.all_tasks() if task is not asyncio.current_task()]


def test_parse_analysis_response_fills_nutrition_defaults():
    analysis = parse_analysis_response(ANALYSIS_REPLY)
    assert analysis.dietary_tags == ["keto"]
    assert analysis.nutritional_info.protein_grams == 30
    assert analysis.nutritional_info.sodium_mg == 0


def test_parse_analysis_response_without_json():
    with pytest.raises(RecipeAnalysisError):
        parse_analysis_response("I could not analyze this recipe.")


def test_embedding_failure_cancels_model_call(settings, db, test_recipes):
    """No model call is left running once the embedding has failed"""
    llm = FakeChatModel(reply=ANALYSIS_REPLY, delay=0.2)
    generator = EmbeddingGenerator(settings, client=FakeEmbeddings(error=RuntimeError("down")))
    analyzer = RecipeAnalyzer(settings, generator, llm=llm)
    recipe = test_recipes[2]

    pending = asyncio.run(
        analyze_and_collect_pending(analyzer, db, recipe.id, EmbeddingError)
    )

    assert pending == []
    db.expire_all()
    assert db.get(Recipe, recipe.id).dietary_tags == []


def test_model_failure_cancels_embedding(settings, db, test_recipes):
    embeddings = FakeEmbeddings(delay=0.2)
    generator = EmbeddingGenerator(settings, client=embeddings)
    analyzer = RecipeAnalyzer(settings, generator, llm=FakeChatModel(error=RuntimeError("quota")))

    pending = asyncio.run(
        analyze_and_collect_pending(analyzer, db, test_recipes[0].id, RecipeAnalysisError)
    )

    assert pending == []


def test_recipe_lookup_runs_off_the_event_loop(settings, db, embedding_generator):
    llm = FakeChatModel(reply=ANALYSIS_REPLY)
    analyzer = RecipeAnalyzer(settings, embedding_generator, llm=llm)
    session = ThreadRecordingSession(db)

    async def run():
        loop_thread = threading.get_ident()
        with pytest.raises(RecipeNotFoundError):
            await analyzer.analyze(session, uuid.uuid4(), RECIPE_DATA)
        return loop_thread

    loop_thread = asyncio.run(run())

    assert session.get_threads
    assert loop_thread not in session.get_threads
    assert llm.calls == []
