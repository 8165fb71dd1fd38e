import os
import sys
import uuid
import asyncio
from pathlib import Path
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Must be set before app.database builds its engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("OPENAI_API_KEY", None)

# Add parent directory to path so main and app modules can be imported
backend_root = Path(__file__).parent.parent
sys.path.insert(0, str(backend_root))

from main import app
from app.config import Settings, get_settings
from app.constants import EMBEDDING_DIMENSION
from app.core.rate_limit import limiter
from app.database import get_db
from app.dependencies import get_embedding_generator, get_intent_extractor
from app.models import Base, Recipe
from app.services.embeddings import EmbeddingGenerator
from app.services.intent_extractor import IntentExtractor

limiter.enabled = False


class FakeChatModel:
    """Stands in for ChatOpenAI: returns a canned reply, raises, or hangs."""

    def __init__(self, reply: str = "", error: Exception = None, delay: float = 0):
        self.reply = reply
        self.error = error
        self.delay = delay
        self.calls = []

    async def ainvoke(self, messages):
        self.calls.append(messages)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return AIMessage(content=self.reply)


class FakeEmbeddings:
    """Stands in for OpenAIEmbeddings."""

    def __init__(self, vector=None, error: Exception = None, delay: float = 0):
        self.vector = vector if vector is not None else [0.01] * EMBEDDING_DIMENSION
        self.error = error
        self.delay = delay
        self.calls = []

    async def aembed_query(self, text):
        self.calls.append(text)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.vector)

    async def aembed_documents(self, texts):
        self.calls.extend(texts)
        if self.error is not None:
            raise self.error
        return [list(self.vector) for _ in texts]


def make_recipe(db: Session, **overrides) -> Recipe:
    """Insert a recipe with sensible defaults"""
    values = {
        "id": uuid.uuid4(),
        "slug": f"recipe-{uuid.uuid4().hex[:8]}",
        "title": "Test Recipe",
        "description": "A simple test recipe",
        "prep_time": 10,
        "cook_time": 20,
        "servings": 4,
        "difficulty": "easy",
        "ingredients": [{"name": "rice", "amount": "2", "unit": "cups"}],
        "instructions": ["Cook the rice"],
        "health_tags": [],
        "dietary_tags": [],
        "health_benefits": [],
        "created_at": datetime.now(timezone.utc),
    }
    values.update(overrides)
    recipe = Recipe(**values)
    db.add(recipe)
    db.commit()
    db.refresh(recipe)
    return recipe


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test"""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def db(engine) -> Session:
    """Get test database session"""
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url="sqlite://", openai_api_key=None)


@pytest.fixture
def fake_embeddings() -> FakeEmbeddings:
    return FakeEmbeddings()


@pytest.fixture
def intent_extractor(settings) -> IntentExtractor:
    """No model configured, so extraction always takes the keyword fallback"""
    return IntentExtractor(settings)


@pytest.fixture
def embedding_generator(settings, fake_embeddings) -> EmbeddingGenerator:
    return EmbeddingGenerator(settings, client=fake_embeddings)


@pytest.fixture
def client(db, settings, intent_extractor, embedding_generator):
    """Get test client wired to the test database and fake model clients"""
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_intent_extractor] = lambda: intent_extractor
    app.dependency_overrides[get_embedding_generator] = lambda: embedding_generator
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def test_recipes(db: Session) -> list:
    """A small catalogue covering the tag dimensions used by search"""
    now = datetime.now(timezone.utc)
    return [
        make_recipe(
            db,
            title="Keto Chicken Stir Fry",
            description="Quick low-carb chicken dinner with broccoli",
            prep_time=10,
            cook_time=15,
            servings=2,
            dietary_tags=["keto", "low-carb", "gluten-free"],
            health_tags=["high-protein", "low-carb"],
            health_benefits=["weight-loss", "muscle-building"],
            created_at=now,
        ),
        make_recipe(
            db,
            title="Vegan Lentil Soup",
            description="Hearty plant-based soup for the whole family",
            prep_time=15,
            cook_time=45,
            servings=6,
            dietary_tags=["vegan", "vegetarian", "plant-based"],
            health_tags=["high-fiber", "heart-healthy"],
            health_benefits=["heart-health", "digestive-health"],
            created_at=now - timedelta(minutes=1),
        ),
        make_recipe(
            db,
            title="Chocolate Lava Cake",
            description="Rich dessert with a molten center",
            prep_time=20,
            cook_time=12,
            servings=4,
            created_at=now - timedelta(minutes=2),
        ),
    ]
