import asyncio
import pytest
from sqlalchemy import select
from app.errors import EmbeddingError
from app.models import Recipe
from app.schemas import RecipeData
from app.services.embeddings import EmbeddingGenerator
from app.utils.prompt_helpers import build_embedding_text
from conftest import FakeEmbeddings, make_recipe
from scripts.generate_embeddings import generate_embeddings_for_recipes


def test_row_and_request_embed_identical_text(db):
    """A stored recipe and the same recipe sent for analysis produce the same text"""
    recipe = make_recipe(
        db,
        title="Miso Soup",
        description="Light broth",
        ingredients=[{"name": "miso", "amount": "2", "unit": "tbsp"}, "ignored"],
        instructions=["Whisk", "Simmer"],
    )
    recipe_data = RecipeData(
        title="Miso Soup",
        description="Light broth",
        ingredients=[{"name": "miso", "amount": "2", "unit": "tbsp"}],
        instructions=["Whisk", "Simmer"],
    )
    expected = "Miso Soup. Light broth. Ingredients: 2 tbsp miso. Instructions: Whisk Simmer"
    assert build_embedding_text(recipe) == expected
    assert build_embedding_text(recipe_data) == expected


def test_backfill_embeds_missing_vectors(engine, db, settings):
    for i in range(3):
        make_recipe(db, title=f"Recipe {i}")
    embeddings = FakeEmbeddings()
    generator = EmbeddingGenerator(settings, client=embeddings)

    processed = asyncio.run(
        generate_embeddings_for_recipes(batch_size=2, generator=generator, bind=engine)
    )

    assert processed == 3
    assert len(embeddings.calls) == 3
    db.expire_all()
    assert db.scalars(select(Recipe).where(Recipe.embedding.is_(None))).all() == []

    # Nothing left to do on a second run
    again = asyncio.run(generate_embeddings_for_recipes(generator=generator, bind=engine))
    assert again == 0


def test_backfill_stops_on_embedding_error(engine, db, settings):
    make_recipe(db, title="Recipe")
    generator = EmbeddingGenerator(settings, client=FakeEmbeddings(error=RuntimeError("down")))

    with pytest.raises(EmbeddingError):
        asyncio.run(generate_embeddings_for_recipes(generator=generator, bind=engine))
