import json
import uuid
import pytest
from app.dependencies import get_description_enhancer, get_recipe_analyzer
from app.models import Recipe, RecipeView
from app.services.description_enhancer import DescriptionEnhancer
from app.services.recipe_analyzer import RecipeAnalyzer
from conftest import FakeChatModel
from main import app

ANALYSIS_REPLY = json.dumps(
    {
        "health_tags": ["high-protein", "low-carb"],
        "dietary_tags": ["keto", "gluten-free"],
        "health_benefits": ["muscle-building"],
        "nutritional_info": {
            "calories_estimate": 450,
            "protein_grams": 35,
            "carbs_grams": 8,
            "fat_grams": 30,
            "fiber_grams": 3,
            "sodium_mg": 600,
        },
    }
)

RECIPE_DATA = {
    "title": "Garlic Butter Steak",
    "description": "Pan seared steak",
    "prep_time": 5,
    "cook_time": 15,
    "servings": 2,
    "ingredients": [{"name": "steak", "amount": "2", "unit": "pieces"}],
    "instructions": ["Sear the steak", "Baste with butter"],
}


@pytest.fixture
def analyzer_llm(client, settings, embedding_generator):
    """Wire a recipe analyzer backed by a fake chat model into the app"""
    llm = FakeChatModel(reply=f"```json\n{ANALYSIS_REPLY}\n```")
    analyzer = RecipeAnalyzer(settings, embedding_generator, llm=llm)
    app.dependency_overrides[get_recipe_analyzer] = lambda: analyzer
    return llm


def override_enhancer(settings, llm):
    enhancer = DescriptionEnhancer(settings, llm=llm)
    app.dependency_overrides[get_description_enhancer] = lambda: enhancer


def test_get_recipe(client, test_recipes):
    """Test getting a recipe by ID"""
    recipe = test_recipes[0]
    response = client.get(f"/api/recipe/{recipe.id}")
    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Keto Chicken Stir Fry"
    assert data["dietary_tags"] == ["keto", "low-carb", "gluten-free"]
    assert "embedding" not in data


def test_get_recipe_not_found(client):
    response = client.get(f"/api/recipe/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json()["error"] == "Recipe not found"


def test_analyze_recipe_updates_tags(client, db, test_recipes, analyzer_llm, fake_embeddings):
    recipe_id = test_recipes[2].id
    response = client.post(
        f"/api/recipes/{recipe_id}/analyze", json={"recipe_data": RECIPE_DATA}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["database_updated"] is True
    assert data["embedding_dimensions"] == 1536
    assert data["analysis_result"]["dietary_tags"] == ["keto", "gluten-free"]
    assert data["analysis_result"]["nutritional_info"]["protein_grams"] == 35

    db.expire_all()
    recipe = db.get(Recipe, recipe_id)
    assert recipe.health_tags == ["high-protein", "low-carb"]
    assert recipe.nutritional_info["calories_estimate"] == 450
    assert recipe.embedding is not None
    assert len(analyzer_llm.calls) == 1
    assert "Garlic Butter Steak" in fake_embeddings.calls[0]


def test_analyze_unknown_recipe(client, analyzer_llm):
    response = client.post(
        f"/api/recipes/{uuid.uuid4()}/analyze", json={"recipe_data": RECIPE_DATA}
    )
    assert response.status_code == 404
    assert analyzer_llm.calls == []


def test_analyze_rejects_incomplete_model_reply(client, settings, embedding_generator, test_recipes):
    llm = FakeChatModel(reply='{"health_tags": [], "dietary_tags": []}')
    analyzer = RecipeAnalyzer(settings, embedding_generator, llm=llm)
    app.dependency_overrides[get_recipe_analyzer] = lambda: analyzer

    response = client.post(
        f"/api/recipes/{test_recipes[0].id}/analyze", json={"recipe_data": RECIPE_DATA}
    )
    assert response.status_code == 502
    data = response.json()
    assert data["error"] == "Recipe analysis failed"
    assert data["debug_info"]["missing_sections"] == ["health_benefits", "nutritional_info"]


def test_enhance_description(client, settings):
    llm = FakeChatModel(reply="  A golden, garlicky steak ready in twenty minutes.  ")
    override_enhancer(settings, llm)

    response = client.post(
        "/api/recipes/enhance-description",
        json={"description": "steak with garlic", "title": "Garlic Steak"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["original_description"] == "steak with garlic"
    assert data["enhanced_description"] == "A golden, garlicky steak ready in twenty minutes."
    assert "Garlic Steak" in llm.calls[0][0].content


def test_enhance_description_requires_text(client, settings):
    llm = FakeChatModel(reply="unused")
    override_enhancer(settings, llm)

    response = client.post("/api/recipes/enhance-description", json={"description": "  "})
    assert response.status_code == 400
    assert response.json()["message"] == "Description is required"
    assert llm.calls == []


def test_enhance_description_model_failure(client, settings):
    override_enhancer(settings, FakeChatModel(error=RuntimeError("quota exceeded")))

    response = client.post("/api/recipes/enhance-description", json={"description": "soup"})
    assert response.status_code == 502
    assert response.json()["error"] == "Description enhancement failed"


def test_track_view(client, db, test_recipes):
    recipe_id = test_recipes[1].id
    response = client.post(
        f"/api/recipes/{recipe_id}/views",
        json={"session_id": "abc-123", "country_code": "CA", "city": "Vancouver"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True

    view = db.get(RecipeView, uuid.UUID(data["view_id"]))
    assert view.recipe_id == recipe_id
    assert view.session_id == "abc-123"
    assert view.city == "Vancouver"


def test_track_view_unknown_recipe(client):
    response = client.post(
        f"/api/recipes/{uuid.uuid4()}/views", json={"session_id": "abc-123"}
    )
    assert response.status_code == 404


def test_track_view_requires_session(client, test_recipes):
    response = client.post(
        f"/api/recipes/{test_recipes[0].id}/views", json={"session_id": "   "}
    )
    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["error"] == "Invalid request"
    assert data["debug_info"]["validation_errors"][0]["loc"] == ["body", "session_id"]
