from datetime import datetime, timezone
from fastapi import APIRouter, Body, Depends, Request, status
from sqlalchemy.orm import Session
from app.core.rate_limit import limiter, model_endpoint_limit
from app.database import get_db
from app.dependencies import get_description_enhancer, get_recipe_analyzer
from app.errors import RecipeNotFoundError
from app.models import Recipe
from app.schemas import (
    DescriptionEnhanceRequest,
    DescriptionEnhanceResponse,
    RecipeAnalysisRequest,
    RecipeAnalysisResponse,
    RecipeResponse,
    RecipeViewCreate,
    RecipeViewResponse,
)
from app.services.description_enhancer import DescriptionEnhancer
from app.services.recipe_analyzer import RecipeAnalyzer
from app.services.view_tracker import record_view
from uuid import UUID

router = APIRouter()


@router.get("/recipe/{recipe_id}", response_model=RecipeResponse)
async def get_recipe(recipe_id: UUID, db: Session = Depends(get_db)):
    """Get recipe details by ID"""
    recipe = db.get(Recipe, recipe_id)
    if not recipe:
        raise RecipeNotFoundError(f"Recipe {recipe_id} not found")
    return recipe


@router.post("/recipes/{recipe_id}/analyze", response_model=RecipeAnalysisResponse)
@limiter.limit(model_endpoint_limit)
async def analyze_recipe(
    request: Request,
    recipe_id: UUID,
    payload: RecipeAnalysisRequest = Body(...),
    db: Session = Depends(get_db),
    analyzer: RecipeAnalyzer = Depends(get_recipe_analyzer),
):
    """Tag a recipe, estimate its nutrition and index its embedding for search"""
    analysis, dimensions = await analyzer.analyze(db, recipe_id, payload.recipe_data)
    return RecipeAnalysisResponse(
        message="Recipe analyzed and updated successfully",
        recipe_id=recipe_id,
        analysis_result=analysis,
        embedding_dimensions=dimensions,
        database_updated=True,
        timestamp=datetime.now(timezone.utc),
    )


@router.post("/recipes/enhance-description", response_model=DescriptionEnhanceResponse)
@limiter.limit(model_endpoint_limit)
async def enhance_description(
    request: Request,
    payload: DescriptionEnhanceRequest = Body(...),
    enhancer: DescriptionEnhancer = Depends(get_description_enhancer),
):
    """Rewrite a recipe description into short, engaging copy"""
    enhanced = await enhancer.enhance(
        payload.description, title=payload.title, ingredients=payload.ingredients
    )
    return DescriptionEnhanceResponse(
        original_description=payload.description,
        enhanced_description=enhanced,
        timestamp=datetime.now(timezone.utc),
    )


@router.post(
    "/recipes/{recipe_id}/views",
    response_model=RecipeViewResponse,
    status_code=status.HTTP_201_CREATED,
)
def track_recipe_view(
    recipe_id: UUID,
    payload: RecipeViewCreate = Body(...),
    db: Session = Depends(get_db),
):
    """Record a recipe view with optional geolocation"""
    view = record_view(db, recipe_id, payload)
    return RecipeViewResponse(
        message="View recorded successfully",
        view_id=view.id,
        timestamp=view.viewed_at,
    )
