from fastapi import APIRouter, Body, Depends, Request
from app.core.rate_limit import limiter, model_endpoint_limit
from app.dependencies import get_search_service
from app.schemas.search import ErrorResponse, SearchRequest, SearchResponse
from app.services.recipe_search import RecipeSearchService

router = APIRouter()


@router.post(
    "/recipes/search",
    response_model=SearchResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
@limiter.limit(model_endpoint_limit)
async def search_recipes(
    request: Request,
    payload: SearchRequest = Body(...),
    service: RecipeSearchService = Depends(get_search_service),
):
    """
    Semantic recipe search.

    Returns at most three recipes ranked by relevance. An empty `results`
    list with `success: true` means nothing was relevant enough.
    """
    return await service.search(payload.query, limit=payload.limit)
