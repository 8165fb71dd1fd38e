import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from app.config import get_settings
from app.core.logging import setup_logging
from app.core.rate_limit import limiter
from app.database import create_tables
from app.errors import InvalidRequestError, InvalidSearchQueryError, RecipeSearchError
from app.routers import recipes, search
from app.schemas.search import ErrorResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level)

    # Startup: Create database tables
    create_tables()
    logger.info(
        "Recipe search ready (model credentials configured: %s)",
        settings.has_openai_credentials,
    )

    yield

    logger.info("Shutting down recipe search service")


app = FastAPI(title="Recipe Search Backend", version="1.0.0", lifespan=lifespan)

# Rate limiting for model-backed endpoints
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["POST", "GET", "OPTIONS", "PUT", "DELETE"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


def error_response(status_code: int, error: str, message: str, debug_info=None) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        message=message,
        timestamp=datetime.now(timezone.utc),
        debug_info=debug_info or {},
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@app.exception_handler(RecipeSearchError)
async def recipe_search_error_handler(request: Request, exc: RecipeSearchError):
    return error_response(exc.status_code, exc.error_label, exc.message, exc.debug_info)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed requests get the same 400 envelope as a blank query"""
    label = (
        InvalidSearchQueryError.error_label
        if request.url.path.endswith("/recipes/search")
        else InvalidRequestError.error_label
    )
    errors = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": str(error.get("msg", "")),
            "type": str(error.get("type", "")),
        }
        for error in exc.errors()
    ]
    return error_response(
        400, label, "Request validation failed", {"validation_errors": errors}
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        500,
        "Internal server error",
        "An unexpected error occurred",
        {"error_type": type(exc).__name__},
    )


# Include routers
app.include_router(search.router, prefix="/api", tags=["search"])
app.include_router(recipes.router, prefix="/api", tags=["recipes"])


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/")
async def root():
    return {"message": "Recipe Search Backend is running!"}
