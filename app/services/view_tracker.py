import logging
import uuid
from datetime import datetime, timezone
from sqlalchemy.orm import Session
from app.errors import RecipeNotFoundError
from app.models import Recipe, RecipeView
from app.schemas import RecipeViewCreate

logger = logging.getLogger(__name__)


def record_view(db: Session, recipe_id: uuid.UUID, payload: RecipeViewCreate) -> RecipeView:
    """Insert one recipe view (with optional geolocation) and return it."""
    if db.get(Recipe, recipe_id) is None:
        raise RecipeNotFoundError(f"Recipe {recipe_id} not found")

    view = RecipeView(
        recipe_id=recipe_id,
        viewed_at=datetime.now(timezone.utc),
        **payload.model_dump(),
    )
    db.add(view)
    db.commit()
    db.refresh(view)
    logger.info(
        "[ViewTracker] View %s recorded for recipe %s (session %s)",
        view.id,
        recipe_id,
        payload.session_id,
    )
    return view
