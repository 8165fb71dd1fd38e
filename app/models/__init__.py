from sqlalchemy import (
    JSON,
    Column,
    Integer,
    String,
    DateTime,
    Text,
    Float,
    ForeignKey,
    Index,
    Uuid,
)
from pgvector.sqlalchemy import Vector
import uuid
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from sqlalchemy.orm import declarative_base
from app.constants import EMBEDDING_DIMENSION

Base = declarative_base()


class Recipe(Base):
    __tablename__ = "recipes"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    slug = Column(String(200), unique=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    prep_time = Column(Integer, default=0)  # minutes
    cook_time = Column(Integer, default=0)  # minutes
    servings = Column(Integer, default=1)
    difficulty = Column(String(20))  # easy, medium, hard
    image_path = Column(String(500))
    ingredients = Column(JSON, default=list)  # [{"name", "amount", "unit"}]
    instructions = Column(JSON, default=list)  # list of step strings
    creator_id = Column(Uuid(as_uuid=True), index=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    # Analysis fields (filled by the recipe analyzer)
    health_tags = Column(JSON, default=list)
    dietary_tags = Column(JSON, default=list)
    health_benefits = Column(JSON, default=list)
    nutritional_info = Column(JSON, nullable=True)
    embedding = Column(Vector(EMBEDDING_DIMENSION), nullable=True)

    # Relationships
    views = relationship("RecipeView", back_populates="recipe")

    @property
    def total_time(self) -> int:
        return (self.prep_time or 0) + (self.cook_time or 0)


class RecipeView(Base):
    __tablename__ = "recipe_views"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    recipe_id = Column(Uuid(as_uuid=True), ForeignKey("recipes.id"), nullable=False)
    user_id = Column(Uuid(as_uuid=True), nullable=True)  # anonymous views allowed
    session_id = Column(String(100), nullable=False)
    country_code = Column(String(2))
    country_name = Column(String(100))
    city = Column(String(100))
    region = Column(String(100))
    latitude = Column(Float)
    longitude = Column(Float)
    viewed_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    recipe = relationship("Recipe", back_populates="views")

    __table_args__ = (Index("idx_recipe_views_recipe_ts", recipe_id, viewed_at.desc()),)
