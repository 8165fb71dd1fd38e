from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime
from uuid import UUID


# Recipe schemas
class IngredientInput(BaseModel):
    name: str
    amount: str = ""
    unit: str = ""

    def as_text(self) -> str:
        return " ".join(part for part in (self.amount, self.unit, self.name) if part)


class RecipeResponse(BaseModel):
    id: UUID
    slug: Optional[str]
    title: str
    description: Optional[str]
    prep_time: Optional[int]
    cook_time: Optional[int]
    servings: Optional[int]
    difficulty: Optional[str]
    image_path: Optional[str]
    ingredients: Optional[List[Any]]
    instructions: Optional[List[str]]
    health_tags: Optional[List[str]]
    dietary_tags: Optional[List[str]]
    health_benefits: Optional[List[str]]
    nutritional_info: Optional[Dict[str, Any]]
    creator_id: Optional[UUID]
    created_at: datetime

    model_config = {"from_attributes": True}


# Recipe analysis schemas
class RecipeData(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    prep_time: int = Field(default=0, ge=0)
    cook_time: int = Field(default=0, ge=0)
    servings: int = Field(default=1, ge=1)
    difficulty: str = "medium"
    ingredients: List[IngredientInput] = []
    instructions: List[str] = []


class NutritionalInfo(BaseModel):
    calories_estimate: float = 0
    protein_grams: float = 0
    carbs_grams: float = 0
    fat_grams: float = 0
    fiber_grams: float = 0
    sodium_mg: float = 0


class AnalysisResult(BaseModel):
    health_tags: List[str]
    dietary_tags: List[str]
    health_benefits: List[str]
    nutritional_info: NutritionalInfo


class RecipeAnalysisRequest(BaseModel):
    recipe_data: RecipeData


class RecipeAnalysisResponse(BaseModel):
    success: bool = True
    message: str
    recipe_id: UUID
    analysis_result: AnalysisResult
    embedding_dimensions: int
    database_updated: bool
    timestamp: datetime


# Description enhancement schemas
class DescriptionEnhanceRequest(BaseModel):
    description: str
    title: Optional[str] = None
    ingredients: List[IngredientInput] = []


class DescriptionEnhanceResponse(BaseModel):
    success: bool = True
    original_description: str
    enhanced_description: str
    timestamp: datetime


# View tracking schemas
class RecipeViewCreate(BaseModel):
    session_id: str = Field(..., min_length=1, max_length=100)
    user_id: Optional[UUID] = None
    country_code: Optional[str] = Field(None, max_length=2)
    country_name: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    @field_validator("session_id")
    @classmethod
    def session_id_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Session ID is required")
        return value.strip()


class RecipeViewResponse(BaseModel):
    success: bool = True
    message: str
    view_id: UUID
    timestamp: datetime
