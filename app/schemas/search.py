import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator


def _dedupe(tags: List[str]) -> List[str]:
    return list(dict.fromkeys(tags))


# --- Query understanding ---
class SearchIntent(BaseModel):
    """Structured interpretation of a free-text recipe query."""

    dietary_tags: List[str] = Field(
        default_factory=list, description="Diet classifications, e.g. 'vegan', 'keto'."
    )
    health_tags: List[str] = Field(
        default_factory=list, description="Nutrient attributes, e.g. 'high-protein'."
    )
    health_benefits: List[str] = Field(
        default_factory=list, description="Claimed outcomes, e.g. 'heart-health'."
    )
    total_time: Optional[int] = Field(
        default=None, ge=0, description="Target prep + cook time in minutes."
    )
    servings: Optional[int] = Field(
        default=None, ge=1, description="Target number of servings."
    )

    @field_validator("dietary_tags", "health_tags", "health_benefits")
    @classmethod
    def dedupe_tags(cls, tags: List[str]) -> List[str]:
        return _dedupe(tags)


class IntentExtraction(BaseModel):
    intent: SearchIntent
    method: str  # "llm" or "fallback"


# --- Candidates ---
class RecipeCandidate(BaseModel):
    """A recipe plus the scores computed for one search request."""

    id: uuid.UUID
    slug: Optional[str] = None
    title: str
    description: str = ""
    prep_time: int = 0
    cook_time: int = 0
    servings: int = 1
    image_path: Optional[str] = None
    ingredients: List[Any] = []
    instructions: List[str] = []
    health_tags: List[str] = []
    dietary_tags: List[str] = []
    health_benefits: List[str] = []
    nutritional_info: Optional[Dict[str, Any]] = None
    creator_id: Optional[uuid.UUID] = None
    created_at: Optional[datetime] = None
    similarity_score: float = Field(default=0.0, ge=0.0, le=1.0)
    relevance_score: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    model_config = {"from_attributes": True}

    @field_validator(
        "ingredients",
        "instructions",
        "health_tags",
        "dietary_tags",
        "health_benefits",
        mode="before",
    )
    @classmethod
    def none_to_list(cls, value):
        return [] if value is None else value

    @field_validator("description", mode="before")
    @classmethod
    def none_to_empty(cls, value):
        return "" if value is None else value

    @field_validator("prep_time", "cook_time", mode="before")
    @classmethod
    def none_to_zero(cls, value):
        return 0 if value is None else value

    @field_validator("servings", mode="before")
    @classmethod
    def none_to_one(cls, value):
        return 1 if value is None else value

    @property
    def total_time(self) -> int:
        return self.prep_time + self.cook_time

    @classmethod
    def from_recipe(cls, recipe, similarity_score: float) -> "RecipeCandidate":
        """Build a candidate from a Recipe row, clamping the similarity into [0, 1]."""
        candidate = cls.model_validate(recipe)
        return candidate.model_copy(
            update={"similarity_score": min(max(float(similarity_score), 0.0), 1.0)}
        )


class RetrievalResult(BaseModel):
    candidates: List[RecipeCandidate] = []
    method: str  # "vector_similarity", "text_search" or "none"


# --- API payloads ---
class SearchRequest(BaseModel):
    query: Optional[str] = Field(
        default=None, description="Free-text recipe search query (required, non-blank)."
    )
    limit: Optional[int] = Field(
        default=None,
        description=(
            "Optional upper bound on results; never raises the fixed cap. "
            "Values below 1 are ignored."
        ),
    )


class RelevanceInfo(BaseModel):
    max_results: int
    min_similarity_threshold: float
    min_relevance_threshold: float
    perfect_match_threshold: float
    high_relevance_count: int
    perfect_matches: int


class ProcessingInfo(BaseModel):
    intent_extraction: str
    embedding_generation: str
    search_method: str


class SearchResponse(BaseModel):
    success: bool = True
    query: str
    intent: SearchIntent
    results: List[RecipeCandidate]
    total_results: int
    relevance_info: RelevanceInfo
    processing_info: ProcessingInfo
    timestamp: datetime


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: str
    timestamp: datetime
    debug_info: Dict[str, Any] = {}
