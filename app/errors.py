"""
Exception types raised by the recipe search service.

Each error carries the HTTP status the API boundary answers with and a short
public label used as the `error` field of the JSON error envelope.
"""

from typing import Any, Dict, Optional


class RecipeSearchError(Exception):
    """Base class for errors surfaced through the API."""

    status_code = 500
    error_label = "Recipe search failed"

    def __init__(self, message: str, debug_info: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.debug_info = debug_info or {}


class InvalidSearchQueryError(RecipeSearchError):
    status_code = 400
    error_label = "Invalid search request"


class IntentExtractionError(RecipeSearchError):
    """The language model could not produce a usable search intent."""

    error_label = "Intent extraction failed"


class EmbeddingError(RecipeSearchError):
    """The embedding service failed or returned a malformed vector."""

    status_code = 502
    error_label = "Embedding generation failed"


class RetrievalError(RecipeSearchError):
    """Candidate retrieval failed with no fallback left."""

    error_label = "Recipe search failed"


class RecipeAnalysisError(RecipeSearchError):
    status_code = 502
    error_label = "Recipe analysis failed"


class DescriptionEnhancementError(RecipeSearchError):
    status_code = 502
    error_label = "Description enhancement failed"


class InvalidRequestError(RecipeSearchError):
    status_code = 400
    error_label = "Invalid request"


class RecipeNotFoundError(RecipeSearchError):
    status_code = 404
    error_label = "Recipe not found"
