import asyncio
import logging
from typing import List
from langchain_openai import OpenAIEmbeddings
from langsmith import traceable
from app.config import Settings
from app.errors import EmbeddingError

logger = logging.getLogger(__name__)


class EmbeddingGenerator:
    """Turns text into fixed-dimension vectors for the recipe index."""

    def __init__(self, settings: Settings, client=None):
        self.dimension = settings.embedding_dimension
        self.timeout = settings.external_call_timeout_seconds
        self.client = client
        if self.client is None and settings.has_openai_credentials:
            self.client = OpenAIEmbeddings(
                model=settings.embedding_model,
                api_key=settings.openai_api_key,
                dimensions=settings.embedding_dimension,
            )

    def _validate(self, vector) -> List[float]:
        if not isinstance(vector, (list, tuple)) or len(vector) != self.dimension:
            size = len(vector) if isinstance(vector, (list, tuple)) else "n/a"
            raise EmbeddingError(
                f"Invalid embedding response: expected {self.dimension} dimensions, got {size}"
            )
        try:
            return [float(value) for value in vector]
        except (TypeError, ValueError) as e:
            raise EmbeddingError("Invalid embedding response: non-numeric values") from e

    @traceable(name="generate_query_embedding")
    async def embed(self, text: str) -> List[float]:
        """
        Embed a single query text.

        Raises:
            EmbeddingError: no client configured, call failed or timed out,
                or the vector has the wrong shape.
        """
        if self.client is None:
            raise EmbeddingError("OpenAI API key not configured")
        try:
            vector = await asyncio.wait_for(
                self.client.aembed_query(text), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            raise EmbeddingError(
                f"Embedding service timed out after {self.timeout}s"
            ) from e
        except Exception as e:
            raise EmbeddingError(f"Embedding service call failed: {e}") from e

        embedding = self._validate(vector)
        logger.info("[EmbeddingGenerator] Query embedded, dimensions: %d", len(embedding))
        return embedding

    async def embed_documents(self, texts: List[str]) -> List[List[float]]:
        """Embed a batch of recipe texts (used by analysis and backfill)."""
        if self.client is None:
            raise EmbeddingError("OpenAI API key not configured")
        try:
            vectors = await asyncio.wait_for(
                self.client.aembed_documents(texts), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            raise EmbeddingError(
                f"Embedding service timed out after {self.timeout}s"
            ) from e
        except Exception as e:
            raise EmbeddingError(f"Embedding service call failed: {e}") from e

        if len(vectors) != len(texts):
            raise EmbeddingError(
                f"Invalid embedding response: expected {len(texts)} vectors, got {len(vectors)}"
            )
        return [self._validate(vector) for vector in vectors]
