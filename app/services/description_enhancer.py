import asyncio
import logging
from typing import List, Optional
from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI
from app.config import Settings
from app.errors import DescriptionEnhancementError, InvalidRequestError
from app.schemas import IngredientInput
from app.utils.prompt_helpers import build_description_prompt

logger = logging.getLogger(__name__)


class DescriptionEnhancer:
    """Rewrites recipe descriptions into short, engaging copy."""

    def __init__(self, settings: Settings, llm=None):
        self.timeout = settings.external_call_timeout_seconds
        self.llm = llm
        if self.llm is None and settings.has_openai_credentials:
            self.llm = ChatOpenAI(
                model=settings.generative_model,
                api_key=settings.openai_api_key,
                temperature=0.7,
                max_tokens=200,
            )

    async def enhance(
        self,
        description: str,
        title: Optional[str] = None,
        ingredients: Optional[List[IngredientInput]] = None,
    ) -> str:
        if not description or not description.strip():
            raise InvalidRequestError("Description is required")
        if self.llm is None:
            raise DescriptionEnhancementError("OpenAI API key not configured")

        prompt = build_description_prompt(description.strip(), title, ingredients)
        try:
            response = await asyncio.wait_for(
                self.llm.ainvoke([HumanMessage(content=prompt)]), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            raise DescriptionEnhancementError(
                f"Description model timed out after {self.timeout}s"
            ) from e
        except Exception as e:
            raise DescriptionEnhancementError(f"Description model call failed: {e}") from e

        enhanced = response.content.strip() if isinstance(response.content, str) else ""
        if not enhanced:
            raise DescriptionEnhancementError("Description model returned no text")

        logger.info("[DescriptionEnhancer] Description enhanced (%d chars)", len(enhanced))
        return enhanced
