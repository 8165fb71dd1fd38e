"""
Search Intent Extraction Service

Turns a free-text recipe query into a structured SearchIntent:
1. LLM extraction against the fixed tag taxonomies (primary path)
2. Rule-based keyword/regex extraction (whenever the LLM path fails)

The extractor never raises; callers always get an intent back together with
the method that produced it.
"""

import asyncio
import logging
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from langsmith import traceable
from app.config import Settings
from app.errors import IntentExtractionError
from app.schemas.search import IntentExtraction, SearchIntent
from app.services.fallback_intent import extract_intent_fallback
from app.utils.json_extraction import parse_intent_response
from app.utils.prompt_helpers import build_intent_system_prompt

logger = logging.getLogger(__name__)


class IntentExtractor:
    """LLM-backed intent extraction with a deterministic fallback."""

    def __init__(self, settings: Settings, llm=None):
        self.timeout = settings.external_call_timeout_seconds
        self.system_prompt = build_intent_system_prompt()
        self.llm = llm
        if self.llm is None and settings.has_openai_credentials:
            self.llm = ChatOpenAI(
                model=settings.generative_model,
                api_key=settings.openai_api_key,
                temperature=0.1,  # Near-deterministic tag selection
                max_tokens=500,
            )

    @traceable(name="extract_search_intent_llm")
    async def extract_with_llm(self, query: str) -> SearchIntent:
        """
        Ask the chat model for a SearchIntent.

        Raises:
            IntentExtractionError: no model configured, call failed or timed
                out, or the reply held no JSON object.
        """
        if self.llm is None:
            raise IntentExtractionError("OpenAI API key not configured")

        messages = [
            SystemMessage(content=self.system_prompt),
            HumanMessage(content=f'User query: "{query}"'),
        ]
        try:
            response = await asyncio.wait_for(
                self.llm.ainvoke(messages), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            raise IntentExtractionError(
                f"Intent model timed out after {self.timeout}s"
            ) from e
        except Exception as e:
            raise IntentExtractionError(f"Intent model call failed: {e}") from e

        raw_text = response.content if isinstance(response.content, str) else ""
        logger.debug("[IntentExtractor] Raw model reply: %s", raw_text)

        intent = parse_intent_response(raw_text)
        if intent is None:
            raise IntentExtractionError("No JSON object found in intent model reply")
        return intent

    async def extract(self, query: str) -> IntentExtraction:
        """
        Extract a search intent, falling back to keyword rules on any failure.

        Args:
            query: The user's search text

        Returns:
            IntentExtraction with method "llm" or "fallback"
        """
        try:
            intent = await self.extract_with_llm(query)
            logger.info("[IntentExtractor] LLM intent: %s", intent.model_dump())
            return IntentExtraction(intent=intent, method="llm")
        except IntentExtractionError as e:
            logger.warning(
                "[IntentExtractor] %s, using keyword fallback", e.message
            )
            return IntentExtraction(
                intent=extract_intent_fallback(query), method="fallback"
            )

