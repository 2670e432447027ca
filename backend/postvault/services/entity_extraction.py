"""LLM-based entity extraction for saved posts."""
import json
import logging
import re
from typing import Any, List, Literal, Optional

from openai import AsyncOpenAI
from pydantic import BaseModel, ValidationError, field_validator

from postvault.core.config import settings

logger = logging.getLogger(__name__)

EntityType = Literal["person", "company", "topic", "technology"]

_CODE_FENCE = re.compile(r"```(?:json)?\n?")


class EntityExtractionError(Exception):
    """Raised when the LLM call fails or its response cannot be parsed."""


class CandidateEntity(BaseModel):
    """Entity proposed by the LLM, before deduplication."""

    name: str
    type: EntityType
    description: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def scalar_name_to_str(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be empty")
        return value

    @field_validator("description", mode="before")
    @classmethod
    def description_to_str(cls, value: Any) -> Optional[str]:
        # A malformed description never costs the entity itself
        if value is None or isinstance(value, (list, dict)):
            return None
        value = str(value).strip()
        return value or None


class EntityExtractionService:
    """Service for extracting typed entities from post content using an LLM."""

    def __init__(self, api_key: Optional[str] = None, client: Optional[AsyncOpenAI] = None):
        """Initialize the entity extraction service.

        Args:
            api_key: OpenAI API key (defaults to settings.OPENAI_API_KEY)
            client: Pre-built async OpenAI client, mainly for tests
        """
        if client is None:
            api_key = api_key or settings.OPENAI_API_KEY
            if not api_key:
                raise ValueError("OpenAI API key is required")
            client = AsyncOpenAI(
                api_key=api_key,
                base_url=settings.OPENAI_BASE_URL,
                timeout=settings.LLM_TIMEOUT_SECONDS,
                max_retries=0,
            )

        self.client = client
        self.model = settings.LLM_MODEL
        self.max_chars = settings.EXTRACTION_MAX_CHARS

    async def extract(self, content: str, author_hint: Optional[str] = None) -> List[CandidateEntity]:
        """Extract entities from post content.

        Failures are not fatal: any error talking to the LLM or parsing its
        answer is logged and reported as "no entities found".

        Args:
            content: Post text (only the first EXTRACTION_MAX_CHARS are analyzed)
            author_hint: Post author name, offered to the LLM as a person entity

        Returns:
            List of validated candidate entities, possibly empty
        """
        try:
            return await self.extract_or_raise(content, author_hint)
        except EntityExtractionError as e:
            logger.error(f"Entity extraction failed: {e}")
            return []

    async def extract_or_raise(
        self, content: str, author_hint: Optional[str] = None
    ) -> List[CandidateEntity]:
        """Same as extract(), but raises EntityExtractionError on failure."""
        prompt = self._build_prompt(content[: self.max_chars], author_hint)

        try:
            raw = await self.chat_complete(prompt)
        except Exception as e:
            raise EntityExtractionError(f"LLM call failed: {e}") from e

        try:
            parsed = json.loads(self._strip_code_fences(raw))
        except json.JSONDecodeError as e:
            raise EntityExtractionError(f"LLM returned invalid JSON: {e}") from e
        except Exception as e:
            raise EntityExtractionError(f"LLM answer could not be parsed: {e!r}") from e

        try:
            return self._validate_candidates(parsed)
        except Exception as e:
            raise EntityExtractionError(f"LLM answer could not be validated: {e!r}") from e

    async def chat_complete(self, prompt: str) -> str:
        """Send a single-turn prompt and return the raw text answer."""
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=settings.LLM_MAX_TOKENS,
            temperature=settings.LLM_TEMPERATURE,
        )
        content = response.choices[0].message.content if response.choices else None
        return (content or "[]").strip()

    @staticmethod
    def _strip_code_fences(raw: str) -> str:
        return _CODE_FENCE.sub("", raw).strip()

    @staticmethod
    def _validate_candidates(parsed: Any) -> List[CandidateEntity]:
        """Keep the well-formed elements of the LLM answer, drop the rest."""
        if not isinstance(parsed, list):
            logger.warning(f"LLM returned {type(parsed).__name__} instead of a list")
            return []

        candidates = []
        for item in parsed:
            try:
                candidates.append(CandidateEntity.model_validate(item))
            except ValidationError as e:
                logger.debug(f"Discarding invalid entity {item!r}: {e.error_count()} errors")
        return candidates

    @staticmethod
    def _build_prompt(content: str, author_hint: Optional[str]) -> str:
        """Build the extraction prompt for one post."""
        author_line = f"\n\nPost author: {author_hint}" if author_hint else ""

        return f"""Analyze this professional content and extract key entities. Return a JSON array of objects with "name", "type", and "description" fields.

Entity types:
- "person": Named individuals mentioned (include the post author if known)
- "company": Companies, organizations, startups
- "topic": Business concepts, strategies, themes (e.g., "product-led growth", "remote work")
- "technology": Specific technologies, tools, frameworks, platforms (e.g., "GPT-4", "Kubernetes", "Figma")

Rules:
- Extract 3-15 entities maximum
- Use the most common/recognized form of each name
- Keep descriptions to one short sentence
- Only extract entities that are meaningfully discussed, not just briefly mentioned
- For topics, prefer specific concepts over generic ones (e.g., "AI pricing models" over "business")

Content:
{content}{author_line}

Return ONLY a valid JSON array, no other text."""
