"""ContentService for turning transcripts into structured content.

Long texts are split into sentence-aligned chunks, one prompt is rendered per
chunk, the model calls are dispatched concurrently, and the outputs are
joined back together in chunk order.
"""
import os
import asyncio
import logging
from typing import Any, List, Mapping, Optional, Union

from models.content_models import ContentResult, PromptPreviewResponse
from models.content_preferences import ContentPreferences, parse_preferences
from services.errors import EmptyResultError, InputError
from services.llm_client import LLMClient
from services.prompt_builder import build_prompt
from utils.text_utils import (
    DEFAULT_MAX_TOKENS,
    chunk_text,
    clean_generated_content,
    estimate_tokens,
)

logger = logging.getLogger(__name__)

CHUNK_SEPARATOR = "\n\n"
GENERATION_TEMPERATURE = 0.7
GENERATION_MAX_TOKENS = 4000


class ContentService:
    """Generates content for a text, chunking it when it exceeds the token budget.

    Failure of any chunk fails the whole request; there is no partial result
    and no retry at this layer.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        max_chunk_tokens: Optional[int] = None,
        clean_output: bool = True
    ):
        self.llm_client = llm_client
        if max_chunk_tokens is None:
            max_chunk_tokens = int(os.getenv("CHUNK_MAX_TOKENS", str(DEFAULT_MAX_TOKENS)))
        if max_chunk_tokens <= 0:
            raise ValueError(f"max_chunk_tokens must be positive, got {max_chunk_tokens}")
        self.max_chunk_tokens = max_chunk_tokens
        self.clean_output = clean_output
        logger.info(f"ContentService initialized with max_chunk_tokens={self.max_chunk_tokens}")

    def split_for_generation(self, text: str) -> List[str]:
        """Return the units of text that will each get one model call."""
        token_count = estimate_tokens(text)
        if token_count <= self.max_chunk_tokens:
            return [text]

        chunks = chunk_text(text, self.max_chunk_tokens)
        logger.info(
            f"Text is {token_count} tokens long, split into {len(chunks)} chunks "
            f"(max_chunk_tokens={self.max_chunk_tokens})"
        )
        return chunks

    def preview_prompts(
        self,
        text: str,
        preferences: Union[ContentPreferences, Mapping[str, Any], None],
        language: str = "en"
    ) -> PromptPreviewResponse:
        """Render the prompts a generation request would use, without calling the model."""
        if not text or not text.strip():
            raise InputError("No text provided for content generation")

        prefs = parse_preferences(preferences)
        chunks = self.split_for_generation(text)
        return PromptPreviewResponse(
            prompts=[build_prompt(chunk, prefs, language) for chunk in chunks],
            chunks=len(chunks),
            estimated_tokens=estimate_tokens(text)
        )

    async def generate_content(
        self,
        text: str,
        preferences: Union[ContentPreferences, Mapping[str, Any], None],
        language: str = "en"
    ) -> ContentResult:
        """
        Generate content for a text according to the user's preferences.

        Args:
            text: Transcript or source text
            preferences: ContentPreferences variant or raw mapping
            language: Output language ('en' or 'no')

        Returns:
            ContentResult with the joined content and echoed type/language

        Raises:
            InputError: If text is empty or preferences are invalid
            ProviderError: If any chunk's model call fails
            EmptyResultError: If any chunk's model call returns no content
        """
        if not text or not text.strip():
            logger.warning("Content generation rejected: empty text")
            raise InputError("No text provided for content generation")

        prefs = parse_preferences(preferences)
        chunks = self.split_for_generation(text)

        logger.info(
            f"Generating content: type={prefs.type}, language={language}, "
            f"length={len(text)} chars, chunks={len(chunks)}"
        )

        # gather() returns results in argument order, whatever the completion order
        results = await asyncio.gather(*[
            self._process_chunk(chunk, prefs, language, index, len(chunks))
            for index, chunk in enumerate(chunks)
        ])

        content = CHUNK_SEPARATOR.join(results)

        logger.info(
            f"Content generation complete: type={prefs.type}, "
            f"chunks={len(chunks)}, output_length={len(content)} chars"
        )

        return ContentResult(content=content, type=prefs.type, language=language)

    async def _process_chunk(
        self,
        chunk: str,
        prefs: ContentPreferences,
        language: str,
        index: int,
        total: int
    ) -> str:
        """Render the prompt for one chunk and run its model call."""
        logger.info(f"Processing chunk {index + 1}/{total}")
        system_prompt = build_prompt(chunk, prefs, language)

        output = await self.llm_client.generate_text(
            system_prompt=system_prompt,
            user_content=chunk,
            temperature=GENERATION_TEMPERATURE,
            max_tokens=GENERATION_MAX_TOKENS
        )

        if self.clean_output:
            output = clean_generated_content(output)
            if not output:
                logger.warning(f"Chunk {index + 1}/{total} was empty after cleanup")
                raise EmptyResultError("No content generated")
        return output
