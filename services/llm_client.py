"""LLMClient: the single entry point for chat-completion calls."""
import os
import logging
from typing import Optional

from openai import AsyncOpenAI, APIError, APIStatusError

from services.errors import EmptyResultError, ProviderError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 4000

GENERIC_PROVIDER_MESSAGE = "Failed to generate content. Please try again."


def create_openai_client() -> AsyncOpenAI:
    """
    Build the shared AsyncOpenAI client from environment configuration.

    Transient provider failures (rate limits, 5xx) are retried by the SDK
    itself, OPENAI_MAX_RETRIES times (default 2).

    Raises:
        ValueError: If OPENAI_API_KEY is not set
    """
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise ValueError("OPENAI_API_KEY environment variable is required")

    max_retries = int(os.getenv("OPENAI_MAX_RETRIES", "2"))
    return AsyncOpenAI(api_key=api_key, max_retries=max_retries)


class LLMClient:
    """Sends one system prompt plus one user message and returns the reply text."""

    def __init__(self, client: AsyncOpenAI, model: Optional[str] = None):
        self.client = client
        self.model = model or os.getenv("OPENAI_MODEL") or DEFAULT_MODEL
        logger.info(f"LLMClient initialized with model: {self.model}")

    async def generate_text(
        self,
        system_prompt: str,
        user_content: str,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        model: Optional[str] = None
    ) -> str:
        """
        Run one chat completion.

        Instructions and source text are sent as separate messages.

        Args:
            system_prompt: Rendered instruction prompt
            user_content: Source text for this call
            temperature: Sampling temperature
            max_tokens: Completion token limit
            model: Model override (defaults to the client's model)

        Returns:
            The generated text

        Raises:
            ProviderError: If the provider reports a failure
            EmptyResultError: If the provider returns no content
        """
        model_name = model or self.model

        try:
            completion = await self.client.chat.completions.create(
                model=model_name,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_content}
                ],
                temperature=temperature,
                max_tokens=max_tokens
            )
        except APIStatusError as e:
            logger.error(
                f"Model call failed: model={model_name}, status={e.status_code}, error={e.message}"
            )
            raise ProviderError(
                e.message or GENERIC_PROVIDER_MESSAGE,
                provider="openai",
                status_code=e.status_code
            )
        except APIError as e:
            logger.error(f"Model call failed: model={model_name}, error={e}")
            raise ProviderError(e.message or GENERIC_PROVIDER_MESSAGE, provider="openai")

        content = None
        if completion.choices:
            content = completion.choices[0].message.content

        if not content or not content.strip():
            logger.warning(f"Model returned no content: model={model_name}")
            raise EmptyResultError("No content generated")

        logger.info(
            f"Model call complete: model={model_name}, "
            f"input_length={len(user_content)} chars, output_length={len(content)} chars"
        )
        return content
