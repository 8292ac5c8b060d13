"""
Unit Tests for ContentService

The model-call collaborator is replaced with an AsyncMock so every call can
be counted and inspected.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from models.content_models import ContentResult
from services.content_service import ContentService
from services.errors import EmptyResultError, InputError, ProviderError
from services.prompt_builder import NORWEGIAN_INSTRUCTION, build_prompt


@pytest.fixture
def llm_client():
    """LLMClient stand-in that echoes a fixed reply."""
    client = MagicMock()
    client.generate_text = AsyncMock(return_value="Generated output")
    return client


@pytest.fixture
def service(llm_client):
    return ContentService(llm_client, max_chunk_tokens=15000)


def long_text(sentences: int) -> str:
    sentence = "The quick brown fox jumps over the lazy dog near the river bank."
    return " ".join([sentence] * sentences)


class TestGenerateContent:
    """Tests for generate_content."""

    @pytest.mark.asyncio
    async def test_short_text_makes_exactly_one_call(self, service, llm_client):
        text = "a" * 99 + "."

        result = await service.generate_content(text, {"type": "tasks"}, "en")

        assert isinstance(result, ContentResult)
        assert result.content == "Generated output"
        assert result.type == "tasks"
        assert result.language == "en"
        llm_client.generate_text.assert_awaited_once()

        kwargs = llm_client.generate_text.call_args.kwargs
        assert kwargs["user_content"] == text
        assert kwargs["system_prompt"] == build_prompt(text, {"type": "tasks"}, "en")
        assert kwargs["temperature"] == 0.7
        assert kwargs["max_tokens"] == 4000

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_blank_text_raises_before_any_call(self, service, llm_client, text):
        with pytest.raises(InputError):
            await service.generate_content(text, {"type": "tasks"}, "en")

        llm_client.generate_text.assert_not_called()

    @pytest.mark.asyncio
    async def test_long_text_makes_one_call_per_chunk(self, service, llm_client):
        text = long_text(2500)
        chunks = service.split_for_generation(text)

        result = await service.generate_content(text, {"type": "article"}, "no")

        assert len(chunks) >= 3
        assert llm_client.generate_text.await_count == len(chunks)
        assert result.content == "\n\n".join(["Generated output"] * len(chunks))
        assert result.language == "no"

        sent_chunks = [call.kwargs["user_content"] for call in llm_client.generate_text.call_args_list]
        assert sorted(sent_chunks) == sorted(chunks)
        for call in llm_client.generate_text.call_args_list:
            assert NORWEGIAN_INSTRUCTION in call.kwargs["system_prompt"]

    @pytest.mark.asyncio
    async def test_failing_chunk_fails_whole_request(self, service, llm_client):
        text = long_text(2500)
        llm_client.generate_text.side_effect = [
            "First part",
            ProviderError("Rate limit exceeded", status_code=429),
            "Third part",
        ]

        with pytest.raises(ProviderError) as exc_info:
            await service.generate_content(text, {"type": "tasks"}, "en")

        assert exc_info.value.message == "Rate limit exceeded"

    @pytest.mark.asyncio
    async def test_empty_chunk_result_fails_request(self, service, llm_client):
        llm_client.generate_text.side_effect = EmptyResultError("No content generated")

        with pytest.raises(EmptyResultError):
            await service.generate_content("Buy milk.", {"type": "tasks"}, "en")

    @pytest.mark.asyncio
    async def test_output_that_cleans_to_nothing_is_empty_result(self, service, llm_client):
        llm_client.generate_text.return_value = "[insert your content here]"

        with pytest.raises(EmptyResultError):
            await service.generate_content("Buy milk.", {"type": "tasks"}, "en")

    @pytest.mark.asyncio
    async def test_output_is_cleaned(self, service, llm_client):
        llm_client.generate_text.return_value = "Post text [insert hashtag]\n\n\n\nMore"

        result = await service.generate_content("Buy milk.", {"type": "blog"}, "en")

        assert result.content == "Post text \n\nMore"

    @pytest.mark.asyncio
    async def test_cleaning_can_be_disabled(self, llm_client):
        llm_client.generate_text.return_value = "**Example** raw"
        service = ContentService(llm_client, clean_output=False)

        result = await service.generate_content("Buy milk.", {"type": "tasks"}, "en")

        assert result.content == "**Example** raw"

    @pytest.mark.asyncio
    async def test_unknown_type_is_echoed(self, service):
        result = await service.generate_content("Buy milk.", {"type": "poem"}, "en")
        assert result.type == "poem"


class TestSplitForGeneration:
    """Tests for split_for_generation."""

    def test_text_within_budget_is_not_chunked(self, service):
        text = "One.  Two.\nThree."
        assert service.split_for_generation(text) == [text]

    def test_budget_comes_from_environment(self, llm_client, monkeypatch):
        monkeypatch.setenv("CHUNK_MAX_TOKENS", "10")
        service = ContentService(llm_client)

        assert service.max_chunk_tokens == 10
        assert len(service.split_for_generation(long_text(3))) == 3

    def test_explicit_budget_wins_over_environment(self, llm_client, monkeypatch):
        monkeypatch.setenv("CHUNK_MAX_TOKENS", "10")

        assert ContentService(llm_client, max_chunk_tokens=50).max_chunk_tokens == 50

    @pytest.mark.parametrize("budget", [0, -5])
    def test_non_positive_budget_is_rejected(self, llm_client, monkeypatch, budget):
        monkeypatch.setenv("CHUNK_MAX_TOKENS", "10")

        with pytest.raises(ValueError):
            ContentService(llm_client, max_chunk_tokens=budget)


class TestPreviewPrompts:
    """Tests for preview_prompts."""

    def test_preview_matches_generation_prompts(self, service, llm_client):
        text = long_text(2500)

        preview = service.preview_prompts(text, {"type": "meeting"}, "en")

        assert preview.chunks == len(service.split_for_generation(text))
        assert len(preview.prompts) == preview.chunks
        assert preview.estimated_tokens == 40625
        llm_client.generate_text.assert_not_called()

    def test_blank_text_raises(self, service):
        with pytest.raises(InputError):
            service.preview_prompts("  ", {"type": "tasks"}, "en")
