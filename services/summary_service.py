"""Summary Service for extracting a summary and personal task list from a voice memo.

Uses instructor with the SummaryAndTasks response model so the model output
arrives already structured. Tasks are enriched locally with a priority and
an optional due date.
"""
import os
import logging
from datetime import date
from typing import Optional

import instructor

from models.content_models import SummaryAndTasks, SummaryResponse, TaskItem
from services.errors import EmptyResultError, InputError, ProviderError
from utils.task_utils import analyze_task_priority, extract_date_from_text

logger = logging.getLogger(__name__)

SUMMARY_TEMPERATURE = 0.7
SUMMARY_MAX_TOKENS = 2000


class SummaryService:
    """Service for summarizing voice memos and extracting the user's tasks."""

    def __init__(self, model: Optional[str] = None):
        """Initialize instructor client with async OpenAI."""
        self.model = model or os.getenv("OPENAI_MODEL") or "gpt-4o"

        self.client = instructor.from_provider(
            f"openai/{self.model}",
            async_client=True,
        )

        logger.info(f"SummaryService initialized with model: {self.model}")

    async def summarize(
        self,
        transcription: str,
        language: str = "en",
        today: Optional[date] = None
    ) -> SummaryResponse:
        """Summarize a transcription and extract second-person tasks.

        Args:
            transcription: The transcription text.
            language: Output language ('en' or 'no').
            today: Reference date for relative due dates.

        Returns:
            SummaryResponse with the summary and enriched tasks.

        Raises:
            InputError: If the transcription is empty.
            ProviderError: If the model call fails.
            EmptyResultError: If the model returns an empty summary.
        """
        if not transcription or not transcription.strip():
            raise InputError("No transcription provided for summary generation")

        logger.info(
            f"Generating summary: language={language}, length={len(transcription)} chars"
        )

        try:
            result = await self.client.create(
                response_model=SummaryAndTasks,
                messages=[
                    {"role": "system", "content": self._get_system_prompt(language)},
                    {"role": "user", "content": transcription}
                ],
                temperature=SUMMARY_TEMPERATURE,
                max_tokens=SUMMARY_MAX_TOKENS,
                max_retries=2
            )
        except Exception as e:
            logger.error(f"Summary extraction failed: {e}", exc_info=True)
            raise ProviderError(
                "Failed to generate summary and tasks. Please try again."
            ) from e

        if result is None or not result.summary.strip():
            raise EmptyResultError("Failed to generate summary from the transcription")

        tasks = [
            TaskItem(
                text=task.strip(),
                priority=analyze_task_priority(task),
                due_date=extract_date_from_text(task, today=today)
            )
            for task in result.tasks
            if task and task.strip()
        ]

        logger.info(
            f"Summary complete: summary_length={len(result.summary)}, tasks={len(tasks)}"
        )

        return SummaryResponse(summary=result.summary.strip(), tasks=tasks)

    def _get_system_prompt(self, language: str) -> str:
        """Personal-assistant prompt in the requested output language."""
        if language == "no":
            return """Du er en personlig assistent som analyserer talenotater og lager sammendrag. For følgende transkripsjon, gi:

1. Et detaljert sammendrag som fanger opp alle viktige punkter og detaljer
2. En komplett liste over alle spesifikke oppgaver som DU må gjøre

VIKTIG for oppgaver: Skriv alle oppgaver som om du snakker direkte til brukeren som deres personlige assistent:
- Bruk "Du må..." i stedet for "Taleren må..."
- Bruk "Du bør..." i stedet for "Personen bør..."

Sammendraget skal inkludere:
- Hovedpunkter og beslutninger
- Viktige detaljer og kontekst
- Nøkkelpersoner og deres roller
- Tidspunkt og frister som nevnes

Skriv ALT på norsk."""

        return """You are a personal assistant that analyzes voice memos and creates comprehensive summaries. For the following transcription, provide:

1. A detailed executive summary that captures all important points and details
2. A complete list of all specific, actionable tasks that YOU need to do

IMPORTANT for tasks: Write all tasks as if speaking directly to the user as their personal assistant:
- Use "You need to..." instead of "The speaker needs to..."
- Use "You should..." instead of "The person should..."

The summary should include:
- Key points and decisions made
- Important details and context
- Key people and their roles
- Timelines and deadlines mentioned

Write everything in English."""
