"""
Content Request/Response Models

Pydantic models for the content generation, prompt preview and summary
endpoints.
"""

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field

Language = Literal["en", "no"]


class ContentResult(BaseModel):
    """
    Final generated content returned to the caller.

    Attributes:
        content: Per-chunk outputs joined with a blank line, in chunk order
        type: Content type echoed from the preferences
        language: Output language echoed from the request
    """
    content: str = Field(..., description="Generated content")
    type: str = Field(..., description="Content type that was generated")
    language: str = Field(..., description="Output language")


class GenerateContentRequest(BaseModel):
    """
    Request body for POST /content/generate.

    Attributes:
        text: Transcript or source text (must not be blank)
        preferences: Content type and options; `type` selects the template
        language: Output language ('en' or 'no')
    """
    text: str = Field(..., description="Source text to transform")
    preferences: Dict[str, Any] = Field(
        default_factory=dict,
        description="Content preferences including the 'type' discriminator"
    )
    language: Language = Field(default="en", description="Output language")


class PromptPreviewResponse(BaseModel):
    """Prompts that a generation request would send, without calling the model."""
    prompts: List[str] = Field(..., description="One rendered prompt per chunk")
    chunks: int = Field(..., description="Number of chunks the text splits into")
    estimated_tokens: int = Field(..., description="Estimated token count of the text")


class SummaryRequest(BaseModel):
    """Request body for POST /content/summary."""
    text: str = Field(..., description="Transcription to summarize")
    language: Language = Field(default="en", description="Output language")


class SummaryAndTasks(BaseModel):
    """Structured model output for the summary endpoint.

    Used as the instructor response model.
    """
    summary: str = Field(
        description="Detailed summary capturing key points, decisions, people and deadlines"
    )
    tasks: List[str] = Field(
        default_factory=list,
        description="Actionable tasks written in second person ('You need to...')"
    )


class TaskItem(BaseModel):
    """A task enriched with a local priority and due-date estimate."""
    text: str
    priority: Literal["High", "Medium", "Low"]
    due_date: Optional[str] = Field(default=None, description="ISO date if one was mentioned")


class SummaryResponse(BaseModel):
    """Response from the summary endpoint."""
    summary: str
    tasks: List[TaskItem]


class TranscriptionResponse(BaseModel):
    """Response from the transcription endpoint."""
    text: str = Field(..., description="Transcribed text")
    language: str = Field(..., description="Language hint used for transcription")
    title: str = Field(..., description="Suggested history title")
