"""
History Request/Response Models

Pydantic models for saving and listing transcription history.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.content_models import Language, TaskItem
from models.db_models import TranscriptionModeEnum


class HistoryRecordCreate(BaseModel):
    """
    Request body for saving a processed memo.

    Attributes:
        transcription: Transcribed text (required, not blank)
        mode: Processing mode the memo was created in
        type: Content type that was generated
        language: Output language
        title: Optional title; derived from the transcription when absent
        content: Generated content, if any
        summary: Summary, for tasks mode
        tasks: Tasks, for tasks mode
    """
    transcription: str = Field(..., description="Transcribed text")
    mode: TranscriptionModeEnum = Field(default=TranscriptionModeEnum.tasks)
    type: str = Field(default="default")
    language: Language = Field(default="en")
    title: Optional[str] = Field(default=None)
    content: Optional[str] = Field(default=None)
    summary: Optional[str] = Field(default=None)
    tasks: List[TaskItem] = Field(default_factory=list)

    @field_validator('transcription')
    @classmethod
    def transcription_must_not_be_empty(cls, v: str) -> str:
        """Validate that transcription is not empty or whitespace-only."""
        if not v or not v.strip():
            raise ValueError("transcription cannot be empty or contain only whitespace")
        return v


class HistoryRecordResponse(BaseModel):
    """A saved memo as returned by the history endpoints."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    transcription: str
    mode: TranscriptionModeEnum
    type: str
    language: str
    content: Optional[str] = None
    summary: Optional[str] = None
    tasks: Optional[List[TaskItem]] = None
    created_at: datetime


class HistoryClearResponse(BaseModel):
    """Number of records removed by DELETE /history."""
    deleted: int
