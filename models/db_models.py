"""SQLModel table definitions for transcription history.

One row per saved voice memo: the transcription, what was generated from it,
and the summary/tasks when the memo was processed in tasks mode.
"""
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, Text, JSON, Enum as SAEnum
from typing import List, Optional
from datetime import datetime, timezone
from uuid import UUID, uuid4
import enum


class TranscriptionModeEnum(str, enum.Enum):
    """Processing mode the memo was created in."""
    tasks = "tasks"
    meeting = "meeting"
    content_creator = "content-creator"
    article = "article"
    professional_documents = "professional-documents"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TranscriptionRecordModel(SQLModel, table=True):
    """Saved transcription with its generated output."""
    __tablename__ = "transcriptions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: str = Field(index=True)
    title: str
    transcription: str = Field(sa_column=Column(Text, nullable=False))
    mode: TranscriptionModeEnum = Field(
        sa_column=Column(
            SAEnum(TranscriptionModeEnum, values_callable=lambda e: [m.value for m in e]),
            nullable=False
        )
    )
    type: str = Field(default="default")
    language: str = Field(default="en")
    content: Optional[str] = Field(default=None, sa_column=Column(Text))
    summary: Optional[str] = Field(default=None, sa_column=Column(Text))
    tasks: Optional[List[dict]] = Field(default=None, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=_utcnow, index=True)
