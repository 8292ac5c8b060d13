"""Data models for the MumbleTasks API."""
from .content_models import (
    ContentResult,
    GenerateContentRequest,
    PromptPreviewResponse,
    SummaryAndTasks,
    SummaryRequest,
    SummaryResponse,
    TaskItem,
    TranscriptionResponse,
)
from .content_preferences import (
    ArticlePreferences,
    ContentCreatorPreferences,
    ContentPreferences,
    GenericPreferences,
    MeetingPreferences,
    PromptPreferences,
    TasksPreferences,
    parse_preferences,
)
from .db_models import (
    TranscriptionRecordModel,
    TranscriptionModeEnum,
)

__all__ = [
    # Content models
    "ContentResult",
    "GenerateContentRequest",
    "PromptPreviewResponse",
    "SummaryAndTasks",
    "SummaryRequest",
    "SummaryResponse",
    "TaskItem",
    "TranscriptionResponse",
    # Preferences
    "ArticlePreferences",
    "ContentCreatorPreferences",
    "ContentPreferences",
    "GenericPreferences",
    "MeetingPreferences",
    "PromptPreferences",
    "TasksPreferences",
    "parse_preferences",
    # Database models
    "TranscriptionRecordModel",
    "TranscriptionModeEnum",
]
