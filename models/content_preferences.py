"""
Content Preference Models

One pydantic model per content type, selected by the `type` discriminator.
Each variant declares only the fields its prompt template reads. Wire
payloads may use camelCase (`taskType`, `hookType`) or snake_case.
"""

from typing import Any, Dict, Literal, Mapping, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from services.errors import InputError

DEFAULT_CONTENT_TYPE = "default"


class BasePreferences(BaseModel):
    """
    Fields shared by every content type.

    Attributes:
        type: Content type discriminator
        tone: Desired tone (e.g. 'Professional')
        style: Writing style
        audience: Target audience
        notes: Free-form user instructions
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    type: str
    tone: Optional[str] = None
    style: Optional[str] = None
    audience: Optional[str] = None
    notes: Optional[str] = None


class TasksPreferences(BasePreferences):
    """Structured task list."""
    type: Literal["tasks"] = "tasks"
    task_type: str = "task"


class MeetingPreferences(BasePreferences):
    """Meeting notes with speaker attribution."""
    type: Literal["meeting"] = "meeting"
    meeting_type: Optional[str] = None
    meeting_objectives: Optional[str] = None
    meeting_focus: Optional[str] = None
    meeting_participants: Optional[str] = None


class ContentCreatorPreferences(BasePreferences):
    """Platform-specific social media content."""
    type: Literal["content-creator"] = "content-creator"
    platform: Optional[str] = None
    # Short videos
    duration: Optional[str] = None
    content_style: Optional[str] = None
    hook_type: Optional[str] = None
    call_to_action: Optional[str] = None
    # YouTube and blog
    target_length: Optional[str] = None
    video_format: Optional[str] = None
    # LinkedIn
    content_tone: Optional[str] = None
    post_length: Optional[str] = None
    # Facebook
    audience_type: Optional[str] = None
    engagement_goal: Optional[str] = None
    # Twitter
    thread_length: Optional[str] = None
    # Blog
    writing_style: Optional[str] = None
    seo_focus: Optional[str] = None


class ArticlePreferences(BasePreferences):
    """Long-form article."""
    type: Literal["article"] = "article"
    article_type: str = "opinion_piece"
    target_length: str = "medium"
    writing_style: str = "informative"


class PromptPreferences(BasePreferences):
    """Prompt engineering help, either drafting prompts or refining a reply."""
    type: Literal["prompt"] = "prompt"
    prompt_mode: Literal["initial", "feedback"] = "initial"
    prompt_type: Optional[str] = None
    llm_output: Optional[str] = None


class GenericPreferences(BasePreferences):
    """Any content type without a dedicated template, including author mode."""
    type: str = DEFAULT_CONTENT_TYPE
    author_genre: Optional[str] = None
    author_style: Optional[str] = None
    author_context: Optional[str] = None
    author_instructions: Optional[str] = None
    author_paste_text: Optional[str] = None


ContentPreferences = Union[
    TasksPreferences,
    MeetingPreferences,
    ContentCreatorPreferences,
    ArticlePreferences,
    PromptPreferences,
    GenericPreferences,
]

PREFERENCE_MODELS: Dict[str, Type[BasePreferences]] = {
    "tasks": TasksPreferences,
    "meeting": MeetingPreferences,
    "content-creator": ContentCreatorPreferences,
    "article": ArticlePreferences,
    "prompt": PromptPreferences,
}


def parse_preferences(data: Optional[Mapping[str, Any]]) -> ContentPreferences:
    """
    Build the preference variant for a raw preferences mapping.

    Unknown or missing `type` values produce GenericPreferences carrying the
    given type (or 'default'); they are never an error.

    Args:
        data: Raw preferences (camelCase or snake_case keys), or a model

    Returns:
        The matching ContentPreferences variant

    Raises:
        InputError: If `type` is not a string or a known field has an invalid value
    """
    if isinstance(data, BasePreferences):
        return data

    raw = dict(data or {})
    content_type = raw.get("type") or DEFAULT_CONTENT_TYPE
    if not isinstance(content_type, str):
        raise InputError(f"Invalid preferences type: {content_type!r}")
    model = PREFERENCE_MODELS.get(content_type, GenericPreferences)

    try:
        return model.model_validate({**raw, "type": content_type})
    except ValidationError as e:
        raise InputError(f"Invalid preferences for type '{content_type}': {e}")
