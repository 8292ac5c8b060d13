"""
Content router for generating structured content from transcripts.

Endpoints:
- POST /content/generate - Transform text into content for a content type
- POST /content/prompt-preview - Render the prompts without calling the model
- POST /content/summary - Summary plus the user's task list
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from models.content_models import (
    ContentResult,
    GenerateContentRequest,
    PromptPreviewResponse,
    SummaryRequest,
    SummaryResponse,
)
from models.request_context import RequestContext
from services.content_service import ContentService
from services.errors import EmptyResultError, InputError, MumbleTasksError, ProviderError
from services.summary_service import SummaryService
from utils.context_utils import get_auth_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/content", tags=["content"])


def get_content_service(request: Request) -> ContentService:
    """Return the ContentService created at startup."""
    return request.app.state.content_service


def get_summary_service(request: Request) -> SummaryService:
    """Return the SummaryService created at startup."""
    return request.app.state.summary_service


def raise_http_error(error: MumbleTasksError, request_id: str) -> None:
    """Translate a service error into an HTTPException.

    InputError maps to 400; provider failures and empty results map to 502.
    """
    if isinstance(error, InputError):
        logger.warning(f"Invalid input: request_id={request_id}, error={error.message}")
        raise HTTPException(status_code=400, detail=error.message)

    if isinstance(error, (ProviderError, EmptyResultError)):
        logger.error(
            f"Upstream failure: request_id={request_id}, "
            f"error_type={type(error).__name__}, error={error.message}"
        )
        raise HTTPException(status_code=502, detail=error.message)

    logger.error(f"Unexpected service error: request_id={request_id}, error={error}")
    raise HTTPException(status_code=500, detail=error.message)


@router.post("/generate", response_model=ContentResult)
async def generate_content(
    body: GenerateContentRequest,
    context: RequestContext = Depends(get_auth_context),
    content_service: ContentService = Depends(get_content_service),
):
    """
    Generate content from a transcript.

    Long texts are chunked and processed concurrently; the response content
    is the per-chunk output joined in order.

    Raises:
        HTTPException: 400 for invalid input, 401 without credentials,
            502 when the model provider fails or returns nothing
    """
    logger.info(
        f"Content generation requested: request_id={context.request_id}, "
        f"user_id={context.user_id}, type={body.preferences.get('type', 'default')}, "
        f"language={body.language}, length={len(body.text)} chars"
    )

    try:
        result = await content_service.generate_content(
            body.text, body.preferences, body.language
        )
    except MumbleTasksError as e:
        raise_http_error(e, context.request_id)

    logger.info(
        f"Content generation complete: request_id={context.request_id}, "
        f"output_length={len(result.content)} chars"
    )
    return result


@router.post("/prompt-preview", response_model=PromptPreviewResponse)
async def preview_prompt(
    body: GenerateContentRequest,
    context: RequestContext = Depends(get_auth_context),
    content_service: ContentService = Depends(get_content_service),
):
    """Return the prompts a /content/generate call with this body would send."""
    try:
        preview = content_service.preview_prompts(
            body.text, body.preferences, body.language
        )
    except MumbleTasksError as e:
        raise_http_error(e, context.request_id)

    logger.info(
        f"Prompt preview: request_id={context.request_id}, chunks={preview.chunks}, "
        f"estimated_tokens={preview.estimated_tokens}"
    )
    return preview


@router.post("/summary", response_model=SummaryResponse)
async def summarize(
    body: SummaryRequest,
    context: RequestContext = Depends(get_auth_context),
    summary_service: SummaryService = Depends(get_summary_service),
):
    """Summarize a transcription and extract prioritized tasks."""
    logger.info(
        f"Summary requested: request_id={context.request_id}, "
        f"language={body.language}, length={len(body.text)} chars"
    )

    try:
        response = await summary_service.summarize(body.text, body.language)
    except MumbleTasksError as e:
        raise_http_error(e, context.request_id)

    logger.info(
        f"Summary complete: request_id={context.request_id}, tasks={len(response.tasks)}"
    )
    return response
