"""
Transcription router for recorded and uploaded voice memos.
"""
import logging
from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile

from models.content_models import Language, TranscriptionResponse
from models.request_context import RequestContext
from routers.content import raise_http_error
from services.errors import MumbleTasksError
from services.transcription_service import TranscriptionService, validate_audio_file
from utils.context_utils import get_auth_context
from utils.text_utils import generate_title

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transcriptions", tags=["transcriptions"])


def get_transcription_service(request: Request) -> TranscriptionService:
    """Return the TranscriptionService created at startup."""
    return request.app.state.transcription_service


@router.post("/transcribe", response_model=TranscriptionResponse)
async def transcribe_audio(
    file: UploadFile = File(...),
    language: Language = Form("en"),
    context: RequestContext = Depends(get_auth_context),
    transcription_service: TranscriptionService = Depends(get_transcription_service),
):
    """
    Transcribe an uploaded audio file.

    Args:
        file: Audio file (flac, m4a, mp3, mp4, mpeg, mpga, oga, ogg, wav, webm; max 25MB)
        language: Language hint, 'en' or 'no'

    Returns:
        JSON response with the text, the language and a suggested title

    Raises:
        HTTPException: 400 for invalid files, 502 when the provider fails
    """
    logger.info(
        f"Transcription started: request_id={context.request_id}, "
        f"filename={file.filename}, language={language}"
    )

    try:
        audio_bytes = await file.read()
    except Exception as e:
        logger.error(f"Failed to read file: request_id={context.request_id}, error={e}")
        raise HTTPException(status_code=400, detail="Failed to read uploaded file")

    try:
        validate_audio_file(file.filename, file.content_type, len(audio_bytes))
        text = await transcription_service.transcribe(audio_bytes, file.filename, language)
    except MumbleTasksError as e:
        raise_http_error(e, context.request_id)

    logger.info(
        f"Transcription complete: request_id={context.request_id}, "
        f"length={len(text)} chars"
    )

    return TranscriptionResponse(
        text=text,
        language=language,
        title=generate_title(text, language)
    )
