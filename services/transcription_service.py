"""TranscriptionService for speech-to-text via the OpenAI audio API."""
import os
import logging
from typing import Optional

from openai import AsyncOpenAI, APIError, APIStatusError

from services.errors import EmptyResultError, InputError, TranscriptionError

logger = logging.getLogger(__name__)

# Formats accepted by the transcription endpoint
SUPPORTED_AUDIO_FORMATS = [
    'flac', 'm4a', 'mp3', 'mp4', 'mpeg', 'mpga', 'oga', 'ogg', 'wav', 'webm'
]
MAX_FILE_SIZE = 25 * 1024 * 1024  # 25MB provider limit

DEFAULT_TRANSCRIPTION_MODEL = "whisper-1"


def validate_audio_file(filename: Optional[str], content_type: Optional[str], size: int) -> None:
    """
    Validate an uploaded audio file before it is sent to the provider.

    A file is accepted when either its extension or its MIME type names a
    supported format.

    Args:
        filename: Original file name
        content_type: MIME type reported by the client
        size: File size in bytes

    Raises:
        InputError: If the file is missing, empty, unsupported or too large
    """
    if not filename:
        raise InputError("No file provided")

    if size == 0:
        raise InputError("File is empty")

    extension = filename.lower().rsplit('.', 1)[-1] if '.' in filename else ''
    mime_type = (content_type or '').lower()

    is_valid_format = any(
        fmt in mime_type or fmt == extension
        for fmt in SUPPORTED_AUDIO_FORMATS
    )
    if not is_valid_format:
        raise InputError(
            "Unsupported audio format. Please use one of the following formats: "
            f"{', '.join(SUPPORTED_AUDIO_FORMATS)}"
        )

    if size > MAX_FILE_SIZE:
        raise InputError(
            f"File size exceeds {MAX_FILE_SIZE // (1024 * 1024)}MB limit"
        )


def get_mimetype_from_extension(filename: str) -> str:
    """
    Map file extension to MIME type.

    Args:
        filename: File name with extension

    Returns:
        MIME type string
    """
    extension = filename.lower().split('.')[-1]

    mime_map = {
        'wav': 'audio/wav',
        'mp3': 'audio/mpeg',
        'mpeg': 'audio/mpeg',
        'mpga': 'audio/mpeg',
        'flac': 'audio/flac',
        'm4a': 'audio/mp4',
        'mp4': 'audio/mp4',
        'oga': 'audio/ogg',
        'ogg': 'audio/ogg',
        'webm': 'audio/webm'
    }

    return mime_map.get(extension, 'audio/wav')


class TranscriptionService:
    """Service for transcribing recorded or uploaded voice memos."""

    def __init__(self, client: AsyncOpenAI, model: Optional[str] = None):
        self.client = client
        self.model = model or os.getenv("OPENAI_TRANSCRIPTION_MODEL") or DEFAULT_TRANSCRIPTION_MODEL
        logger.info(f"TranscriptionService initialized with model={self.model}")

    async def transcribe(self, audio_bytes: bytes, filename: str, language: str = "en") -> str:
        """
        Transcribe an audio file.

        Args:
            audio_bytes: Raw audio file bytes
            filename: Original file name (used for the format hint)
            language: ISO-639-1 language hint ('en', 'no', ...)

        Returns:
            Transcribed text

        Raises:
            TranscriptionError: If the provider call fails
            EmptyResultError: If the provider returns no text
        """
        mimetype = get_mimetype_from_extension(filename)
        logger.info(
            f"Starting transcription, model={self.model}, mimetype={mimetype}, "
            f"language={language}, size={len(audio_bytes)} bytes"
        )

        try:
            response = await self.client.audio.transcriptions.create(
                model=self.model,
                file=(filename, audio_bytes, mimetype),
                language=language,
                response_format="json"
            )
        except APIStatusError as e:
            logger.error(f"Transcription failed: status={e.status_code}, error={e.message}")
            raise TranscriptionError(
                e.message or "Transcription failed",
                provider="openai",
                status_code=e.status_code
            )
        except APIError as e:
            logger.error(f"Transcription failed: {e}", exc_info=True)
            raise TranscriptionError(e.message or "Transcription failed", provider="openai")

        text = getattr(response, "text", None)
        if not text or not text.strip():
            logger.warning(f"Transcription returned no text: size={len(audio_bytes)} bytes")
            raise EmptyResultError("No transcription text received from API")

        logger.info(f"Transcription complete: length={len(text)} chars")
        return text
