"""
History router for a user's saved transcriptions.

All endpoints are scoped to the authenticated user and return 503 when no
DATABASE_URL is configured.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from models.history_models import (
    HistoryClearResponse,
    HistoryRecordCreate,
    HistoryRecordResponse,
)
from models.request_context import RequestContext
from services.history_service import HistoryService
from utils.context_utils import get_auth_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/history", tags=["history"])


def get_history_service(request: Request) -> HistoryService:
    """Return the HistoryService, or 503 when persistence is not configured."""
    history_service = getattr(request.app.state, "history_service", None)
    if history_service is None:
        raise HTTPException(status_code=503, detail="Transcription history is not available")
    return history_service


@router.get("", response_model=List[HistoryRecordResponse])
async def list_history(
    search: Optional[str] = Query(default=None, max_length=200),
    context: RequestContext = Depends(get_auth_context),
    history_service: HistoryService = Depends(get_history_service),
):
    """List the caller's saved transcriptions, newest first."""
    try:
        records = await history_service.list_records(context.user_id, search=search)
    except Exception as e:
        logger.error(
            f"Failed to list history: request_id={context.request_id}, error={e}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Failed to load transcription history")

    return [HistoryRecordResponse.model_validate(record) for record in records]


@router.post("", response_model=HistoryRecordResponse, status_code=201)
async def save_history(
    body: HistoryRecordCreate,
    context: RequestContext = Depends(get_auth_context),
    history_service: HistoryService = Depends(get_history_service),
):
    """Save a processed memo to the caller's history."""
    try:
        record = await history_service.save_record(context.user_id, body)
    except Exception as e:
        logger.error(
            f"Failed to save history: request_id={context.request_id}, error={e}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Failed to save transcription")

    return HistoryRecordResponse.model_validate(record)


@router.delete("", response_model=HistoryClearResponse)
async def clear_history(
    context: RequestContext = Depends(get_auth_context),
    history_service: HistoryService = Depends(get_history_service),
):
    """Delete all of the caller's saved transcriptions."""
    try:
        deleted = await history_service.clear_records(context.user_id)
    except Exception as e:
        logger.error(
            f"Failed to clear history: request_id={context.request_id}, error={e}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Failed to clear transcription history")

    return HistoryClearResponse(deleted=deleted)
