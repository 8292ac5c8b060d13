"""History Service for persisting processed voice memos per user."""
import logging
from typing import Callable, List, Optional

from sqlalchemy import delete, or_, select

from models.db_models import TranscriptionRecordModel
from models.history_models import HistoryRecordCreate
from services.database import get_async_session
from utils.text_utils import generate_title

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 100


class HistoryService:
    """Reads and writes the transcriptions table.

    The session factory is injectable so tests can supply a fake session.
    """

    def __init__(self, session_factory: Callable = get_async_session):
        self.session_factory = session_factory

    async def save_record(
        self,
        user_id: str,
        record: HistoryRecordCreate
    ) -> TranscriptionRecordModel:
        """Persist one processed memo.

        Args:
            user_id: Owner of the record.
            record: Validated record payload.

        Returns:
            The stored TranscriptionRecordModel.
        """
        title = (record.title or "").strip() or generate_title(
            record.transcription, record.language
        )

        row = TranscriptionRecordModel(
            user_id=user_id,
            title=title,
            transcription=record.transcription,
            mode=record.mode,
            type=record.type,
            language=record.language,
            content=record.content,
            summary=record.summary,
            tasks=[task.model_dump() for task in record.tasks] or None,
        )

        async with self.session_factory() as session:
            session.add(row)
            await session.commit()
            await session.refresh(row)

        logger.info(f"Saved transcription record: user_id={user_id}, record_id={row.id}")
        return row

    async def list_records(
        self,
        user_id: str,
        search: Optional[str] = None,
        limit: int = DEFAULT_LIST_LIMIT
    ) -> List[TranscriptionRecordModel]:
        """List a user's records, newest first.

        Args:
            user_id: Owner of the records.
            search: Optional case-insensitive filter on title and transcription.
            limit: Maximum number of rows.
        """
        query = select(TranscriptionRecordModel).where(
            TranscriptionRecordModel.user_id == user_id
        )

        if search and search.strip():
            pattern = f"%{search.strip()}%"
            query = query.where(or_(
                TranscriptionRecordModel.title.ilike(pattern),
                TranscriptionRecordModel.transcription.ilike(pattern),
            ))

        query = query.order_by(TranscriptionRecordModel.created_at.desc()).limit(limit)

        async with self.session_factory() as session:
            result = await session.execute(query)
            records = list(result.scalars().all())

        logger.info(
            f"Listed transcription records: user_id={user_id}, "
            f"search={'yes' if search else 'no'}, count={len(records)}"
        )
        return records

    async def clear_records(self, user_id: str) -> int:
        """Delete all of a user's records and return how many were removed."""
        async with self.session_factory() as session:
            result = await session.execute(
                delete(TranscriptionRecordModel).where(
                    TranscriptionRecordModel.user_id == user_id
                )
            )
            await session.commit()

        deleted = result.rowcount or 0
        logger.info(f"Cleared transcription records: user_id={user_id}, deleted={deleted}")
        return deleted
