"""
Unit Tests for HistoryService

Uses a fake async session so no database is required.
"""

from contextlib import asynccontextmanager
from datetime import date

import pytest
from unittest.mock import AsyncMock, MagicMock
from sqlalchemy.dialects import postgresql

from models.content_models import TaskItem
from models.db_models import TranscriptionModeEnum, TranscriptionRecordModel
from models.history_models import HistoryRecordCreate
from services.history_service import HistoryService


class FakeSession:
    """Records calls made through the session API used by HistoryService."""

    def __init__(self, execute_result=None):
        self.added = []
        self.add = MagicMock(side_effect=self.added.append)
        self.commit = AsyncMock()
        self.refresh = AsyncMock()
        self.execute = AsyncMock(return_value=execute_result)


def session_factory_for(session: FakeSession):
    @asynccontextmanager
    async def factory():
        yield session
    return factory


def compiled_sql(statement) -> str:
    return str(statement.compile(dialect=postgresql.dialect()))


class TestSaveRecord:
    """Tests for save_record."""

    @pytest.mark.asyncio
    async def test_persists_record_for_user(self):
        session = FakeSession()
        service = HistoryService(session_factory=session_factory_for(session))
        record = HistoryRecordCreate(
            transcription="Call the plumber about the leak. Then pay the bill.",
            mode="tasks",
            summary="Household chores",
            tasks=[TaskItem(text="You need to call the plumber", priority="Low")],
        )

        row = await service.save_record("user-1", record)

        assert session.added == [row]
        session.commit.assert_awaited_once()
        session.refresh.assert_awaited_once_with(row)
        assert row.user_id == "user-1"
        assert row.title == "Call the plumber about the leak"
        assert row.mode == TranscriptionModeEnum.tasks
        assert row.tasks == [
            {"text": "You need to call the plumber", "priority": "Low", "due_date": None}
        ]

    @pytest.mark.asyncio
    async def test_explicit_title_is_kept(self):
        session = FakeSession()
        service = HistoryService(session_factory=session_factory_for(session))
        record = HistoryRecordCreate(
            transcription="Some text.",
            mode="content-creator",
            type="content-creator",
            title="  Launch thread  ",
            content="1/ We launched",
        )

        row = await service.save_record("user-1", record)

        assert row.title == "Launch thread"
        assert row.mode == TranscriptionModeEnum.content_creator
        assert row.tasks is None

    @pytest.mark.asyncio
    async def test_short_transcription_gets_dated_title(self):
        session = FakeSession()
        service = HistoryService(session_factory=session_factory_for(session))

        row = await service.save_record(
            "user-1", HistoryRecordCreate(transcription="Ok.", language="no")
        )

        today = date.today()
        assert row.title == f"Notat {today.day}.{today.month}.{today.year}"

    def test_blank_transcription_is_rejected(self):
        with pytest.raises(ValueError):
            HistoryRecordCreate(transcription="   ")


class TestListRecords:
    """Tests for list_records."""

    @pytest.mark.asyncio
    async def test_lists_user_records_newest_first(self):
        rows = [
            TranscriptionRecordModel(
                user_id="user-1", title="Newest", transcription="a", mode="tasks"
            ),
        ]
        result = MagicMock()
        result.scalars.return_value.all.return_value = rows
        session = FakeSession(execute_result=result)
        service = HistoryService(session_factory=session_factory_for(session))

        records = await service.list_records("user-1")

        assert records == rows
        sql = compiled_sql(session.execute.call_args.args[0])
        assert "transcriptions.user_id = " in sql
        assert "ORDER BY transcriptions.created_at DESC" in sql
        assert "ILIKE" not in sql

    @pytest.mark.asyncio
    async def test_search_filters_title_and_transcription(self):
        result = MagicMock()
        result.scalars.return_value.all.return_value = []
        session = FakeSession(execute_result=result)
        service = HistoryService(session_factory=session_factory_for(session))

        await service.list_records("user-1", search="dentist")

        sql = compiled_sql(session.execute.call_args.args[0])
        assert "transcriptions.title ILIKE" in sql
        assert "transcriptions.transcription ILIKE" in sql


class TestClearRecords:
    """Tests for clear_records."""

    @pytest.mark.asyncio
    async def test_returns_deleted_count(self):
        result = MagicMock(rowcount=3)
        session = FakeSession(execute_result=result)
        service = HistoryService(session_factory=session_factory_for(session))

        deleted = await service.clear_records("user-1")

        assert deleted == 3
        session.commit.assert_awaited_once()
        sql = compiled_sql(session.execute.call_args.args[0])
        assert sql.startswith("DELETE FROM transcriptions")
