"""
Unit tests for the meaning insert guard.

Tests guard_insert() on plain rows and attach_insert_guard() on real
SQLAlchemy sessions.
"""

import logging

import pytest
from domain.exceptions import MeaningGuardError
from domain.services.insert_guard import ROW_PREVIEW_LENGTH, attach_insert_guard, guard_insert
from domain.value_objects.protected_tables import ProtectedColumn, ProtectedTableConfig
from sqlalchemy import Column, Integer, String, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

GuardTestBase = declarative_base()


class Task(GuardTestBase):
    """Content row in a protected table."""

    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    meaning_object_id = Column(String, nullable=True)


class AuditLog(GuardTestBase):
    """Row in an unprotected table."""

    __tablename__ = "audit_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    message = Column(String, nullable=False)


class TestGuardInsert:
    """Tests for guard_insert()."""

    @pytest.mark.unit
    def test_row_with_meaning_passes(self):
        assert guard_insert("tasks", {"title": "Ship report", "meaning_object_id": "m-1"}) is True

    @pytest.mark.unit
    def test_unprotected_table_passes(self):
        """Tables outside the protected list are never checked."""
        assert guard_insert("audit_log", {"message": "hello"}) is True

    @pytest.mark.unit
    def test_missing_meaning_blocks(self):
        """Blocking mode raises with the table and column in the message."""
        with pytest.raises(MeaningGuardError) as exc_info:
            guard_insert("tasks", {"title": "Ship report"})

        assert exc_info.value.table == "tasks"
        assert exc_info.value.column == "meaning_object_id"
        assert str(exc_info.value) == 'Blocked insert into "tasks": meaning_object_id is required.'

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [None, ""])
    def test_null_or_empty_meaning_blocks(self, value):
        with pytest.raises(MeaningGuardError):
            guard_insert("goals", {"title": "Run", "meaning_object_id": value})

    @pytest.mark.unit
    def test_one_bad_row_blocks_batch(self):
        """A batch is rejected if any row lacks its meaning reference."""
        rows = [
            {"title": "One", "meaning_object_id": "m-1"},
            {"title": "Two"},
        ]

        with pytest.raises(MeaningGuardError):
            guard_insert("chat_messages", rows)

    @pytest.mark.unit
    def test_batch_of_valid_rows_passes(self):
        rows = [{"meaning_object_id": f"m-{i}"} for i in range(3)]

        assert guard_insert("booking_quotes", rows) is True

    @pytest.mark.unit
    def test_non_blocking_warns_and_returns_false(self, caplog):
        """Warn mode logs the violation with a payload preview instead of raising."""
        with caplog.at_level(logging.WARNING, logger="MeaningGuard"):
            result = guard_insert("ideas", {"title": "Dark mode"}, block=False)

        assert result is False
        assert len(caplog.records) == 1
        assert caplog.records[0].levelno == logging.WARNING
        assert "Meaning-First" in caplog.records[0].getMessage()
        assert "Dark mode" in caplog.records[0].getMessage()

    @pytest.mark.unit
    def test_payload_preview_truncated(self, caplog):
        """The logged row preview never exceeds the preview length."""
        row = {"title": "x" * 1000}

        with caplog.at_level(logging.WARNING, logger="MeaningGuard"):
            guard_insert("plans", row, block=False)

        preview = caplog.records[0].getMessage().split("Payload: ", 1)[1]
        assert len(preview) == ROW_PREVIEW_LENGTH

    @pytest.mark.unit
    def test_blocking_also_logs_error(self, caplog):
        with caplog.at_level(logging.ERROR, logger="MeaningGuard"):
            with pytest.raises(MeaningGuardError):
                guard_insert("tasks", {"title": "Ship report"})

        assert any(r.levelno == logging.ERROR for r in caplog.records)

    @pytest.mark.unit
    def test_custom_config(self):
        """A custom configuration replaces the built-in table list."""
        config = ProtectedTableConfig([ProtectedColumn("notes")])

        assert guard_insert("tasks", {"title": "x"}, config=config) is True
        with pytest.raises(MeaningGuardError):
            guard_insert("notes", {"body": "x"}, config=config)

    @pytest.mark.unit
    def test_optional_columns_not_enforced(self, caplog):
        """Missing optional columns never block; they are noted at INFO when enabled."""
        config = ProtectedTableConfig(
            [ProtectedColumn("tasks"), ProtectedColumn("tasks", "goal_meaning_id", required=False)],
            warn_on_missing_optional=True,
        )

        with caplog.at_level(logging.INFO, logger="MeaningGuard"):
            assert guard_insert("tasks", {"meaning_object_id": "m-1"}, config=config) is True

        assert [r.levelno for r in caplog.records] == [logging.INFO]
        assert "goal_meaning_id" in caplog.records[0].getMessage()

    @pytest.mark.unit
    def test_optional_columns_silent_by_default(self, caplog):
        config = ProtectedTableConfig(
            [ProtectedColumn("tasks"), ProtectedColumn("tasks", "goal_meaning_id", required=False)],
        )

        with caplog.at_level(logging.INFO, logger="MeaningGuard"):
            assert guard_insert("tasks", {"meaning_object_id": "m-1"}, config=config) is True

        assert caplog.records == []


class TestAttachInsertGuard:
    """Tests for attach_insert_guard() on async sessions."""

    @pytest.fixture
    async def guarded_session_maker(self, tmp_path):
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'guard.db'}")
        async with engine.begin() as conn:
            await conn.run_sync(GuardTestBase.metadata.create_all)

        yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

        await engine.dispose()

    async def _count_tasks(self, session_maker) -> int:
        async with session_maker() as db:
            return (await db.execute(select(func.count()).select_from(Task))).scalar_one()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_insert_without_meaning_is_blocked(self, guarded_session_maker):
        """A blocked flush writes nothing."""
        async with guarded_session_maker() as db:
            attach_insert_guard(db)
            db.add(Task(title="Ship report"))

            with pytest.raises(MeaningGuardError):
                await db.commit()
            await db.rollback()

        assert await self._count_tasks(guarded_session_maker) == 0

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_insert_with_meaning_is_written(self, guarded_session_maker):
        async with guarded_session_maker() as db:
            attach_insert_guard(db)
            db.add(Task(title="Ship report", meaning_object_id="m-1"))
            await db.commit()

        assert await self._count_tasks(guarded_session_maker) == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unprotected_insert_is_written(self, guarded_session_maker):
        async with guarded_session_maker() as db:
            attach_insert_guard(db)
            db.add(AuditLog(message="hello"))
            await db.commit()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_non_blocking_guard_lets_insert_through(self, guarded_session_maker, caplog):
        """Warn mode logs the violation but the row is still written."""
        async with guarded_session_maker() as db:
            attach_insert_guard(db, block=False)
            db.add(Task(title="Ship report"))
            with caplog.at_level(logging.WARNING, logger="MeaningGuard"):
                await db.commit()

        assert await self._count_tasks(guarded_session_maker) == 1
        assert any("Meaning-First" in r.getMessage() for r in caplog.records)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unguarded_session_is_not_checked(self, guarded_session_maker):
        """The guard is per session; other sessions are unaffected."""
        async with guarded_session_maker() as db:
            db.add(Task(title="Ship report"))
            await db.commit()

        assert await self._count_tasks(guarded_session_maker) == 1
