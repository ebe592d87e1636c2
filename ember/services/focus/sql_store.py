from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ember.logging import setup_logger
from ember.models.focus_workflow import FocusWorkflowRecord
from ember.services.focus.errors import StorageError
from ember.services.focus.models import FocusQuestion, FocusWorkflow, utcnow
from ember.services.focus.store import SessionStore


def _to_db_time(value: datetime) -> datetime:
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _from_db_time(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def _to_workflow(record: FocusWorkflowRecord) -> FocusWorkflow:
    return FocusWorkflow(
        session_key=record.session_key,
        category=record.category,
        questions=[FocusQuestion(**q) for q in record.questions],
        time_budget_minutes=record.time_budget_minutes,
        selected_activities=record.selected_activities,
        check_in_notes=record.check_in_notes,
        status=record.status,
        created_at=_from_db_time(record.created_at),
        updated_at=_from_db_time(record.updated_at),
    )


def _to_record(workflow: FocusWorkflow) -> FocusWorkflowRecord:
    return FocusWorkflowRecord(
        session_key=workflow.session_key,
        category=workflow.category,
        questions=[q.model_dump(mode="json") for q in workflow.questions],
        time_budget_minutes=workflow.time_budget_minutes,
        selected_activities=workflow.selected_activities,
        check_in_notes=workflow.check_in_notes,
        status=workflow.status.value,
        created_at=_to_db_time(workflow.created_at),
        updated_at=_to_db_time(workflow.updated_at),
    )


class SqlSessionStore(SessionStore):
    """Focus workflow store backed by SQLAlchemy (sqlite + aiosqlite by default)"""

    def __init__(
        self,
        session_factory: sessionmaker,
        ttl_seconds: int,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.logger = setup_logger(__name__)
        self.session_factory = session_factory
        self.ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock

    def _cutoff(self) -> datetime:
        return _to_db_time(self._clock() - self.ttl)

    async def get(self, session_key: str, category: str) -> Optional[FocusWorkflow]:
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(FocusWorkflowRecord).where(
                        FocusWorkflowRecord.session_key == session_key,
                        FocusWorkflowRecord.category == category,
                        FocusWorkflowRecord.updated_at >= self._cutoff(),
                    )
                )
                record = result.scalars().first()
                return _to_workflow(record) if record else None
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading focus session ({session_key}, {category}): {e}")
            raise StorageError("Error loading focus session") from e

    async def put(self, workflow: FocusWorkflow) -> None:
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    await session.merge(_to_record(workflow))
        except (SQLAlchemyError, OverflowError) as e:
            # sqlite drivers raise OverflowError for integers beyond 64 bits
            self.logger.error(f"Error saving focus session {workflow.key}: {e}")
            raise StorageError("Error saving focus session") from e

    async def list_by_session(self, session_key: str) -> List[FocusWorkflow]:
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(FocusWorkflowRecord).where(
                        FocusWorkflowRecord.session_key == session_key,
                        FocusWorkflowRecord.updated_at >= self._cutoff(),
                    )
                )
                return [_to_workflow(r) for r in result.scalars().all()]
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing focus sessions for {session_key}: {e}")
            raise StorageError("Error listing focus sessions") from e

    async def purge_expired(self) -> int:
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    result = await session.execute(
                        delete(FocusWorkflowRecord).where(
                            FocusWorkflowRecord.updated_at < self._cutoff()
                        )
                    )
            if result.rowcount:
                self.logger.info(f"Purged {result.rowcount} expired focus sessions")
            return result.rowcount or 0
        except SQLAlchemyError as e:
            self.logger.error(f"Error purging expired focus sessions: {e}")
            raise StorageError("Error purging focus sessions") from e
