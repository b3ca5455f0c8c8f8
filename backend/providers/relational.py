"""
Relational storage provider (PostgreSQL in production, any SQLAlchemy URL).

Each operation runs in its own session/transaction on the shared pooled
engine. SQLAlchemy sessions are blocking, so the work of every operation
runs on the default thread pool executor and the event loop stays free.

Event creation writes the event and the derived job status in one
transaction; the status write sits in a SAVEPOINT so a failure there is
rolled back alone and the event still commits.
"""

import asyncio
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Iterator, Optional, TypeVar

from sqlalchemy import case, func, or_, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from db.session import get_session_factory
from errors import StorageError, ensure_valid_id, not_found
from lifecycle.status_engine import recompute_status, status_for_new_event
from models.enums import EventType, JobStatus, ProviderKind
from models.job import Job as JobRow
from models.job_event import JobEvent as JobEventRow
from providers.base import applied_event_for
from schemas import (
    Job,
    JobCreate,
    JobEvent,
    JobEventCreate,
    JobEventUpdate,
    JobPage,
    JobQuery,
    JobStats,
    JobUpdate,
    Pagination,
    TimelineEvent,
    TimelinePage,
    TimelinePagination,
    TimelineQuery,
)
from schemas.timeline import TIMELINE_EVENT_TYPES
from utils.provider_logging import ProviderLoggerMixin, ProviderType

T = TypeVar("T")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _like_pattern(term: str) -> str:
    """Substring pattern with LIKE wildcards in the search term escaped."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _event_fields(data: dict) -> dict:
    """Schema field names -> ORM attribute names ("metadata" is renamed on the model)."""
    if "metadata" in data:
        data = dict(data)
        data["event_metadata"] = data.pop("metadata")
    return data


def to_job(row: JobRow) -> Job:
    return Job.model_validate(row)


def _event_values(row: JobEventRow) -> dict:
    return dict(
        id=row.id,
        job_id=row.job_id,
        event_type=row.event_type,
        event_date=row.event_date,
        title=row.title,
        description=row.description,
        interview_round=row.interview_round,
        interview_type=row.interview_type,
        interview_link=row.interview_link,
        interview_result=row.interview_result,
        notes=row.notes,
        metadata=row.event_metadata,
    )


def to_job_event(row: JobEventRow) -> JobEvent:
    return JobEvent(**_event_values(row), created_at=row.created_at, updated_at=row.updated_at)


class RelationalProvider(ProviderLoggerMixin):
    """Storage provider issuing parameterized statements through SQLAlchemy."""

    kind = ProviderKind.RELATIONAL
    provider_type = ProviderType.RELATIONAL

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        """
        Args:
            session_factory: Session factory to use. Defaults to the shared
                engine from DATABASE_URL (raises ConfigurationError if unset).
        """
        self._session_factory = session_factory or get_session_factory()

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        """
        Open a session; translate backend failures into StorageError.

        Anything not committed by the caller is rolled back on close.
        """
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            self.log_error(f"Failed to {action}: {e}")
            raise StorageError(f"Failed to {action}", original_error=e)
        finally:
            db.close()

    def _in_session(self, action: str, work: Callable[[Session], T]) -> T:
        with self._session(action) as db:
            return work(db)

    async def _run(self, action: str, work: Callable[[Session], T]) -> T:
        """Run work(db) in a fresh session on a worker thread."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._in_session, action, work)

    @staticmethod
    def _get_job_row(db: Session, job_id: int) -> JobRow:
        row = db.query(JobRow).filter(JobRow.id == job_id).first()
        if not row:
            raise not_found("Job", job_id)
        return row

    @staticmethod
    def _get_event_row(db: Session, event_id: int) -> JobEventRow:
        row = db.query(JobEventRow).filter(JobEventRow.id == event_id).first()
        if not row:
            raise not_found("Event", event_id)
        return row

    # -------------------------------------------------------------------------
    # Jobs
    # -------------------------------------------------------------------------

    async def fetch_jobs(self, query: JobQuery) -> JobPage:
        def fetch(db: Session) -> JobPage:
            q = db.query(JobRow)
            if query.search:
                pattern = _like_pattern(query.search)
                q = q.filter(or_(
                    JobRow.company.ilike(pattern, escape="\\"),
                    JobRow.position.ilike(pattern, escape="\\"),
                ))
            if query.status is not None:
                q = q.filter(JobRow.status == query.status)
            if query.favorites:
                q = q.filter(JobRow.is_favorite.is_(True))

            total = q.count()
            rows = q.order_by(
                JobRow.application_date.desc(),
                JobRow.id.desc(),
            ).offset(query.offset).limit(query.limit).all()

            return JobPage(
                jobs=[to_job(row) for row in rows],
                pagination=Pagination.for_query(query, total),
            )

        return await self._run("fetch jobs", fetch)

    async def get_job(self, job_id: int) -> Job:
        job_id = ensure_valid_id(job_id, "Job")
        return await self._run("fetch job", lambda db: to_job(self._get_job_row(db, job_id)))

    async def create_job(self, data: JobCreate) -> Job:
        def create(db: Session) -> Job:
            row = JobRow(**data.model_dump())
            db.add(row)
            db.flush()

            applied = applied_event_for(to_job(row))
            db.add(JobEventRow(**_event_fields(applied.model_dump())))

            db.commit()
            db.refresh(row)
            self.log_info(f"Created job {row.id} ({row.company} / {row.position})")
            return to_job(row)

        return await self._run("create job", create)

    async def update_job(self, job_id: int, data: JobUpdate) -> None:
        job_id = ensure_valid_id(job_id, "Job")
        changes = data.changes()

        def update(db: Session) -> None:
            row = self._get_job_row(db, job_id)
            for field, value in changes.items():
                setattr(row, field, value)
            row.updated_at = _now()
            db.commit()
            self.log_info(f"Updated job {job_id}: {sorted(changes)}")

        await self._run("update job", update)

    async def delete_job(self, job_id: int) -> None:
        job_id = ensure_valid_id(job_id, "Job")

        def delete(db: Session) -> None:
            self._get_job_row(db, job_id)
            # Delete child events explicitly (don't rely on ON DELETE CASCADE being present)
            deleted_events = db.query(JobEventRow).filter(
                JobEventRow.job_id == job_id
            ).delete(synchronize_session=False)
            db.query(JobRow).filter(JobRow.id == job_id).delete(synchronize_session=False)
            db.commit()
            self.log_info(f"Deleted job {job_id} and {deleted_events} events")

        await self._run("delete job", delete)

    async def toggle_favorite(self, job_id: int, current_value: bool) -> None:
        job_id = ensure_valid_id(job_id, "Job")

        def toggle(db: Session) -> None:
            updated = db.query(JobRow).filter(JobRow.id == job_id).update(
                {JobRow.is_favorite: not current_value, JobRow.updated_at: _now()},
                synchronize_session=False,
            )
            if updated == 0:
                raise not_found("Job", job_id)
            db.commit()

        await self._run("update favorite status", toggle)

    async def recompute_job_status(self, job_id: int) -> JobStatus:
        job_id = ensure_valid_id(job_id, "Job")

        def recompute(db: Session) -> JobStatus:
            row = self._get_job_row(db, job_id)
            events = db.query(JobEventRow).filter(JobEventRow.job_id == job_id).all()
            derived = recompute_status(events)
            if derived is not None and derived != row.status:
                self.log_info(f"Recomputed job {job_id} status: {row.status.value} -> {derived.value}")
                row.status = derived
                row.updated_at = _now()
                db.commit()
            return row.status

        return await self._run("recompute job status", recompute)

    async def fetch_stats(self) -> JobStats:
        def count_status(status: JobStatus):
            return func.count(case((JobRow.status == status, 1)))

        def stats(db: Session) -> JobStats:
            result = db.query(
                func.count(JobRow.id),
                count_status(JobStatus.INTERVIEW),
                count_status(JobStatus.OFFER),
                func.count(case((JobRow.is_favorite.is_(True), 1))),
                count_status(JobStatus.APPLIED),
                count_status(JobStatus.REJECTED),
                count_status(JobStatus.ACCEPTED),
            ).one()

            return JobStats(
                total_applications=result[0],
                active_interviews=result[1],
                offers_received=result[2],
                favorites=result[3],
                applied_count=result[4],
                rejected_count=result[5],
                accepted_count=result[6],
            )

        return await self._run("fetch stats", stats)

    async def fetch_timeline_events(self, query: TimelineQuery) -> TimelinePage:
        def timeline(db: Session) -> TimelinePage:
            q = db.query(JobEventRow, JobRow.company, JobRow.position, JobRow.location).join(
                JobRow, JobRow.id == JobEventRow.job_id
            ).filter(JobEventRow.event_type.in_(TIMELINE_EVENT_TYPES))
            if query.date_from is not None:
                q = q.filter(JobEventRow.event_date >= query.date_from)
            if query.date_to is not None:
                q = q.filter(JobEventRow.event_date <= query.date_to)

            total = q.count()
            rows = q.order_by(
                JobEventRow.event_date.desc(),
                JobEventRow.id.desc(),
            ).offset(query.offset).limit(query.limit).all()

            return TimelinePage(
                events=[
                    TimelineEvent(**_event_values(event), company=company, position=position, location=location)
                    for event, company, position, location in rows
                ],
                pagination=TimelinePagination.for_query(query, total),
            )

        return await self._run("fetch timeline events", timeline)

    async def ping(self) -> None:
        await self._run("reach database", lambda db: db.execute(text("SELECT 1")))

    # -------------------------------------------------------------------------
    # Job events
    # -------------------------------------------------------------------------

    async def fetch_job_events(self, job_id: Optional[int] = None) -> list[JobEvent]:
        if job_id is not None:
            job_id = ensure_valid_id(job_id, "Job")

        def fetch(db: Session) -> list[JobEvent]:
            q = db.query(JobEventRow)
            if job_id is not None:
                q = q.filter(JobEventRow.job_id == job_id)
            rows = q.order_by(JobEventRow.event_date.desc(), JobEventRow.id.desc()).all()
            return [to_job_event(row) for row in rows]

        return await self._run("fetch job events", fetch)

    async def create_job_event(self, data: JobEventCreate) -> JobEvent:
        def create(db: Session) -> JobEvent:
            job = self._get_job_row(db, data.job_id)

            row = JobEventRow(**_event_fields(data.model_dump()))
            db.add(row)
            db.flush()

            self._apply_derived_status(db, job, row)

            db.commit()
            db.refresh(row)
            self.log_info(f"Created event {row.id} ({row.event_type.value}) for job {row.job_id}")
            return to_job_event(row)

        return await self._run("create job event", create)

    def _apply_derived_status(self, db: Session, job: JobRow, event: JobEventRow) -> None:
        """
        Write the status implied by a new event inside a SAVEPOINT.

        A failure here is logged and rolled back to the savepoint; the event
        insert is kept and recompute_job_status() can repair the job later.
        """
        try:
            with db.begin_nested():
                siblings = db.query(JobEventRow).filter(
                    JobEventRow.job_id == job.id,
                    JobEventRow.event_type == EventType.INTERVIEW_RESULT,
                ).all()
                new_status = status_for_new_event(event, siblings)
                if new_status is not None and new_status != job.status:
                    self.log_info(f"Job {job.id} status: {job.status.value} -> {new_status.value}")
                    job.status = new_status
                    job.updated_at = _now()
        except Exception as e:
            self.log_error(f"Status update failed for job {job.id} after event {event.id}: {e}")

    async def update_job_event(self, event_id: int, data: JobEventUpdate) -> None:
        event_id = ensure_valid_id(event_id, "Event")
        changes = _event_fields(data.changes())

        def update(db: Session) -> None:
            row = self._get_event_row(db, event_id)
            for field, value in changes.items():
                setattr(row, field, value)
            row.updated_at = _now()
            db.commit()

        await self._run("update job event", update)

    async def delete_job_event(self, event_id: int) -> None:
        event_id = ensure_valid_id(event_id, "Event")

        def delete(db: Session) -> None:
            db.delete(self._get_event_row(db, event_id))
            db.commit()

        await self._run("delete job event", delete)

    async def delete_job_events_by_type(self, job_id: int, event_types: list[EventType]) -> int:
        job_id = ensure_valid_id(job_id, "Job")
        types = [EventType(t) for t in event_types]

        def delete(db: Session) -> int:
            deleted = db.query(JobEventRow).filter(
                JobEventRow.job_id == job_id,
                JobEventRow.event_type.in_(types),
            ).delete(synchronize_session=False)
            db.commit()
            self.log_info(f"Bulk-deleted {deleted} events of job {job_id}")
            return deleted

        return await self._run("delete job events", delete)
