"""
In-memory storage provider for demos and tests.

State lives in two Python lists and is lost on restart. Mutations are not
guarded by locks: safe for a single event loop, not for concurrent
mutation from multiple threads or processes.
"""

from datetime import datetime, timezone
from typing import Optional

from errors import ensure_valid_id, not_found
from lifecycle.status_engine import recompute_status, status_for_new_event
from models.enums import EventType, JobStatus, ProviderKind
from providers.base import applied_event_for
from providers.mock_data import build_seed
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
from utils.provider_logging import ProviderLoggerMixin, ProviderType


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _next_id(items) -> int:
    return max((item.id for item in items), default=0) + 1


class MockProvider(ProviderLoggerMixin):
    """Storage provider backed by in-process lists."""

    kind = ProviderKind.MOCK
    provider_type = ProviderType.MOCK

    def __init__(
        self,
        jobs: Optional[list[Job]] = None,
        events: Optional[list[JobEvent]] = None,
        seed: bool = True,
    ):
        """
        Args:
            jobs: Initial jobs (copied). Defaults to the demo seed.
            events: Initial events (copied). Defaults to the demo seed.
            seed: Load demo data when jobs/events are not given
        """
        if jobs is None and events is None and seed:
            jobs, events = build_seed()
        self._jobs: list[Job] = [job.model_copy() for job in jobs or []]
        self._events: list[JobEvent] = [event.model_copy() for event in events or []]

    # -------------------------------------------------------------------------
    # Jobs
    # -------------------------------------------------------------------------

    def _find_job(self, job_id: int) -> int:
        job_id = ensure_valid_id(job_id, "Job")
        for index, job in enumerate(self._jobs):
            if job.id == job_id:
                return index
        raise not_found("Job", job_id)

    async def fetch_jobs(self, query: JobQuery) -> JobPage:
        matching = [job for job in self._jobs if query.matches(job)]
        matching.sort(key=lambda job: (job.application_date, job.id), reverse=True)
        page = matching[query.offset:query.offset + query.limit]
        return JobPage(
            jobs=[job.model_copy() for job in page],
            pagination=Pagination.for_query(query, len(matching)),
        )

    async def get_job(self, job_id: int) -> Job:
        return self._jobs[self._find_job(job_id)].model_copy()

    async def create_job(self, data: JobCreate) -> Job:
        now = _now()
        job = Job(id=_next_id(self._jobs), created_at=now, updated_at=now, **data.model_dump())
        self._jobs.insert(0, job)
        self.log_info(f"Created job {job.id} ({job.company} / {job.position})")

        await self._insert_event(applied_event_for(job))
        return job.model_copy()

    async def update_job(self, job_id: int, data: JobUpdate) -> None:
        index = self._find_job(job_id)
        changes = data.changes()
        self._jobs[index] = self._jobs[index].model_copy(update={**changes, "updated_at": _now()})
        self.log_info(f"Updated job {job_id}: {sorted(changes)}")

    async def delete_job(self, job_id: int) -> None:
        index = self._find_job(job_id)
        job = self._jobs.pop(index)
        before = len(self._events)
        self._events = [event for event in self._events if event.job_id != job.id]
        self.log_info(f"Deleted job {job.id} and {before - len(self._events)} events")

    async def toggle_favorite(self, job_id: int, current_value: bool) -> None:
        index = self._find_job(job_id)
        self._jobs[index] = self._jobs[index].model_copy(
            update={"is_favorite": not current_value, "updated_at": _now()}
        )

    async def fetch_stats(self) -> JobStats:
        return JobStats.from_jobs(self._jobs)

    async def recompute_job_status(self, job_id: int) -> JobStatus:
        index = self._find_job(job_id)
        job = self._jobs[index]
        derived = recompute_status(e for e in self._events if e.job_id == job.id)
        if derived is not None and derived != job.status:
            self._jobs[index] = job.model_copy(update={"status": derived, "updated_at": _now()})
            self.log_info(f"Recomputed job {job.id} status: {job.status.value} -> {derived.value}")
        return self._jobs[index].status

    async def fetch_timeline_events(self, query: TimelineQuery) -> TimelinePage:
        jobs = {job.id: job for job in self._jobs}
        matching = [
            e for e in self._events
            if e.job_id in jobs and query.matches(e.event_type, e.event_date)
        ]
        matching.sort(key=lambda e: (e.event_date, e.id), reverse=True)
        page = matching[query.offset:query.offset + query.limit]
        return TimelinePage(
            events=[
                TimelineEvent(
                    **e.model_dump(exclude={"created_at", "updated_at"}),
                    company=jobs[e.job_id].company,
                    position=jobs[e.job_id].position,
                    location=jobs[e.job_id].location,
                )
                for e in page
            ],
            pagination=TimelinePagination.for_query(query, len(matching)),
        )

    async def ping(self) -> None:
        return None

    # -------------------------------------------------------------------------
    # Job events
    # -------------------------------------------------------------------------

    def _find_event(self, event_id: int) -> int:
        event_id = ensure_valid_id(event_id, "Event")
        for index, event in enumerate(self._events):
            if event.id == event_id:
                return index
        raise not_found("Event", event_id)

    async def fetch_job_events(self, job_id: Optional[int] = None) -> list[JobEvent]:
        if job_id is not None:
            job_id = ensure_valid_id(job_id, "Job")
        events = [e for e in self._events if job_id is None or e.job_id == job_id]
        events.sort(key=lambda e: (e.event_date, e.id), reverse=True)
        return [event.model_copy() for event in events]

    async def _insert_event(self, data: JobEventCreate) -> JobEvent:
        now = _now()
        event = JobEvent(id=_next_id(self._events), created_at=now, updated_at=now, **data.model_dump())
        self._events.append(event)
        return event

    async def create_job_event(self, data: JobEventCreate) -> JobEvent:
        job_index = self._find_job(data.job_id)
        event = await self._insert_event(data)
        self.log_info(f"Created event {event.id} ({event.event_type.value}) for job {event.job_id}")

        # Best-effort follow-up write; the event stays even if this fails
        try:
            job_events = [e for e in self._events if e.job_id == event.job_id]
            new_status = status_for_new_event(event, job_events)
            if new_status is not None:
                job = self._jobs[job_index]
                self._jobs[job_index] = job.model_copy(update={"status": new_status, "updated_at": _now()})
                self.log_info(f"Job {job.id} status: {job.status.value} -> {new_status.value}")
        except Exception as e:
            self.log_error(f"Status update failed for job {event.job_id} after event {event.id}: {e}")

        return event.model_copy()

    async def update_job_event(self, event_id: int, data: JobEventUpdate) -> None:
        index = self._find_event(event_id)
        self._events[index] = self._events[index].model_copy(update={**data.changes(), "updated_at": _now()})

    async def delete_job_event(self, event_id: int) -> None:
        index = self._find_event(event_id)
        self._events.pop(index)

    async def delete_job_events_by_type(self, job_id: int, event_types: list[EventType]) -> int:
        job_id = ensure_valid_id(job_id, "Job")
        types = {EventType(t) for t in event_types}
        kept = [e for e in self._events if not (e.job_id == job_id and e.event_type in types)]
        deleted = len(self._events) - len(kept)
        self._events = kept
        self.log_info(f"Bulk-deleted {deleted} events of job {job_id}")
        return deleted
