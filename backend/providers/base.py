"""
Storage provider capability contract.

Mock, relational and hosted storage implement this Protocol structurally
(no shared base class). Callers depend only on StorageProvider and get an
instance from providers.registry.

Error contract for every implementation:
    - invalid id                  -> errors.ValidationError (before storage)
    - absent or not-owned row     -> errors.NotFoundError (no side effect)
    - backend failure             -> errors.StorageError

Atomicity: the relational provider runs each operation in one transaction.
Mock and hosted providers are not transactional; a failure in the second
write of a two-step operation (job + applied event, event + derived status)
leaves the first write in place.
"""

from typing import Optional, Protocol, runtime_checkable

from models.enums import EventType, JobStatus, ProviderKind
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
    TimelinePage,
    TimelineQuery,
)


@runtime_checkable
class StorageProvider(Protocol):
    """Operations every storage backend supports, with identical semantics."""

    kind: ProviderKind

    async def fetch_jobs(self, query: JobQuery) -> JobPage:
        """Filtered page of jobs ordered by application date desc."""
        ...

    async def get_job(self, job_id: int) -> Job:
        ...

    async def create_job(self, data: JobCreate) -> Job:
        """Create a job and its 'applied' event."""
        ...

    async def update_job(self, job_id: int, data: JobUpdate) -> None:
        """Partial update: fields not sent keep their stored value."""
        ...

    async def delete_job(self, job_id: int) -> None:
        """Delete a job and all its events."""
        ...

    async def toggle_favorite(self, job_id: int, current_value: bool) -> None:
        """Set is_favorite to (not current_value)."""
        ...

    async def fetch_job_events(self, job_id: Optional[int] = None) -> list[JobEvent]:
        """Events of one job (or all), ordered by event date desc."""
        ...

    async def create_job_event(self, data: JobEventCreate) -> JobEvent:
        """Create an event and apply the derived status to its job."""
        ...

    async def update_job_event(self, event_id: int, data: JobEventUpdate) -> None:
        ...

    async def delete_job_event(self, event_id: int) -> None:
        ...

    async def delete_job_events_by_type(self, job_id: int, event_types: list[EventType]) -> int:
        """Delete a job's events of the given types. Returns the number deleted."""
        ...

    async def recompute_job_status(self, job_id: int) -> JobStatus:
        """Rebuild the job status from its events and store it."""
        ...

    async def fetch_stats(self) -> JobStats:
        ...

    async def fetch_timeline_events(self, query: TimelineQuery) -> TimelinePage:
        """Milestone events of all jobs with their job's company, position and location."""
        ...

    async def ping(self) -> None:
        """Cheap reachability probe. Raises StorageError when unreachable."""
        ...


def applied_event_for(job: Job) -> JobEventCreate:
    """The 'applied' event created together with every job."""
    return JobEventCreate(
        job_id=job.id,
        event_type=EventType.APPLIED,
        event_date=job.application_date,
        title=f"Applied to {job.company}",
        description=f"Applied for {job.position} position at {job.company}",
    )
