"""
Hosted storage provider (Supabase).

Rows live in the `jobs` and `job_events` tables with a `user_id` owner
column. Every statement filters on (or sets) the owner, so rows of other
users behave exactly like absent rows. The client is authorized with the
caller's access token, so row-level security applies as well.

The supabase client is synchronous; each request is executed on the
default thread pool executor so the event loop is not blocked.

Not transactional: job + applied event and event + derived status are two
separate requests.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from errors import StorageError, ensure_valid_id, not_found
from lifecycle.status_engine import recompute_status, status_for_new_event
from models.enums import EventType, JobStatus, ProviderKind
from providers.base import applied_event_for
from providers.field_mapping import JOB_EVENT_FIELDS, JOB_FIELDS, from_storage, to_storage
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

JOBS_TABLE = "jobs"
JOB_EVENTS_TABLE = "job_events"

# Job columns carried by every timeline event
TIMELINE_JOB_COLUMNS = ("company", "position", "location")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def search_filter(term: str) -> str:
    """
    PostgREST or-filter matching term as a substring of company or position.

    LIKE wildcards in the term are escaped, and the pattern is double-quoted
    so commas and parentheses cannot break out of the filter expression.
    """
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    quoted = '"%' + escaped.replace("\\", "\\\\").replace('"', '\\"') + '%"'
    return f"company.ilike.{quoted},position.ilike.{quoted}"


def to_job(row: dict) -> Job:
    return Job.model_validate(from_storage(row, JOB_FIELDS))


def to_job_event(row: dict) -> JobEvent:
    return JobEvent.model_validate(from_storage(row, JOB_EVENT_FIELDS))


def to_timeline_event(row: dict, job_row: dict) -> TimelineEvent:
    fields = from_storage(row, JOB_EVENT_FIELDS)
    fields.pop("createdAt", None)
    fields.pop("updatedAt", None)
    fields.update({column: job_row.get(column) for column in TIMELINE_JOB_COLUMNS})
    return TimelineEvent.model_validate(fields)


class HostedProvider(ProviderLoggerMixin):
    """Storage provider for one signed-in user of the hosted backend."""

    kind = ProviderKind.HOSTED
    provider_type = ProviderType.HOSTED

    def __init__(self, client: Client, owner_id: str):
        """
        Args:
            client: Supabase client, already authorized for the owner
            owner_id: The user id every row is scoped to
        """
        self.client = client
        self.owner_id = owner_id

    def _log_context(self) -> str:
        return f"user={self.owner_id}"

    def _table(self, name: str):
        return self.client.table(name)

    async def _execute(self, action: str, request) -> Any:
        """Run a query builder off the event loop; translate API and transport failures into StorageError."""
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, request.execute)
        except (APIError, httpx.HTTPError) as e:
            self.log_error(f"Failed to {action}: {e}")
            raise StorageError(f"Failed to {action}", original_error=e)

    async def _counted(self, action: str, request) -> tuple[list[dict], int]:
        """Rows and exact total of a select(count="exact") request."""
        response = await self._execute(action, request)
        if response.count is None:
            self.log_error(f"Failed to {action}: no row count in response")
            raise StorageError(f"Failed to {action}")
        return response.data or [], response.count

    async def _get_job_row(self, job_id: int) -> dict:
        response = await self._execute(
            "fetch job",
            self._table(JOBS_TABLE).select("*").eq("id", job_id).eq("user_id", self.owner_id).limit(1),
        )
        if not response.data:
            raise not_found("Job", job_id)
        return response.data[0]

    async def _job_event_rows(self, job_id: int, event_type: Optional[EventType] = None) -> list[dict]:
        request = self._table(JOB_EVENTS_TABLE).select("*").eq("job_id", job_id).eq("user_id", self.owner_id)
        if event_type is not None:
            request = request.eq("event_type", event_type.value)
        return (await self._execute("fetch job events", request)).data or []

    async def _set_status(self, job_id: int, status: JobStatus) -> None:
        await self._execute(
            "update job status",
            self._table(JOBS_TABLE)
            .update({"status": status.value, "updated_at": _now_iso()})
            .eq("id", job_id)
            .eq("user_id", self.owner_id),
        )

    # -------------------------------------------------------------------------
    # Jobs
    # -------------------------------------------------------------------------

    async def fetch_jobs(self, query: JobQuery) -> JobPage:
        request = self._table(JOBS_TABLE).select("*", count="exact").eq("user_id", self.owner_id)
        if query.search:
            request = request.or_(search_filter(query.search))
        if query.status is not None:
            request = request.eq("status", query.status.value)
        if query.favorites:
            request = request.eq("is_favorite", True)

        request = (
            request.order("application_date", desc=True)
            .order("id", desc=True)
            .range(query.offset, query.offset + query.limit - 1)
        )
        rows, total = await self._counted("fetch jobs", request)

        return JobPage(
            jobs=[to_job(row) for row in rows],
            pagination=Pagination.for_query(query, total),
        )

    async def get_job(self, job_id: int) -> Job:
        job_id = ensure_valid_id(job_id, "Job")
        return to_job(await self._get_job_row(job_id))

    async def create_job(self, data: JobCreate) -> Job:
        row = to_storage(data.model_dump(by_alias=True, mode="json"), JOB_FIELDS)
        row["user_id"] = self.owner_id
        response = await self._execute("create job", self._table(JOBS_TABLE).insert(row))
        job = to_job(response.data[0])
        self.log_info(f"Created job {job.id} ({job.company} / {job.position})")

        try:
            await self._insert_event(applied_event_for(job))
        except StorageError as e:
            # Job row stays; the applied event can be added again by hand
            self.log_error(f"Applied event not created for job {job.id}: {e.message}")

        return job

    async def update_job(self, job_id: int, data: JobUpdate) -> None:
        job_id = ensure_valid_id(job_id, "Job")
        changes = to_storage(data.model_dump(by_alias=True, mode="json", exclude_unset=True), JOB_FIELDS)
        changes["updated_at"] = _now_iso()
        response = await self._execute(
            "update job",
            self._table(JOBS_TABLE).update(changes).eq("id", job_id).eq("user_id", self.owner_id),
        )
        if not response.data:
            raise not_found("Job", job_id)
        self.log_info(f"Updated job {job_id}: {sorted(changes)}")

    async def delete_job(self, job_id: int) -> None:
        job_id = ensure_valid_id(job_id, "Job")
        await self._get_job_row(job_id)
        await self._execute(
            "delete job events",
            self._table(JOB_EVENTS_TABLE).delete().eq("job_id", job_id).eq("user_id", self.owner_id),
        )
        await self._execute(
            "delete job",
            self._table(JOBS_TABLE).delete().eq("id", job_id).eq("user_id", self.owner_id),
        )
        self.log_info(f"Deleted job {job_id}")

    async def toggle_favorite(self, job_id: int, current_value: bool) -> None:
        job_id = ensure_valid_id(job_id, "Job")
        response = await self._execute(
            "update favorite status",
            self._table(JOBS_TABLE)
            .update({"is_favorite": not current_value, "updated_at": _now_iso()})
            .eq("id", job_id)
            .eq("user_id", self.owner_id),
        )
        if not response.data:
            raise not_found("Job", job_id)

    async def recompute_job_status(self, job_id: int) -> JobStatus:
        job_id = ensure_valid_id(job_id, "Job")
        job = to_job(await self._get_job_row(job_id))
        events = [to_job_event(row) for row in await self._job_event_rows(job_id)]
        derived = recompute_status(events)
        if derived is None or derived == job.status:
            return job.status
        await self._set_status(job_id, derived)
        self.log_info(f"Recomputed job {job_id} status: {job.status.value} -> {derived.value}")
        return derived

    async def fetch_stats(self) -> JobStats:
        response = await self._execute(
            "fetch stats",
            self._table(JOBS_TABLE).select("status,is_favorite").eq("user_id", self.owner_id),
        )
        return JobStats.tally((row["status"], row["is_favorite"]) for row in response.data or [])

    async def fetch_timeline_events(self, query: TimelineQuery) -> TimelinePage:
        request = (
            self._table(JOB_EVENTS_TABLE)
            .select("*", count="exact")
            .eq("user_id", self.owner_id)
            .in_("event_type", [t.value for t in TIMELINE_EVENT_TYPES])
        )
        if query.date_from is not None:
            request = request.gte("event_date", query.date_from.isoformat())
        if query.date_to is not None:
            request = request.lte("event_date", query.date_to.isoformat())

        request = (
            request.order("event_date", desc=True)
            .order("id", desc=True)
            .range(query.offset, query.offset + query.limit - 1)
        )
        rows, total = await self._counted("fetch timeline events", request)

        jobs = {}
        job_ids = sorted({row["job_id"] for row in rows})
        if job_ids:
            response = await self._execute(
                "fetch timeline events",
                self._table(JOBS_TABLE)
                .select("id," + ",".join(TIMELINE_JOB_COLUMNS))
                .eq("user_id", self.owner_id)
                .in_("id", job_ids),
            )
            jobs = {job["id"]: job for job in response.data or []}

        return TimelinePage(
            events=[to_timeline_event(row, jobs[row["job_id"]]) for row in rows if row["job_id"] in jobs],
            pagination=TimelinePagination.for_query(query, total),
        )

    async def ping(self) -> None:
        await self._execute("reach hosted backend", self._table(JOBS_TABLE).select("id").limit(1))

    # -------------------------------------------------------------------------
    # Job events
    # -------------------------------------------------------------------------

    async def fetch_job_events(self, job_id: Optional[int] = None) -> list[JobEvent]:
        request = self._table(JOB_EVENTS_TABLE).select("*").eq("user_id", self.owner_id)
        if job_id is not None:
            request = request.eq("job_id", ensure_valid_id(job_id, "Job"))
        request = request.order("event_date", desc=True).order("id", desc=True)
        response = await self._execute("fetch job events", request)
        return [to_job_event(row) for row in response.data or []]

    async def _insert_event(self, data: JobEventCreate) -> JobEvent:
        row = to_storage(data.model_dump(by_alias=True, mode="json"), JOB_EVENT_FIELDS)
        row["user_id"] = self.owner_id
        response = await self._execute("create job event", self._table(JOB_EVENTS_TABLE).insert(row))
        return to_job_event(response.data[0])

    async def create_job_event(self, data: JobEventCreate) -> JobEvent:
        job = to_job(await self._get_job_row(data.job_id))
        event = await self._insert_event(data)
        self.log_info(f"Created event {event.id} ({event.event_type.value}) for job {event.job_id}")

        # Best-effort follow-up write; the event stays even if this fails
        try:
            siblings = []
            if event.event_type == EventType.INTERVIEW_RESULT:
                siblings = [
                    to_job_event(row)
                    for row in await self._job_event_rows(job.id, EventType.INTERVIEW_RESULT)
                ]
            new_status = status_for_new_event(event, siblings)
            if new_status is not None and new_status != job.status:
                await self._set_status(job.id, new_status)
                self.log_info(f"Job {job.id} status: {job.status.value} -> {new_status.value}")
        except Exception as e:
            self.log_error(f"Status update failed for job {job.id} after event {event.id}: {e}")

        return event

    async def update_job_event(self, event_id: int, data: JobEventUpdate) -> None:
        event_id = ensure_valid_id(event_id, "Event")
        changes = to_storage(data.model_dump(by_alias=True, mode="json", exclude_unset=True), JOB_EVENT_FIELDS)
        changes["updated_at"] = _now_iso()
        response = await self._execute(
            "update job event",
            self._table(JOB_EVENTS_TABLE).update(changes).eq("id", event_id).eq("user_id", self.owner_id),
        )
        if not response.data:
            raise not_found("Event", event_id)

    async def delete_job_event(self, event_id: int) -> None:
        event_id = ensure_valid_id(event_id, "Event")
        response = await self._execute(
            "delete job event",
            self._table(JOB_EVENTS_TABLE).delete().eq("id", event_id).eq("user_id", self.owner_id),
        )
        if not response.data:
            raise not_found("Event", event_id)

    async def delete_job_events_by_type(self, job_id: int, event_types: list[EventType]) -> int:
        job_id = ensure_valid_id(job_id, "Job")
        types = [EventType(t).value for t in event_types]
        response = await self._execute(
            "delete job events",
            self._table(JOB_EVENTS_TABLE)
            .delete()
            .eq("job_id", job_id)
            .eq("user_id", self.owner_id)
            .in_("event_type", types),
        )
        deleted = len(response.data or [])
        self.log_info(f"Bulk-deleted {deleted} events of job {job_id}")
        return deleted
